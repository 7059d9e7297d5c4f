from memoplan.services import memo_svc


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "memoplan-api"


def test_memo_lifecycle(client, storage):
    res = client.post("/api/memos", json={"content": "hello", "target_date": "20240115"})
    assert res.status_code == 201
    memo = res.json()
    assert memo["category"] == "daily"
    assert memo["target_date"] == "2024-01-15"
    assert memo["completion_status"] == "pending"

    # Validate DB side-effects through the store
    assert memo_svc.get_memo(storage, memo["id"]).uid == memo["uid"]

    got = client.get(f"/api/memos/{memo['id']}")
    assert got.status_code == 200 and got.json() == memo

    upd = client.patch(f"/api/memos/{memo['id']}", json={"pinned": True})
    assert upd.status_code == 200
    body = upd.json()
    assert body["pinned"] is True
    assert body["content"] == "hello"
    assert body["target_date"] == "2024-01-15"

    tog = client.post(f"/api/memos/{memo['id']}/toggle-status")
    assert tog.json()["completion_status"] == "completed"

    lst = client.get("/api/memos", params={"limit": 10}).json()
    assert lst["total"] == 1
    assert [m["id"] for m in lst["items"]] == [memo["id"]]

    found = client.get("/api/memos/search", params={"query": "ell"}).json()["items"]
    assert [m["id"] for m in found] == [memo["id"]]

    by_date = client.get("/api/memos/by-date", params={"date": "2024-01-15"}).json()["items"]
    assert [m["id"] for m in by_date] == [memo["id"]]

    assert client.delete(f"/api/memos/{memo['id']}").json() == {"message": "ok"}
    assert client.delete(f"/api/memos/{memo['id']}").status_code == 200
    assert client.get(f"/api/memos/{memo['id']}").status_code == 404


def test_memo_errors(client):
    r = client.get("/api/memos/999")
    assert r.status_code == 404
    assert "memo_not_found" in r.json()["detail"]

    assert client.patch("/api/memos/999", json={"content": "x"}).status_code == 404
    assert client.post("/api/memos/999/toggle-status").status_code == 404
    assert client.get("/api/memos/by-date", params={"date": "15/01/2024"}).status_code == 400
    assert client.post("/api/memos", json={"content": "x", "target_date": "soon"}).status_code == 400


def test_memo_patch_empty_target_date_keeps_existing(client):
    memo = client.post("/api/memos", json={"content": "x", "target_date": "2024-01-15"}).json()

    upd = client.patch(f"/api/memos/{memo['id']}", json={"target_date": "", "content": "y"})
    assert upd.status_code == 200
    assert upd.json()["target_date"] == "2024-01-15"
    assert upd.json()["content"] == "y"

    created = client.post("/api/memos", json={"content": "z", "target_date": ""}).json()
    assert created["target_date"] is None
    upd = client.patch(f"/api/memos/{created['id']}", json={"target_date": ""})
    assert upd.json()["target_date"] is None


def test_memo_patch_rejects_unknown_completion_status(client):
    memo = client.post("/api/memos", json={"content": "x"}).json()

    r = client.patch(f"/api/memos/{memo['id']}", json={"completion_status": "someday"})
    assert r.status_code == 400
    assert "invalid_completion_status" in r.json()["detail"]
    assert client.get(f"/api/memos/{memo['id']}").json()["completion_status"] == "pending"

    ok = client.patch(f"/api/memos/{memo['id']}", json={"completion_status": "incomplete"})
    assert ok.json()["completion_status"] == "incomplete"


def test_plan_lifecycle(client):
    a = client.post("/api/plans", json={"plan_date": "2024-03-01", "title": "Ship release", "priority": 5})
    b = client.post("/api/plans", json={"plan_date": "2024-03-01", "title": "Write notes", "priority": 5})
    assert a.status_code == 201 and b.status_code == 201

    items = client.get("/api/plans", params={"date": "2024-03-01"}).json()["items"]
    assert [p["title"] for p in items] == ["Ship release", "Write notes"]

    pid = a.json()["id"]
    done = client.post(f"/api/plans/{pid}/toggle").json()
    assert done["completed"] is True and done["completed_ts"] is not None
    undone = client.post(f"/api/plans/{pid}/toggle").json()
    assert undone["completed"] is False and undone["completed_ts"] is None

    upd = client.patch(f"/api/plans/{pid}", json={"description": "tag v1.2"}).json()
    assert upd["title"] == "Ship release"
    assert upd["description"] == "tag v1.2"

    assert client.get(f"/api/plans/{pid}").json()["description"] == "tag v1.2"
    assert client.delete(f"/api/plans/{pid}").json() == {"message": "ok"}
    assert client.get(f"/api/plans/{pid}").status_code == 404
    assert client.patch(f"/api/plans/{pid}", json={"title": "x"}).status_code == 404
