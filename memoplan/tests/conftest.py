import os
import sys
import time
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def tmp_db_path(tmp_path, monkeypatch):
    path = tmp_path / "memoplan_test.db"
    # Point memoplan to this temp DB so nothing touches a real one
    monkeypatch.setenv("MEMOPLAN_DB_PATH", str(path))
    return str(path)


@pytest.fixture()
def storage():
    from memoplan.db import Storage, MEMORY_DB
    st = Storage.open(MEMORY_DB)
    yield st
    st.close()


class FakeClock:
    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1):
        self.now += seconds


@pytest.fixture()
def clock(monkeypatch):
    """Freeze the stores' notion of "now" (unix seconds)."""
    from memoplan.services import memo_svc, plan_svc
    fake = FakeClock(1_700_000_000)
    monkeypatch.setattr(memo_svc, "now_ts", fake)
    monkeypatch.setattr(plan_svc, "now_ts", fake)
    return fake


@pytest.fixture()
def utc_plus_8(monkeypatch):
    # POSIX TZ string: UTC+8 without DST, no tzdata needed
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")
    old = os.environ.get("TZ")
    monkeypatch.setenv("TZ", "CST-8")
    time.tzset()
    yield "CST-8"
    if old is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = old
    time.tzset()


@pytest.fixture()
def client(storage):
    from fastapi.testclient import TestClient
    from memoplan.api import app
    from memoplan.routes.deps import get_storage
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_storage, None)
