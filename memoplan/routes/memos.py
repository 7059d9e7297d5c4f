from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..db import Storage
from ..domain.models import COMPLETION_STATUSES, MemoPatch
from ..errors import NotFound, PersistenceError
from ..logs import LogContext
from ..services import memo_svc
from ..services.utils import to_dash_date
from .deps import get_storage

router = APIRouter()


class MemoCreate(BaseModel):
    content: str
    category: str | None = None
    target_date: str | None = None  # YYYY-MM-DD


class MemoUpdate(BaseModel):
    content: str | None = None
    category: str | None = None
    target_date: str | None = None
    completion_status: str | None = None
    pinned: bool | None = None
    archived: bool | None = None


@router.post("/api/memos", status_code=201)
def api_memo_create(body: MemoCreate, storage: Storage = Depends(get_storage)):
    log = LogContext("CREATE_MEMO")
    log.set_payload(body.model_dump())
    try:
        target_date = to_dash_date(body.target_date) if body.target_date else None
        memo = memo_svc.create_memo(storage, body.content, body.category, target_date)
        log.set_entity("memo", memo.id)
        log.write("OK")
        return memo.to_dict()
    except ValueError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/memos")
def api_memo_list(
    limit: int = Query(memo_svc.DEFAULT_LIMIT, ge=0),
    offset: int = Query(0, ge=0),
    category: str | None = None,
    storage: Storage = Depends(get_storage),
):
    try:
        total, items = memo_svc.list_memos_page(storage, limit, offset, category)
        return {"total": total, "items": [m.to_dict() for m in items]}
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/memos/search")
def api_memo_search(query: str = "", storage: Storage = Depends(get_storage)):
    try:
        items = memo_svc.search_memos(storage, query)
        return {"items": [m.to_dict() for m in items]}
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/memos/by-date")
def api_memo_by_date(date: str = Query(...), storage: Storage = Depends(get_storage)):
    try:
        items = memo_svc.list_memos_by_date(storage, to_dash_date(date))
        return {"items": [m.to_dict() for m in items]}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/memos/{memo_id}")
def api_memo_get(memo_id: int, storage: Storage = Depends(get_storage)):
    try:
        return memo_svc.get_memo(storage, memo_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/api/memos/{memo_id}")
def api_memo_update(memo_id: int, body: MemoUpdate, storage: Storage = Depends(get_storage)):
    log = LogContext("UPDATE_MEMO")
    log.set_payload(body.model_dump(exclude_unset=True))
    try:
        fields = body.model_dump(exclude_unset=True)
        # 空日期与创建时一致，视为未提供
        if fields.get("target_date"):
            fields["target_date"] = to_dash_date(fields["target_date"])
        else:
            fields.pop("target_date", None)
        status = fields.get("completion_status")
        if status is not None and status not in COMPLETION_STATUSES:
            raise ValueError(f"invalid_completion_status: {status!r}")
        memo = memo_svc.update_memo(storage, memo_id, MemoPatch(**fields), log)
        log.write("OK")
        return memo.to_dict()
    except NotFound as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/memos/{memo_id}/toggle-status")
def api_memo_toggle_status(memo_id: int, storage: Storage = Depends(get_storage)):
    log = LogContext("TOGGLE_MEMO_STATUS")
    try:
        memo = memo_svc.toggle_memo_status(storage, memo_id, log)
        log.write("OK")
        return memo.to_dict()
    except NotFound as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/memos/{memo_id}")
def api_memo_delete(memo_id: int, storage: Storage = Depends(get_storage)):
    log = LogContext("DELETE_MEMO")
    try:
        memo_svc.delete_memo(storage, memo_id, log)
        log.write("OK")
        return {"message": "ok"}
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
