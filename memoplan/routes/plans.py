from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..db import Storage
from ..domain.models import PlanPatch
from ..errors import NotFound, PersistenceError
from ..logs import LogContext
from ..services import plan_svc
from ..services.utils import to_dash_date
from .deps import get_storage

router = APIRouter()


class PlanCreate(BaseModel):
    plan_date: str  # YYYY-MM-DD
    title: str
    description: str | None = None
    category: str | None = None
    priority: int | None = None


class PlanUpdate(BaseModel):
    title: str | None = None
    description: str | None = None


@router.post("/api/plans", status_code=201)
def api_plan_create(body: PlanCreate, storage: Storage = Depends(get_storage)):
    log = LogContext("CREATE_PLAN")
    log.set_payload(body.model_dump())
    try:
        plan = plan_svc.create_plan(
            storage,
            to_dash_date(body.plan_date),
            body.title,
            description=body.description,
            category=body.category,
            priority=body.priority,
        )
        log.set_entity("plan", plan.id)
        log.write("OK")
        return plan.to_dict()
    except ValueError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/plans")
def api_plan_list(date: str = Query(...), storage: Storage = Depends(get_storage)):
    try:
        items = plan_svc.list_plans_by_date(storage, to_dash_date(date))
        return {"items": [p.to_dict() for p in items]}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/plans/{plan_id}")
def api_plan_get(plan_id: int, storage: Storage = Depends(get_storage)):
    try:
        return plan_svc.get_plan(storage, plan_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/api/plans/{plan_id}")
def api_plan_update(plan_id: int, body: PlanUpdate, storage: Storage = Depends(get_storage)):
    log = LogContext("UPDATE_PLAN")
    log.set_payload(body.model_dump(exclude_unset=True))
    try:
        plan = plan_svc.update_plan(storage, plan_id, PlanPatch(**body.model_dump(exclude_unset=True)), log)
        log.write("OK")
        return plan.to_dict()
    except NotFound as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/plans/{plan_id}/toggle")
def api_plan_toggle(plan_id: int, storage: Storage = Depends(get_storage)):
    log = LogContext("TOGGLE_PLAN")
    try:
        plan = plan_svc.toggle_plan_completion(storage, plan_id, log)
        log.write("OK")
        return plan.to_dict()
    except NotFound as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/plans/{plan_id}")
def api_plan_delete(plan_id: int, storage: Storage = Depends(get_storage)):
    log = LogContext("DELETE_PLAN")
    try:
        plan_svc.delete_plan(storage, plan_id, log)
        log.write("OK")
        return {"message": "ok"}
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
