from __future__ import annotations

from ..db import Storage
from ..domain.models import DEFAULT_CATEGORY, DailyPlan, PlanPatch
from ..errors import NotFound
from ..logs import LogContext
from ..repository import plan_repo
from .utils import now_ts


def _load(conn, plan_id: int) -> DailyPlan:
    row = plan_repo.get_one(conn, plan_id)
    if row is None:
        raise NotFound("plan", plan_id)
    return DailyPlan.from_row(row)


def create_plan(storage: Storage, plan_date: str, title: str, description: str | None = None,
                category: str | None = None, priority: int | None = None) -> DailyPlan:
    now = now_ts()
    with storage.session() as conn:
        plan_id = plan_repo.insert_plan(
            conn,
            plan_date=plan_date,
            title=title,
            description=description,
            category=category if category is not None else DEFAULT_CATEGORY,
            priority=int(priority) if priority is not None else 0,
            created_ts=now,
            updated_ts=now,
        )
        return _load(conn, plan_id)


def get_plan(storage: Storage, plan_id: int) -> DailyPlan:
    with storage.session() as conn:
        return _load(conn, plan_id)


def list_plans_by_date(storage: Storage, date_dash: str) -> list[DailyPlan]:
    with storage.session() as conn:
        rows = plan_repo.list_by_date(conn, date_dash)
    return [DailyPlan.from_row(r) for r in rows]


def toggle_plan_completion(storage: Storage, plan_id: int, log: LogContext | None = None) -> DailyPlan:
    with storage.session() as conn:
        before = _load(conn, plan_id)
        now = max(now_ts(), before.updated_ts)
        if before.completed:
            plan_repo.set_completed(conn, plan_id, False, None, now)
        else:
            plan_repo.set_completed(conn, plan_id, True, now, now)
        after = _load(conn, plan_id)
    if log is not None:
        log.set_entity("plan", plan_id)
        log.set_before({"completed": before.completed, "completed_ts": before.completed_ts})
        log.set_after({"completed": after.completed, "completed_ts": after.completed_ts})
    return after


def delete_plan(storage: Storage, plan_id: int, log: LogContext | None = None) -> None:
    with storage.session() as conn:
        deleted = plan_repo.delete(conn, plan_id)
    if log is not None:
        log.set_entity("plan", plan_id)
        log.set_after({"deleted": deleted})


def update_plan(storage: Storage, plan_id: int, patch: PlanPatch, log: LogContext | None = None) -> DailyPlan:
    # 只允许改 title / description；日期、分类、优先级创建后不变
    with storage.session() as conn:
        before = _load(conn, plan_id)
        merged = patch.apply(before)
        plan_repo.update_text(
            conn,
            plan_id,
            title=merged.title,
            description=merged.description,
            updated_ts=max(now_ts(), before.updated_ts),
        )
        after = _load(conn, plan_id)
    if log is not None:
        log.set_entity("plan", plan_id)
        log.set_before(before.to_dict())
        log.set_after(after.to_dict())
    return after
