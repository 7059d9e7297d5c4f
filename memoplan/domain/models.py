from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from sqlite3 import Row
from typing import Any

DEFAULT_CATEGORY = "daily"

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_INCOMPLETE = "incomplete"
COMPLETION_STATUSES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_INCOMPLETE)

_NEXT_STATUS = {
    STATUS_PENDING: STATUS_COMPLETED,
    STATUS_COMPLETED: STATUS_INCOMPLETE,
    STATUS_INCOMPLETE: STATUS_PENDING,
}


def next_completion_status(current: str | None) -> str:
    """pending -> completed -> incomplete -> pending; unknown values count as pending."""
    if current not in _NEXT_STATUS:
        current = STATUS_PENDING
    return _NEXT_STATUS[current]


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET and value is not None


@dataclass
class Memo:
    id: int
    uid: str
    created_ts: int
    updated_ts: int
    category: str
    target_date: str | None
    completion_status: str
    content: str
    pinned: bool
    archived: bool

    @classmethod
    def from_row(cls, r: Row) -> "Memo":
        return cls(
            id=int(r["id"]),
            uid=r["uid"],
            created_ts=int(r["created_ts"]),
            updated_ts=int(r["updated_ts"]),
            category=r["category"],
            target_date=r["target_date"],
            completion_status=r["completion_status"],
            content=r["content"],
            pinned=bool(r["pinned"]),
            archived=bool(r["archived"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DailyPlan:
    id: int
    plan_date: str
    title: str
    description: str | None
    category: str
    completed: bool
    priority: int
    created_ts: int
    updated_ts: int
    completed_ts: int | None

    @classmethod
    def from_row(cls, r: Row) -> "DailyPlan":
        return cls(
            id=int(r["id"]),
            plan_date=r["plan_date"],
            title=r["title"],
            description=r["description"],
            category=r["category"],
            completed=bool(r["completed"]),
            priority=int(r["priority"] or 0),
            created_ts=int(r["created_ts"]),
            updated_ts=int(r["updated_ts"]),
            completed_ts=(int(r["completed_ts"]) if r["completed_ts"] is not None else None),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MemoPatch:
    """
    Partial update for a memo. A field left as ``UNSET`` (or given as None)
    keeps the stored value.
    """
    content: Any = UNSET
    category: Any = UNSET
    target_date: Any = UNSET
    completion_status: Any = UNSET
    pinned: Any = UNSET
    archived: Any = UNSET

    def apply(self, memo: Memo) -> Memo:
        merged = asdict(memo)
        for f in fields(self):
            v = getattr(self, f.name)
            if is_set(v):
                merged[f.name] = v
        merged["pinned"] = bool(merged["pinned"])
        merged["archived"] = bool(merged["archived"])
        return Memo(**merged)


@dataclass
class PlanPatch:
    """Partial update for a plan; only title and description are editable."""
    title: Any = UNSET
    description: Any = UNSET

    def apply(self, plan: DailyPlan) -> DailyPlan:
        merged = asdict(plan)
        for f in fields(self):
            v = getattr(self, f.name)
            if is_set(v):
                merged[f.name] = v
        return DailyPlan(**merged)
