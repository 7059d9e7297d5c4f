from __future__ import annotations

import logging
import uuid

from ..db import Storage
from ..domain.models import DEFAULT_CATEGORY, Memo, MemoPatch, next_completion_status
from ..errors import NotFound
from ..logs import LogContext
from ..repository import memo_repo
from .utils import now_ts

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
SEARCH_LIMIT = 50


def _load(conn, memo_id: int) -> Memo:
    row = memo_repo.get_one(conn, memo_id)
    if row is None:
        raise NotFound("memo", memo_id)
    return Memo.from_row(row)


def create_memo(storage: Storage, content: str, category: str | None = None,
                target_date: str | None = None) -> Memo:
    uid = str(uuid.uuid4())
    now = now_ts()
    with storage.session() as conn:
        memo_id = memo_repo.insert_memo(
            conn,
            uid=uid,
            created_ts=now,
            updated_ts=now,
            category=category if category is not None else DEFAULT_CATEGORY,
            target_date=target_date,
            content=content,
        )
        memo = _load(conn, memo_id)
    logger.debug("memo created id=%s uid=%s", memo.id, memo.uid)
    return memo


def get_memo(storage: Storage, memo_id: int) -> Memo:
    with storage.session() as conn:
        return _load(conn, memo_id)


def list_memos(storage: Storage, limit: int | None = None, offset: int | None = None,
               category: str | None = None) -> list[Memo]:
    lim = DEFAULT_LIMIT if limit is None else int(limit)
    off = 0 if offset is None else int(offset)
    with storage.session() as conn:
        rows = memo_repo.list_page(conn, lim, off, category)
    return [Memo.from_row(r) for r in rows]


def list_memos_page(storage: Storage, limit: int | None = None, offset: int | None = None,
                    category: str | None = None) -> tuple[int, list[Memo]]:
    """Total of non-archived memos plus one page, read in the same session."""
    lim = DEFAULT_LIMIT if limit is None else int(limit)
    off = 0 if offset is None else int(offset)
    with storage.session() as conn:
        total = memo_repo.count_active(conn, category)
        rows = memo_repo.list_page(conn, lim, off, category)
    return total, [Memo.from_row(r) for r in rows]


def update_memo(storage: Storage, memo_id: int, patch: MemoPatch,
                log: LogContext | None = None) -> Memo:
    """
    合并更新：patch 中未提供的字段保留数据库中的当前值。
    读取、合并、写入在同一个锁内完成。
    """
    with storage.session() as conn:
        before = _load(conn, memo_id)
        merged = patch.apply(before)
        memo_repo.update_fields(
            conn,
            memo_id,
            content=merged.content,
            category=merged.category,
            target_date=merged.target_date,
            completion_status=merged.completion_status,
            pinned=merged.pinned,
            archived=merged.archived,
            updated_ts=max(now_ts(), before.updated_ts),
        )
        after = _load(conn, memo_id)
    if log is not None:
        log.set_entity("memo", memo_id)
        log.set_before(before.to_dict())
        log.set_after(after.to_dict())
    return after


def delete_memo(storage: Storage, memo_id: int, log: LogContext | None = None) -> None:
    with storage.session() as conn:
        deleted = memo_repo.delete(conn, memo_id)
    if log is not None:
        log.set_entity("memo", memo_id)
        log.set_after({"deleted": deleted})
    if not deleted:
        logger.debug("delete_memo: id=%s already absent", memo_id)


def search_memos(storage: Storage, query: str) -> list[Memo]:
    with storage.session() as conn:
        rows = memo_repo.search(conn, query or "", SEARCH_LIMIT)
    return [Memo.from_row(r) for r in rows]


def list_memos_by_date(storage: Storage, date_dash: str) -> list[Memo]:
    with storage.session() as conn:
        rows = memo_repo.list_by_date(conn, date_dash)
    return [Memo.from_row(r) for r in rows]


def toggle_memo_status(storage: Storage, memo_id: int, log: LogContext | None = None) -> Memo:
    with storage.session() as conn:
        before = _load(conn, memo_id)
        status = next_completion_status(before.completion_status)
        memo_repo.set_status(conn, memo_id, status, max(now_ts(), before.updated_ts))
        after = _load(conn, memo_id)
    if log is not None:
        log.set_entity("memo", memo_id)
        log.set_before({"completion_status": before.completion_status})
        log.set_after({"completion_status": after.completion_status})
    return after
