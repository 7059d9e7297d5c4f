from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Optional

MEMO_COLUMNS = (
    "id, uid, created_ts, updated_ts, category, target_date, "
    "completion_status, content, pinned, archived"
)


def insert_memo(
    conn: Connection,
    uid: str,
    created_ts: int,
    updated_ts: int,
    category: str,
    target_date: str | None,
    content: str,
) -> int:
    cur = conn.execute(
        "INSERT INTO memo(uid, created_ts, updated_ts, category, target_date, content) "
        "VALUES(?,?,?,?,?,?)",
        (uid, created_ts, updated_ts, category, target_date, content),
    )
    return int(cur.lastrowid)


def get_one(conn: Connection, memo_id: int) -> Optional[Row]:
    return conn.execute(
        f"SELECT {MEMO_COLUMNS} FROM memo WHERE id=?", (memo_id,)
    ).fetchone()


def list_page(conn: Connection, limit: int, offset: int, category: str | None = None):
    sql = f"SELECT {MEMO_COLUMNS} FROM memo WHERE archived = 0"
    params: list[object] = []
    if category is not None:
        sql += " AND category = ?"
        params.append(category)
    sql += " ORDER BY pinned DESC, created_ts DESC, id DESC LIMIT ? OFFSET ?"
    params.extend([limit, offset])
    return conn.execute(sql, params).fetchall()


def search(conn: Connection, query: str, limit: int = 50):
    # query 原样拼进 LIKE 模式，不转义 % 和 _
    return conn.execute(
        f"SELECT {MEMO_COLUMNS} FROM memo "
        "WHERE content LIKE ? AND archived = 0 "
        "ORDER BY created_ts DESC, id DESC LIMIT ?",
        (f"%{query}%", limit),
    ).fetchall()


def list_by_date(conn: Connection, date_dash: str):
    # created_ts 按本机时区换算成日期
    return conn.execute(
        f"SELECT {MEMO_COLUMNS} FROM memo "
        "WHERE (target_date = ? OR DATE(created_ts, 'unixepoch', 'localtime') = ?) "
        "AND archived = 0 "
        "ORDER BY pinned DESC, created_ts DESC, id DESC",
        (date_dash, date_dash),
    ).fetchall()


def update_fields(
    conn: Connection,
    memo_id: int,
    content: str,
    category: str,
    target_date: str | None,
    completion_status: str,
    pinned: bool,
    archived: bool,
    updated_ts: int,
) -> int:
    cur = conn.execute(
        "UPDATE memo SET content=?, category=?, target_date=?, "
        "completion_status=?, pinned=?, archived=?, updated_ts=? WHERE id=?",
        (
            content,
            category,
            target_date,
            completion_status,
            1 if pinned else 0,
            1 if archived else 0,
            updated_ts,
            memo_id,
        ),
    )
    return cur.rowcount


def set_status(conn: Connection, memo_id: int, status: str, updated_ts: int) -> int:
    cur = conn.execute(
        "UPDATE memo SET completion_status=?, updated_ts=? WHERE id=?",
        (status, updated_ts, memo_id),
    )
    return cur.rowcount


def delete(conn: Connection, memo_id: int) -> int:
    cur = conn.execute("DELETE FROM memo WHERE id=?", (memo_id,))
    return cur.rowcount


def count_active(conn: Connection, category: str | None = None) -> int:
    if category is None:
        row = conn.execute("SELECT COUNT(1) AS c FROM memo WHERE archived = 0").fetchone()
    else:
        row = conn.execute(
            "SELECT COUNT(1) AS c FROM memo WHERE archived = 0 AND category = ?", (category,)
        ).fetchone()
    return int(row["c"])
