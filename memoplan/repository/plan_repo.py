from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Optional

PLAN_COLUMNS = (
    "id, plan_date, title, description, category, completed, priority, "
    "created_ts, updated_ts, completed_ts"
)


def insert_plan(
    conn: Connection,
    plan_date: str,
    title: str,
    description: str | None,
    category: str,
    priority: int,
    created_ts: int,
    updated_ts: int,
) -> int:
    if description is None:
        # 省略 description 列，让表默认值 '' 生效
        cur = conn.execute(
            "INSERT INTO daily_plan(plan_date, title, category, priority, created_ts, updated_ts) "
            "VALUES(?,?,?,?,?,?)",
            (plan_date, title, category, priority, created_ts, updated_ts),
        )
    else:
        cur = conn.execute(
            "INSERT INTO daily_plan(plan_date, title, description, category, priority, created_ts, updated_ts) "
            "VALUES(?,?,?,?,?,?,?)",
            (plan_date, title, description, category, priority, created_ts, updated_ts),
        )
    return int(cur.lastrowid)


def get_one(conn: Connection, plan_id: int) -> Optional[Row]:
    return conn.execute(
        f"SELECT {PLAN_COLUMNS} FROM daily_plan WHERE id=?", (plan_id,)
    ).fetchone()


def list_by_date(conn: Connection, date_dash: str):
    # 同优先级按创建时间正序：先建的计划先做
    return conn.execute(
        f"SELECT {PLAN_COLUMNS} FROM daily_plan WHERE plan_date=? "
        "ORDER BY priority DESC, created_ts ASC, id ASC",
        (date_dash,),
    ).fetchall()


def set_completed(conn: Connection, plan_id: int, completed: bool, completed_ts: int | None, updated_ts: int) -> int:
    cur = conn.execute(
        "UPDATE daily_plan SET completed=?, completed_ts=?, updated_ts=? WHERE id=?",
        (1 if completed else 0, completed_ts, updated_ts, plan_id),
    )
    return cur.rowcount


def update_text(conn: Connection, plan_id: int, title: str, description: str | None, updated_ts: int) -> int:
    cur = conn.execute(
        "UPDATE daily_plan SET title=?, description=?, updated_ts=? WHERE id=?",
        (title, description, updated_ts, plan_id),
    )
    return cur.rowcount


def delete(conn: Connection, plan_id: int) -> int:
    cur = conn.execute("DELETE FROM daily_plan WHERE id=?", (plan_id,))
    return cur.rowcount
