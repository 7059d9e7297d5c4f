from __future__ import annotations

# memoplan/db.py
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from .config import PROJECT_ROOT, is_test_env, read_config_yaml
from .errors import PersistenceError, StorageUnavailable

logger = logging.getLogger(__name__)

# DB 路径解析顺序：
# 1) 环境变量 MEMOPLAN_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 memoplan.db
_ROOT_DB = os.path.join(PROJECT_ROOT, "memoplan.db")
MEMORY_DB = ":memory:"

SCHEMA = """
CREATE TABLE IF NOT EXISTS memo (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uid TEXT NOT NULL UNIQUE,
    created_ts BIGINT NOT NULL,
    updated_ts BIGINT NOT NULL,
    category TEXT NOT NULL DEFAULT 'daily',
    target_date TEXT,
    completion_status TEXT NOT NULL DEFAULT 'pending',
    content TEXT NOT NULL DEFAULT '',
    pinned INTEGER NOT NULL DEFAULT 0,
    archived INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS daily_plan (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    plan_date TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    category TEXT DEFAULT 'daily',
    completed INTEGER NOT NULL DEFAULT 0,
    priority INTEGER DEFAULT 0,
    created_ts BIGINT NOT NULL,
    updated_ts BIGINT NOT NULL,
    completed_ts BIGINT
);
CREATE INDEX IF NOT EXISTS idx_memo_category ON memo (category);
CREATE INDEX IF NOT EXISTS idx_memo_target_date ON memo (target_date);
CREATE INDEX IF NOT EXISTS idx_memo_created_ts ON memo (created_ts);
CREATE INDEX IF NOT EXISTS idx_daily_plan_date ON daily_plan (plan_date);
"""


def get_db_path() -> str:
    env_path = os.environ.get("MEMOPLAN_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")

    if env_path:
        path = env_path
    elif is_test_env() and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    if path != MEMORY_DB:
        # 确保目录存在
        dirn = os.path.dirname(path) or "."
        os.makedirs(dirn, exist_ok=True)
    return path


def ensure_schema(conn: sqlite3.Connection):
    conn.executescript(SCHEMA)
    conn.commit()


def open_and_initialize(path: str) -> sqlite3.Connection:
    """
    打开（不存在则创建）SQLite 文件并确保表和索引存在。
    对已初始化的文件重复执行不会报错，也不会改动已有数据。
    """
    try:
        conn = sqlite3.connect(path, check_same_thread=False)
    except (sqlite3.Error, OSError) as e:
        raise StorageUnavailable(f"cannot open database {path}: {e}") from e
    try:
        conn.row_factory = sqlite3.Row
        ensure_schema(conn)
    except sqlite3.Error as e:
        conn.close()
        raise StorageUnavailable(f"cannot initialize database {path}: {e}") from e
    logger.info("database ready: %s", path)
    return conn


class Storage:
    """
    The one connection handle shared by both stores, guarded by a single lock.

    Every store operation runs inside ``session()``; readers and writers
    serialize identically.
    """

    def __init__(self, conn: sqlite3.Connection, path: str | None = None):
        self._conn: sqlite3.Connection | None = conn
        self._lock = threading.Lock()
        self._poisoned: str | None = None
        self.path = path

    @classmethod
    def open(cls, path: str | None = None) -> "Storage":
        db_path = path or get_db_path()
        return cls(open_and_initialize(db_path), db_path)

    @property
    def closed(self) -> bool:
        return self._conn is None

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._conn is None:
                raise PersistenceError("storage is closed")
            if self._poisoned:
                raise PersistenceError(f"storage unusable after failed rollback: {self._poisoned}")
            conn = self._conn
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                self._rollback(conn, e)
                raise PersistenceError(str(e)) from e
            except BaseException as e:
                self._rollback(conn, e)
                raise

    def _rollback(self, conn: sqlite3.Connection, cause: BaseException):
        try:
            conn.rollback()
        except sqlite3.Error as e:
            self._poisoned = str(e)
            logger.error("rollback failed after %r: %s", cause, e)

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc):
        self.close()
