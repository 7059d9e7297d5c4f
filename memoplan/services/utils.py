from __future__ import annotations

# memoplan/services/utils.py
import re
import time

_DASH_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_COMPACT_RE = re.compile(r"^\d{8}$")


def now_ts() -> int:
    """当前 unix 秒。"""
    return int(time.time())


def yyyyMMdd_to_dash(s: str) -> str: return f"{s[0:4]}-{s[4:6]}-{s[6:8]}"


def to_dash_date(s: str) -> str:
    """接受 YYYY-MM-DD 或 YYYYMMDD，统一成 YYYY-MM-DD。"""
    s = (s or "").strip()
    if _DASH_RE.match(s):
        return s
    if _COMPACT_RE.match(s):
        return yyyyMMdd_to_dash(s)
    raise ValueError(f"invalid_date: {s!r}")
