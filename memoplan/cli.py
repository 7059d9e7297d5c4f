#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
memoplan command line (SQLite)

Commands:
  init                Create the database file and ensure tables/indexes
  add-memo            Create a memo
  memos               List non-archived memos (pinned first, newest first)
  search              Substring search over memo content
  memos-on            Memos targeted at or created on a date
  toggle-memo         Advance a memo's completion status
  delete-memo         Delete a memo
  add-plan            Create a daily plan item
  plans               List the plans of a date (priority first, oldest first)
  toggle-plan         Flip a plan's completed flag
  delete-plan         Delete a plan

Every command prints one JSON document to stdout.
"""
from __future__ import annotations

import argparse
import datetime as dt
import json
import sys

from .db import Storage
from .errors import MemoplanError, StorageUnavailable
from .logs import LogContext, configure_logging
from .services import memo_svc, plan_svc
from .services.utils import to_dash_date


def _emit(obj):
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def _today() -> str:
    return dt.date.today().strftime("%Y-%m-%d")


# ---------------- Commands ----------------

def cmd_init(args, storage: Storage):
    _emit({"message": "ok", "db_path": storage.path})


def cmd_add_memo(args, storage: Storage):
    target = to_dash_date(args.target_date) if args.target_date else None
    memo = memo_svc.create_memo(storage, args.content, args.category, target)
    _emit(memo.to_dict())


def cmd_memos(args, storage: Storage):
    items = memo_svc.list_memos(storage, args.limit, args.offset, args.category)
    _emit({"items": [m.to_dict() for m in items]})


def cmd_search(args, storage: Storage):
    items = memo_svc.search_memos(storage, args.query)
    _emit({"items": [m.to_dict() for m in items]})


def cmd_memos_on(args, storage: Storage):
    date = to_dash_date(args.date) if args.date else _today()
    items = memo_svc.list_memos_by_date(storage, date)
    _emit({"date": date, "items": [m.to_dict() for m in items]})


def cmd_toggle_memo(args, storage: Storage):
    log = LogContext("TOGGLE_MEMO_STATUS", user="cli")
    memo = memo_svc.toggle_memo_status(storage, args.id, log)
    log.write("OK")
    _emit(memo.to_dict())


def cmd_delete_memo(args, storage: Storage):
    log = LogContext("DELETE_MEMO", user="cli")
    memo_svc.delete_memo(storage, args.id, log)
    log.write("OK")
    _emit({"message": "ok"})


def cmd_add_plan(args, storage: Storage):
    date = to_dash_date(args.date) if args.date else _today()
    plan = plan_svc.create_plan(
        storage, date, args.title,
        description=args.description, category=args.category, priority=args.priority,
    )
    _emit(plan.to_dict())


def cmd_plans(args, storage: Storage):
    date = to_dash_date(args.date) if args.date else _today()
    items = plan_svc.list_plans_by_date(storage, date)
    _emit({"date": date, "items": [p.to_dict() for p in items]})


def cmd_toggle_plan(args, storage: Storage):
    log = LogContext("TOGGLE_PLAN", user="cli")
    plan = plan_svc.toggle_plan_completion(storage, args.id, log)
    log.write("OK")
    _emit(plan.to_dict())


def cmd_delete_plan(args, storage: Storage):
    log = LogContext("DELETE_PLAN", user="cli")
    plan_svc.delete_plan(storage, args.id, log)
    log.write("OK")
    _emit({"message": "ok"})


# ---------------- Entry ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memoplan", description="Memos and daily plans (SQLite)")
    parser.add_argument("--db", default=None, help="database file (default: MEMOPLAN_DB_PATH / config.yaml)")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create db and tables")
    p_init.set_defaults(func=cmd_init)

    p_add = sub.add_parser("add-memo", help="create a memo")
    p_add.add_argument("content")
    p_add.add_argument("--category", required=False)
    p_add.add_argument("--target-date", dest="target_date", required=False, help="YYYY-MM-DD")
    p_add.set_defaults(func=cmd_add_memo)

    p_list = sub.add_parser("memos", help="list memos")
    p_list.add_argument("--limit", type=int, default=memo_svc.DEFAULT_LIMIT)
    p_list.add_argument("--offset", type=int, default=0)
    p_list.add_argument("--category", required=False)
    p_list.set_defaults(func=cmd_memos)

    p_search = sub.add_parser("search", help="search memo content")
    p_search.add_argument("query", nargs="?", default="")
    p_search.set_defaults(func=cmd_search)

    p_on = sub.add_parser("memos-on", help="memos of a date")
    p_on.add_argument("--date", required=False, help="YYYY-MM-DD (default today)")
    p_on.set_defaults(func=cmd_memos_on)

    p_tm = sub.add_parser("toggle-memo", help="advance completion status")
    p_tm.add_argument("id", type=int)
    p_tm.set_defaults(func=cmd_toggle_memo)

    p_dm = sub.add_parser("delete-memo", help="delete a memo")
    p_dm.add_argument("id", type=int)
    p_dm.set_defaults(func=cmd_delete_memo)

    p_ap = sub.add_parser("add-plan", help="create a plan")
    p_ap.add_argument("title")
    p_ap.add_argument("--date", required=False, help="YYYY-MM-DD (default today)")
    p_ap.add_argument("--description", required=False)
    p_ap.add_argument("--category", required=False)
    p_ap.add_argument("--priority", type=int, required=False)
    p_ap.set_defaults(func=cmd_add_plan)

    p_pl = sub.add_parser("plans", help="plans of a date")
    p_pl.add_argument("--date", required=False, help="YYYY-MM-DD (default today)")
    p_pl.set_defaults(func=cmd_plans)

    p_tp = sub.add_parser("toggle-plan", help="flip completed")
    p_tp.add_argument("id", type=int)
    p_tp.set_defaults(func=cmd_toggle_plan)

    p_dp = sub.add_parser("delete-plan", help="delete a plan")
    p_dp.add_argument("id", type=int)
    p_dp.set_defaults(func=cmd_delete_plan)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    configure_logging(args.log_level)
    try:
        storage = Storage.open(args.db)
    except StorageUnavailable as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    with storage:
        try:
            args.func(args, storage)
        except (MemoplanError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
