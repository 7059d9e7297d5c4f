"""Repository layer: SQLite access helpers for memos and daily plans.

Functions take an explicit connection and stay thin, so services never carry SQL strings.
Rows come back as ``sqlite3.Row``; services turn them into domain objects.
"""
