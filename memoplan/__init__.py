"""memoplan: personal memos and daily plans on a local SQLite file."""

__version__ = "0.1.0"
