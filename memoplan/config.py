from __future__ import annotations

# memoplan/config.py
import os

import yaml

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.yaml")

DEFAULTS = {
    "log_level": "INFO",
}

_STR_KEYS = ("db_path", "test_db_path", "log_level")


def read_config_yaml(path: str | None = None) -> dict:
    """读取 config.yaml；文件缺失或格式不对时返回空 dict，不抛异常。"""
    cfg_path = path or CONFIG_PATH
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}

    out = {}
    for k in _STR_KEYS:
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_settings(path: str | None = None) -> dict:
    """Merged settings: defaults < config.yaml < environment."""
    out = dict(DEFAULTS)
    out.update(read_config_yaml(path))
    env_level = os.environ.get("MEMOPLAN_LOG_LEVEL")
    if env_level:
        out["log_level"] = env_level.strip().upper()
    return out


def is_test_env() -> bool:
    return (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)
