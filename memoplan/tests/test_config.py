from memoplan import config


def test_missing_config_yields_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("MEMOPLAN_LOG_LEVEL", raising=False)
    settings = config.get_settings(str(tmp_path / "nope.yaml"))
    assert settings == {"log_level": "INFO"}


def test_config_yaml_values_and_env_override(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "db_path: ' /data/notes.db '\nlog_level: debug\nunknown: 1\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("MEMOPLAN_LOG_LEVEL", raising=False)
    assert config.read_config_yaml(str(cfg)) == {
        "db_path": "/data/notes.db",
        "log_level": "debug",
    }

    monkeypatch.setenv("MEMOPLAN_LOG_LEVEL", "warning")
    assert config.get_settings(str(cfg))["log_level"] == "WARNING"


def test_broken_yaml_is_ignored(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("db_path: [unclosed\n", encoding="utf-8")
    assert config.read_config_yaml(str(cfg)) == {}
