from __future__ import annotations

from pathlib import Path

import pytest

from invoice_importer.config.loader import ConfigError, apply_env_overrides, load_config, load_env_file
from invoice_importer.models.config_models import ApiConfig, ImportConfig, ImportOptions


def test_load_sample_config(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.api == ApiConfig(base_url="http://exportpro.test/api", timeout_seconds=5.0, token=None)
    assert cfg.options == ImportOptions(keep_na_strings=["NA"], strict_header=False)
    assert cfg.timezone == "Asia/Kolkata"
    assert cfg.error_log_dir == "logs"


def test_minimal_config_takes_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("api:\n  base_url: http://x/api\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.api.timeout_seconds == 30.0
    assert cfg.options.keep_na_strings == ["NA"]
    assert cfg.options.strict_header is False
    assert cfg.timezone == "UTC"
    assert cfg.error_log_dir == "logs"


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "absent.yml")


@pytest.mark.parametrize(
    "text, match",
    [
        ("api: [unclosed", "invalid yaml"),
        ("- just\n- a list\n", "mapping"),
        ("timezone: UTC\n", "config validation failed"),
        ("api:\n  base_url: http://x\nextra: 1\n", "config validation failed"),
        ("api:\n  base_url: http://x\n  timeout_seconds: 0\n", "config validation failed"),
        ("api:\n  base_url: http://x\nimport:\n  keep_na_strings: NA\n", "config validation failed"),
        ("api:\n  base_url: http://x\ntimezone: Mars/Olympus\n", "unknown timezone"),
    ],
)
def test_invalid_configs(temp_workdir: Path, text: str, match: str):
    path = temp_workdir / "config" / "import.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match=match):
        load_config(path)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("EXPORTPRO_API_URL", "https://prod.example/api")
    monkeypatch.setenv("EXPORTPRO_API_TOKEN", "tok")
    monkeypatch.setenv("EXPORTPRO_API_TIMEOUT", "12.5")
    cfg = apply_env_overrides(ImportConfig(timezone="Asia/Kolkata"))
    assert cfg.api == ApiConfig(base_url="https://prod.example/api", timeout_seconds=12.5, token="tok")
    assert cfg.timezone == "Asia/Kolkata"


def test_env_overrides_absent_keep_values(temp_workdir: Path):
    cfg = ImportConfig(api=ApiConfig(base_url="http://yaml/api", timeout_seconds=3, token="y"))
    assert apply_env_overrides(cfg) == cfg


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_env_timeout_must_be_positive_number(monkeypatch, value: str):
    monkeypatch.setenv("EXPORTPRO_API_TIMEOUT", value)
    with pytest.raises(ConfigError, match="EXPORTPRO_API_TIMEOUT"):
        apply_env_overrides(ImportConfig())


def test_env_file_overrides_process_env(temp_workdir: Path, monkeypatch):
    monkeypatch.setenv("EXPORTPRO_API_URL", "http://process/api")
    env_file = temp_workdir / ".env"
    env_file.write_text("EXPORTPRO_API_URL=http://dotenv/api\n", encoding="utf-8")
    assert load_env_file(env_file) is True
    assert apply_env_overrides(ImportConfig()).api.base_url == "http://dotenv/api"


def test_env_file_absent(temp_workdir: Path):
    assert load_env_file(temp_workdir / ".env") is False
