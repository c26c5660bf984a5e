from pathlib import Path

import pytest

from spendwise.core import settings


def test_read_config_file(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "# SpendWise configuration\n"
        "CURRENCY_CODE: VND  # dong\n"
        "LOG_LEVEL: 'DEBUG'\n"
        "DATA_DIR: \"/tmp/a # b\"\n"
        "# NOTIFICATIONS_ENABLED: false\n"
        "EMPTY:\n"
        "not a pair\n",
        encoding="utf-8",
    )

    assert settings.read_config_file(str(config)) == {
        "CURRENCY_CODE": "VND",
        "LOG_LEVEL": "DEBUG",
        "DATA_DIR": "/tmp/a # b",
    }


def test_read_missing_config_file(tmp_path: Path) -> None:
    assert settings.read_config_file(str(tmp_path / "missing.yaml")) == {}
    assert settings.read_config_file(None) == {}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("ON", True), ("1", True), ("false", False), ("no", False), ("maybe", True), ("", True)],
)
def test_get_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("NOTIFICATIONS_ENABLED", raw)
    assert settings.notifications_enabled() is expected


def test_get_env_int_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALERT_RETENTION_MONTHS", "abc")
    assert settings.get_alert_retention_months() == settings.DEFAULT_ALERT_RETENTION_MONTHS
    monkeypatch.setenv("ALERT_RETENTION_MONTHS", "0")
    assert settings.get_alert_retention_months() == settings.DEFAULT_ALERT_RETENTION_MONTHS
    monkeypatch.setenv("ALERT_RETENTION_MONTHS", "6")
    assert settings.get_alert_retention_months() == 6


def test_currency_code_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CURRENCY_CODE", raising=False)
    assert settings.get_currency_code() == "USD"
    monkeypatch.setenv("CURRENCY_CODE", "  ")
    assert settings.get_currency_code() == "USD"
