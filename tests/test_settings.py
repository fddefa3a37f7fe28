import logging

import pytest

from logging_setup import get_logger, parse_level
from settings import DEFAULT_DATA_PATH, Settings, load_settings


def test_load_settings_defaults() -> None:
    assert load_settings({}) == Settings()
    assert load_settings({}).data_path == DEFAULT_DATA_PATH


def test_load_settings_reads_overrides() -> None:
    out = load_settings(
        {
            "MONEY_TRACKER_DATA_PATH": "/tmp/ledger.json",
            "MONEY_TRACKER_ANOMALY_THRESHOLD": "2.5",
            "MONEY_TRACKER_FORECAST_WINDOW": "14",
            "MONEY_TRACKER_FORECAST_HORIZON": "0",
            "MONEY_TRACKER_RUNWAY_LOOKBACK_DAYS": "60",
            "MONEY_TRACKER_LOG_LEVEL": "debug",
        }
    )

    assert out.data_path == "/tmp/ledger.json"
    assert out.anomaly_threshold == 2.5
    assert out.forecast_window == 14
    assert out.forecast_horizon == 0
    assert out.runway_lookback_days == 60
    assert out.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("env", "name"),
    [
        ({"MONEY_TRACKER_FORECAST_WINDOW": "0"}, "MONEY_TRACKER_FORECAST_WINDOW"),
        ({"MONEY_TRACKER_FORECAST_HORIZON": "soon"}, "MONEY_TRACKER_FORECAST_HORIZON"),
        ({"MONEY_TRACKER_ANOMALY_THRESHOLD": "high"}, "MONEY_TRACKER_ANOMALY_THRESHOLD"),
    ],
)
def test_load_settings_rejects_bad_values(env, name) -> None:
    with pytest.raises(ValueError, match=name):
        load_settings(env)


def test_parse_level_accepts_names_and_numbers(monkeypatch) -> None:
    monkeypatch.delenv("MONEY_TRACKER_LOG_LEVEL", raising=False)

    assert parse_level("debug") == logging.DEBUG
    assert parse_level("30") == logging.WARNING
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level("verbose") == logging.INFO


def test_parse_level_falls_back_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("MONEY_TRACKER_LOG_LEVEL", "warning")

    assert parse_level(None) == logging.WARNING


def test_get_logger_returns_package_child() -> None:
    logger = get_logger("money_tracker.analytics")

    assert logger.name == "money_tracker.analytics"
    assert logging.getLogger("money_tracker").handlers
