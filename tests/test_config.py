import logging

import pytest
from pydantic import ValidationError

from tablereader.config import Settings
from tablereader.logger import ROOT_LOGGER_NAME, get_logger, set_level
from tablereader.table.config import ReaderConfig


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings().LOG_LEVEL == "DEBUG"


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize(
    "kwargs",
    [{"blank_row": "stop"}, {"on_error": "ignore"}, {"header_scan_rows": -1}],
)
def test_reader_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        ReaderConfig(**kwargs)


def test_set_level_applies_to_package_loggers():
    get_logger("tablereader.table.locator")
    try:
        set_level("debug")
        assert logging.getLogger("tablereader.table.locator").isEnabledFor(logging.DEBUG)
    finally:
        set_level(logging.INFO)
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.INFO
