import logging

import pytest

from koszyk.runtime import logging as koszyk_logging
from koszyk.runtime.logging import LOG_FORMAT, LOG_FORMAT_DEBUG, get_logger, set_log_level


@pytest.fixture
def restore_level():
    namespace_logger = logging.getLogger(koszyk_logging.LOGGER_NAMESPACE)
    level = namespace_logger.level
    yield namespace_logger
    set_log_level(level)


def test_get_logger_prefixes_foreign_names() -> None:
    assert get_logger("scripts.tool").name == "koszyk.scripts.tool"
    assert get_logger("koszyk.receipt.ocr_result_parser").name == "koszyk.receipt.ocr_result_parser"
    assert get_logger("koszyk").name == "koszyk"


def test_set_log_level_switches_format(restore_level: logging.Logger) -> None:
    set_log_level(logging.DEBUG)

    handler = restore_level.handlers[0]
    assert restore_level.level == logging.DEBUG
    assert handler.formatter._fmt == LOG_FORMAT_DEBUG

    set_log_level(logging.WARNING)

    assert handler.formatter._fmt == LOG_FORMAT


@pytest.mark.parametrize(("value", "expected"), [("debug", logging.DEBUG), (" warn ", logging.WARNING), ("bogus", logging.INFO)])
def test_level_from_env(monkeypatch: pytest.MonkeyPatch, value: str, expected: int) -> None:
    monkeypatch.setenv("KOSZYK_LOG_LEVEL", value)

    assert koszyk_logging._level_from_env() == expected
