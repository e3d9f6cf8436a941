import json
import logging
import sys

from sellerfin.adapters.logging_utils import JsonLogFormatter, get_logger


def _record(msg, context=None, exc_info=None):
    record = logging.LogRecord("sellerfin.test", logging.INFO, __file__, 1, msg, None, exc_info)
    if context is not None:
        record.context = context
    return record


def test_context_is_merged_without_clobbering_reserved_keys():
    fmt = JsonLogFormatter(env="test")
    out = json.loads(fmt.format(_record("offers calculated", {"offer_type": "balanced", "level": "nope"})))

    assert out["message"] == "offers calculated"
    assert out["offer_type"] == "balanced"
    assert out["level"] == "INFO"
    assert out["env"] == "test"
    assert "exception" not in out


def test_exception_is_included():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        exc_info = sys.exc_info()

    out = json.loads(JsonLogFormatter(env="test").format(_record("calculation failed", exc_info=exc_info)))
    assert "RuntimeError: boom" in out["exception"]


def test_get_logger_attaches_one_handler():
    logger = get_logger("sellerfin.test.handlers")
    again = get_logger("sellerfin.test.handlers")

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.propagate is False
