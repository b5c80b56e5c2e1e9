import io
import logging

import pytest
from expense_ledger import logging_setup
from expense_ledger.logging_setup import configure_logging, get_logger


@pytest.fixture
def pkg_logger(monkeypatch):
    logger = logging.getLogger("expense_ledger")
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "level", logger.level)
    monkeypatch.setattr(logger, "propagate", logger.propagate)
    original = logger.level
    yield logger
    # setLevel also drops the per-logger isEnabledFor caches.
    logger.setLevel(original)


def test_unconfigured_package_logger_is_silent(pkg_logger):
    get_logger("expense_ledger.store")
    assert [type(h) for h in pkg_logger.handlers] == [logging.NullHandler]


def test_env_level_enables_debug_traces(pkg_logger, monkeypatch):
    monkeypatch.setenv("EXPENSE_LEDGER_LOG_LEVEL", "debug")
    buf = io.StringIO()
    configure_logging(stream=buf, fmt="%(name)s %(levelname)s %(message)s")

    get_logger("expense_ledger.store").debug("store:add id=%d", 1)
    assert buf.getvalue() == "expense_ledger.store DEBUG store:add id=1\n"
    assert not any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)


def test_default_level_hides_debug_and_configures_once(pkg_logger, monkeypatch):
    monkeypatch.delenv("EXPENSE_LEDGER_LOG_LEVEL", raising=False)
    first, second = io.StringIO(), io.StringIO()
    configure_logging(stream=first, fmt="%(levelname)s %(message)s")
    configure_logging(level="DEBUG", stream=second)

    log = get_logger("expense_ledger.persistence")
    log.debug("persistence:saved count=1")
    log.warning("persistence:json_invalid")
    assert first.getvalue() == "WARNING persistence:json_invalid\n"
    assert second.getvalue() == ""
    assert len(pkg_logger.handlers) == 1
