import logging

import pytest

from condo_billing.core.log import get_logger, init_logging, log_context, shutdown_logging, timeit
from condo_billing.core.log.context import ContextFilter


def _record() -> logging.LogRecord:
    return logging.LogRecord("condo_billing.test", logging.INFO, __file__, 1, "hello", (), None)


def test_context_filter_renders_bound_values() -> None:
    """Bound keys prefix the message; scoped keys vanish after the block."""

    context_filter = ContextFilter()
    log_context.clear()

    with log_context.scoped(employee="emp-1", period="2024-03", missing=None):
        record = _record()
        context_filter.filter(record)
        assert record.context == "employee=emp-1 period=2024-03 "

    record = _record()
    context_filter.filter(record)
    assert record.context == ""


def test_timeit_logs_success_and_failure(caplog) -> None:
    logger = logging.getLogger("condo_billing.test.timer")

    with caplog.at_level(logging.DEBUG, logger="condo_billing.test.timer"):
        with timeit("Reconcile", logger=logger) as timer:
            timer.add(2)
        with pytest.raises(RuntimeError):
            with timeit("Save", logger=logger):
                raise RuntimeError("boom")

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("Reconcile completed") and "(2 writes)" in m for m in messages)
    assert any(m.startswith("Save failed after") for m in messages)


def test_log_dir_receives_records(tmp_path) -> None:
    """Shutting down drains the queue into the daily file."""

    init_logging(log_dir=tmp_path, console=False)
    try:
        with log_context.scoped(employee="emp-1"):
            get_logger("condo_billing.test.file").info("written to disk")
    finally:
        shutdown_logging()
        init_logging()

    (log_file,) = tmp_path.glob("*.log")
    assert "employee=emp-1 written to disk" in log_file.read_text(encoding="utf-8")
