"""
Unit tests for pdeflow.utils.flow_logging.

Tests include:
- Thread safety of logger creation
- Handler deduplication
- Logger caching and reconfiguration
- Structured logging helpers
"""

from __future__ import annotations

import concurrent.futures
import logging

import pytest

from pdeflow.types import SolveStatus
from pdeflow.utils.flow_logging import (
    FlowLogger,
    LoggedOperation,
    configure_logging,
    get_logger,
    log_integration_progress,
    log_integration_start,
    log_solver_completion,
)


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    logger = logging.getLogger("test.flow_logging.captured")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = ListHandler()
    logger.addHandler(handler)
    yield logger, handler
    logger.handlers.clear()


@pytest.fixture(autouse=True)
def clean_registry():
    """Drop test loggers from the registry before and after each test."""

    def _clear():
        for name in [k for k in FlowLogger._loggers if k.startswith("test.")]:
            del FlowLogger._loggers[name]
            logging.getLogger(name).handlers.clear()

    _clear()
    yield
    _clear()
    configure_logging(level="INFO")


class TestThreadSafety:
    def test_concurrent_logger_creation_no_duplicate_handlers(self):
        handler_counts: dict[str, int] = {}

        def get_logger_from_thread(thread_id: int) -> str:
            logger_name = f"test.thread_{thread_id % 5}"
            logger = get_logger(logger_name)
            handler_counts[logger_name] = len(logger.handlers)
            return logger_name

        with concurrent.futures.ThreadPoolExecutor(max_workers=10) as executor:
            futures = [executor.submit(get_logger_from_thread, i) for i in range(50)]
            concurrent.futures.wait(futures)

        assert all(count == 1 for count in handler_counts.values()), handler_counts

    def test_same_logger_returned_across_threads(self):
        with concurrent.futures.ThreadPoolExecutor(max_workers=10) as executor:
            loggers = list(executor.map(lambda _: get_logger("test.shared"), range(20)))

        assert all(logger is loggers[0] for logger in loggers)


class TestLoggerCreation:
    def test_get_logger_caches_logger(self):
        logger = get_logger("test.cached")

        assert isinstance(logger, logging.Logger)
        assert FlowLogger._loggers["test.cached"] is logger
        assert get_logger("test.cached") is logger
        assert logger.propagate is False

    def test_default_name_is_calling_module(self):
        logger = get_logger()
        assert logger.name == __name__

    def test_existing_handlers_are_kept(self):
        existing = logging.getLogger("test.existing_handlers")
        handler = logging.NullHandler()
        existing.addHandler(handler)

        logger = get_logger("test.existing_handlers")

        assert logger is existing
        assert logger.handlers == [handler]

    def test_singleton(self):
        assert FlowLogger() is FlowLogger()


class TestConfiguration:
    def test_level_applies_to_existing_loggers(self):
        logger = get_logger("test.levels")

        configure_logging(level="WARNING", use_colors=False)

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = get_logger("test.file")

        configure_logging(level="DEBUG", log_to_file=True, log_file_path=log_file, use_colors=False)
        logger.info("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "written to file" in log_file.read_text()

        configure_logging(level="INFO")
        assert len(logger.handlers) == 1


class TestHelpers:
    def test_integration_start(self, captured):
        logger, handler = captured
        log_integration_start(logger, "time", {"dt": 0.1})

        assert handler.records[0].levelno == logging.INFO
        assert "Starting time integration" in handler.records[0].getMessage()
        assert "'dt': 0.1" in handler.records[1].getMessage()

    def test_integration_progress(self, captured):
        logger, handler = captured
        log_integration_progress(logger, 3, 0.5, 0.1, t_end=1.0)

        record = handler.records[-1]
        assert record.levelno == logging.DEBUG
        assert "Cycle 3" in record.getMessage()
        assert "50.0%" in record.getMessage()

    @pytest.mark.parametrize(
        ("status", "level"),
        [
            (SolveStatus.CONVERGED, logging.DEBUG),
            (SolveStatus.NOT_CONVERGED, logging.WARNING),
            (SolveStatus.BREAKDOWN, logging.WARNING),
        ],
    )
    def test_solver_completion_level(self, captured, status, level):
        logger, handler = captured
        log_solver_completion(logger, "ConjugateGradientSolver", 12, 1e-9, 0.01, status.name)

        assert all(r.levelno == level for r in handler.records)
        assert f"Status: {status.name}" in handler.records[0].getMessage()

    def test_logged_operation(self, captured):
        logger, handler = captured
        with LoggedOperation(logger, "assembly") as op:
            pass

        assert op.duration is not None and op.duration >= 0.0
        assert "Starting assembly" in handler.records[0].getMessage()
        assert "Completed assembly" in handler.records[1].getMessage()

    def test_logged_operation_failure(self, captured):
        logger, handler = captured
        with pytest.raises(RuntimeError), LoggedOperation(logger, "solve"):
            raise RuntimeError("boom")

        assert handler.records[-1].levelno == logging.ERROR
        assert "boom" in handler.records[-1].getMessage()
