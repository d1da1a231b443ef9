"""
Unit tests -- logging error sink.
"""
import logging

from src.observability.sink import LoggingErrorSink


def test_logs_error_with_tags_and_extra(caplog):
    sink = LoggingErrorSink("tests.sink")
    logging.getLogger("tests.sink").propagate = True
    try:
        raise ValueError("bad row")
    except ValueError as exc:
        error = exc

    with caplog.at_level(logging.ERROR, logger="tests.sink"):
        sink.capture_exception(error, tags={"table": "plant_units", "operation": "select"},
                               extra={"filters": {"unit": "CM 220"}})

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "ValueError" in record.getMessage()
    assert "table=plant_units" in record.getMessage()
    assert "operation=select" in record.getMessage()
    assert '"unit":"CM 220"' in record.getMessage()
    assert record.exc_info[1] is error


def test_unserialisable_extra_does_not_raise():
    sink = LoggingErrorSink("tests.sink")
    sink.capture_exception(RuntimeError("x"), extra={"obj": object()})
