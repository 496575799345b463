"""Tests for query instrumentation."""

import logging
from unittest.mock import Mock

import pytest

from druidsql.client.instrumentation import (
  LoggingObserver,
  QueryEvent,
  context_flags,
  with_without_flag,
)
from druidsql.exceptions import QueryTimedOutError


def _event(**kwargs) -> QueryEvent:
  defaults = {
    "name": "Druid SQL",
    "query_id": "q-1",
    "sql": "SELECT * FROM wiki WHERE page = ?",
    "binds": ["Main"],
    "context": {"sqlQueryId": "q-1"},
    "duration_ms": 12.34,
    "row_count": 2,
  }
  defaults.update(kwargs)
  return QueryEvent(**defaults)


@pytest.fixture
def mock_logger():
  logger = Mock(spec=logging.Logger)
  logger.isEnabledFor.return_value = True
  return logger


class TestContextFlags:
  """Test cases for describing context options."""

  def test_no_flags(self):
    assert context_flags({"sqlQueryId": "q"}) == []

  def test_all_flags(self):
    context = {
      "sqlQueryId": "q",
      "sqlTimeZone": "America/Los_Angeles",
      "useApproximateCountDistinct": True,
      "useApproximateTopN": False,
      "useCache": False,
      "enableWindowing": True,
      "priority": 10,
    }

    assert context_flags(context) == [
      "in time zone America/Los_Angeles",
      "with approximate count distinct",
      "without approximate top N",
      "without cache",
      "with windowing",
      "priority 10",
    ]

  @pytest.mark.parametrize(
    "value,expected",
    [(True, "with cache"), (False, "without cache"), ("x", "cache = 'x'")],
  )
  def test_with_without_flag(self, value, expected):
    assert with_without_flag("cache", value) == expected


class TestLoggingObserver:
  """Test cases for LoggingObserver."""

  def test_render(self):
    event = _event(context={"sqlQueryId": "q-1", "useCache": False})

    line = LoggingObserver().render(event)

    assert line == (
      "  Druid SQL (12.3ms)  SELECT * FROM wiki WHERE page = ?"
      "  (without cache)  ['Main']"
    )

  def test_render_without_flags_or_binds(self):
    line = LoggingObserver().render(_event(sql="SELECT 1", binds=[]))

    assert line == "  Druid SQL (12.3ms)  SELECT 1"

  def test_success_is_logged(self, mock_logger):
    observer = LoggingObserver(logger=mock_logger, slow_query_threshold_ms=1000)

    observer(_event())

    mock_logger.debug.assert_called_once()
    mock_logger.info.assert_called_once()
    extra = mock_logger.info.call_args.kwargs["extra"]
    assert extra["query_id"] == "q-1"
    assert extra["row_count"] == 2
    mock_logger.warning.assert_not_called()

  def test_slow_query_is_a_warning(self, mock_logger):
    observer = LoggingObserver(logger=mock_logger, slow_query_threshold_ms=5)

    observer(_event(duration_ms=50.0))

    mock_logger.warning.assert_called_once()
    assert "Slow query q-1" in mock_logger.warning.call_args.args[0]
    mock_logger.info.assert_not_called()

  def test_debug_line_skipped_when_disabled(self, mock_logger):
    mock_logger.isEnabledFor.return_value = False

    LoggingObserver(logger=mock_logger, slow_query_threshold_ms=1000)(_event())

    mock_logger.debug.assert_not_called()

  def test_query_failure_is_a_warning(self, mock_logger):
    observer = LoggingObserver(logger=mock_logger)

    observer(_event(row_count=None, error=QueryTimedOutError()))

    mock_logger.warning.assert_called_once()
    message = mock_logger.warning.call_args.args[0]
    assert "Query q-1 failed" in message
    assert "The query timed out" in message
    assert mock_logger.warning.call_args.kwargs["extra"]["action"] == "query_failed"
    mock_logger.info.assert_not_called()
    mock_logger.error.assert_not_called()

  def test_unexpected_failure_is_an_error(self, mock_logger):
    """Test that errors from outside the library are logged with traceback."""
    error = RuntimeError("observer bug")
    observer = LoggingObserver(logger=mock_logger)

    observer(_event(row_count=None, error=error))

    mock_logger.error.assert_called_once()
    kwargs = mock_logger.error.call_args.kwargs
    assert kwargs["exc_info"] is error
    assert kwargs["extra"]["error_category"] == "unexpected"
    assert kwargs["extra"]["metadata"]["query_id"] == "q-1"
    mock_logger.warning.assert_not_called()
