"""
Structured Logging Configuration for druidsql

This module builds the configuration for the "druidsql" logger hierarchy.
Nothing is applied until the application calls `setup_logging()`. In
development it writes human-readable lines; everywhere else it emits one
JSON object per record so query timings and failures can be searched by
field.

Key Features:
- Structured JSON output with consistent field names
- Automatic log level management by environment
- Query timing with a slow-query threshold
- Error categorization
"""

import json
import logging
import logging.config
import traceback
from datetime import datetime, timezone
from typing import Any

from druidsql.config.env import EnvConfig


class StructuredFormatter(logging.Formatter):
  """
  JSON formatter with consistent, searchable field names.

  - Timestamp in ISO format
  - Component/action structure
  - Query identifiers and timings preserved as fields
  """

  def format(self, record: logging.LogRecord) -> str:
    log_entry = {
      "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
      .replace(tzinfo=None)
      .isoformat()
      + "Z",
      "level": record.levelname,
      "component": getattr(record, "component", record.name),
      "message": record.getMessage(),
    }

    if hasattr(record, "action"):
      log_entry["action"] = record.action

    # Query context
    if hasattr(record, "query_id"):
      log_entry["query_id"] = record.query_id
    if hasattr(record, "sql"):
      log_entry["sql"] = record.sql

    # Performance metrics
    if hasattr(record, "duration_ms"):
      log_entry["duration_ms"] = record.duration_ms
    if hasattr(record, "status_code"):
      log_entry["status_code"] = record.status_code
    if hasattr(record, "row_count"):
      log_entry["row_count"] = record.row_count

    if record.levelno >= logging.ERROR:
      if record.exc_info:
        log_entry["error"] = {
          "type": record.exc_info[0].__name__ if record.exc_info[0] else "Unknown",
          "message": str(record.exc_info[1]) if record.exc_info[1] else "",
          "traceback": traceback.format_exception(*record.exc_info),
        }

      if hasattr(record, "error_category"):
        log_entry["error_category"] = record.error_category

    if hasattr(record, "metadata"):
      log_entry["metadata"] = record.metadata

    return json.dumps(log_entry, default=str, separators=(",", ":"))


def get_logging_config(environment: str | None = None) -> dict[str, Any]:
  """
  Generate logging configuration based on environment.

  - prod: INFO level, structured output
  - staging: INFO level, structured output
  - test: WARNING level, minimal output for clean test runs
  - dev: DEBUG level unless LOG_LEVEL overrides, plain text
  """
  env = environment or EnvConfig.ENVIRONMENT

  log_level_override = EnvConfig.LOG_LEVEL or None

  if env in ("prod", "staging"):
    default_level = "INFO"
  elif env == "test":
    default_level = "WARNING"
  else:  # dev
    default_level = log_level_override or "DEBUG"

  handler = "console" if env == "dev" else "structured"

  config: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
      "structured": {
        "()": StructuredFormatter,
      },
      "simple": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
    },
    "handlers": {
      "structured": {
        "class": "logging.StreamHandler",
        "level": "DEBUG",
        "formatter": "structured",
        "stream": "ext://sys.stderr",
      },
      "console": {
        "class": "logging.StreamHandler",
        "level": "DEBUG",
        "formatter": "simple",
        "stream": "ext://sys.stdout",
      },
    },
    "loggers": {
      "druidsql": {
        "level": default_level,
        "handlers": [handler],
        "propagate": False,
      },
    },
  }

  return config


def setup_logging(environment: str | None = None) -> None:
  """
  Apply druidsql's logging configuration. Only the "druidsql" logger
  hierarchy is touched; other loggers keep the application's settings.
  """
  config = get_logging_config(environment)
  logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
  """Get a logger with structured logging capabilities."""
  return logging.getLogger(name)


def log_query_executed(
  logger: logging.Logger,
  query_id: str,
  sql: str,
  duration_ms: float,
  row_count: int | None = None,
  slow_threshold_ms: float | None = None,
) -> None:
  """Log a completed query with its timing, warning when it was slow."""
  extra: dict[str, Any] = {
    "component": "query",
    "action": "query_executed",
    "query_id": query_id,
    "sql": sql,
    "duration_ms": duration_ms,
  }

  if row_count is not None:
    extra["row_count"] = row_count

  threshold = (
    slow_threshold_ms
    if slow_threshold_ms is not None
    else EnvConfig.SLOW_QUERY_THRESHOLD_MS
  )

  if duration_ms > threshold:
    logger.warning(f"Slow query {query_id} ({duration_ms:.2f}ms)", extra=extra)
  else:
    logger.info(f"Query {query_id} ({duration_ms:.2f}ms)", extra=extra)


def log_error(
  logger: logging.Logger,
  error: Exception,
  component: str,
  action: str,
  error_category: str = "application",
  metadata: dict[str, Any] | None = None,
) -> None:
  """Log error with structured data for easy searching."""
  logger.error(
    f"Error in {component}.{action}: {error!s}",
    exc_info=error,
    extra={
      "component": component,
      "action": action,
      "error_category": error_category,
      "metadata": metadata or {},
    },
  )
