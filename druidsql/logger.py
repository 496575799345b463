"""
druidsql logging entry point.

Exposes the loggers used across the package. The library never configures
logging on import; records go to whatever handlers the application sets up,
or nowhere. Call `setup_logging()` to opt into druidsql's own formatting.
"""

import logging

from .config.logging import (
  setup_logging,
  get_logger,
  log_query_executed,
  log_error,
)

logger = get_logger("druidsql")
logger.addHandler(logging.NullHandler())

query_logger = get_logger("druidsql.query")
transport_logger = get_logger("druidsql.transport")

__all__ = [
  "logger",
  "query_logger",
  "transport_logger",
  "setup_logging",
  "log_query_executed",
  "log_error",
  "get_logger",
]
