"""
Druid SQL Client - HTTP client for the Druid SQL endpoint.
"""

from .client import DruidClient
from .config import DruidClientConfig
from .instrumentation import LoggingObserver, QueryEvent, QueryObserver
from .transport import (
  HttpResponse,
  HttpxTransport,
  ResponseOutcome,
  TimedOut,
  Transport,
  TransportFailure,
)

__all__ = [
  "DruidClient",
  "DruidClientConfig",
  "HttpResponse",
  "HttpxTransport",
  "LoggingObserver",
  "QueryEvent",
  "QueryObserver",
  "ResponseOutcome",
  "TimedOut",
  "Transport",
  "TransportFailure",
]
