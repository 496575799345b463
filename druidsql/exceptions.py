"""
Exception types for druidsql.

Every error raised by the client derives from DruidSQLError so callers can
catch the whole family at once, while each subclass identifies one distinct
failure kind: caller misuse, transport failure, server-reported failure,
timeout, truncated output, or output that does not match the row grammar.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class DruidSQLError(Exception):
  """
  Base exception for all druidsql errors.

  Attributes:
      message: Human-readable error message
      error_code: Error code for categorization, defaults to the class name
      details: Additional error context
      timestamp: When the error occurred
  """

  def __init__(
    self,
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
  ):
    super().__init__(message)
    self.message = message
    self.error_code = error_code or self.__class__.__name__
    self.details = details or {}
    self.timestamp = datetime.now(timezone.utc).isoformat()

  def to_dict(self) -> Dict[str, Any]:
    """Convert exception to a dictionary for logging or API responses."""
    return {
      "error": self.error_code,
      "message": self.message,
      "details": self.details,
      "timestamp": self.timestamp,
    }


class ConfigurationError(DruidSQLError):
  """Raised when the client configuration or URI is not usable."""

  pass


class QueryAlreadyExecutedError(DruidSQLError):
  """
  Raised when an operation that is only valid before execution is attempted
  on a query that has already executed.
  """

  def __init__(self, operation: str):
    super().__init__(
      f"{operation} cannot be set because the query has already been executed",
      error_code="QUERY_ALREADY_EXECUTED",
      details={"operation": operation},
    )
    self.operation = operation


class QueryPayloadError(DruidSQLError, ValueError):
  """Raised when the query payload cannot be serialized to valid JSON."""

  pass


class QueryError(DruidSQLError):
  """
  The server or the transport reported an error executing the query.

  Attributes:
      status_code: HTTP status code, if the server answered
      response_body: Raw response body, if any
  """

  def __init__(
    self,
    message: str,
    status_code: Optional[int] = None,
    response_body: Optional[str] = None,
    **kwargs,
  ):
    details: Dict[str, Any] = {}
    if status_code is not None:
      details["status_code"] = status_code
    details.update(kwargs)
    super().__init__(message, error_code="QUERY_ERROR", details=details)
    self.status_code = status_code
    self.response_body = response_body


class QueryTransportError(QueryError):
  """The request never produced an HTTP response (connection, TLS, DNS, ...)."""

  def __init__(self, code: str, description: str):
    super().__init__(f"Transport error {code}: {description}", code=code)
    self.error_code = "QUERY_TRANSPORT_ERROR"
    self.code = code
    self.description = description


class QueryTimedOutError(DruidSQLError):
  """The HTTP request timed out while attempting to execute the query."""

  def __init__(self, message: str = "The query timed out"):
    super().__init__(message, error_code="QUERY_TIMED_OUT")


class QueryResultTruncatedError(DruidSQLError):
  """The response ended before its terminating blank line."""

  def __init__(
    self, message: str = "The query result was truncated and cannot be trusted"
  ):
    super().__init__(message, error_code="QUERY_RESULT_TRUNCATED")


class QueryResultUnparseableError(DruidSQLError):
  """A response line did not match the array-per-line row grammar."""

  def __init__(self, message: str):
    super().__init__(message, error_code="QUERY_RESULT_UNPARSEABLE")
