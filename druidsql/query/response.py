"""
Response classification.

Decides whether a transport outcome carries a result to decode, and turns
everything else into the matching exception.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from druidsql.client.transport import (
  Body,
  HttpResponse,
  ResponseOutcome,
  TimedOut,
  TransportFailure,
)
from druidsql.exceptions import QueryError, QueryTimedOutError, QueryTransportError

SUCCESS_STATUS = 200


class QueryErrorBody(BaseModel):
  """The JSON object the server sends with a failed query."""

  model_config = ConfigDict(extra="allow", populate_by_name=True)

  error: Optional[Any] = None
  error_message: Optional[Any] = Field(default=None, alias="errorMessage")


def classify_response(outcome: ResponseOutcome) -> Body:
  """
  Return the body of a successful response, or raise.

  Only status 200 counts as success; every other status is unexpected
  for this endpoint.

  Raises:
      QueryTimedOutError: The transport timed out, whatever was received
      QueryTransportError: The request failed below HTTP
      QueryError: The server answered with a non-success status
  """
  if isinstance(outcome, TimedOut):
    raise QueryTimedOutError()

  if isinstance(outcome, TransportFailure):
    raise QueryTransportError(outcome.code, outcome.message)

  if not isinstance(outcome, HttpResponse):
    raise TypeError(f"Unknown response outcome: {outcome!r}")

  if outcome.status_code == SUCCESS_STATUS:
    return outcome.body

  body = _read_whole(outcome.body)
  raise QueryError(
    parse_query_error(body),
    status_code=outcome.status_code,
    response_body=body,
  )


def parse_query_error(body: str) -> str:
  """
  Build an error message from an error response body.

  The server sends a JSON object with `error` and/or `errorMessage`; the
  fields present are joined with ": ". Anything else produces a generic
  message that includes the raw body.
  """
  try:
    error_info = QueryErrorBody.model_validate_json(body)
  except ValidationError:
    error_info = None

  if error_info is not None:
    components = [
      str(component)
      for component in (error_info.error, error_info.error_message)
      if component is not None
    ]
    if components:
      return ": ".join(components)

  return f"An error occurred, but the server's response was unparseable: {body}"


def _read_whole(body: Body) -> str:
  if isinstance(body, str):
    return body
  return "".join(body)
