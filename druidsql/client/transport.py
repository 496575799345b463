"""
HTTP transport for query payloads.

A transport submits a serialized payload and reports what happened as a
ResponseOutcome: an HTTP response (any status), a transport-level failure,
or a timeout. Transports never interpret status codes; that is the
response classifier's job.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterable, Iterator, Optional, Protocol, Union

import httpx

from druidsql.exceptions import QueryTimedOutError, QueryTransportError
from druidsql.logger import transport_logger

Body = Union[str, Iterable[str]]


@dataclass(frozen=True)
class HttpResponse:
  """The server answered. `body` is text, or an iterable of text chunks."""

  status_code: int
  body: Body


@dataclass(frozen=True)
class TransportFailure:
  """The request failed below HTTP (connection refused, TLS, DNS, ...)."""

  code: str
  message: str


@dataclass(frozen=True)
class TimedOut:
  """The request timed out; anything received so far is untrustworthy."""

  partial_body: Optional[str] = None


ResponseOutcome = Union[HttpResponse, TransportFailure, TimedOut]


class Transport(Protocol):
  """Submits a payload to the query endpoint."""

  def submit(self, payload: str) -> ContextManager[ResponseOutcome]:
    """
    Submit a serialized payload.

    The outcome is only valid inside the context; a streamed body must be
    consumed before the context exits.
    """
    ...

  def close(self) -> None: ...


class HttpxTransport:
  """Transport backed by a synchronous httpx client with streamed responses."""

  def __init__(self, uri: str, client: httpx.Client):
    self.uri = uri
    self.client = client

  @contextmanager
  def submit(self, payload: str) -> Iterator[ResponseOutcome]:
    transport_logger.debug(f"Making request: POST {self.uri}")

    request = self.client.build_request(
      "POST",
      self.uri,
      content=payload.encode("utf-8"),
      headers={"Content-Type": "application/json"},
    )
    response: Optional[httpx.Response] = None

    try:
      response = self.client.send(request, stream=True)
      if response.status_code != httpx.codes.OK:
        # Error bodies are small and are needed whole
        response.read()
    except httpx.TimeoutException as e:
      transport_logger.warning(f"Request timeout: {e}")
      outcome: ResponseOutcome = TimedOut()
    except httpx.TransportError as e:
      transport_logger.warning(f"Transport error: {e}")
      outcome = TransportFailure(code=type(e).__name__, message=str(e))
    else:
      if response.status_code == httpx.codes.OK:
        outcome = HttpResponse(response.status_code, _iter_body(response))
      else:
        outcome = HttpResponse(response.status_code, response.text)

    try:
      yield outcome
    finally:
      if response is not None:
        response.close()

  def close(self) -> None:
    self.client.close()


def _iter_body(response: httpx.Response) -> Iterator[str]:
  """Stream response text, converting failures that happen mid-stream."""
  try:
    yield from response.iter_text()
  except httpx.TimeoutException as e:
    raise QueryTimedOutError(
      f"The query timed out while reading the result: {e}"
    ) from e
  except httpx.TransportError as e:
    raise QueryTransportError(type(e).__name__, str(e)) from e
