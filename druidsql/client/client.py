"""
Druid SQL Client.

A client holds one HTTP connection pool and creates queries against it.
It is safe to share across threads; each query it creates is not.
"""

from typing import Any, List, Optional

import httpx

from druidsql.logger import logger
from druidsql.query.query import Query
from .config import DruidClientConfig
from .instrumentation import LoggingObserver, QueryObserver
from .transport import HttpxTransport, Transport


class DruidClient:
  """Client for the Druid SQL HTTP endpoint."""

  def __init__(
    self,
    uri: Optional[str] = None,
    config: Optional[DruidClientConfig] = None,
    transport: Optional[Transport] = None,
    observers: Optional[List[QueryObserver]] = None,
    **kwargs,
  ):
    """
    Initialize the client.

    Args:
        uri: URI of the SQL endpoint, including credentials if needed
        config: Client configuration, read from the environment if omitted
        transport: Transport to submit queries with, httpx if omitted
        observers: Query observers; a LoggingObserver if omitted
        **kwargs: Additional config overrides

    Raises:
        ConfigurationError: If the configuration is not valid
    """
    self.config = config or DruidClientConfig.from_env()

    if uri:
      kwargs["uri"] = uri
    if kwargs:
      self.config = self.config.with_overrides(**kwargs)

    self.config.validate()

    self.transport = transport or self._build_transport()

    if observers is None:
      observers = [
        LoggingObserver(slow_query_threshold_ms=self.config.slow_query_threshold_ms)
      ]
    self.observers = list(observers)

    logger.debug(f"DruidClient configured for {self._redacted_uri()}")

  def __enter__(self):
    return self

  def __exit__(self, exc_type, exc_val, exc_tb):
    self.close()

  def close(self) -> None:
    """Close the transport and its connections."""
    self.transport.close()

  def query(self, sql: str, *params: Any) -> Query:
    """
    Create a query. Nothing is sent until its result is accessed.

    Args:
        sql: The SQL, with `?` placeholders for parameters
        *params: Values for the placeholders, in order

    Returns:
        A Query that can be configured, then executed
    """
    return Query(self.transport, sql, params, observers=self.observers)

  def _build_transport(self) -> HttpxTransport:
    headers = {
      "Connection": "keep-alive",
      "User-Agent": self.config.user_agent(),
      **self.config.headers,
    }

    client = httpx.Client(
      timeout=self.config.httpx_timeout(),
      headers=headers,
      verify=self.config.tls_ca_certificate_bundle or True,
    )
    return HttpxTransport(self.config.uri, client)

  def _redacted_uri(self) -> str:
    url = httpx.URL(self.config.uri)
    if url.password:
      url = url.copy_with(username=url.username, password="***")
    return str(url)
