"""
druidsql - a client for Apache Druid SQL.

Example:
    import druidsql

    with druidsql.connect("https://broker.example.com/druid/v2/sql") as client:
      query = client.query("SELECT page, COUNT(*) AS n FROM wiki WHERE user = ?", "bob")
      for record in query.in_time_zone("America/Los_Angeles"):
        print(record["page"], record["n"])
"""

from typing import Any

from .client import DruidClient, DruidClientConfig
from .exceptions import (
  ConfigurationError,
  DruidSQLError,
  QueryAlreadyExecutedError,
  QueryError,
  QueryPayloadError,
  QueryResultTruncatedError,
  QueryResultUnparseableError,
  QueryTimedOutError,
  QueryTransportError,
)
from .query import ContextOption, Query, ResultSet
from .version import __version__


def connect(uri: str, **options: Any) -> DruidClient:
  """
  Create a client for the Druid SQL endpoint at `uri`.

  Args:
      uri: The endpoint URI, including username and password if needed
      **options: DruidClientConfig settings, such as timeout,
          connect_timeout, tls_ca_certificate_bundle,
          insecure_plaintext_login or user_agent_prefix

  Raises:
      ConfigurationError: If the URI or options are not usable
  """
  config = DruidClientConfig(uri=uri).with_overrides(**options)
  return DruidClient(config=config)


__all__ = [
  "ConfigurationError",
  "ContextOption",
  "DruidClient",
  "DruidClientConfig",
  "DruidSQLError",
  "Query",
  "QueryAlreadyExecutedError",
  "QueryError",
  "QueryPayloadError",
  "QueryResultTruncatedError",
  "QueryResultUnparseableError",
  "QueryTimedOutError",
  "QueryTransportError",
  "ResultSet",
  "__version__",
  "connect",
]
