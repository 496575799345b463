"""
Druid SQL query.

A Query is configured through its fluent context methods and executed at
most once: the first successful call to `result()` sends the request and
caches the ResultSet, and from then on the query is read-only. A failed
execution leaves the query unexecuted so it can be reconfigured and retried.
"""

import threading
import time
import uuid
from concurrent.futures import Future
from typing import Any, Dict, Iterator, List, Optional, Sequence

from druidsql.client.instrumentation import QueryEvent, QueryObserver
from druidsql.client.transport import Transport
from druidsql.exceptions import QueryAlreadyExecutedError
from druidsql.logger import log_error, query_logger
from druidsql.query.context import ContextOption, ContextOptions
from druidsql.query.parameters import SqlParameter, encode_parameters
from druidsql.query.payload import build_payload, dump_payload
from druidsql.query.response import classify_response
from druidsql.query.result import ResultSet, assemble_result

EVENT_NAME = "Druid SQL"


class Query:
  """
  A Druid SQL query, bound to the transport of the client that created it.

  Queries are created by DruidClient.query; constructing one directly is
  only needed with a custom transport. The result accessors (`columns`,
  `rows`, iteration, indexing, ...) execute the query on first use.
  """

  def __init__(
    self,
    transport: Transport,
    sql: str,
    params: Sequence[Any] = (),
    observers: Optional[List[QueryObserver]] = None,
  ):
    self._transport = transport
    self._sql = sql
    self._params = list(params)
    self._observers = list(observers or [])
    self._query_id = str(uuid.uuid4())
    self._options = ContextOptions()

    self._lock = threading.Lock()
    self._result: Optional[ResultSet] = None
    self._inflight: Optional[Future] = None

  def __repr__(self) -> str:
    state = "executed" if self.executed else "pending"
    return f"<Query {self._query_id} ({state}): {self._sql!r}>"

  @property
  def query_id(self) -> str:
    return self._query_id

  @property
  def sql(self) -> str:
    return self._sql

  @property
  def parameters(self) -> List[Any]:
    return list(self._params)

  @property
  def executed(self) -> bool:
    """Whether the query has executed; executed queries can't be configured."""
    return self._result is not None

  @property
  def query_context(self) -> Dict[str, Any]:
    return self._options.to_context(self._query_id)

  @property
  def query_parameters(self) -> List[SqlParameter]:
    return encode_parameters(self._params)

  # Execution

  def result(self) -> ResultSet:
    """
    Execute the query, or return the result of the earlier execution.

    Concurrent callers share a single in-flight attempt and all see its
    result or its exception.

    Raises:
        QueryError: The server rejected the query
        QueryTransportError: The request failed below HTTP
        QueryTimedOutError: The request timed out
        QueryResultTruncatedError: The result ended early and can't be trusted
        QueryResultUnparseableError: The result did not have the expected format
        QueryPayloadError: A parameter could not be serialized
    """
    with self._lock:
      if self._result is not None:
        return self._result

      attempt = self._inflight
      owner = attempt is None
      if owner:
        attempt = self._inflight = Future()

    if not owner:
      return attempt.result()

    context = self.query_context
    start = time.monotonic()

    try:
      result = self._execute(context)
    except BaseException as e:
      with self._lock:
        self._inflight = None
      attempt.set_exception(e)
      self._notify(self._event(context, start, error=e))
      raise

    with self._lock:
      self._result = result
      self._inflight = None
    attempt.set_result(result)
    self._notify(self._event(context, start, result=result))

    return result

  def _execute(self, context: Dict[str, Any]) -> ResultSet:
    payload = dump_payload(build_payload(self._sql, self.query_parameters, context))

    with self._transport.submit(payload) as outcome:
      return assemble_result(classify_response(outcome))

  def _event(
    self,
    context: Dict[str, Any],
    start: float,
    result: Optional[ResultSet] = None,
    error: Optional[BaseException] = None,
  ) -> QueryEvent:
    return QueryEvent(
      name=EVENT_NAME,
      query_id=self._query_id,
      sql=self._sql,
      binds=list(self._params),
      context=context,
      duration_ms=(time.monotonic() - start) * 1000,
      row_count=len(result) if result is not None else None,
      error=error,
    )

  def _notify(self, event: QueryEvent) -> None:
    """Run each observer; an observer that raises is logged and skipped."""
    for observer in self._observers:
      try:
        observer(event)
      except Exception as e:
        log_error(
          query_logger,
          e,
          "query",
          "observer_failed",
          metadata={"query_id": event.query_id, "observer": repr(observer)},
        )

  # Configuration

  def _check_not_executed(self, operation: str) -> None:
    if self.executed:
      raise QueryAlreadyExecutedError(operation)

  def in_time_zone(self, zone: Optional[str]) -> "Query":
    """
    Set the time zone that time functions and timestamp literals use, as a
    name like "America/Los_Angeles" or an offset like "-08:00". None unsets.
    """
    self._check_not_executed("in_time_zone")
    self._options.set(ContextOption.TIME_ZONE, zone)
    return self

  def with_approximate_count_distinct(self) -> "Query":
    """Use an approximate cardinality algorithm for COUNT(DISTINCT foo)."""
    return self._set_flag(
      "with_approximate_count_distinct", ContextOption.APPROXIMATE_COUNT_DISTINCT, True
    )

  def without_approximate_count_distinct(self) -> "Query":
    """Use an exact algorithm for COUNT(DISTINCT foo)."""
    return self._set_flag(
      "without_approximate_count_distinct",
      ContextOption.APPROXIMATE_COUNT_DISTINCT,
      False,
    )

  def with_approximate_top_n(self) -> "Query":
    """Use approximate TopN queries when the SQL could be expressed as one."""
    return self._set_flag(
      "with_approximate_top_n", ContextOption.APPROXIMATE_TOP_N, True
    )

  def without_approximate_top_n(self) -> "Query":
    """Use exact GroupBy queries instead of approximate TopN queries."""
    return self._set_flag(
      "without_approximate_top_n", ContextOption.APPROXIMATE_TOP_N, False
    )

  def with_cache(self) -> "Query":
    return self._set_flag("with_cache", ContextOption.USE_CACHE, True)

  def without_cache(self) -> "Query":
    return self._set_flag("without_cache", ContextOption.USE_CACHE, False)

  def with_windowing(self) -> "Query":
    """Allow window functions in the SQL."""
    return self._set_flag("with_windowing", ContextOption.ENABLE_WINDOWING, True)

  def without_windowing(self) -> "Query":
    return self._set_flag("without_windowing", ContextOption.ENABLE_WINDOWING, False)

  def with_priority(self, priority: Optional[int]) -> "Query":
    """Set the query priority; higher values run first. None unsets."""
    self._check_not_executed("with_priority")
    self._options.set(ContextOption.PRIORITY, priority)
    return self

  def set_option(self, option: ContextOption, value: Any) -> "Query":
    """Set any context option by key, or unset it with None."""
    self._check_not_executed("set_option")
    self._options.set(option, value)
    return self

  def bind(self, *params: Any) -> "Query":
    """Replace the positional parameters."""
    self._check_not_executed("bind")
    self._params = list(params)
    return self

  def _set_flag(
    self, operation: str, option: ContextOption, value: bool
  ) -> "Query":
    self._check_not_executed(operation)
    self._options.set(option, value)
    return self

  # Result access

  @property
  def columns(self):
    return self.result().columns

  @property
  def rows(self):
    return self.result().rows

  @property
  def column_types(self) -> Dict[str, Any]:
    return self.result().column_types

  @property
  def last(self) -> Optional[Dict[str, Any]]:
    return self.result().last

  @property
  def empty(self) -> bool:
    return self.result().empty

  def includes_column(self, name: str) -> bool:
    return self.result().includes_column(name)

  def to_list(self) -> List[Dict[str, Any]]:
    return self.result().to_list()

  def __len__(self) -> int:
    return len(self.result())

  def __iter__(self) -> Iterator[Dict[str, Any]]:
    return iter(self.result())

  def __getitem__(self, index: int) -> Dict[str, Any]:
    return self.result()[index]
