"""
Query instrumentation.

Observers are plain callables that receive a QueryEvent after every
execution attempt, whether it succeeded or raised. LoggingObserver is the
default observer and writes a debug line per query in the shape
application SQL logs usually take.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from druidsql.exceptions import DruidSQLError
from druidsql.logger import log_error, log_query_executed, query_logger


@dataclass(frozen=True)
class QueryEvent:
  """What happened during one execution attempt."""

  name: str
  query_id: str
  sql: str
  binds: List[Any] = field(default_factory=list)
  context: Dict[str, Any] = field(default_factory=dict)
  duration_ms: float = 0.0
  row_count: Optional[int] = None
  error: Optional[BaseException] = None


QueryObserver = Callable[[QueryEvent], None]


class LoggingObserver:
  """Logs each query: a rendered debug line, then its timing."""

  def __init__(
    self,
    logger: Optional[logging.Logger] = None,
    slow_query_threshold_ms: Optional[float] = None,
  ):
    self.logger = logger or query_logger
    self.slow_query_threshold_ms = slow_query_threshold_ms

  def __call__(self, event: QueryEvent) -> None:
    if self.logger.isEnabledFor(logging.DEBUG):
      self.logger.debug(self.render(event))

    if event.error is not None and not isinstance(event.error, DruidSQLError):
      log_error(
        self.logger,
        event.error,
        "query",
        "query_failed",
        error_category="unexpected",
        metadata={"query_id": event.query_id, "duration_ms": event.duration_ms},
      )
      return

    if event.error is not None:
      self.logger.warning(
        f"Query {event.query_id} failed after {event.duration_ms:.1f}ms: "
        f"{event.error}",
        extra={
          "component": "query",
          "action": "query_failed",
          "query_id": event.query_id,
          "duration_ms": event.duration_ms,
        },
      )
      return

    log_query_executed(
      self.logger,
      event.query_id,
      event.sql,
      event.duration_ms,
      row_count=event.row_count,
      slow_threshold_ms=self.slow_query_threshold_ms,
    )

  def render(self, event: QueryEvent) -> str:
    """Render `name (1.2ms)  SQL  (context flags)  [binds]`."""
    line = f"  {event.name} ({event.duration_ms:.1f}ms)  {event.sql}"

    flags = context_flags(event.context)
    if flags:
      line += f"  ({', '.join(flags)})"

    if event.binds:
      line += f"  {event.binds!r}"

    return line


def context_flags(context: Dict[str, Any]) -> List[str]:
  """Describe the notable query context options in words."""
  flags = []

  if context.get("sqlTimeZone") is not None:
    flags.append(f"in time zone {context['sqlTimeZone']}")

  for key, human in (
    ("useApproximateCountDistinct", "approximate count distinct"),
    ("useApproximateTopN", "approximate top N"),
    ("useCache", "cache"),
    ("enableWindowing", "windowing"),
  ):
    if key in context:
      flags.append(with_without_flag(human, context[key]))

  if context.get("priority") is not None:
    flags.append(f"priority {context['priority']}")

  return flags


def with_without_flag(human: str, value: Any) -> str:
  if value is True:
    return f"with {human}"
  if value is False:
    return f"without {human}"
  return f"{human} = {value!r}"
