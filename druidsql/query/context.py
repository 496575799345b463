"""
Query context options.

The query context is a sparse map of execution hints sent with each query.
An option that was never set is left out of the map entirely; `False` is a
real value and is always sent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ContextOption(str, Enum):
  """Settable context options, valued by their wire names."""

  TIME_ZONE = "sqlTimeZone"
  APPROXIMATE_COUNT_DISTINCT = "useApproximateCountDistinct"
  APPROXIMATE_TOP_N = "useApproximateTopN"
  USE_CACHE = "useCache"
  ENABLE_WINDOWING = "enableWindowing"
  PRIORITY = "priority"


QUERY_ID_KEY = "sqlQueryId"


@dataclass
class ContextOptions:
  """Typed holder for the context options of one query; None means unset."""

  time_zone: Optional[str] = None
  approximate_count_distinct: Optional[bool] = None
  approximate_top_n: Optional[bool] = None
  use_cache: Optional[bool] = None
  enable_windowing: Optional[bool] = None
  priority: Optional[int] = None

  def set(self, option: ContextOption, value: Any) -> None:
    """
    Set an option by key, or unset it with None.

    Raises:
        TypeError: If the value has the wrong type for the option
    """
    option = ContextOption(option)

    if value is not None:
      if option is ContextOption.TIME_ZONE:
        if not isinstance(value, str):
          raise TypeError(f"{option.value} must be a string, got {value!r}")
      elif option is ContextOption.PRIORITY:
        if isinstance(value, bool) or not isinstance(value, int):
          raise TypeError(f"{option.value} must be an integer, got {value!r}")
      elif not isinstance(value, bool):
        raise TypeError(f"{option.value} must be a boolean, got {value!r}")

    setattr(self, _ATTRIBUTES[option], value)

  def get(self, option: ContextOption) -> Any:
    return getattr(self, _ATTRIBUTES[ContextOption(option)])

  def to_context(self, query_id: str) -> Dict[str, Any]:
    """Build the context map: the query id, then each option that is set."""
    context: Dict[str, Any] = {QUERY_ID_KEY: query_id}

    for option in ContextOption:
      value = self.get(option)
      if value is not None:
        context[option.value] = value

    return context


_ATTRIBUTES = {
  ContextOption.TIME_ZONE: "time_zone",
  ContextOption.APPROXIMATE_COUNT_DISTINCT: "approximate_count_distinct",
  ContextOption.APPROXIMATE_TOP_N: "approximate_top_n",
  ContextOption.USE_CACHE: "use_cache",
  ContextOption.ENABLE_WINDOWING: "enable_windowing",
  ContextOption.PRIORITY: "priority",
}
