"""
Query parameter encoding.

Maps Python values to the typed `{type, value}` pairs the SQL endpoint
expects for `?` placeholders. Parameters are positional; their count is not
checked against the placeholders in the SQL text.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Union

from pydantic import BaseModel, ConfigDict

from druidsql.exceptions import QueryPayloadError


class SqlType(str, Enum):
  """Wire types for query parameters."""

  DECIMAL = "DECIMAL"
  TIMESTAMP = "TIMESTAMP"
  DATE = "DATE"
  DOUBLE = "DOUBLE"
  INTEGER = "INTEGER"
  BOOLEAN = "BOOLEAN"
  VARCHAR = "VARCHAR"


class SqlParameter(BaseModel):
  """A single encoded query parameter."""

  model_config = ConfigDict(frozen=True, use_enum_values=True)

  type: SqlType
  value: Union[bool, int, float, str]


def format_timestamp(value: datetime) -> str:
  """
  Render a datetime as `YYYY-MM-DD HH:MM:SS.nnnnnnnnn+0000` in UTC.

  Naive datetimes are interpreted as local time, aware ones are converted
  from whatever zone they carry.
  """
  utc = value.astimezone(timezone.utc)
  # Python datetimes carry microseconds; the wire format wants nanoseconds
  naive = utc.replace(tzinfo=None).isoformat(sep=" ", timespec="microseconds")
  return f"{naive}000+0000"


def format_decimal(value: Decimal) -> str:
  """Render a Decimal as a fixed-point string without an exponent."""
  if not value.is_finite():
    raise QueryPayloadError(f"Cannot encode non-finite decimal parameter: {value}")
  return format(value, "f")


def encode_parameter(value: Any) -> SqlParameter:
  """
  Encode one value. More specific types are checked first: datetime is a
  subclass of date and bool is a subclass of int. Unrecognized values are
  sent as VARCHAR.
  """
  if isinstance(value, Decimal):
    return SqlParameter(type=SqlType.DECIMAL, value=format_decimal(value))
  if isinstance(value, datetime):
    return SqlParameter(type=SqlType.TIMESTAMP, value=format_timestamp(value))
  if isinstance(value, date):
    return SqlParameter(type=SqlType.DATE, value=value.isoformat())
  if isinstance(value, bool):
    return SqlParameter(type=SqlType.BOOLEAN, value=value)
  if isinstance(value, float):
    return SqlParameter(type=SqlType.DOUBLE, value=value)
  if isinstance(value, int):
    return SqlParameter(type=SqlType.INTEGER, value=value)
  if isinstance(value, (bytes, bytearray)):
    text = bytes(value).decode("utf-8", errors="replace")
    return SqlParameter(type=SqlType.VARCHAR, value=text)
  return SqlParameter(type=SqlType.VARCHAR, value=str(value))


def encode_parameters(values: Iterable[Any]) -> List[SqlParameter]:
  """Encode parameters in order."""
  return [encode_parameter(value) for value in values]
