"""
Query payload construction and serialization.
"""

import json
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from druidsql.exceptions import QueryPayloadError
from druidsql.query.parameters import SqlParameter


class QueryPayload(BaseModel):
  """The JSON body POSTed to the SQL endpoint."""

  model_config = ConfigDict(frozen=True, populate_by_name=True)

  query: str
  # The result decoder treats the first row as the header, so it must be sent
  header: Literal[True] = True
  parameters: List[SqlParameter] = Field(default_factory=list)
  # One array per line avoids repeating column names on every row
  result_format: Literal["arrayLines"] = Field(
    default="arrayLines", alias="resultFormat"
  )
  context: Dict[str, Any] = Field(default_factory=dict)


def build_payload(
  sql: str, parameters: List[SqlParameter], context: Dict[str, Any]
) -> QueryPayload:
  return QueryPayload(query=sql, parameters=parameters, context=context)


def dump_payload(payload: QueryPayload) -> str:
  """
  Serialize a payload to compact JSON.

  Raises:
      QueryPayloadError: If any value is NaN or infinite
  """
  try:
    return json.dumps(
      payload.model_dump(by_alias=True),
      allow_nan=False,
      ensure_ascii=False,
      separators=(",", ":"),
    )
  except ValueError as e:
    raise QueryPayloadError(f"Query payload is not valid JSON: {e}") from e
