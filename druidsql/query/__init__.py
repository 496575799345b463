"""
Query building, execution and result decoding.
"""

from .context import ContextOption, ContextOptions
from .parameters import SqlParameter, SqlType, encode_parameter, encode_parameters
from .payload import QueryPayload, build_payload, dump_payload
from .query import Query
from .response import classify_response, parse_query_error
from .result import ResultAssembler, ResultSet, assemble_result
from .row_parser import RowParser, tokenize_line

__all__ = [
  "ContextOption",
  "ContextOptions",
  "Query",
  "QueryPayload",
  "ResultAssembler",
  "ResultSet",
  "RowParser",
  "SqlParameter",
  "SqlType",
  "assemble_result",
  "build_payload",
  "classify_response",
  "dump_payload",
  "encode_parameter",
  "encode_parameters",
  "parse_query_error",
  "tokenize_line",
]
