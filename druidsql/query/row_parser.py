"""
Streaming row parser for array-per-line query results.

Each line of a result is expected to be exactly one JSON array of scalars.
Instead of decoding the line into a general JSON tree, `tokenize_line` walks
the text once and pushes events (array start/end, object start/end, scalar
values) into a `RowParser`, which rejects anything outside that grammar the
moment it appears.

Example:
    RowParser.parse_line('["a", 1, true]')  # -> ("a", 1, True)
"""

import json
import re
from typing import Any, Optional, Tuple

from druidsql.exceptions import QueryResultUnparseableError

Scalar = Any
Row = Tuple[Scalar, ...]

_WHITESPACE = " \t\r\n"
_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_STRING = re.compile(r'"(?:[^"\\\x00-\x1f]|\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4}))*"')
_LITERALS = {"true": True, "false": False, "null": None}


class RowParser:
  """
  Event-driven parser for a single result row.

  The parser moves from idle (no row) to open (accumulating values) to
  closed (row frozen). Event methods take the object key the value appeared
  under, which is always None for a well-formed row. Any event that does not
  fit the current state raises QueryResultUnparseableError.

  After a successful parse the frozen row is available at `row`.
  """

  def __init__(self):
    self._values: Optional[list] = None
    self._row: Optional[Row] = None

  @property
  def row(self) -> Optional[Row]:
    return self._row

  @property
  def state(self) -> str:
    if self._row is not None:
      return "closed"
    if self._values is not None:
      return "open"
    return "idle"

  @classmethod
  def parse_line(cls, line: str) -> Row:
    """Parse one line with a fresh parser."""
    return cls().parse(line)

  def parse(self, line: str) -> Row:
    """
    Parse a line of text into a row.

    Args:
        line: One line of the response, without its newline

    Returns:
        The row, or an empty tuple if the line holds no array

    Raises:
        QueryResultUnparseableError: If the line is not a single array of scalars
    """
    try:
      tokenize_line(line, self)

      if self.state == "open":
        raise QueryResultUnparseableError("Row was not finished")
    except Exception:
      self.reset()
      raise

    return self._row or ()

  def reset(self) -> None:
    """Discard any partial or finished row."""
    self._values = None
    self._row = None

  # Parser events

  def array_start(self, key: Optional[str] = None) -> None:
    if key is not None:
      raise QueryResultUnparseableError("Encountered unexpected key for an array")
    if self.state != "idle":
      raise QueryResultUnparseableError("Row was already initialized")

    self._values = []

  def add_value(self, value: Scalar, key: Optional[str] = None) -> None:
    if key is not None:
      raise QueryResultUnparseableError("Encountered unexpected key for a value")
    if self.state == "idle":
      raise QueryResultUnparseableError("Encountered value before array start")
    if self.state == "closed":
      raise QueryResultUnparseableError("Row was already finished")

    self._values.append(value)

  def array_end(self, key: Optional[str] = None) -> None:
    if key is not None:
      raise QueryResultUnparseableError("Encountered unexpected key for an array")
    if self.state != "open":
      raise QueryResultUnparseableError("Row was already finished")

    self._row = tuple(self._values)
    self._values = None

  def hash_start(self, key: Optional[str] = None) -> None:
    raise QueryResultUnparseableError("Encountered unexpected { in response")

  def hash_end(self, key: Optional[str] = None) -> None:
    raise QueryResultUnparseableError("Encountered unexpected } in response")


def tokenize_line(line: str, handler: RowParser) -> None:
  """
  Scan one line and push its events into `handler`.

  Only the pieces of JSON a row can contain are recognized: brackets,
  braces, commas and scalar literals. The tokenizer enforces that values
  are comma-separated; every structural rule (nesting, values outside the
  array, objects) is the handler's to enforce.

  Raises:
      QueryResultUnparseableError: On any token outside the row grammar
  """
  pos = 0
  end = len(line)
  # What came before the current token: "start", "open", "value" or "comma"
  previous = "start"
  depth = 0

  while True:
    while pos < end and line[pos] in _WHITESPACE:
      pos += 1
    if pos >= end:
      break

    char = line[pos]

    if char == "[":
      handler.array_start(None)
      depth += 1
      previous = "open"
      pos += 1
    elif char == "]":
      if previous == "comma":
        _fail("Unexpected ]", pos)
      handler.array_end(None)
      depth = max(depth - 1, 0)
      previous = "value"
      pos += 1
    elif char == "{":
      handler.hash_start(None)
      pos += 1
    elif char == "}":
      handler.hash_end(None)
      pos += 1
    elif char == ",":
      if depth == 0 or previous != "value":
        _fail("Unexpected ,", pos)
      previous = "comma"
      pos += 1
    else:
      if depth and previous == "value":
        _fail(f"Expected , but found {char!r}", pos)
      value, pos = _read_scalar(line, pos)
      handler.add_value(value, None)
      previous = "value"


def _read_scalar(line: str, pos: int) -> Tuple[Scalar, int]:
  char = line[pos]

  if char == '"':
    match = _STRING.match(line, pos)
    if match is None:
      _fail("Unterminated or invalid string", pos)
    return json.loads(match.group()), match.end()

  if char == "-" or char.isdigit():
    match = _NUMBER.match(line, pos)
    if match is None:
      _fail("Invalid number", pos)
    return json.loads(match.group()), match.end()

  for literal, value in _LITERALS.items():
    if line.startswith(literal, pos):
      return value, pos + len(literal)

  _fail(f"Unexpected {char!r}", pos)


def _fail(reason: str, pos: int) -> None:
  raise QueryResultUnparseableError(f"{reason} at position {pos}")
