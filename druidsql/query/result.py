"""
Result assembly for array-per-line responses.

A successful response is one JSON array per line: the header first, then
one line per result row, then a blank line marking the end of the stream.
"""

import codecs
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from druidsql.exceptions import QueryResultTruncatedError
from druidsql.query.row_parser import Row, RowParser

Body = Union[str, bytes, Iterable[Union[str, bytes]]]


@dataclass(frozen=True)
class ResultSet:
  """
  Immutable query result.

  Rows are tuples in column order. Iterating or indexing yields records,
  which are dicts keyed by column name. Rows are not checked against the
  header's width.
  """

  columns: Tuple[str, ...] = ()
  rows: Tuple[Row, ...] = ()

  def __len__(self) -> int:
    return len(self.rows)

  def __iter__(self) -> Iterator[Dict[str, Any]]:
    for row in self.rows:
      yield self._record(row)

  def __getitem__(self, index: int) -> Dict[str, Any]:
    return self._record(self.rows[index])

  def row(self, index: int) -> Row:
    """Positional access to a row."""
    return self.rows[index]

  def column(self, name: str) -> List[Any]:
    """All values of one column, in row order."""
    position = self.columns.index(name)
    return [row[position] for row in self.rows]

  def includes_column(self, name: str) -> bool:
    return name in self.columns

  @property
  def column_types(self) -> Dict[str, Any]:
    # Responses carry no type information
    return {}

  @property
  def empty(self) -> bool:
    return not self.rows

  @property
  def last(self) -> Optional[Dict[str, Any]]:
    return self._record(self.rows[-1]) if self.rows else None

  def to_list(self) -> List[Dict[str, Any]]:
    return [self._record(row) for row in self.rows]

  def _record(self, row: Row) -> Dict[str, Any]:
    return dict(zip(self.columns, row))


class ResultAssembler:
  """
  Incrementally assembles a ResultSet from response text.

  Text may arrive in chunks of any size. Each complete line is parsed as
  soon as its newline arrives, so malformed rows are rejected without
  buffering the rest of the response.

  Example:
      assembler = ResultAssembler()
      for chunk in response.iter_text():
        assembler.feed(chunk)
      result = assembler.finish()
  """

  def __init__(self):
    self._rows: List[Row] = []
    self._partial = ""
    self._last_line: Optional[str] = None
    self._decoder = codecs.getincrementaldecoder("utf-8")()

  def feed(self, chunk: Union[str, bytes]) -> None:
    if isinstance(chunk, bytes):
      chunk = self._decoder.decode(chunk)

    *lines, self._partial = (self._partial + chunk).split("\n")

    for line in lines:
      self._last_line = line
      if line:
        self._rows.append(RowParser.parse_line(line))

  def finish(self) -> ResultSet:
    """
    Complete the stream and build the result.

    Raises:
        QueryResultTruncatedError: If the stream did not end with a blank line
    """
    self._partial += self._decoder.decode(b"", final=True)

    if self._partial or self._last_line != "":
      raise QueryResultTruncatedError()

    if not self._rows:
      return ResultSet()

    header, *rows = self._rows
    return ResultSet(columns=tuple(header), rows=tuple(rows))


def assemble_result(body: Body) -> ResultSet:
  """Build a ResultSet from a whole body or an iterable of text chunks."""
  assembler = ResultAssembler()

  if isinstance(body, (str, bytes)):
    assembler.feed(body)
  else:
    for chunk in body:
      assembler.feed(chunk)

  return assembler.finish()
