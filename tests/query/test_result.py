"""Tests for result assembly."""

import pytest

from druidsql.exceptions import QueryResultTruncatedError, QueryResultUnparseableError
from druidsql.query.result import ResultAssembler, ResultSet, assemble_result


class TestAssembleResult:
  """Test cases for turning a response body into a ResultSet."""

  def test_header_and_rows(self):
    result = assemble_result('["a","b"]\n["1","2"]\n\n')

    assert result.columns == ("a", "b")
    assert result.rows == (("1", "2"),)

  def test_missing_terminator_is_truncation(self):
    """Test that a body without the trailing blank line is rejected."""
    with pytest.raises(QueryResultTruncatedError):
      assemble_result('["a","b"]\n["1","2"]\n')

  def test_cut_mid_line_is_truncation(self):
    with pytest.raises(QueryResultTruncatedError):
      assemble_result('["a","b"]\n["1","2"]\n["3",')

  def test_empty_body_is_truncation(self):
    with pytest.raises(QueryResultTruncatedError):
      assemble_result("")

  def test_only_terminator(self):
    result = assemble_result("\n")

    assert result.columns == ()
    assert result.rows == ()

  def test_header_only(self):
    result = assemble_result('["a"]\n\n')

    assert result.columns == ("a",)
    assert result.empty

  def test_blank_lines_between_rows_are_skipped(self):
    result = assemble_result('["a"]\n\n["1"]\n\n')

    assert result.rows == (("1",),)

  def test_unparseable_line(self):
    with pytest.raises(QueryResultUnparseableError):
      assemble_result('["a"]\n{"error":"x"}\n\n')

  def test_chunks(self):
    """Test that chunk boundaries may fall anywhere, including mid-line."""
    chunks = ['["a","', 'b"]\n["1"', ',"2"]\n', "\n"]

    result = assemble_result(iter(chunks))

    assert result.columns == ("a", "b")
    assert result.rows == (("1", "2"),)

  def test_byte_chunks_split_inside_a_character(self):
    data = '["é"]\n["ü"]\n\n'.encode("utf-8")
    chunks = [data[i : i + 1] for i in range(len(data))]

    result = assemble_result(chunks)

    assert result.columns == ("é",)
    assert result.rows == (("ü",),)

  def test_truncated_chunks(self):
    with pytest.raises(QueryResultTruncatedError):
      assemble_result(['["a"]\n', '["1"]\n'])


class TestResultAssembler:
  """Test cases for incremental assembly."""

  def test_rows_are_parsed_as_lines_arrive(self):
    """Test that a bad line fails before the stream ends."""
    assembler = ResultAssembler()
    assembler.feed('["a"]\n')

    with pytest.raises(QueryResultUnparseableError):
      assembler.feed('[["b"]]\n')

  def test_finish(self):
    assembler = ResultAssembler()
    assembler.feed('["a"]\n["1"]\n')
    assembler.feed("\n")

    assert assembler.finish() == ResultSet(columns=("a",), rows=(("1",),))


class TestResultSet:
  """Test cases for ResultSet access."""

  @pytest.fixture
  def result(self):
    return ResultSet(
      columns=("page", "count"),
      rows=(("Main", 10), ("Talk", 3)),
    )

  def test_len(self, result):
    assert len(result) == 2

  def test_iteration_yields_records(self, result):
    assert list(result) == [
      {"page": "Main", "count": 10},
      {"page": "Talk", "count": 3},
    ]

  def test_named_access(self, result):
    assert result[1]["page"] == "Talk"

  def test_positional_access(self, result):
    assert result.row(0) == ("Main", 10)
    assert result.row(0)[1] == 10

  def test_column(self, result):
    assert result.column("count") == [10, 3]

  def test_includes_column(self, result):
    assert result.includes_column("page")
    assert not result.includes_column("missing")

  def test_last(self, result):
    assert result.last == {"page": "Talk", "count": 3}
    assert ResultSet().last is None

  def test_empty(self, result):
    assert not result.empty
    assert ResultSet(columns=("a",)).empty

  def test_to_list(self, result):
    assert result.to_list() == list(result)

  def test_column_types(self, result):
    assert result.column_types == {}

  def test_immutable(self, result):
    with pytest.raises(AttributeError):
      result.rows = ()

  def test_rows_are_not_checked_against_header(self):
    result = assemble_result('["a","b"]\n["only"]\n\n')

    assert result.rows == (("only",),)
    assert result[0] == {"a": "only"}
