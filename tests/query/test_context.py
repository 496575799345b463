"""Tests for query context options."""

import pytest

from druidsql.query.context import ContextOption, ContextOptions


class TestContextOptions:
  """Test cases for ContextOptions."""

  def test_only_query_id_by_default(self):
    """Test that unset options are never serialized."""
    assert ContextOptions().to_context("qid-1") == {"sqlQueryId": "qid-1"}

  def test_false_is_serialized(self):
    """Test that false is a set value, distinct from unset."""
    options = ContextOptions()
    options.set(ContextOption.APPROXIMATE_TOP_N, False)

    assert options.to_context("q") == {"sqlQueryId": "q", "useApproximateTopN": False}

  def test_all_options(self):
    options = ContextOptions()
    options.set(ContextOption.TIME_ZONE, "America/Los_Angeles")
    options.set(ContextOption.APPROXIMATE_COUNT_DISTINCT, True)
    options.set(ContextOption.APPROXIMATE_TOP_N, False)
    options.set(ContextOption.USE_CACHE, False)
    options.set(ContextOption.ENABLE_WINDOWING, True)
    options.set(ContextOption.PRIORITY, 10)

    assert options.to_context("q") == {
      "sqlQueryId": "q",
      "sqlTimeZone": "America/Los_Angeles",
      "useApproximateCountDistinct": True,
      "useApproximateTopN": False,
      "useCache": False,
      "enableWindowing": True,
      "priority": 10,
    }

  def test_unset_with_none(self):
    """Test that setting None removes the option again."""
    options = ContextOptions()
    options.set(ContextOption.TIME_ZONE, "-08:00")
    options.set(ContextOption.TIME_ZONE, None)

    assert "sqlTimeZone" not in options.to_context("q")

  def test_set_by_wire_name(self):
    options = ContextOptions()
    options.set("useCache", True)

    assert options.use_cache is True
    assert options.get(ContextOption.USE_CACHE) is True

  def test_unknown_option(self):
    with pytest.raises(ValueError):
      ContextOptions().set("notAnOption", True)

  @pytest.mark.parametrize(
    "option,value",
    [
      (ContextOption.TIME_ZONE, 8),
      (ContextOption.USE_CACHE, "yes"),
      (ContextOption.APPROXIMATE_TOP_N, 1),
      (ContextOption.PRIORITY, True),
      (ContextOption.PRIORITY, 1.5),
    ],
  )
  def test_wrong_types_are_rejected(self, option, value):
    with pytest.raises(TypeError):
      ContextOptions().set(option, value)

  def test_query_id_comes_first(self):
    options = ContextOptions(priority=1, time_zone="UTC")

    assert list(options.to_context("q")) == ["sqlQueryId", "sqlTimeZone", "priority"]
