"""Tests for query payload construction."""

import json

import pytest

from druidsql.exceptions import QueryPayloadError
from druidsql.query.parameters import encode_parameters
from druidsql.query.payload import QueryPayload, build_payload, dump_payload


class TestQueryPayload:
  """Test cases for building and serializing payloads."""

  def test_payload_shape(self):
    """Test that the payload has the fields and order the endpoint expects."""
    payload = build_payload(
      "SELECT * FROM wiki WHERE page = ? AND n > ?",
      encode_parameters(["Main", 3]),
      {"sqlQueryId": "q-1"},
    )

    assert dump_payload(payload) == (
      '{"query":"SELECT * FROM wiki WHERE page = ? AND n > ?",'
      '"header":true,'
      '"parameters":[{"type":"VARCHAR","value":"Main"},{"type":"INTEGER","value":3}],'
      '"resultFormat":"arrayLines",'
      '"context":{"sqlQueryId":"q-1"}}'
    )

  def test_header_and_format_are_fixed(self):
    payload = QueryPayload(query="SELECT 1")

    assert payload.header is True
    assert payload.result_format == "arrayLines"
    assert json.loads(dump_payload(payload))["parameters"] == []

  def test_serialization_is_deterministic(self):
    payload = build_payload("SELECT ?", encode_parameters([1.25]), {"sqlQueryId": "q"})

    assert dump_payload(payload) == dump_payload(payload)

  @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
  def test_non_finite_parameters_are_rejected(self, value):
    """Test that NaN/Infinity never reach the wire."""
    payload = build_payload("SELECT ?", encode_parameters([value]), {"sqlQueryId": "q"})

    with pytest.raises(QueryPayloadError):
      dump_payload(payload)

  def test_payload_error_is_a_value_error(self):
    payload = build_payload("SELECT ?", encode_parameters([float("nan")]), {})

    with pytest.raises(ValueError):
      dump_payload(payload)

  def test_unicode_is_kept(self):
    payload = build_payload("SELECT ?", encode_parameters(["日本"]), {})

    assert "日本" in dump_payload(payload)
