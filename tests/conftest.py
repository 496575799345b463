from contextlib import contextmanager
from typing import List

import pytest

from druidsql.client.transport import HttpResponse, ResponseOutcome


class FakeTransport:
  """Transport that returns canned outcomes and records submitted payloads."""

  def __init__(self, *outcomes: ResponseOutcome):
    self.outcomes: List[ResponseOutcome] = list(outcomes)
    self.payloads: List[str] = []
    self.closed = False

  @contextmanager
  def submit(self, payload: str):
    self.payloads.append(payload)
    outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
    yield outcome

  def close(self) -> None:
    self.closed = True


@pytest.fixture
def ok_transport():
  """A transport answering every query with a two-column, one-row result."""
  return FakeTransport(HttpResponse(200, '["a","b"]\n["1","2"]\n\n'))


@pytest.fixture
def fake_transport():
  return FakeTransport
