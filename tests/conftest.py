"""Shared test fixtures."""

from datetime import datetime

import pytest

from subminder.db.models import SubscriptionDraft
from subminder.engine.notifications import NotificationCenter
from subminder.engine.state import SubscriptionState


class FakeClock:
    """Injectable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 5, 13, 9, 0))


@pytest.fixture
def state(clock):
    return SubscriptionState(clock=clock, notifications=NotificationCenter(clock))


@pytest.fixture
def changes(state):
    """Collection names reported to the on-change observer."""
    seen = []
    state.add_listener(lambda collection, _state: seen.append(collection))
    return seen


def make_draft(name="Netflix", price="15.99", cycle="monthly", next_payment="2025-05-15", **kwargs):
    return SubscriptionDraft(
        name=name, price=price, cycle=cycle, next_payment=next_payment, **kwargs
    )


@pytest.fixture
def draft():
    """Factory for valid subscription drafts."""
    return make_draft
