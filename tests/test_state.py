"""Tests for subscription CRUD and payment acknowledgment."""

from datetime import date

import pytest

from subminder.engine.state import SubscriptionState, parse_price
from subminder.utils.error_handler import ValidationError


def test_add_assigns_ids_and_persists(state, changes, draft):
    """Test creating subscriptions."""
    netflix = state.add(draft())
    spotify = state.add(draft(name="Spotify", price="9.99", next_payment="2025-05-10"))

    assert (netflix.id, spotify.id) == (1, 2)
    assert netflix.price == 15.99
    assert netflix.next_payment == date(2025, 5, 15)
    assert netflix.cycle == "monthly"
    assert [s.name for s in state.subscriptions] == ["Netflix", "Spotify"]
    assert changes == ["subscriptions", "subscriptions"]

    latest = state.notifications.active()[0]
    assert latest.message == "Added Spotify subscription"
    assert latest.severity == "success"


def test_add_normalizes_input(state, draft):
    """Test loose user input is normalized."""
    sub = state.add(draft(name="  Gym  ", price="$1,200.50", cycle="annually"))

    assert sub.name == "Gym"
    assert sub.price == 1200.50
    assert sub.cycle == "yearly"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"name": "   "},
        {"price": ""},
        {"price": None},
        {"next_payment": ""},
        {"price": "-1"},
        {"price": "free"},
        {"price": "nan"},
        {"next_payment": "next tuesday"},
        {"cycle": "daily"},
    ],
)
def test_add_rejects_invalid_input(state, changes, draft, overrides):
    """Test that bad input raises and changes nothing."""
    with pytest.raises(ValidationError):
        state.add(draft(**overrides))

    assert state.subscriptions == []
    assert changes == []

    error = state.notifications.active()[0]
    assert error.severity == "error"


def test_add_missing_fields_message(state, draft):
    """Test the message for missing fields."""
    with pytest.raises(ValidationError, match="Please fill in all required fields"):
        state.add(draft(name=""))


def test_zero_price_is_allowed(state, draft):
    """Test free subscriptions."""
    assert state.add(draft(price="0")).price == 0.0


def test_parse_price():
    """Test price parsing."""
    assert parse_price("15.99") == 15.99
    assert parse_price(" €9 ") == 9.0
    assert parse_price(12) == 12.0
    with pytest.raises(ValidationError):
        parse_price("inf")


def test_custom_id_factory(clock, draft):
    """Test that ids come from the injected factory."""
    ids = iter([100, 200])
    state = SubscriptionState(clock=clock, id_factory=lambda subs: next(ids))

    assert state.add(draft()).id == 100
    assert state.add(draft()).id == 200


def test_remove_cascades_to_ledger(state, changes, draft):
    """Test deleting a subscription purges its reminder records."""
    netflix = state.add(draft())
    spotify = state.add(draft(name="Spotify"))
    state.ledger.record_fired(netflix.id, date(2025, 5, 15))
    state.ledger.record_fired(spotify.id, date(2025, 5, 15))
    changes.clear()

    removed = state.remove(netflix.id)

    assert removed == netflix
    assert state.get(netflix.id) is None
    assert not state.ledger.has_fired(netflix.id, date(2025, 5, 15))
    assert state.ledger.has_fired(spotify.id, date(2025, 5, 15))
    assert changes == ["subscriptions", "reminders"]
    assert state.notifications.active()[0].message == "Subscription deleted"


def test_remove_unknown_is_noop(state, changes):
    """Test removing an unknown id."""
    assert state.remove(42) is None
    assert changes == []


def test_mark_paid_advances_one_cycle(state, changes, draft):
    """Test payment acknowledgment."""
    sub = state.add(draft(cycle="quarterly", next_payment="2025-05-15", icon="🎬"))
    state.ledger.record_fired(sub.id, date(2025, 5, 15))
    changes.clear()

    advanced = state.mark_paid(sub.id)

    assert advanced is not None
    assert advanced.next_payment == date(2025, 8, 15)
    assert state.get(sub.id).next_payment == date(2025, 8, 15)
    assert state.get(sub.id).icon == "🎬"
    # The ledger keeps the old key
    assert state.ledger.has_fired(sub.id, date(2025, 5, 15))
    assert changes == ["subscriptions"]
    assert state.notifications.active()[0].message == "Marked Netflix as paid"


def test_mark_paid_unknown_is_noop(state, changes):
    """Test acknowledging an unknown id."""
    assert state.mark_paid(99) is None
    assert changes == []


def test_update_replaces_fields(state, draft):
    """Test editing a subscription."""
    sub = state.add(draft())

    updated = state.update(sub.id, draft(name="Netflix Premium", price="22.99"))

    assert updated.id == sub.id
    assert state.get(sub.id).name == "Netflix Premium"
    assert state.get(sub.id).price == 22.99


def test_update_invalid_keeps_subscription(state, draft):
    """Test that a rejected edit changes nothing."""
    sub = state.add(draft())

    with pytest.raises(ValidationError):
        state.update(sub.id, draft(price="-5"))

    assert state.get(sub.id) == sub


def test_update_unknown_is_noop(state, draft):
    """Test editing an unknown id."""
    assert state.update(5, draft()) is None


def test_send_reminder(state, draft):
    """Test the manual reminder action."""
    sub = state.add(draft(next_payment="2025-05-15"))

    assert state.send_reminder(sub.id) == sub

    event = state.notifications.active()[0]
    assert event.message == "Email reminder sent for Netflix payment due in 2 days"
    assert event.severity == "success"
    assert len(state.ledger) == 0
    assert state.send_reminder(99) is None
