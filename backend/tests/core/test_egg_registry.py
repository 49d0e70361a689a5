"""Egg Registry: tests for generate, send, edit, give and the public lookup.

Tests cover:
    - One generation per account, ever (even after the egg leaves)
    - One transfer per account; zero-address receivers rejected
    - Transfer refreshes owner and timestamp and uses swap-and-pop
    - Edit lock, edit counter derived from the descriptor, and no open check
    - Surrender threshold, removal and given-counter
    - Failing operations mutate nothing
    - The generate -> send -> give walkthrough
"""

import pytest

from eastereggs.core.domain_types import (
    ANSWER_FUNDS, ContractState, EDIT_INTERVAL, EventName, ZERO_ADDRESS,
)
from eastereggs.core.egg_ledger import Egg
from eastereggs.core.egg_ledger_snapshot import ledger_to_snapshot
from eastereggs.core.egg_registry import (
    apply_give, edit_egg, generate_egg, get_egg_index, prepare_give, send_egg,
)
from eastereggs.core.errors import (
    CapacityError, NotFoundError, StateError, ValidationError,
)
from tests.fakes import ALICE, BOB, OWNER, T0


def _generate(ledger, actor=ALICE, wish="Peace", colour="White", now=T0) -> Egg:
    egg, _ = generate_egg(ledger, actor, wish, colour, now)
    return egg


# ─── generate ────────────────────────────────────────────────────

def test_generate_creates_fresh_egg(ledger):
    egg, event = generate_egg(ledger, ALICE, "Peace", "White", T0)

    assert egg == Egg(ALICE, 0, T0, "Peace", "White")
    assert ledger.eggs_of(ALICE) == [egg]
    assert ledger.get_account(ALICE).has_generated
    assert event.name == EventName.EGG_GENERATED
    assert event.to_payload() == {"owner": ALICE, "wish": "Peace", "colour": "White"}


def test_generate_returns_copy_not_stored_record(ledger):
    egg = _generate(ledger)
    egg.wish = "mutated"
    assert ledger.eggs_of(ALICE)[0].wish == "Peace"


def test_generate_twice_fails_and_keeps_single_egg(ledger):
    _generate(ledger)
    with pytest.raises(StateError) as exc_info:
        generate_egg(ledger, ALICE, "Again", "Blue", T0 + 1)

    assert exc_info.value.code == "CANNOT_GENERATE_EGG"
    assert exc_info.value.context.actor == ALICE
    assert exc_info.value.context.operation == "generate"
    assert ledger.get_account(ALICE).eggs_count == 1


def test_generate_cap_holds_after_egg_was_sent_away(ledger):
    egg = _generate(ledger)
    send_egg(ledger, ALICE, BOB, egg, T0 + 1)

    with pytest.raises(StateError):
        generate_egg(ledger, ALICE, "Again", "Blue", T0 + 2)


def test_generate_on_closed_contract_fails(ledger):
    ledger.state = ContractState.CLOSED
    with pytest.raises(StateError) as exc_info:
        generate_egg(ledger, ALICE, "Peace", "White", T0)

    assert exc_info.value.code == "CONTRACT_CLOSED"
    assert ALICE not in ledger.accounts


def test_generate_accepts_empty_texts(ledger):
    egg = _generate(ledger, wish="", colour="")
    assert egg.wish == "" and egg.colour == ""


# ─── send ────────────────────────────────────────────────────────

def test_send_relocates_and_refreshes_owner_and_timestamp(ledger):
    egg = _generate(ledger)
    moved, event = send_egg(ledger, ALICE, BOB, egg, T0 + 60)

    assert moved == Egg(BOB, 0, T0 + 60, "Peace", "White")
    assert ledger.eggs_of(ALICE) == []
    assert ledger.eggs_of(BOB) == [moved]
    assert ledger.get_account(ALICE).eggs_sent == 1
    assert event.name == EventName.EGG_SENT
    assert event.to_payload()["receiver"] == BOB


def test_send_twice_fails_even_with_eggs_left(ledger):
    first = _generate(ledger, actor=ALICE)
    bob_egg = _generate(ledger, actor=BOB, wish="Health", colour="Green")
    send_egg(ledger, BOB, ALICE, bob_egg, T0 + 1)
    send_egg(ledger, ALICE, BOB, first, T0 + 2)

    received = ledger.eggs_of(ALICE)[0]
    with pytest.raises(CapacityError) as exc_info:
        send_egg(ledger, ALICE, BOB, received, T0 + 3)

    assert exc_info.value.code == "CANNOT_SEND_MORE_EGGS"
    assert ledger.eggs_of(ALICE) == [received]


def test_send_to_zero_address_fails_without_mutation(ledger):
    egg = _generate(ledger)
    before = ledger_to_snapshot(ledger)

    with pytest.raises(ValidationError) as exc_info:
        send_egg(ledger, ALICE, ZERO_ADDRESS, egg, T0 + 1)

    assert exc_info.value.code == "ZERO_ADDRESS_RECEIVER"
    assert ledger_to_snapshot(ledger) == before


def test_send_unknown_egg_fails_and_keeps_sent_counter(ledger):
    _generate(ledger)
    ghost = Egg(ALICE, 0, T0, "Peace", "Black")

    with pytest.raises(NotFoundError) as exc_info:
        send_egg(ledger, ALICE, BOB, ghost, T0 + 1)

    assert exc_info.value.context.operation == "send"
    assert ledger.get_account(ALICE).eggs_sent == 0


def test_send_on_closed_contract_fails(ledger):
    egg = _generate(ledger)
    ledger.state = ContractState.CLOSED
    with pytest.raises(StateError):
        send_egg(ledger, ALICE, BOB, egg, T0 + 1)


def test_self_send_counts_as_transfer(ledger):
    egg = _generate(ledger)
    moved, _ = send_egg(ledger, ALICE, ALICE, egg, T0 + 5)

    assert ledger.eggs_of(ALICE) == [moved]
    assert moved.timestamp == T0 + 5
    assert ledger.get_account(ALICE).eggs_sent == 1


def test_send_swap_and_pop_reorders_sender_collection(ledger):
    a = _generate(ledger, actor=ALICE, wish="a")
    b = _generate(ledger, actor=BOB, wish="b")
    send_egg(ledger, BOB, ALICE, b, T0)
    moved_b = ledger.eggs_of(ALICE)[1]
    c = _generate(ledger, actor=OWNER, wish="c")
    send_egg(ledger, OWNER, ALICE, c, T0)
    moved_c = ledger.eggs_of(ALICE)[2]

    send_egg(ledger, ALICE, OWNER, a, T0 + 1)

    assert ledger.eggs_of(ALICE) == [moved_c, moved_b]


# ─── edit ────────────────────────────────────────────────────────

def test_edit_overwrites_texts_and_counts(ledger):
    egg = _generate(ledger)
    edited, event = edit_egg(ledger, ALICE, "Health", "Green", egg, T0 + 10)

    assert edited == Egg(ALICE, 1, T0, "Health", "Green")
    assert ledger.eggs_of(ALICE) == [edited]
    assert event.name == EventName.EGG_EDITED
    assert event.to_payload()["wish"] == "Health"


def test_edit_does_not_refresh_timestamp(ledger):
    egg = _generate(ledger)
    edited, _ = edit_egg(ledger, ALICE, "Health", "Green", egg, T0 + 999)
    assert edited.timestamp == T0


def test_edit_counter_derives_from_descriptor(ledger):
    egg = _generate(ledger)
    once, _ = edit_egg(ledger, ALICE, "w1", "c1", egg, T0 + 1)
    twice, _ = edit_egg(ledger, ALICE, "w2", "c2", once, T0 + 2)
    assert twice.times_edited == 2


def test_edit_lock_after_two_edits_and_interval(ledger):
    egg = _generate(ledger)
    once, _ = edit_egg(ledger, ALICE, "w1", "c1", egg, T0 + 1)
    twice, _ = edit_egg(ledger, ALICE, "w2", "c2", once, T0 + 2)

    with pytest.raises(CapacityError) as exc_info:
        edit_egg(ledger, ALICE, "w3", "c3", twice, T0 + EDIT_INTERVAL + 1)

    assert exc_info.value.code == "EGG_CANNOT_BE_EDITED"
    assert ledger.eggs_of(ALICE) == [twice]


def test_third_edit_allowed_inside_interval(ledger):
    egg = _generate(ledger)
    once, _ = edit_egg(ledger, ALICE, "w1", "c1", egg, T0 + 1)
    twice, _ = edit_egg(ledger, ALICE, "w2", "c2", once, T0 + 2)
    third, _ = edit_egg(ledger, ALICE, "w3", "c3", twice, T0 + EDIT_INTERVAL)
    assert third.times_edited == 3


def test_edit_allowed_after_interval_with_one_edit(ledger):
    egg = _generate(ledger)
    once, _ = edit_egg(ledger, ALICE, "w1", "c1", egg, T0 + 1)
    twice, _ = edit_egg(ledger, ALICE, "w2", "c2", once, T0 + EDIT_INTERVAL + 100)
    assert twice.times_edited == 2


def test_transfer_resets_edit_lock_clock(ledger):
    egg = _generate(ledger)
    once, _ = edit_egg(ledger, ALICE, "w1", "c1", egg, T0 + 1)
    twice, _ = edit_egg(ledger, ALICE, "w2", "c2", once, T0 + 2)
    now = T0 + EDIT_INTERVAL + 10
    moved, _ = send_egg(ledger, ALICE, BOB, twice, now)

    edited, _ = edit_egg(ledger, BOB, "w3", "c3", moved, now + 1)
    assert edited.times_edited == 3


@pytest.mark.parametrize("wish, colour, field", [
    ("", "Blue", "wish"),
    ("Peace", "", "colour"),
])
def test_edit_rejects_empty_texts(ledger, wish, colour, field):
    egg = _generate(ledger)
    with pytest.raises(ValidationError) as exc_info:
        edit_egg(ledger, ALICE, wish, colour, egg, T0 + 1)

    assert exc_info.value.field == field
    assert ledger.eggs_of(ALICE) == [egg]


def test_edit_allowed_on_closed_contract(ledger):
    egg = _generate(ledger)
    ledger.state = ContractState.CLOSED
    edited, _ = edit_egg(ledger, ALICE, "Health", "Green", egg, T0 + 1)
    assert edited.wish == "Health"


def test_edit_stale_descriptor_not_found(ledger):
    egg = _generate(ledger)
    edit_egg(ledger, ALICE, "Health", "Green", egg, T0 + 1)

    with pytest.raises(NotFoundError):
        edit_egg(ledger, ALICE, "Again", "Red", egg, T0 + 2)


def test_edit_locked_looking_stale_descriptor_is_not_found(ledger):
    egg = _generate(ledger)
    stale = Egg(ALICE, 5, T0 - EDIT_INTERVAL - 1, egg.wish, egg.colour)

    with pytest.raises(NotFoundError):
        edit_egg(ledger, ALICE, "Health", "Green", stale, T0 + 1)
    assert ledger.eggs_of(ALICE) == [egg]


def test_edit_only_searches_callers_collection(ledger):
    egg = _generate(ledger, actor=ALICE)
    with pytest.raises(NotFoundError):
        edit_egg(ledger, BOB, "Hijack", "Black", egg, T0 + 1)


# ─── give ────────────────────────────────────────────────────────

def test_prepare_give_rejects_low_payment(ledger):
    egg = _generate(ledger)
    with pytest.raises(ValidationError) as exc_info:
        prepare_give(ledger, ALICE, ANSWER_FUNDS - 1000, egg)

    assert exc_info.value.code == "INSUFFICIENT_FUNDS"
    assert ledger.eggs_of(ALICE) == [egg]


def test_prepare_give_checks_funds_before_lookup(ledger):
    ghost = Egg(ALICE, 0, T0, "nothing", "here")
    with pytest.raises(ValidationError):
        prepare_give(ledger, ALICE, 0, ghost)


def test_prepare_give_unknown_egg_fails(ledger):
    _generate(ledger)
    with pytest.raises(NotFoundError):
        prepare_give(ledger, ALICE, ANSWER_FUNDS, Egg(ALICE, 1, T0, "Peace", "White"))


def test_prepare_give_does_not_mutate(ledger):
    egg = _generate(ledger)
    before = ledger_to_snapshot(ledger)
    assert prepare_give(ledger, ALICE, ANSWER_FUNDS, egg) == 0
    assert ledger_to_snapshot(ledger) == before


def test_apply_give_removes_egg_and_counts(ledger):
    egg = _generate(ledger)
    index = prepare_give(ledger, ALICE, ANSWER_FUNDS, egg)
    removed, event = apply_give(ledger, ALICE, index)

    assert removed == egg
    assert ledger.eggs_of(ALICE) == []
    assert ledger.get_account(ALICE).eggs_given == 1
    assert event.name == EventName.ANSWER_REQUESTED
    assert event.to_payload() == {}


def test_give_allowed_on_closed_contract(ledger):
    egg = _generate(ledger)
    ledger.state = ContractState.CLOSED
    index = prepare_give(ledger, ALICE, ANSWER_FUNDS, egg)
    apply_give(ledger, ALICE, index)
    assert ledger.get_account(ALICE).eggs_count == 0


# ─── lookup ──────────────────────────────────────────────────────

def test_get_egg_index_disambiguates_by_owner(ledger):
    egg = _generate(ledger, actor=ALICE)
    twin = Egg(BOB, 0, T0, "Peace", "White")

    assert get_egg_index(ledger, ALICE, egg) == 0
    with pytest.raises(NotFoundError) as exc_info:
        get_egg_index(ledger, BOB, twin)
    assert exc_info.value.context.operation == "get_egg_index"


def test_get_egg_index_unknown_identity_does_not_create_account(ledger):
    with pytest.raises(NotFoundError):
        get_egg_index(ledger, BOB, Egg(BOB, 0, T0, "Peace", "White"))
    assert BOB not in ledger.accounts


# ─── walkthrough ─────────────────────────────────────────────────

def test_generate_send_give_walkthrough(ledger):
    egg = _generate(ledger, actor=ALICE, wish="Peace", colour="White", now=T0)
    moved, _ = send_egg(ledger, ALICE, BOB, egg, T0 + 30)
    assert moved == Egg(BOB, 0, T0 + 30, "Peace", "White")

    index = prepare_give(ledger, BOB, ANSWER_FUNDS, moved)
    apply_give(ledger, BOB, index)

    assert ledger.get_account(ALICE).eggs_count == 0
    assert ledger.get_account(ALICE).eggs_sent == 1
    assert ledger.get_account(BOB).eggs_count == 0
    assert ledger.get_account(BOB).eggs_given == 1
    with pytest.raises(StateError):
        generate_egg(ledger, ALICE, "Again", "White", T0 + 60)
