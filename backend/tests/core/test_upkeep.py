"""Upkeep: tests for the readiness predicate and request construction."""

import pytest

from eastereggs.core.domain_types import ContractState, NUM_WORDS, REQUEST_CONFIRMATIONS
from eastereggs.core.egg_registry import generate_egg
from eastereggs.core.errors import CapacityError
from eastereggs.core.upkeep import VrfConfig, check_upkeep, prepare_upkeep
from tests.fakes import ALICE, BOB, GAS_LANE, T0

CONFIG = VrfConfig(gas_lane=GAS_LANE, subscription_id=42, callback_gas_limit=500_000)


def test_check_upkeep_false_for_empty_account(ledger):
    assert check_upkeep(ledger, ALICE) is False


def test_check_upkeep_true_when_holding_an_egg(ledger):
    generate_egg(ledger, ALICE, "Peace", "White", T0)
    assert check_upkeep(ledger, ALICE) is True
    assert check_upkeep(ledger, BOB) is False


def test_check_upkeep_ignores_closed_state(ledger):
    generate_egg(ledger, ALICE, "Peace", "White", T0)
    ledger.state = ContractState.CLOSED
    assert check_upkeep(ledger, ALICE) is True


def test_prepare_upkeep_builds_request_with_fixed_constants(ledger):
    generate_egg(ledger, ALICE, "Peace", "White", T0)
    request = prepare_upkeep(ledger, ALICE, CONFIG)

    assert request.gas_lane == GAS_LANE
    assert request.subscription_id == 42
    assert request.callback_gas_limit == 500_000
    assert request.request_confirmations == REQUEST_CONFIRMATIONS == 3
    assert request.num_words == NUM_WORDS == 1


def test_prepare_upkeep_does_not_touch_eggs(ledger):
    egg, _ = generate_egg(ledger, ALICE, "Peace", "White", T0)
    prepare_upkeep(ledger, ALICE, CONFIG)
    assert ledger.eggs_of(ALICE) == [egg]


def test_prepare_upkeep_without_eggs_fails(ledger):
    with pytest.raises(CapacityError) as exc_info:
        prepare_upkeep(ledger, ALICE, CONFIG)

    assert exc_info.value.code == "INSUFFICIENT_EGGS"
    assert exc_info.value.context.operation == "perform_upkeep"
    assert exc_info.value.context.actor == ALICE
