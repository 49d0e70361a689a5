"""Upkeep: readiness predicate and randomness-request construction.

Invariants:
    - check_upkeep is pure and ignores the open/closed state
    - prepare_upkeep re-evaluates readiness and never selects or touches an egg
    - Every request carries REQUEST_CONFIRMATIONS and NUM_WORDS unchanged
"""

from dataclasses import dataclass

from eastereggs.core.domain_types import Address, NUM_WORDS, REQUEST_CONFIRMATIONS
from eastereggs.core.egg_ledger import EggLedger
from eastereggs.core.enforce_eggs import check_has_eggs


@dataclass(frozen=True)
class VrfConfig:
    """Oracle pass-through parameters, uninterpreted by the core."""
    gas_lane: str
    subscription_id: int
    callback_gas_limit: int


@dataclass(frozen=True)
class RandomnessRequest:
    gas_lane: str
    subscription_id: int
    request_confirmations: int
    callback_gas_limit: int
    num_words: int


def check_upkeep(ledger: EggLedger, actor: Address) -> bool:
    """True iff actor currently holds at least one egg."""
    return ledger.get_account(actor).eggs_count > 0


def prepare_upkeep(
    ledger: EggLedger, actor: Address, config: VrfConfig,
) -> RandomnessRequest:
    error = check_has_eggs(ledger.get_account(actor))
    if error:
        error.context.actor = actor
        error.context.operation = "perform_upkeep"
        raise error
    return RandomnessRequest(
        gas_lane=config.gas_lane,
        subscription_id=config.subscription_id,
        request_confirmations=REQUEST_CONFIRMATIONS,
        callback_gas_limit=config.callback_gas_limit,
        num_words=NUM_WORDS,
    )
