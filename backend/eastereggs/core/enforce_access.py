"""Access Enforcement: owner and open-state guards plus the close transition.

Invariants:
    - All guards are PURE: no IO, no async, no side effects
    - Guards return an EasterEggsError on violation, None on success
    - close_contract is the only OPEN -> CLOSED transition; there is no reopen

Design Decisions:
    - Guards return errors instead of raising: callers chain them with `or`
      and raise the first one, keeping each operation's precondition list flat
"""

from eastereggs.core.domain_types import Address, ContractState
from eastereggs.core.egg_ledger import EggLedger
from eastereggs.core.errors import (
    AuthorizationError, EasterEggsError, ErrorContext, StateError,
)


def initialize_ledger(owner: Address) -> EggLedger:
    """Construct the ledger: owner fixed, state OPEN."""
    return EggLedger(owner=owner, state=ContractState.OPEN)


def check_owner(ledger: EggLedger, actor: Address) -> EasterEggsError | None:
    """Owner-only operations reject every other identity."""
    if actor != ledger.owner:
        return AuthorizationError(
            "Only the contract owner can perform this operation",
            "NOT_OWNER",
            ErrorContext(actor=actor),
        )
    return None


def check_open(ledger: EggLedger) -> EasterEggsError | None:
    if not ledger.is_open:
        return StateError("Contract is closed", "CONTRACT_CLOSED")
    return None


def close_contract(ledger: EggLedger, actor: Address) -> None:
    """Move the contract to CLOSED. Owner only; fails if already closed."""
    error = check_owner(ledger, actor) or check_open(ledger)
    if error:
        error.context.operation = "close"
        raise error
    ledger.state = ContractState.CLOSED
