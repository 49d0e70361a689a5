"""Egg Enforcement: per-account caps, input checks and the edit-lock policy.

Invariants:
    - All functions are PURE: no IO, no clock reads (callers pass `now`)
    - Return an EasterEggsError on violation, None on success
    - Edit lock engages only when BOTH times_edited >= MAX_FREE_EDITS
      AND more than EDIT_INTERVAL has elapsed since the egg's timestamp

Design Decisions:
    - Edit lock reads the caller-supplied descriptor; lookup afterwards
      guarantees it equals the stored egg
"""

from eastereggs.core.domain_types import (
    Address, ANSWER_FUNDS, EDIT_INTERVAL, MAX_EGGS_SENT, MAX_FREE_EDITS,
    ZERO_ADDRESS,
)
from eastereggs.core.egg_ledger import AccountRecord, Egg
from eastereggs.core.errors import (
    CapacityError, EasterEggsError, StateError, ValidationError,
)


def check_can_generate(account: AccountRecord) -> EasterEggsError | None:
    """Lifetime cap: one generation per identity, ever."""
    if account.has_generated:
        return StateError(
            "Account has already generated its egg", "CANNOT_GENERATE_EGG",
        )
    return None


def check_can_send(account: AccountRecord) -> EasterEggsError | None:
    """Lifetime cap: one transfer per identity, regardless of eggs held."""
    if account.eggs_sent >= MAX_EGGS_SENT:
        return CapacityError(
            "Account has already sent its egg", "CANNOT_SEND_MORE_EGGS",
        )
    return None


def check_receiver(receiver: Address) -> EasterEggsError | None:
    if receiver == ZERO_ADDRESS:
        return ValidationError(
            "Cannot send an egg to the zero address",
            "receiver", "ZERO_ADDRESS_RECEIVER",
        )
    return None


def check_text_fields(wish: str, colour: str) -> EasterEggsError | None:
    """Both wish and colour must be non-empty."""
    if not wish:
        return ValidationError("Wish must not be empty", "wish")
    if not colour:
        return ValidationError("Colour must not be empty", "colour")
    return None


def is_edit_locked(egg: Egg, now: int) -> bool:
    return (
        egg.times_edited >= MAX_FREE_EDITS
        and now - egg.timestamp > EDIT_INTERVAL
    )


def check_edit_lock(egg: Egg, now: int) -> EasterEggsError | None:
    if is_edit_locked(egg, now):
        return CapacityError(
            f"Egg was edited {egg.times_edited} times and its edit "
            f"window of {EDIT_INTERVAL}s has passed",
            "EGG_CANNOT_BE_EDITED",
        )
    return None


def check_answer_funds(payment: int) -> EasterEggsError | None:
    if payment < ANSWER_FUNDS:
        return ValidationError(
            f"Payment {payment} is below the required {ANSWER_FUNDS}",
            "payment", "INSUFFICIENT_FUNDS",
        )
    return None


def check_has_eggs(account: AccountRecord) -> EasterEggsError | None:
    """Upkeep readiness gate: the account must hold at least one egg."""
    if not account.eggs:
        return CapacityError(
            "Account holds no eggs", "INSUFFICIENT_EGGS",
        )
    return None
