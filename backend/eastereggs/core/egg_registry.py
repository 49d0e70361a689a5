"""Egg Registry: generate, send, edit and give (surrender) operations on the ledger.

Invariants:
    - Every operation runs all guards BEFORE touching the ledger; the first
      failing guard is raised and nothing is mutated
    - generate is the only creator; edit the only in-place mutator; send the
      only relocator (owner and timestamp refreshed); give the only remover
    - send and give remove with swap-and-pop (collection order not preserved)
    - edit has no open-state precondition; generate and send do
    - The new times_edited derives from the descriptor, not a re-read of storage
    - edit resolves the egg before judging the edit lock, so a stale descriptor
      is NotFoundError and the lock is judged on the stored egg

Design Decisions:
    - give is split in two (prepare_give / apply_give) so the shell can forward
      the payment between them: every check that can fail runs before the
      payment moves, and apply_give cannot fail
"""

from eastereggs.core.domain_types import Address
from eastereggs.core.egg_ledger import Egg, EggLedger
from eastereggs.core.egg_lookup import find_egg_index, swap_and_pop
from eastereggs.core.enforce_access import check_open
from eastereggs.core.enforce_eggs import (
    check_answer_funds, check_can_generate, check_can_send,
    check_edit_lock, check_receiver, check_text_fields,
)
from eastereggs.core.errors import EasterEggsError, NotFoundError
from eastereggs.core.events import AnswerRequested, EggEdited, EggGenerated, EggSent


def _raise_if(error: EasterEggsError | None, actor: Address, operation: str) -> None:
    if error:
        error.context.actor = actor
        error.context.operation = operation
        raise error


def _locate(ledger: EggLedger, actor: Address, descriptor: Egg, operation: str) -> int:
    try:
        return find_egg_index(ledger.get_account(actor).eggs, descriptor, actor)
    except NotFoundError as e:
        e.context.actor = actor
        e.context.operation = operation
        raise


def get_egg_index(ledger: EggLedger, owner: Address, descriptor: Egg) -> int:
    """Public structural lookup in owner's collection."""
    return _locate(ledger, owner, descriptor, "get_egg_index")


def generate_egg(
    ledger: EggLedger, actor: Address, wish: str, colour: str, now: int,
) -> tuple[Egg, EggGenerated]:
    """Create the account's one and only generated egg."""
    account = ledger.get_account(actor)
    _raise_if(
        check_open(ledger) or check_can_generate(account),
        actor, "generate",
    )
    account = ledger.account_for_update(actor)
    account.has_generated = True
    egg = Egg(owner=actor, times_edited=0, timestamp=now, wish=wish, colour=colour)
    account.eggs.append(egg)
    return egg.copy(), EggGenerated(owner=actor, wish=wish, colour=colour)


def send_egg(
    ledger: EggLedger, actor: Address, receiver: Address,
    descriptor: Egg, now: int,
) -> tuple[Egg, EggSent]:
    """Relocate one egg from actor to receiver. One transfer per account, ever."""
    _raise_if(
        check_open(ledger)
        or check_can_send(ledger.get_account(actor))
        or check_receiver(receiver),
        actor, "send",
    )
    index = _locate(ledger, actor, descriptor, "send")

    sender_account = ledger.account_for_update(actor)
    egg = swap_and_pop(sender_account.eggs, index)
    sender_account.eggs_sent += 1
    egg.owner = receiver
    egg.timestamp = now
    ledger.account_for_update(receiver).eggs.append(egg)
    return egg.copy(), EggSent(sender=actor, receiver=receiver, egg=egg.copy())


def edit_egg(
    ledger: EggLedger, actor: Address, new_wish: str, new_colour: str,
    descriptor: Egg, now: int,
) -> tuple[Egg, EggEdited]:
    """Overwrite wish and colour unless the edit lock has engaged."""
    _raise_if(check_text_fields(new_wish, new_colour), actor, "edit")
    index = _locate(ledger, actor, descriptor, "edit")
    stored = ledger.get_account(actor).eggs[index]
    _raise_if(check_edit_lock(stored, now), actor, "edit")

    egg = ledger.account_for_update(actor).eggs[index]
    egg.wish = new_wish
    egg.colour = new_colour
    egg.times_edited = descriptor.times_edited + 1
    return egg.copy(), EggEdited(wish=new_wish, colour=new_colour, egg=egg.copy())


def prepare_give(
    ledger: EggLedger, actor: Address, payment: int, descriptor: Egg,
) -> int:
    """Run every surrender check and return the index of the egg to remove."""
    _raise_if(check_answer_funds(payment), actor, "give")
    return _locate(ledger, actor, descriptor, "give")


def apply_give(
    ledger: EggLedger, actor: Address, index: int,
) -> tuple[Egg, AnswerRequested]:
    """Remove the resolved egg and count it as given. Call after payment."""
    account = ledger.account_for_update(actor)
    egg = swap_and_pop(account.eggs, index)
    account.eggs_given += 1
    return egg, AnswerRequested()
