"""Egg Ledger Snapshot: serialization / deserialization for EggLedger.

Invariants:
    - ledger_to_snapshot produces a JSON-safe dict (no Enums, no dataclasses)
    - ledger_from_snapshot reconstructs an equal EggLedger from that dict
    - Missing account keys fall back to AccountRecord defaults (forward-compatible)
    - Collection order is preserved exactly
"""

from eastereggs.core.domain_types import Address, ContractState
from eastereggs.core.egg_ledger import AccountRecord, Egg, EggLedger
from eastereggs.core.events import egg_to_dict


def _egg_from_dict(data: dict) -> Egg:
    return Egg(
        owner=Address(data["owner"]),
        times_edited=int(data["times_edited"]),
        timestamp=int(data["timestamp"]),
        wish=data["wish"],
        colour=data["colour"],
    )


def _account_to_dict(account: AccountRecord) -> dict:
    return {
        "eggs": [egg_to_dict(egg) for egg in account.eggs],
        "has_generated": account.has_generated,
        "eggs_sent": account.eggs_sent,
        "eggs_given": account.eggs_given,
    }


def _account_from_dict(data: dict) -> AccountRecord:
    return AccountRecord(
        eggs=[_egg_from_dict(e) for e in data.get("eggs", [])],
        has_generated=data.get("has_generated", False),
        eggs_sent=data.get("eggs_sent", 0),
        eggs_given=data.get("eggs_given", 0),
    )


def ledger_to_snapshot(ledger: EggLedger) -> dict:
    """Serialize EggLedger to a JSON-safe dict. Pure, no IO."""
    return {
        "owner": ledger.owner,
        "state": ledger.state.value,
        "accounts": {
            address: _account_to_dict(account)
            for address, account in ledger.accounts.items()
        },
    }


def ledger_from_snapshot(snapshot: dict) -> EggLedger:
    """Reconstruct EggLedger from a snapshot dict. Pure, no IO."""
    return EggLedger(
        owner=Address(snapshot["owner"]),
        state=ContractState(snapshot.get("state", ContractState.OPEN.value)),
        accounts={
            Address(address): _account_from_dict(data)
            for address, data in snapshot.get("accounts", {}).items()
        },
    )
