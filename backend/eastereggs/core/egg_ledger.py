"""Egg Ledger: in-memory aggregate holding the contract flag, owner and every account.

Invariants:
    - owner is set once at construction and never reassigned
    - state starts OPEN and only ever becomes CLOSED
    - An egg lives in exactly one AccountRecord.eggs list at a time
    - has_generated, once True, is never reset
    - Read-only accessors never create accounts; only account_for_update does

Design Decisions:
    - One keyed AccountRecord per identity instead of parallel counter maps
    - Pure dataclasses, no IO: the service shell owns persistence and locking
"""

from dataclasses import dataclass, field

from eastereggs.core.domain_types import Address, ContractState


@dataclass
class Egg:
    """A pledge record. Its lookup identity is the full five-field tuple."""
    owner: Address
    times_edited: int
    timestamp: int
    wish: str
    colour: str

    def copy(self) -> "Egg":
        return Egg(
            owner=self.owner,
            times_edited=self.times_edited,
            timestamp=self.timestamp,
            wish=self.wish,
            colour=self.colour,
        )


@dataclass
class AccountRecord:
    """Per-identity collection plus the one-shot counters."""

    # Owned eggs, insertion order (not stable across removals)
    eggs: list[Egg] = field(default_factory=list)

    # Lifetime generation cap
    has_generated: bool = False

    # Transfers performed (capped at MAX_EGGS_SENT)
    eggs_sent: int = 0

    # Eggs surrendered, cumulative
    eggs_given: int = 0

    @property
    def eggs_count(self) -> int:
        return len(self.eggs)


@dataclass
class EggLedger:
    """Whole-contract state, mutated only by the registry and access operations."""
    owner: Address
    state: ContractState = ContractState.OPEN
    accounts: dict[Address, AccountRecord] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.state == ContractState.OPEN

    def get_account(self, address: Address) -> AccountRecord:
        """Return the account for reading; unknown identities read as empty."""
        return self.accounts.get(address) or AccountRecord()

    def account_for_update(self, address: Address) -> AccountRecord:
        return self.accounts.setdefault(address, AccountRecord())

    def eggs_of(self, address: Address) -> list[Egg]:
        return [egg.copy() for egg in self.get_account(address).eggs]
