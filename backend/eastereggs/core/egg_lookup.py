"""Structural Lookup: locate an egg by exact match of all five fields.

Invariants:
    - Linear scan in collection order; the first full match wins
    - All five fields compared independently (owner, times_edited, timestamp, wish, colour)
    - No match raises NotFoundError; duplicates are not detected
    - swap_and_pop does not preserve order: the last egg takes the removed slot
"""

from eastereggs.core.domain_types import Address
from eastereggs.core.egg_ledger import Egg
from eastereggs.core.errors import NotFoundError


def eggs_match(stored: Egg, descriptor: Egg) -> bool:
    return (
        stored.owner == descriptor.owner
        and stored.times_edited == descriptor.times_edited
        and stored.timestamp == descriptor.timestamp
        and stored.wish == descriptor.wish
        and stored.colour == descriptor.colour
    )


def find_egg_index(eggs: list[Egg], descriptor: Egg, owner: Address) -> int:
    """Return the index of the first egg equal to descriptor, else raise."""
    for index, stored in enumerate(eggs):
        if eggs_match(stored, descriptor):
            return index
    raise NotFoundError(owner)


def swap_and_pop(eggs: list[Egg], index: int) -> Egg:
    """Remove eggs[index] by moving the last egg into its slot."""
    removed = eggs[index]
    eggs[index] = eggs[-1]
    eggs.pop()
    return removed
