"""Contract Events: immutable records of what each successful operation did.

Invariants:
    - Events are emitted only after the operation's mutation is complete
    - to_payload() is JSON-safe (no dataclasses, no Enums)
    - AnswerRequested carries no payload beyond its name

Design Decisions:
    - Frozen dataclasses with a shared `name`: the event sink keys on it
"""

from dataclasses import dataclass
from typing import ClassVar

from eastereggs.core.domain_types import Address, EventName
from eastereggs.core.egg_ledger import Egg


def egg_to_dict(egg: Egg) -> dict:
    return {
        "owner": egg.owner,
        "times_edited": egg.times_edited,
        "timestamp": egg.timestamp,
        "wish": egg.wish,
        "colour": egg.colour,
    }


@dataclass(frozen=True)
class ContractEvent:
    """Base event. Subclasses add their payload fields."""
    name: ClassVar[EventName]

    def to_payload(self) -> dict:
        return {}


@dataclass(frozen=True)
class EggGenerated(ContractEvent):
    owner: Address
    wish: str
    colour: str
    name: ClassVar[EventName] = EventName.EGG_GENERATED

    def to_payload(self) -> dict:
        return {"owner": self.owner, "wish": self.wish, "colour": self.colour}


@dataclass(frozen=True)
class EggSent(ContractEvent):
    sender: Address
    receiver: Address
    egg: Egg
    name: ClassVar[EventName] = EventName.EGG_SENT

    def to_payload(self) -> dict:
        return {
            "sender": self.sender,
            "receiver": self.receiver,
            "egg": egg_to_dict(self.egg),
        }


@dataclass(frozen=True)
class EggEdited(ContractEvent):
    wish: str
    colour: str
    egg: Egg
    name: ClassVar[EventName] = EventName.EGG_EDITED

    def to_payload(self) -> dict:
        return {
            "wish": self.wish,
            "colour": self.colour,
            "egg": egg_to_dict(self.egg),
        }


@dataclass(frozen=True)
class AnswerRequested(ContractEvent):
    name: ClassVar[EventName] = EventName.ANSWER_REQUESTED


@dataclass(frozen=True)
class AnswerPerformed(ContractEvent):
    request_id: int
    name: ClassVar[EventName] = EventName.ANSWER_PERFORMED

    def to_payload(self) -> dict:
        return {"request_id": self.request_id}


@dataclass(frozen=True)
class AnswerPicked(ContractEvent):
    answer_index: int
    name: ClassVar[EventName] = EventName.ANSWER_PICKED

    def to_payload(self) -> dict:
        return {"answer_index": self.answer_index}
