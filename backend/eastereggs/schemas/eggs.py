"""Egg Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - Addresses match 0x + 40 hex chars and are lower-cased
    - EggModel converts losslessly to and from the core Egg
    - Empty wish/colour pass the schema on edit: emptiness is a domain
      ValidationError so callers receive the typed INVALID_DATA error

Design Decisions:
    - Annotated address type with AfterValidator: one definition reused by every model
"""

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field

from eastereggs.config import ADDRESS_PATTERN
from eastereggs.core.domain_types import Address
from eastereggs.core.egg_ledger import Egg


def _normalise_address(v: str) -> str:
    if not ADDRESS_PATTERN.match(v):
        raise ValueError("must be 0x followed by 40 hex characters")
    return v.lower()


AddressStr = Annotated[str, AfterValidator(_normalise_address)]


class EggModel(BaseModel):
    """Full egg record; also used as the structural lookup descriptor."""
    owner: AddressStr
    times_edited: int = Field(ge=0)
    timestamp: int = Field(ge=0)
    wish: str = Field(max_length=1_000)
    colour: str = Field(max_length=100)

    def to_domain(self) -> Egg:
        return Egg(
            owner=Address(self.owner),
            times_edited=self.times_edited,
            timestamp=self.timestamp,
            wish=self.wish,
            colour=self.colour,
        )

    @classmethod
    def from_domain(cls, egg: Egg) -> "EggModel":
        return cls(
            owner=egg.owner,
            times_edited=egg.times_edited,
            timestamp=egg.timestamp,
            wish=egg.wish,
            colour=egg.colour,
        )


class GenerateEggRequest(BaseModel):
    wish: str = Field(max_length=1_000)
    colour: str = Field(max_length=100)


class SendEggRequest(BaseModel):
    receiver: AddressStr
    egg: EggModel


class EditEggRequest(BaseModel):
    wish: str = Field(max_length=1_000)
    colour: str = Field(max_length=100)
    egg: EggModel


class GiveEggRequest(BaseModel):
    """Surrender request; payment in minor units."""
    payment: int = Field(ge=0)
    egg: EggModel


class EggIndexRequest(BaseModel):
    owner: AddressStr
    egg: EggModel


class FulfillRequest(BaseModel):
    request_id: int = Field(ge=0)
    random_words: list[Annotated[int, Field(ge=0)]]


class EggsResponse(BaseModel):
    address: str
    eggs: list[EggModel]
    eggs_count: int
    eggs_given: int


class EggIndexResponse(BaseModel):
    index: int


class ContractResponse(BaseModel):
    """Read-only contract surface: owner, flag and every fixed constant."""
    owner: str
    state: Literal["open", "closed"]
    answer_funds: int
    edit_interval: int
    request_confirmations: int
    num_words: int
    num_answers: int
    gas_lane: str
    subscription_id: int
    callback_gas_limit: int


class UpkeepResponse(BaseModel):
    address: str
    upkeep_needed: bool


class UpkeepPerformedResponse(BaseModel):
    request_id: int


class AnswerResponse(BaseModel):
    request_id: int
    answer_index: int
