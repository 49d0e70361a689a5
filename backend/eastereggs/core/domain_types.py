"""Domain Types: rich types and fixed constants shared across the ledger.

Invariants:
    - Address wraps str; addresses are compared exactly (normalised at the API boundary)
    - ZERO_ADDRESS is never a valid receiver
    - ContractState only moves OPEN -> CLOSED
    - All constants are fixed at import time; nothing in the core mutates them

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Address = NewType("Address", str)
RequestId = NewType("RequestId", int)

ZERO_ADDRESS = Address("0x" + "0" * 40)


# ─── Fixed Configuration ─────────────────────────────────────────

ANSWER_FUNDS = 10_000_000_000_000     # minimum surrender payment, minor units
EDIT_INTERVAL = 1_500_000             # seconds after which the edit lock can engage
MAX_FREE_EDITS = 2                    # edit lock engages at this many edits
MAX_EGGS_SENT = 1                     # lifetime transfer cap per account
REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1
NUM_ANSWERS = 10


# ─── Enums ───────────────────────────────────────────────────────

class ContractState(str, Enum):
    """Global open/closed flag. Construction sets OPEN; there is no reopen."""
    OPEN = "open"
    CLOSED = "closed"


class EventName(str, Enum):
    """Names of the events emitted by contract operations."""
    EGG_GENERATED = "EggGenerated"
    EGG_SENT = "EggSent"
    EGG_EDITED = "EggEdited"
    ANSWER_REQUESTED = "AnswerRequested"
    ANSWER_PERFORMED = "AnswerPerformed"
    ANSWER_PICKED = "AnswerPicked"
