"""Answer Picker: reduce an oracle fulfillment to a bounded answer index.

Invariants:
    - Only the configured coordinator identity may deliver a fulfillment
    - index = random_words[0] mod NUM_ANSWERS, always in [0, NUM_ANSWERS)
    - No ledger access: the result is not bound to any account or egg
"""

from eastereggs.core.domain_types import Address, NUM_ANSWERS
from eastereggs.core.errors import (
    AuthorizationError, EasterEggsError, ErrorContext, ValidationError,
)
from eastereggs.core.events import AnswerPicked


def check_coordinator(caller: Address, coordinator: Address) -> EasterEggsError | None:
    if caller != coordinator:
        return AuthorizationError(
            "Only the randomness coordinator can fulfill requests",
            "NOT_COORDINATOR",
        )
    return None


def check_random_words(random_words: list[int]) -> EasterEggsError | None:
    if not random_words:
        return ValidationError(
            "Fulfillment carried no random words",
            "random_words", "NO_RANDOM_WORDS",
        )
    return None


def pick_answer_index(random_words: list[int]) -> int:
    return random_words[0] % NUM_ANSWERS


def fulfill_random_words(
    caller: Address, coordinator: Address, request_id: int,
    random_words: list[int],
) -> AnswerPicked:
    error = check_coordinator(caller, coordinator) or check_random_words(random_words)
    if error:
        error.context = ErrorContext(
            actor=caller, operation="fulfill", request_id=request_id,
        )
        raise error
    return AnswerPicked(answer_index=pick_answer_index(random_words))
