"""API Dependencies: service lookup and caller identity extraction.

Invariants:
    - The caller identity comes from the X-Actor-Address header, lower-cased
    - Malformed addresses raise the domain ValidationError (400 INVALID_ADDRESS)
    - The EggService lives on app.state, installed by the lifespan or by tests
"""

from fastapi import Header, Request

from eastereggs.config import ADDRESS_PATTERN
from eastereggs.core.domain_types import Address
from eastereggs.core.errors import ValidationError
from eastereggs.services.egg_service import EggService


def parse_address(value: str, field: str) -> Address:
    if not ADDRESS_PATTERN.match(value):
        raise ValidationError(
            f"{field} must be 0x followed by 40 hex characters",
            field, "INVALID_ADDRESS",
        )
    return Address(value.lower())


def get_egg_service(request: Request) -> EggService:
    service = getattr(request.app.state, "egg_service", None)
    if service is None:
        raise RuntimeError("EggService not initialized")
    return service


def get_actor(x_actor_address: str = Header(...)) -> Address:
    return parse_address(x_actor_address, "X-Actor-Address")
