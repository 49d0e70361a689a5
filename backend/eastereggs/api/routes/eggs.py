"""Egg Routes: generate, send, edit, give, collection queries and index lookup.

Invariants:
    - The caller is always X-Actor-Address; bodies never name the actor
    - Every mutation returns the resulting record or collection state
"""

from fastapi import APIRouter, Depends, status

from eastereggs.api.dependencies import get_actor, get_egg_service, parse_address
from eastereggs.core.domain_types import Address
from eastereggs.schemas.eggs import (
    EditEggRequest, EggIndexRequest, EggIndexResponse, EggModel, EggsResponse,
    GenerateEggRequest, GiveEggRequest, SendEggRequest,
)
from eastereggs.services.egg_service import EggService

router = APIRouter(prefix="/api/v1/eggs", tags=["eggs"])


def _eggs_response(service: EggService, address: Address) -> EggsResponse:
    return EggsResponse(
        address=address,
        eggs=[EggModel.from_domain(egg) for egg in service.eggs_of(address)],
        eggs_count=service.eggs_count(address),
        eggs_given=service.eggs_given(address),
    )


@router.post("", response_model=EggModel, status_code=status.HTTP_201_CREATED)
async def generate_egg(
    body: GenerateEggRequest,
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    egg = await service.generate(actor, body.wish, body.colour)
    return EggModel.from_domain(egg)


@router.get("/{address}", response_model=EggsResponse)
async def get_eggs(
    address: str, service: EggService = Depends(get_egg_service),
):
    return _eggs_response(service, parse_address(address, "address"))


@router.post("/send", response_model=EggModel)
async def send_egg(
    body: SendEggRequest,
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    egg = await service.send(actor, Address(body.receiver), body.egg.to_domain())
    return EggModel.from_domain(egg)


@router.post("/edit", response_model=EggModel)
async def edit_egg(
    body: EditEggRequest,
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    egg = await service.edit(actor, body.wish, body.colour, body.egg.to_domain())
    return EggModel.from_domain(egg)


@router.post("/give", response_model=EggsResponse)
async def give_egg(
    body: GiveEggRequest,
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    """Surrender an egg; the payment is forwarded to the owner."""
    await service.give(actor, body.payment, body.egg.to_domain())
    return _eggs_response(service, actor)


@router.post("/index", response_model=EggIndexResponse)
async def get_egg_index(
    body: EggIndexRequest, service: EggService = Depends(get_egg_service),
):
    index = service.egg_index(Address(body.owner), body.egg.to_domain())
    return EggIndexResponse(index=index)
