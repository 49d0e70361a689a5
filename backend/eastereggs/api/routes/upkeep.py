"""Upkeep & Oracle Routes: readiness polling, upkeep trigger and fulfillment callback.

Invariants:
    - GET /upkeep/{address} is side-effect free and works while closed
    - POST /oracle/fulfill succeeds only when X-Actor-Address is the coordinator
    - POST /oracle/simulate/{request_id} exists only with the seeded coordinator
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from eastereggs.api.dependencies import get_actor, get_egg_service, parse_address
from eastereggs.core.domain_types import Address, RequestId
from eastereggs.infrastructure.seeded_vrf import SeededVrfCoordinator
from eastereggs.schemas.eggs import (
    AnswerResponse, FulfillRequest, UpkeepPerformedResponse, UpkeepResponse,
)
from eastereggs.services.egg_service import EggService

router = APIRouter(prefix="/api/v1", tags=["upkeep"])


@router.get("/upkeep/{address}", response_model=UpkeepResponse)
async def check_upkeep(
    address: str, service: EggService = Depends(get_egg_service),
):
    target = parse_address(address, "address")
    return UpkeepResponse(address=target, upkeep_needed=service.check_upkeep(target))


@router.post("/upkeep/{address}/perform", response_model=UpkeepPerformedResponse)
async def perform_upkeep(
    address: str, service: EggService = Depends(get_egg_service),
):
    request_id = await service.perform_upkeep(parse_address(address, "address"))
    return UpkeepPerformedResponse(request_id=request_id)


@router.post("/oracle/fulfill", response_model=AnswerResponse)
async def fulfill(
    body: FulfillRequest,
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    index = await service.fulfill_random_words(
        actor, RequestId(body.request_id), body.random_words,
    )
    return AnswerResponse(request_id=body.request_id, answer_index=index)


@router.post("/oracle/simulate/{request_id}", response_model=AnswerResponse)
async def simulate_fulfillment(
    request_id: int,
    request: Request,
    service: EggService = Depends(get_egg_service),
):
    """Ask the seeded coordinator to fulfill a pending request (development only)."""
    coordinator = getattr(request.app.state, "vrf_coordinator", None)
    if not isinstance(coordinator, SeededVrfCoordinator):
        raise HTTPException(
            status.HTTP_404_NOT_FOUND,
            detail="Simulation requires the seeded coordinator",
        )
    index = await coordinator.fulfill_random_words(request_id, service)
    return AnswerResponse(request_id=request_id, answer_index=index)
