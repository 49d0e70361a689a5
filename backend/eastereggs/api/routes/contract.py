"""Contract Routes: owner/state/constants surface, close, and the event log.

Invariants:
    - GET /contract never mutates
    - POST /contract/close is owner-only and fails once the contract is closed
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from eastereggs.api.dependencies import get_actor, get_egg_service
from eastereggs.core.domain_types import Address
from eastereggs.schemas.eggs import ContractResponse
from eastereggs.services.egg_service import EggService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["contract"])


def _contract_response(service: EggService) -> ContractResponse:
    return ContractResponse(
        owner=service.owner, state=service.state.value, **service.constants(),
    )


@router.get("/contract", response_model=ContractResponse)
async def get_contract(service: EggService = Depends(get_egg_service)):
    return _contract_response(service)


@router.post(
    "/contract/close", response_model=ContractResponse,
    status_code=status.HTTP_200_OK,
)
async def close_contract(
    actor: Address = Depends(get_actor),
    service: EggService = Depends(get_egg_service),
):
    await service.close(actor)
    return _contract_response(service)


@router.get("/events")
async def list_events(
    limit: int = Query(50, ge=1, le=500),
    service: EggService = Depends(get_egg_service),
):
    """Most recent events, oldest first."""
    return {"events": await service.recent_events(limit)}
