"""API test fixtures: FastAPI app with an in-memory EggService on app.state.

Invariants:
    - The lifespan is bypassed; each test installs a fresh service and coordinator
    - The clock is frozen so returned timestamps are predictable

Design Decisions:
    - Service state lives on app.state, so no dependency override is needed
"""

import pytest
from httpx import ASGITransport, AsyncClient

from eastereggs.main import app
from tests.fakes import ALICE, BOB, COORDINATOR, OWNER


@pytest.fixture
async def client(service, coordinator):
    app.state.egg_service = service
    app.state.vrf_coordinator = coordinator
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    del app.state.egg_service
    del app.state.vrf_coordinator


def as_actor(address: str) -> dict:
    return {"X-Actor-Address": address}


@pytest.fixture
def owner_headers():
    return as_actor(OWNER)


@pytest.fixture
def alice_headers():
    return as_actor(ALICE)


@pytest.fixture
def bob_headers():
    return as_actor(BOB)


@pytest.fixture
def coordinator_headers():
    return as_actor(COORDINATOR)
