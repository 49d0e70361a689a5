"""Root conftest: shared test configuration and ledger/service fixtures."""

import os

# Tests never reach a real database or external collaborator
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PERSIST_LEDGER", "false")
os.environ.setdefault("VRF_MODE", "seeded")
os.environ.setdefault("PAYMENT_RAIL_MODE", "memory")

import pytest  # noqa: E402

from eastereggs.core.enforce_access import initialize_ledger  # noqa: E402
from eastereggs.core.upkeep import VrfConfig  # noqa: E402
from eastereggs.infrastructure.database import DatabaseSessionManager  # noqa: E402
from eastereggs.infrastructure.event_store import RecordingEventSink  # noqa: E402
from eastereggs.infrastructure.ledger_store import InMemoryLedgerRepository  # noqa: E402
from eastereggs.infrastructure.payment_rail import InMemoryPaymentRail  # noqa: E402
from eastereggs.infrastructure.seeded_vrf import SeededVrfCoordinator  # noqa: E402
from eastereggs.services.egg_service import EggService  # noqa: E402
from tests.fakes import COORDINATOR, GAS_LANE, OWNER, T0, FrozenClock  # noqa: E402


@pytest.fixture
def ledger():
    return initialize_ledger(OWNER)


@pytest.fixture
def clock():
    return FrozenClock(T0)


@pytest.fixture
def coordinator():
    vrf = SeededVrfCoordinator(COORDINATOR, seed=7)
    vrf.fund_subscription(vrf.create_subscription(), 10**18)
    return vrf


@pytest.fixture
def payment_rail():
    return InMemoryPaymentRail()


@pytest.fixture
def event_sink():
    return RecordingEventSink()


@pytest.fixture
def ledger_repository():
    return InMemoryLedgerRepository()


@pytest.fixture
def service(ledger, clock, coordinator, payment_rail, event_sink, ledger_repository):
    return EggService(
        ledger=ledger,
        coordinator=coordinator,
        coordinator_address=COORDINATOR,
        vrf_config=VrfConfig(
            gas_lane=GAS_LANE, subscription_id=1, callback_gas_limit=500_000,
        ),
        payment_rail=payment_rail,
        event_sink=event_sink,
        ledger_repository=ledger_repository,
        clock=clock,
    )


@pytest.fixture
async def db_manager(tmp_path):
    """Fresh SQLite database file with every table created."""
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'eggs.db'}")
    await manager.create_schema()
    yield manager
    await manager.dispose()
