"""Egg Service Factory: builds an EggService and its adapters from Settings.

Invariants:
    - The owner is fixed by the first persisted snapshot; later settings cannot change it
    - vrf_mode=seeded creates and funds a subscription when none is configured
    - Without a database manager, persistence and the event log stay in memory
"""

import logging
from dataclasses import dataclass

from eastereggs.config import Settings
from eastereggs.core.domain_types import Address
from eastereggs.core.egg_ledger_snapshot import ledger_from_snapshot
from eastereggs.core.enforce_access import initialize_ledger
from eastereggs.core.repository_protocols import (
    EventSink, LedgerRepository, PaymentRail, RandomnessCoordinator,
)
from eastereggs.core.upkeep import VrfConfig
from eastereggs.infrastructure.database import DatabaseSessionManager
from eastereggs.infrastructure.event_store import DatabaseEventSink, RecordingEventSink
from eastereggs.infrastructure.ledger_store import (
    DatabaseLedgerRepository, InMemoryLedgerRepository,
)
from eastereggs.infrastructure.payment_rail import HttpPaymentRail, InMemoryPaymentRail
from eastereggs.infrastructure.seeded_vrf import SeededVrfCoordinator
from eastereggs.infrastructure.vrf_client import HttpVrfCoordinator
from eastereggs.services.egg_service import EggService

logger = logging.getLogger(__name__)


@dataclass
class EggServiceWiring:
    """The service plus the adapters the API layer may need directly."""
    service: EggService
    coordinator: RandomnessCoordinator
    payment_rail: PaymentRail


def _build_coordinator(settings: Settings) -> tuple[RandomnessCoordinator, int]:
    if settings.vrf_mode == "http":
        coordinator = HttpVrfCoordinator(
            settings.vrf_coordinator_url,
            max_retries=settings.http_max_retries,
            base_delay_ms=settings.http_base_delay_ms,
            max_delay_ms=settings.http_max_delay_ms,
            timeout_seconds=settings.http_timeout_seconds,
        )
        return coordinator, settings.subscription_id

    seeded = SeededVrfCoordinator(
        Address(settings.vrf_coordinator_address), seed=settings.vrf_seed,
    )
    if settings.subscription_id:
        sub_id = seeded.ensure_subscription(settings.subscription_id)
    else:
        sub_id = seeded.create_subscription()
    seeded.fund_subscription(sub_id, settings.vrf_subscription_fund_amount)
    return seeded, sub_id


def _build_payment_rail(settings: Settings) -> PaymentRail:
    if settings.payment_rail_mode == "http":
        return HttpPaymentRail(
            settings.payment_rail_url, timeout_seconds=settings.http_timeout_seconds,
        )
    return InMemoryPaymentRail()


async def build_egg_service(
    settings: Settings, manager: DatabaseSessionManager | None = None,
) -> EggServiceWiring:
    """Assemble the service, restoring the latest ledger snapshot if one exists."""
    repository: LedgerRepository
    event_sink: EventSink
    if manager is not None and settings.persist_ledger:
        repository = DatabaseLedgerRepository(manager)
        event_sink = DatabaseEventSink(manager)
    else:
        repository = InMemoryLedgerRepository()
        event_sink = RecordingEventSink()

    snapshot = await repository.load_latest()
    if snapshot:
        ledger = ledger_from_snapshot(snapshot)
        if ledger.owner != settings.owner_address:
            logger.warning(
                f"Configured owner {settings.owner_address} ignored; "
                f"ledger owner is {ledger.owner}",
            )
        logger.info(f"Restored ledger with {len(ledger.accounts)} accounts")
    else:
        ledger = initialize_ledger(Address(settings.owner_address))
        logger.info("Initialized new ledger", extra={"actor": ledger.owner})

    coordinator, sub_id = _build_coordinator(settings)
    payment_rail = _build_payment_rail(settings)
    service = EggService(
        ledger=ledger,
        coordinator=coordinator,
        coordinator_address=Address(settings.vrf_coordinator_address),
        vrf_config=VrfConfig(
            gas_lane=settings.gas_lane,
            subscription_id=sub_id,
            callback_gas_limit=settings.callback_gas_limit,
        ),
        payment_rail=payment_rail,
        event_sink=event_sink,
        ledger_repository=repository,
    )
    return EggServiceWiring(
        service=service, coordinator=coordinator, payment_rail=payment_rail,
    )
