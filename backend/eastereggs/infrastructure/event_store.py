"""Event Store: EventSink adapters (database log and in-memory recorder).

Invariants:
    - publish() is called once per emitted event, in emission order
    - recent() returns newest-last dicts shaped {"event", "payload"}
"""

import logging

from sqlalchemy import select

from eastereggs.core.events import ContractEvent
from eastereggs.infrastructure.database import DatabaseSessionManager
from eastereggs.models.contract_event import ContractEventRecord

logger = logging.getLogger(__name__)


def _log_event(event: ContractEvent) -> None:
    logger.info(
        f"Event {event.name.value}",
        extra={"event_name": event.name.value},
    )


class DatabaseEventSink:
    """Appends events to the contract_events table."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def publish(self, event: ContractEvent) -> None:
        _log_event(event)
        async with self._manager.session("publish_event") as db:
            db.add(ContractEventRecord(
                event_name=event.name.value, payload=event.to_payload(),
            ))
            await db.commit()

    async def recent(self, limit: int = 50) -> list[dict]:
        async with self._manager.session("read_events") as db:
            result = await db.execute(
                select(ContractEventRecord)
                .order_by(ContractEventRecord.created_at.desc())
                .limit(limit),
            )
            rows = list(result.scalars().all())
        return [
            {"event": row.event_name, "payload": row.payload}
            for row in reversed(rows)
        ]


class RecordingEventSink:
    """Keeps published events in memory."""

    def __init__(self):
        self.events: list[ContractEvent] = []

    async def publish(self, event: ContractEvent) -> None:
        _log_event(event)
        self.events.append(event)

    async def recent(self, limit: int = 50) -> list[dict]:
        return [
            {"event": e.name.value, "payload": e.to_payload()}
            for e in self.events[-limit:]
        ]

    def names(self) -> list[str]:
        return [e.name.value for e in self.events]
