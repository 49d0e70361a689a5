"""Ledger Store: LedgerRepository adapters (database and in-memory).

Invariants:
    - save() replaces the stored snapshot; load_latest() returns it or None
    - Storage stays one snapshot in size however many operations run
    - The in-memory store deep-copies snapshots so callers cannot alias state
"""

import copy
import logging

from sqlalchemy import select

from eastereggs.infrastructure.database import DatabaseSessionManager
from eastereggs.models.ledger_snapshot import LedgerSnapshot

logger = logging.getLogger(__name__)


class DatabaseLedgerRepository:
    """Keeps the ledger in the single ledger_snapshots row."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def load_latest(self) -> dict | None:
        async with self._manager.session("load_snapshot") as db:
            row = (await db.execute(select(LedgerSnapshot).limit(1))).scalar_one_or_none()
            return dict(row.snapshot) if row else None

    async def save(self, snapshot: dict) -> None:
        async with self._manager.session("save_snapshot") as db:
            row = (await db.execute(select(LedgerSnapshot).limit(1))).scalar_one_or_none()
            if row is None:
                row = LedgerSnapshot()
                db.add(row)
            row.owner = snapshot["owner"]
            row.state = snapshot["state"]
            row.snapshot = copy.deepcopy(snapshot)
            await db.commit()


class InMemoryLedgerRepository:
    """Holds the latest snapshot in memory. For tests and database-less runs."""

    def __init__(self):
        self.latest: dict | None = None
        self.save_count = 0

    async def load_latest(self) -> dict | None:
        return copy.deepcopy(self.latest)

    async def save(self, snapshot: dict) -> None:
        self.latest = copy.deepcopy(snapshot)
        self.save_count += 1
