"""LedgerSnapshot ORM: the persisted state of the whole egg ledger.

Invariants:
    - At most one row exists; every save overwrites it in place
    - snapshot holds the output of ledger_to_snapshot (JSON-safe dict)
    - owner/state denormalized for inspection without decoding the JSON
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from eastereggs.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerSnapshot(Base):
    """Persisted EggLedger state."""
    __tablename__ = "ledger_snapshots"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner: Mapped[str] = mapped_column(String(42), nullable=False)
    state: Mapped[str] = mapped_column(String(10), nullable=False)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
