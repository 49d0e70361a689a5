"""ContractEventRecord ORM: append-only log of emitted contract events.

Invariants:
    - One row per published event, in publication order (created_at)
    - payload is the event's to_payload() output

Design Decisions:
    - Logging table, not enforcement: no operation reads it back
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from eastereggs.db.base import Base


class ContractEventRecord(Base):
    """Event log entry."""
    __tablename__ = "contract_events"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    event_name: Mapped[str] = mapped_column(String(50), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
