"""ORM tables: the single-row ledger snapshot and the append-only event log.

Both are imported here so Base.metadata sees them before create_all or alembic runs.
"""

from eastereggs.models.ledger_snapshot import LedgerSnapshot  # noqa: F401
from eastereggs.models.contract_event import ContractEventRecord  # noqa: F401
