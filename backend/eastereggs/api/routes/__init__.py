"""HTTP routes: contract (and events), eggs, upkeep (and oracle), health.

Each module owns one APIRouter; handlers translate requests into EggService calls.
"""
