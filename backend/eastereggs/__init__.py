"""Easter Eggs: pledge ledger service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
