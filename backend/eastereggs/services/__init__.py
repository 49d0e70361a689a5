"""Service Layer: imperative shell around the pure core.

Invariants:
    - Services own IO (ports) and serialization; core owns every rule
"""
