"""Infrastructure Layer: external collaborator adapters and cross-cutting concerns.

Invariants:
    - Every adapter implements one Protocol from core/repository_protocols.py
    - Outbound HTTP failures mapped to core error types (or False for the rail)

Design Decisions:
    - One production adapter and one deterministic adapter per collaborator
"""
