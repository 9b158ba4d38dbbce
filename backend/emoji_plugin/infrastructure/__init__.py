"""Infrastructure Layer — blob stores, registry, event bus and cross-cutting concerns.

Invariants:
    - Infrastructure implements core/repository_protocols.py, never the reverse
    - Backend failures are mapped to core/errors.py types at this boundary
"""
