"""Services Layer — the emoji manager and its serving chain.

Invariants:
    - Services orchestrate IO around pure core functions
    - Collaborators arrive through constructor injection (core/repository_protocols.py)
"""
