"""Pydantic Schemas — response contracts for the emoji API.

Invariants:
    - Schemas validate at the system boundary only; core uses dataclasses
"""
