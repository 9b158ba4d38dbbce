"""Core Layer — emoji domain logic, no DB, no request handling.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Resolution and validation functions are pure and deterministic
    - image_sniffer is the only async module: it consumes the stream it is given

Design Decisions:
    - Functional core separated from the imperative shell in services/
"""
