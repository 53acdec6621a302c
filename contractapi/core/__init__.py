"""Core Layer - handler shapes, marshalling, contexts, responses. No IO.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Store access only through the StateStore protocol
"""
