"""Boundary Protocols - contracts between the router core and the world-state store.

Invariants:
    - Core NEVER imports a concrete store; stores are injected per invocation
    - get() returns None for an absent key; b"" is a present, empty value
    - put() never accepts None; deletion goes through delete()

Design Decisions:
    - Protocol over ABC: structural subtyping, any object with get/put/delete works
    - Synchronous methods: invocations run to completion on the calling thread
"""

from typing import Protocol


class StateStore(Protocol):
    """World-state key/value collaborator, implemented by infrastructure."""
    def get(self, key: str) -> bytes | None: ...
    def put(self, key: str, value: bytes) -> None: ...
    def delete(self, key: str) -> None: ...
