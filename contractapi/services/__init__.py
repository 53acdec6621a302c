"""Services Layer - lifecycle executor, invocation router, system contract.

Invariants:
    - Routing uses explicit namespace -> group mappings built at start-up
    - Nothing here raises for a per-call failure
"""
