"""API Layer - FastAPI transport in front of the invocation router.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes hold no routing logic of their own; they delegate to Chaincode
"""
