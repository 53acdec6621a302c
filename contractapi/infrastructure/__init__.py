"""Infrastructure Layer - state stores, logging setup, chaincode loading.

Invariants:
    - Infrastructure never imports from api/
    - Store failures are mapped to StateStoreError before reaching handlers
"""
