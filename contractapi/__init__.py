"""contractapi - convention-based contract invocation router.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
