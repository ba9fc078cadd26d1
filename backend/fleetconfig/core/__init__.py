"""Core Layer — template rules, secret policy and persistence contracts. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Validation, merge and redaction are pure and deterministic
"""
