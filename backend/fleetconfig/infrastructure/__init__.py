"""Infrastructure Layer — database access, store implementations, and logging.

Invariants:
    - Store implementations satisfy the protocols in core/repository_protocols.py
    - Driver errors are mapped to DatabaseError before they leave this package
"""
