"""fleetconfig — device configuration template service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
