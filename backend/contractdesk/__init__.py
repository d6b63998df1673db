"""ContractDesk — data-access layer for projects, contracts, tasks and project wallets.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
