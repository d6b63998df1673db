"""Infrastructure Layer — database sessions, the relational store, and logging.

Invariants:
    - Infrastructure never encodes business rules; it only runs statements
    - All SQLAlchemy failures are mapped to ContractDeskError subclasses here
"""
