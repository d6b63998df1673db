"""Repositories — imperative shell: one repository per stored entity.

Invariants:
    - Every repository receives its RelationalStore in the constructor
    - Repositories return immutable snapshots, never ORM rows
    - Business rules are delegated to core/; repositories decide nothing on their own
"""
