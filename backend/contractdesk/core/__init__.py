"""Core Layer — pure domain logic, no SQL, no sessions, no transactions.

Invariants:
    - No module in core/ imports from repositories/, infrastructure/, models/ or db/
    - All functions are deterministic given their inputs (clock passed in where needed)

Design Decisions:
    - Functional core separated from imperative shell: paging math, iteration,
      lifecycle and activation rules are testable without a database
"""
