"""Database Infrastructure — sync session factory and SQLAlchemy Base.

Invariants:
    - Single engine per DatabaseSessionManager, injected where needed
    - All sessions are synchronous (sqlalchemy.orm.Session)

Design Decisions:
    - psycopg 3 driver for PostgreSQL; SQLite (stdlib driver) for tests
"""
