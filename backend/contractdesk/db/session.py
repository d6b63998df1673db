"""Session Factory — provides sync DB sessions for direct usage outside a Storage.

Invariants:
    - Sessions never expire attributes on commit (snapshots are built after commit)
    - Meant for scripts and test fixtures

Design Decisions:
    - Separate from infrastructure/database.py: no error mapping, no health checks
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker


def create_session_factory(
    database_url: str | None = None, engine: Engine | None = None,
) -> sessionmaker[Session]:
    """Create a session factory for the given database URL or engine."""
    if engine is None:
        if database_url is None:
            raise ValueError("Either database_url or engine is required")
        engine = create_engine(database_url, echo=False)
    return sessionmaker(
        engine, class_=Session, expire_on_commit=False,
    )
