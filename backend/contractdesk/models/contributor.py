"""Contributor ORM — a user who can hold contracts.

Invariants:
    - Primary key is (username, provider)
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class ContributorRow(Base):
    __tablename__ = "contributors"

    username: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
