"""Contract ORM — a contributor's engagement on a project in one role.

Invariants:
    - Primary key is (repo_full_name, username, provider, role)
    - Belongs to a Project (repo_full_name, provider) and a Contributor (username, provider)
    - marked_for_removal is NULL unless the contract is scheduled for removal

Design Decisions:
    - Numeric hourly_rate: money never stored as float
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    String, Numeric, DateTime, ForeignKeyConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class ContractRow(Base):
    __tablename__ = "contracts"
    __table_args__ = (
        ForeignKeyConstraint(
            ["repo_full_name", "provider"],
            ["projects.repo_full_name", "projects.provider"],
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["username", "provider"],
            ["contributors.username", "contributors.provider"],
            ondelete="CASCADE",
        ),
    )

    repo_full_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    username: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    role: Mapped[str] = mapped_column(String(32), primary_key=True)
    hourly_rate: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False,
    )
    marked_for_removal: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
