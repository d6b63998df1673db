"""Project ORM — persists a repository managed by the platform.

Invariants:
    - Primary key is (repo_full_name, provider)
    - owner_username and webhook_token are non-nullable
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class ProjectRow(Base):
    """Project aggregate root — owns tasks, contracts and wallets."""
    __tablename__ = "projects"

    repo_full_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    owner_username: Mapped[str] = mapped_column(String(256), nullable=False)
    webhook_token: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
