"""Resignation ORM — immutable record of a contributor leaving a task.

Invariants:
    - Written once, never updated
    - Deleted only together with its task
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class ResignationRow(Base):
    __tablename__ = "resignations"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    repo_full_name: Mapped[str] = mapped_column(String(256), nullable=False)
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    issue_id: Mapped[str] = mapped_column(String(64), nullable=False)
    is_pull_request: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    username: Mapped[str] = mapped_column(String(256), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
