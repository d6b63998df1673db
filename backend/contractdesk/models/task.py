"""Task ORM — an issue or pull request registered as a unit of work.

Invariants:
    - Primary key is (repo_full_name, provider, issue_id, is_pull_request)
    - username, assigned and deadline are all NULL (unassigned) or all set (assigned)
    - The assignee's contract is (repo_full_name, username, provider, role)

Design Decisions:
    - CHECK constraint mirrors the all-or-nothing assignment rule in the database
    - No FK to contracts: the contract is derived from task columns, and
      removing a contract must not cascade into task history
"""

from datetime import datetime

from sqlalchemy import (
    String, Integer, Boolean, DateTime, CheckConstraint, ForeignKeyConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class TaskRow(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        ForeignKeyConstraint(
            ["repo_full_name", "provider"],
            ["projects.repo_full_name", "projects.provider"],
            ondelete="CASCADE",
        ),
        CheckConstraint(
            "(username IS NULL AND assigned IS NULL AND deadline IS NULL) "
            "OR (username IS NOT NULL AND assigned IS NOT NULL "
            "AND deadline IS NOT NULL)",
            name="ck_tasks_assignment_all_or_nothing",
        ),
    )

    repo_full_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    issue_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    is_pull_request: Mapped[bool] = mapped_column(
        Boolean, primary_key=True, default=False,
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    estimation_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=60,
    )
    username: Mapped[str | None] = mapped_column(String(256), nullable=True)
    assigned: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
