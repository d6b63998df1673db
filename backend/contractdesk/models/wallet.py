"""Wallet ORM — a project's funding source.

Invariants:
    - Primary key is (repo_full_name, provider, type): one wallet per type per project
    - At most one wallet per (repo_full_name, provider) has active = TRUE
      between transactions (enforced by ExclusiveActivation)
    - New wallets are inactive
"""

from decimal import Decimal

from sqlalchemy import String, Numeric, Boolean, ForeignKeyConstraint
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class WalletRow(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        ForeignKeyConstraint(
            ["repo_full_name", "provider"],
            ["projects.repo_full_name", "projects.provider"],
            ondelete="CASCADE",
        ),
    )

    repo_full_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), primary_key=True)
    cash: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    identifier: Mapped[str] = mapped_column(String(256), nullable=False)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
