"""PaymentMethod ORM — a wallet's means of payment.

Invariants:
    - Primary key is (repo_full_name, provider, type, identifier)
    - Belongs to the wallet (repo_full_name, provider, type)
    - At most one payment method per wallet has active = TRUE
"""

from sqlalchemy import String, Boolean, ForeignKeyConstraint
from sqlalchemy.orm import Mapped, mapped_column

from contractdesk.db.base import Base


class PaymentMethodRow(Base):
    __tablename__ = "payment_methods"
    __table_args__ = (
        ForeignKeyConstraint(
            ["repo_full_name", "provider", "type"],
            ["wallets.repo_full_name", "wallets.provider", "wallets.type"],
            ondelete="CASCADE",
        ),
    )

    repo_full_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), primary_key=True)
    identifier: Mapped[str] = mapped_column(String(256), primary_key=True)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
