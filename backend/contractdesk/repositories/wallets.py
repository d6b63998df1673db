"""Wallets — registration, lookup, cash updates and exclusive activation per project.

Invariants:
    - Only FAKE and STRIPE wallets can be registered; new wallets are inactive
    - Scope of activation = all wallets of one project
    - update_cash touches exactly one row or fails (InvariantViolationError)
    - remove deletes the wallet's payment methods in the same unit of work
"""

import logging
from decimal import Decimal

from sqlalchemy import and_, delete, select, update
from sqlalchemy.orm import Session

from contractdesk.core.activation import active_of
from contractdesk.core.domain_types import ProjectId, WalletType
from contractdesk.core.errors import (
    ConflictError, ProjectNotFoundError, UnsupportedTypeError,
)
from contractdesk.core.snapshots import Project, Wallet
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.infrastructure.relational_store import expect_one_row
from contractdesk.models import PaymentMethodRow, ProjectRow, WalletRow
from contractdesk.repositories.exclusive_activation import ExclusiveActivation
from contractdesk.repositories.loaders import load_wallet

logger = logging.getLogger(__name__)


def _of_project(project_id: ProjectId):
    return and_(
        WalletRow.repo_full_name == project_id.repo_full_name,
        WalletRow.provider == project_id.provider,
    )


def _wallet_identity(wallet: Wallet):
    return and_(_of_project(wallet.project_id), WalletRow.type == wallet.type)


def _describe(wallet: Wallet) -> str:
    return f"{wallet.type} of {wallet.project_id}"


class WalletRepository:
    """All the wallets of all projects."""

    def __init__(self, store: RelationalStore):
        self._store = store
        self._activation: ExclusiveActivation[Wallet] = ExclusiveActivation(
            store,
            WalletRow,
            scope_of=lambda wallet: _of_project(wallet.project_id),
            identity_of=_wallet_identity,
            resource_type="Wallet",
            loader=load_wallet,
            describe=_describe,
        )

    def register(
        self,
        project: Project,
        wallet_type: str,
        cash: Decimal,
        identifier: str,
    ) -> Wallet:
        allowed = [t.value for t in WalletType]
        if wallet_type not in allowed:
            raise UnsupportedTypeError("wallets", wallet_type, allowed)
        wallet = Wallet(
            project_id=project.id,
            type=wallet_type,
            cash=Decimal(cash),
            identifier=identifier,
            active=False,
        )

        def unit(db: Session) -> Wallet:
            if db.get(ProjectRow, (project.repo_full_name, project.provider)) is None:
                raise ProjectNotFoundError(project.repo_full_name, project.provider)
            existing = db.execute(
                select(WalletRow).where(_wallet_identity(wallet)),
            ).scalars().first()
            if existing is not None:
                raise ConflictError(f"Wallet {_describe(wallet)} already exists.")
            db.add(WalletRow(
                repo_full_name=project.repo_full_name,
                provider=project.provider,
                type=wallet_type,
                cash=wallet.cash,
                identifier=identifier,
                active=False,
            ))
            return wallet

        registered = self._store.run_transaction(unit)
        logger.info(
            f"Registered wallet {_describe(registered)}",
            extra={
                "repo_full_name": project.repo_full_name,
                "provider": project.provider,
                "wallet_type": wallet_type,
            },
        )
        return registered

    def get(self, project_id: ProjectId, wallet_type: str) -> Wallet | None:
        return self._store.fetch_one(
            select(WalletRow).where(
                _of_project(project_id), WalletRow.type == wallet_type,
            ),
            load_wallet,
        )

    def of_project(self, project_id: ProjectId) -> list[Wallet]:
        return self._store.fetch_all(
            select(WalletRow)
            .where(_of_project(project_id))
            .order_by(WalletRow.type),
            load_wallet,
        )

    def active_of(self, project_id: ProjectId) -> Wallet | None:
        """The project's active wallet, or None (also None for a project without wallets)."""
        return active_of(self.of_project(project_id))

    def activate(self, wallet: Wallet) -> Wallet:
        return self._activation.activate(wallet)

    def deactivate(self, wallet: Wallet) -> Wallet:
        return self._activation.deactivate(wallet)

    def update_cash(self, wallet: Wallet, cash: Decimal) -> Wallet:
        self._store.run_transaction(
            lambda db: expect_one_row(
                db,
                update(WalletRow)
                .where(_wallet_identity(wallet))
                .values(cash=Decimal(cash))
                .execution_options(synchronize_session=False),
                "update wallet cash",
            ),
        )
        return wallet.with_cash(Decimal(cash))

    def remove(self, wallet: Wallet) -> None:
        """Delete an inactive wallet together with its payment methods."""
        self._activation.remove(
            wallet,
            dependents=[
                delete(PaymentMethodRow)
                .where(
                    PaymentMethodRow.repo_full_name == wallet.project_id.repo_full_name,
                    PaymentMethodRow.provider == wallet.project_id.provider,
                    PaymentMethodRow.type == wallet.type,
                )
                .execution_options(synchronize_session=False),
            ],
        )
