"""Payment Methods — registration, lookup and exclusive activation per wallet.

Invariants:
    - Scope of activation = all payment methods of one wallet (project + wallet type)
    - A payment method can only be registered on an existing wallet; it starts inactive
    - An active payment method cannot be removed
"""

import logging

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from contractdesk.core.activation import active_of
from contractdesk.core.errors import ConflictError, ResourceNotFoundError
from contractdesk.core.snapshots import PaymentMethod, Wallet
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.models import PaymentMethodRow, WalletRow
from contractdesk.repositories.exclusive_activation import ExclusiveActivation
from contractdesk.repositories.loaders import load_payment_method

logger = logging.getLogger(__name__)


def _of_wallet(repo_full_name: str, provider: str, wallet_type: str):
    return and_(
        PaymentMethodRow.repo_full_name == repo_full_name,
        PaymentMethodRow.provider == provider,
        PaymentMethodRow.type == wallet_type,
    )


def _scope(method: PaymentMethod):
    return _of_wallet(
        method.project_id.repo_full_name,
        method.project_id.provider,
        method.wallet_type,
    )


def _identity(method: PaymentMethod):
    return and_(_scope(method), PaymentMethodRow.identifier == method.identifier)


def _describe(method: PaymentMethod) -> str:
    return (
        f"{method.identifier} of {method.wallet_type} wallet "
        f"of {method.project_id}"
    )


class PaymentMethodRepository:
    """All the payment methods of all wallets."""

    def __init__(self, store: RelationalStore):
        self._store = store
        self._activation: ExclusiveActivation[PaymentMethod] = ExclusiveActivation(
            store,
            PaymentMethodRow,
            scope_of=_scope,
            identity_of=_identity,
            resource_type="PaymentMethod",
            loader=load_payment_method,
            describe=_describe,
        )

    def register(self, wallet: Wallet, identifier: str) -> PaymentMethod:
        method = PaymentMethod(
            project_id=wallet.project_id,
            wallet_type=wallet.type,
            identifier=identifier,
            active=False,
        )
        key = (
            wallet.project_id.repo_full_name,
            wallet.project_id.provider,
            wallet.type,
        )

        def unit(db: Session) -> PaymentMethod:
            if db.get(WalletRow, key) is None:
                raise ResourceNotFoundError(
                    "Wallet", f"{wallet.type} of {wallet.project_id}",
                )
            if db.get(PaymentMethodRow, (*key, identifier)) is not None:
                raise ConflictError(
                    f"PaymentMethod {_describe(method)} already exists.",
                )
            db.add(PaymentMethodRow(
                repo_full_name=key[0],
                provider=key[1],
                type=key[2],
                identifier=identifier,
                active=False,
            ))
            return method

        registered = self._store.run_transaction(unit)
        logger.info(
            f"Registered payment method {_describe(registered)}",
            extra={"wallet_type": wallet.type},
        )
        return registered

    def of_wallet(self, wallet: Wallet) -> list[PaymentMethod]:
        return self._store.fetch_all(
            select(PaymentMethodRow)
            .where(_of_wallet(
                wallet.project_id.repo_full_name,
                wallet.project_id.provider,
                wallet.type,
            ))
            .order_by(PaymentMethodRow.identifier),
            load_payment_method,
        )

    def active_of(self, wallet: Wallet) -> PaymentMethod | None:
        return active_of(self.of_wallet(wallet))

    def activate(self, method: PaymentMethod) -> PaymentMethod:
        return self._activation.activate(method)

    def deactivate(self, method: PaymentMethod) -> PaymentMethod:
        return self._activation.deactivate(method)

    def remove(self, method: PaymentMethod) -> None:
        self._activation.remove(method)
