"""Exclusive Activation — "this one active, every scope sibling inactive", atomically.

Invariants:
    - activate is ONE unit of work: lock scope, deactivate siblings, activate target
    - The target update must hit exactly one row, else the whole unit rolls back
      (activating an unknown resource never leaves its scope without an active member)
    - Re-activating the active target is idempotent: same end state
    - deactivate touches only the target; zero actives in a scope is legal afterwards
    - remove re-reads the stored row under lock and refuses while it is active
    - activate / deactivate return the row as stored after the write, never
      the caller's snapshot

Design Decisions:
    - Parameterized by two predicates (scope_of, identity_of) over one ORM model,
      so wallets and payment methods share the same code path
    - SELECT ... FOR UPDATE on the scope serialises concurrent activations on
      server backends; SQLite serialises writers on its own
"""

import logging
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, delete, not_, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.base import Executable

from contractdesk.core.activation import ensure_removable
from contractdesk.core.errors import ResourceNotFoundError
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.db.base import Base
from contractdesk.infrastructure.relational_store import expect_one_row

logger = logging.getLogger(__name__)

R = TypeVar("R")

Predicate = Callable[[R], ColumnElement[bool]]


class ExclusiveActivation(Generic[R]):
    """Enforces at most one active row per scope for one table."""

    def __init__(
        self,
        store: RelationalStore,
        model: type[Base],
        scope_of: Predicate,
        identity_of: Predicate,
        resource_type: str,
        loader: Callable[[Base], R],
        describe: Callable[[R], str] = str,
    ):
        self._store = store
        self._model = model
        self._scope_of = scope_of
        self._identity_of = identity_of
        self._resource_type = resource_type
        self._loader = loader
        self._describe = describe

    def _reload(self, db: Session, identity: ColumnElement[bool]) -> R:
        # Bulk updates bypass the identity map; populate_existing refreshes it
        row = db.execute(
            select(self._model)
            .where(identity)
            .execution_options(populate_existing=True),
        ).scalars().one()
        return self._loader(row)

    def activate(self, target: R) -> R:
        """Make target the scope's only active member; return the stored snapshot."""
        scope = self._scope_of(target)
        identity = self._identity_of(target)
        model = self._model

        def unit(db: Session) -> R:
            db.execute(select(model).where(scope).with_for_update()).all()
            db.execute(
                update(model)
                .where(scope, not_(identity))
                .values(active=False)
                .execution_options(synchronize_session=False),
            )
            expect_one_row(
                db,
                update(model)
                .where(identity)
                .values(active=True)
                .execution_options(synchronize_session=False),
                f"activate {self._resource_type}",
            )
            return self._reload(db, identity)

        activated = self._store.run_transaction(unit)
        logger.info(
            f"Activated {self._resource_type} {self._describe(activated)}",
            extra={"operation": "activate"},
        )
        return activated

    def deactivate(self, target: R) -> R:
        identity = self._identity_of(target)

        def unit(db: Session) -> R:
            expect_one_row(
                db,
                update(self._model)
                .where(identity)
                .values(active=False)
                .execution_options(synchronize_session=False),
                f"deactivate {self._resource_type}",
            )
            return self._reload(db, identity)

        deactivated = self._store.run_transaction(unit)
        logger.info(
            f"Deactivated {self._resource_type} {self._describe(deactivated)}",
            extra={"operation": "deactivate"},
        )
        return deactivated

    def remove(
        self, target: R, dependents: Sequence[Executable] = (),
    ) -> None:
        """Delete target (and dependents first) unless it is stored as active."""
        identity = self._identity_of(target)
        model = self._model
        described = self._describe(target)

        def unit(db: Session) -> None:
            row = db.execute(
                select(model).where(identity).with_for_update(),
            ).scalars().first()
            if row is None:
                raise ResourceNotFoundError(self._resource_type, described)
            ensure_removable(row.active, self._resource_type, described)
            for statement in dependents:
                db.execute(statement)
            expect_one_row(
                db,
                delete(model)
                .where(identity)
                .execution_options(synchronize_session=False),
                f"remove {self._resource_type}",
            )

        self._store.run_transaction(unit)
        logger.info(
            f"Removed {self._resource_type} {described}",
            extra={"operation": "remove"},
        )
