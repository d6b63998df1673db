"""Contracts — contributor engagements on projects.

Invariants:
    - A contract needs its project (ProjectNotFoundError) and contributor
      (ContributorNotFoundError) to exist
    - Adding a contract under an existing key is a ConflictError on every
      backend; nothing is silently ignored
    - mark_for_removal / restore each touch exactly one row
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import and_, select, update
from sqlalchemy.orm import Session

from contractdesk.core.domain_types import ContractId, ProjectId
from contractdesk.core.errors import (
    ConflictError, ContributorNotFoundError, ProjectNotFoundError,
)
from contractdesk.core.paged_iterator import LazyPagedIterator
from contractdesk.core.snapshots import Contract, Contributor
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.infrastructure.relational_store import expect_one_row
from contractdesk.models import ContractRow, ContributorRow, ProjectRow
from contractdesk.repositories.loaders import load_contract

logger = logging.getLogger(__name__)

_ORDER = (
    ContractRow.provider,
    ContractRow.repo_full_name,
    ContractRow.username,
    ContractRow.role,
)


def _identity(contract_id: ContractId):
    return and_(
        ContractRow.repo_full_name == contract_id.repo_full_name,
        ContractRow.username == contract_id.username,
        ContractRow.provider == contract_id.provider,
        ContractRow.role == contract_id.role,
    )


class ContractRepository:
    def __init__(self, store: RelationalStore, page_size: int = 100):
        self._store = store
        self._page_size = page_size

    def add(
        self,
        repo_full_name: str,
        username: str,
        provider: str,
        hourly_rate: Decimal,
        role: str,
    ) -> Contract:
        contract = Contract(
            id=ContractId(repo_full_name, username, provider, role),
            hourly_rate=Decimal(hourly_rate),
        )

        def unit(db: Session) -> Contract:
            if db.get(ProjectRow, (repo_full_name, provider)) is None:
                raise ProjectNotFoundError(repo_full_name, provider)
            if db.get(ContributorRow, (username, provider)) is None:
                raise ContributorNotFoundError(username, provider)
            if db.get(ContractRow, (repo_full_name, username, provider, role)) is not None:
                raise ConflictError(f"Contract {contract.id} already exists.")
            db.add(ContractRow(
                repo_full_name=repo_full_name,
                username=username,
                provider=provider,
                role=role,
                hourly_rate=contract.hourly_rate,
            ))
            return contract

        added = self._store.run_transaction(unit)
        logger.info(
            f"Added contract {added.id}",
            extra={"repo_full_name": repo_full_name, "provider": provider},
        )
        return added

    def find_by_id(self, contract_id: ContractId) -> Contract | None:
        return self._store.fetch_one(
            select(ContractRow).where(_identity(contract_id)), load_contract,
        )

    def of_project(self, project_id: ProjectId) -> list[Contract]:
        return self._store.fetch_all(
            select(ContractRow)
            .where(
                ContractRow.repo_full_name == project_id.repo_full_name,
                ContractRow.provider == project_id.provider,
            )
            .order_by(*_ORDER),
            load_contract,
        )

    def of_contributor(self, contributor: Contributor) -> list[Contract]:
        return self._store.fetch_all(
            select(ContractRow)
            .where(
                ContractRow.username == contributor.username,
                ContractRow.provider == contributor.provider,
            )
            .order_by(*_ORDER),
            load_contract,
        )

    def iter_all(self) -> LazyPagedIterator[Contract]:
        return self._store.iterate(
            select(ContractRow).order_by(*_ORDER), load_contract, self._page_size,
        )

    def mark_for_removal(
        self, contract: Contract, now: datetime | None = None,
    ) -> Contract:
        marked_at = now or datetime.now(timezone.utc)
        self._set_removal_mark(contract, marked_at, "mark contract for removal")
        return contract.with_removal_mark(marked_at)

    def restore(self, contract: Contract) -> Contract:
        self._set_removal_mark(contract, None, "restore contract")
        return contract.with_removal_mark(None)

    def _set_removal_mark(
        self, contract: Contract, value: datetime | None, operation: str,
    ) -> None:
        self._store.run_transaction(
            lambda db: expect_one_row(
                db,
                update(ContractRow)
                .where(_identity(contract.id))
                .values(marked_for_removal=value)
                .execution_options(synchronize_session=False),
                operation,
            ),
        )
        logger.info(f"{operation.capitalize()}: {contract.id}")
