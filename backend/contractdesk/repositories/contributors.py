"""Contributors — registration, lookup and per-project listing."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractdesk.core.domain_types import ProjectId
from contractdesk.core.errors import ConflictError
from contractdesk.core.paging import Page
from contractdesk.core.snapshots import Contributor
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.models import ContractRow, ContributorRow
from contractdesk.repositories.loaders import load_contributor

logger = logging.getLogger(__name__)

_ALL_CONTRIBUTORS = select(ContributorRow).order_by(
    ContributorRow.provider, ContributorRow.username,
)


class ContributorRepository:
    def __init__(self, store: RelationalStore):
        self._store = store

    def register(self, username: str, provider: str) -> Contributor:
        def unit(db: Session) -> Contributor:
            if db.get(ContributorRow, (username, provider)) is not None:
                raise ConflictError(
                    f"Contributor {username} at {provider} already exists.",
                )
            db.add(ContributorRow(username=username, provider=provider))
            return Contributor(username, provider)

        registered = self._store.run_transaction(unit)
        logger.info(
            f"Registered contributor {username} at {provider}",
            extra={"provider": provider},
        )
        return registered

    def get_by_id(self, username: str, provider: str) -> Contributor | None:
        return self._store.fetch_one(
            select(ContributorRow).where(
                ContributorRow.username == username,
                ContributorRow.provider == provider,
            ),
            load_contributor,
        )

    def of_project(self, project_id: ProjectId) -> list[Contributor]:
        """Contributors holding at least one contract on the project, each once."""
        holding = (
            select(ContractRow.username)
            .where(
                ContractRow.repo_full_name == project_id.repo_full_name,
                ContractRow.provider == project_id.provider,
            )
        )
        return self._store.fetch_all(
            select(ContributorRow)
            .where(
                ContributorRow.provider == project_id.provider,
                ContributorRow.username.in_(holding),
            )
            .order_by(ContributorRow.username),
            load_contributor,
        )

    def page(self, page: Page) -> list[Contributor]:
        if page.is_all:
            return self._store.fetch_all(_ALL_CONTRIBUTORS, load_contributor)
        return self._store.fetch_page(
            _ALL_CONTRIBUTORS, load_contributor, page.offset, page.limit,
        )
