"""Projects — registration, lookup by key and paged listing.

Invariants:
    - (repo_full_name, provider) is unique; a second registration is a ConflictError
    - Listings are ordered by primary key so page windows are stable
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractdesk.core.domain_types import ProjectId
from contractdesk.core.errors import ConflictError
from contractdesk.core.paged_iterator import LazyPagedIterator
from contractdesk.core.paging import Page
from contractdesk.core.snapshots import Project
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.models import ProjectRow
from contractdesk.repositories.loaders import load_project

logger = logging.getLogger(__name__)

_ALL_PROJECTS = select(ProjectRow).order_by(
    ProjectRow.provider, ProjectRow.repo_full_name,
)


class ProjectRepository:
    def __init__(self, store: RelationalStore, page_size: int = 100):
        self._store = store
        self._page_size = page_size

    def register(
        self,
        repo_full_name: str,
        provider: str,
        owner_username: str,
        webhook_token: str,
    ) -> Project:
        project = Project(
            repo_full_name=repo_full_name,
            provider=provider,
            owner_username=owner_username,
            webhook_token=webhook_token,
        )

        def unit(db: Session) -> Project:
            if db.get(ProjectRow, (repo_full_name, provider)) is not None:
                raise ConflictError(f"Project {project.id} already exists.")
            db.add(ProjectRow(
                repo_full_name=repo_full_name,
                provider=provider,
                owner_username=owner_username,
                webhook_token=webhook_token,
            ))
            return project

        registered = self._store.run_transaction(unit)
        logger.info(
            f"Registered project {registered.id}",
            extra={"repo_full_name": repo_full_name, "provider": provider},
        )
        return registered

    def get_by_id(self, repo_full_name: str, provider: str) -> Project | None:
        return self._store.fetch_one(
            select(ProjectRow).where(
                ProjectRow.repo_full_name == repo_full_name,
                ProjectRow.provider == provider,
            ),
            load_project,
        )

    def exists(self, project_id: ProjectId) -> bool:
        return self.get_by_id(project_id.repo_full_name, project_id.provider) is not None

    def count(self) -> int:
        return self._store.count_rows(_ALL_PROJECTS)

    def page(self, page: Page) -> list[Project]:
        if page.is_all:
            return self._store.fetch_all(_ALL_PROJECTS, load_project)
        return self._store.fetch_page(
            _ALL_PROJECTS, load_project, page.offset, page.limit,
        )

    def iter_all(self) -> LazyPagedIterator[Project]:
        return self._store.iterate(_ALL_PROJECTS, load_project, self._page_size)
