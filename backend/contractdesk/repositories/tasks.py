"""Tasks — registration, queries and the Unassigned <-> Assigned lifecycle.

Invariants:
    - register needs the issue's project (ProjectNotFoundError); tasks start Unassigned
    - assign checks contract_matches_task BEFORE any write (ContractMismatchError)
    - assign replaces all three assignment columns in one statement
    - unassign always issues the clearing write, even for an unassigned task
    - assign / unassign must affect exactly one row (InvariantViolationError otherwise)
    - remove deletes the task and its resignations in one unit of work,
      whatever the task's state

Design Decisions:
    - Lifecycle rules live in core/task_lifecycle.py; this module only writes
"""

import logging
from datetime import datetime

from sqlalchemy import and_, delete, select, update
from sqlalchemy.orm import Session

from contractdesk.core.domain_types import ContractId, ProjectId, TaskKey
from contractdesk.core.errors import ConflictError, ProjectNotFoundError
from contractdesk.core.paged_iterator import LazyPagedIterator
from contractdesk.core.snapshots import Contract, Contributor, Issue, Task
from contractdesk.core.task_lifecycle import build_assignment, clear_assignment
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.infrastructure.relational_store import expect_one_row
from contractdesk.models import ProjectRow, ResignationRow, TaskRow
from contractdesk.repositories.loaders import load_task

logger = logging.getLogger(__name__)

_ORDER = (
    TaskRow.provider,
    TaskRow.repo_full_name,
    TaskRow.issue_id,
    TaskRow.is_pull_request,
)


def _identity(key: TaskKey):
    return and_(
        TaskRow.repo_full_name == key.project_id.repo_full_name,
        TaskRow.provider == key.project_id.provider,
        TaskRow.issue_id == key.issue_id,
        TaskRow.is_pull_request == key.is_pull_request,
    )


def _log_extra(task: Task) -> dict:
    return {
        "repo_full_name": task.project_id.repo_full_name,
        "provider": task.project_id.provider,
        "issue_id": task.issue_id,
    }


class TaskRepository:
    def __init__(
        self,
        store: RelationalStore,
        page_size: int = 100,
        default_estimation_minutes: int = 60,
    ):
        self._store = store
        self._page_size = page_size
        self._default_estimation = default_estimation_minutes

    # ─── Lifecycle ───────────────────────────────────────────────

    def register(self, issue: Issue) -> Task:
        """Turn an issue into an Unassigned task of its (existing) project."""
        task = Task(
            project_id=issue.project_id,
            issue_id=issue.issue_id,
            role=issue.role,
            estimation_minutes=self._default_estimation,
            is_pull_request=issue.is_pull_request,
        )

        def unit(db: Session) -> Task:
            if db.get(ProjectRow, (issue.repo_full_name, issue.provider)) is None:
                raise ProjectNotFoundError(issue.repo_full_name, issue.provider)
            existing = db.execute(
                select(TaskRow).where(_identity(task.key)),
            ).scalars().first()
            if existing is not None:
                raise ConflictError(f"Task {task.key} already exists.")
            db.add(TaskRow(
                repo_full_name=issue.repo_full_name,
                provider=issue.provider,
                issue_id=issue.issue_id,
                is_pull_request=issue.is_pull_request,
                role=issue.role,
                estimation_minutes=task.estimation_minutes,
            ))
            return task

        registered = self._store.run_transaction(unit)
        logger.info(f"Registered task {registered.key}", extra=_log_extra(registered))
        return registered

    def assign(
        self,
        task: Task,
        contract: Contract,
        duration_days: int,
        now: datetime | None = None,
    ) -> Task:
        assigned = build_assignment(task, contract, duration_days, now)
        assignment = assigned.assignment
        self._store.run_transaction(
            lambda db: expect_one_row(
                db,
                update(TaskRow)
                .where(_identity(task.key))
                .values(
                    username=contract.id.username,
                    assigned=assignment.assigned_at,
                    deadline=assignment.deadline,
                )
                .execution_options(synchronize_session=False),
                "assign task",
            ),
        )
        logger.info(
            f"Assigned task {task.key} to {contract.id.username}, "
            f"deadline {assignment.deadline.isoformat()}",
            extra=_log_extra(task),
        )
        return assigned

    def unassign(self, task: Task) -> Task:
        self._store.run_transaction(
            lambda db: expect_one_row(
                db,
                update(TaskRow)
                .where(_identity(task.key))
                .values(username=None, assigned=None, deadline=None)
                .execution_options(synchronize_session=False),
                "unassign task",
            ),
        )
        logger.info(f"Unassigned task {task.key}", extra=_log_extra(task))
        return clear_assignment(task)

    def remove(self, task: Task) -> bool:
        """Delete the task (and its resignations). False if it was already gone."""
        key = task.key

        def unit(db: Session) -> bool:
            db.execute(
                delete(ResignationRow)
                .where(
                    ResignationRow.repo_full_name == key.project_id.repo_full_name,
                    ResignationRow.provider == key.project_id.provider,
                    ResignationRow.issue_id == key.issue_id,
                    ResignationRow.is_pull_request == key.is_pull_request,
                )
                .execution_options(synchronize_session=False),
            )
            deleted = db.execute(
                delete(TaskRow)
                .where(_identity(key))
                .execution_options(synchronize_session=False),
            ).rowcount
            return deleted == 1

        removed = self._store.run_transaction(unit)
        logger.info(f"Removed task {key}: {removed}", extra=_log_extra(task))
        return removed

    # ─── Queries ─────────────────────────────────────────────────

    def get_by_id(
        self,
        repo_full_name: str,
        provider: str,
        issue_id: str,
        is_pull_request: bool = False,
    ) -> Task | None:
        key = TaskKey(ProjectId(repo_full_name, provider), issue_id, is_pull_request)
        return self._store.fetch_one(
            select(TaskRow).where(_identity(key)), load_task,
        )

    def of_project(self, project_id: ProjectId) -> list[Task]:
        return self._store.fetch_all(
            select(TaskRow)
            .where(
                TaskRow.repo_full_name == project_id.repo_full_name,
                TaskRow.provider == project_id.provider,
            )
            .order_by(*_ORDER),
            load_task,
        )

    def of_contributor(self, contributor: Contributor) -> list[Task]:
        return self._store.fetch_all(
            select(TaskRow)
            .where(
                TaskRow.username == contributor.username,
                TaskRow.provider == contributor.provider,
            )
            .order_by(*_ORDER),
            load_task,
        )

    def of_contract(self, contract_id: ContractId) -> list[Task]:
        return self._store.fetch_all(
            select(TaskRow)
            .where(
                TaskRow.repo_full_name == contract_id.repo_full_name,
                TaskRow.provider == contract_id.provider,
                TaskRow.username == contract_id.username,
                TaskRow.role == contract_id.role,
            )
            .order_by(*_ORDER),
            load_task,
        )

    def unassigned(self, limit: int = 100) -> list[Task]:
        return self._store.fetch_page(
            select(TaskRow).where(TaskRow.username.is_(None)).order_by(*_ORDER),
            load_task,
            0,
            limit,
        )

    def iter_all(self) -> LazyPagedIterator[Task]:
        return self._store.iterate(
            select(TaskRow).order_by(*_ORDER), load_task, self._page_size,
        )
