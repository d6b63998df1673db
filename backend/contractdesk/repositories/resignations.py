"""Resignations — historical records of contributors leaving tasks.

Invariants:
    - register needs task.assignee (NotAssignedError); the record names that assignee
    - register does NOT unassign the task; callers sequence unassign themselves
    - register re-reads the task in the same unit of work: a resignation for a
      removed task is a ResourceNotFoundError, never an orphan row
    - Records are never updated
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractdesk.core.errors import ResourceNotFoundError
from contractdesk.core.snapshots import Resignation, Task
from contractdesk.core.task_lifecycle import ensure_resignable
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.models import ResignationRow, TaskRow
from contractdesk.repositories.loaders import load_resignation

logger = logging.getLogger(__name__)


class ResignationRepository:
    def __init__(self, store: RelationalStore):
        self._store = store

    def register(
        self, task: Task, reason: str, now: datetime | None = None,
    ) -> Resignation:
        ensure_resignable(task)
        resignation = Resignation(
            task_key=task.key,
            contributor=task.assignee,
            timestamp=now or datetime.now(timezone.utc),
            reason=reason,
        )
        key = (
            task.project_id.repo_full_name,
            task.project_id.provider,
            task.issue_id,
            task.is_pull_request,
        )

        def unit(db: Session) -> None:
            if db.get(TaskRow, key) is None:
                raise ResourceNotFoundError("Task", str(task.key))
            db.add(ResignationRow(
                repo_full_name=key[0],
                provider=key[1],
                issue_id=key[2],
                is_pull_request=key[3],
                username=resignation.contributor.username,
                timestamp=resignation.timestamp,
                reason=reason,
            ))

        self._store.run_transaction(unit)
        logger.info(
            f"{resignation.contributor.username} resigned from task {task.key}",
            extra={
                "repo_full_name": task.project_id.repo_full_name,
                "provider": task.project_id.provider,
                "issue_id": task.issue_id,
            },
        )
        return resignation

    def of_task(self, task: Task) -> list[Resignation]:
        return self._store.fetch_all(
            select(ResignationRow)
            .where(
                ResignationRow.repo_full_name == task.project_id.repo_full_name,
                ResignationRow.provider == task.project_id.provider,
                ResignationRow.issue_id == task.issue_id,
                ResignationRow.is_pull_request == task.is_pull_request,
            )
            .order_by(ResignationRow.timestamp, ResignationRow.id),
            load_resignation,
        )
