"""Task Lifecycle — pure transition rules for Unassigned <-> Assigned.

Invariants:
    - contract_matches_task is exact-match on (project, role, contributor)
    - assign is a full replace of the assignment, never a merge
    - deadline = assigned_at + duration_days
    - unassign always yields an Unassigned task (idempotent in effect)
    - A resignation needs a current assignee; it does NOT unassign the task

Design Decisions:
    - Functions return new snapshots and raise domain errors; the repository
      layer performs the write and decides nothing on its own
"""

from datetime import datetime, timedelta, timezone

from contractdesk.core.domain_types import ContractId
from contractdesk.core.errors import (
    ContractMismatchError, NotAssignedError,
)
from contractdesk.core.snapshots import Assignment, Contract, Task


def expected_contract_id(task: Task, contract: Contract) -> ContractId:
    """Contract id obtained by putting contract's contributor on task's project and role."""
    return ContractId(
        repo_full_name=task.project_id.repo_full_name,
        username=contract.id.username,
        provider=task.project_id.provider,
        role=task.role,
    )


def contract_matches_task(task: Task, contract: Contract) -> bool:
    """True iff contract is the one the task's project/role would give its contributor."""
    return expected_contract_id(task, contract) == contract.id


def build_assignment(
    task: Task,
    contract: Contract,
    duration_days: int,
    now: datetime | None = None,
) -> Task:
    """Assigned copy of task. Raises ContractMismatchError on a foreign contract."""
    if not contract_matches_task(task, contract):
        raise ContractMismatchError(str(task.key), str(contract.id))
    if duration_days < 0:
        raise ValueError(f"duration_days must be >= 0, got {duration_days}")
    assigned_at = now or datetime.now(timezone.utc)
    return task.with_assignment(
        Assignment(
            contract_id=contract.id,
            assigned_at=assigned_at,
            deadline=assigned_at + timedelta(days=duration_days),
        )
    )


def clear_assignment(task: Task) -> Task:
    return task.with_assignment(None)


def ensure_resignable(task: Task) -> None:
    """Rule: only a task with a current assignee can record a resignation."""
    if task.assignee is None:
        raise NotAssignedError(str(task.key))
