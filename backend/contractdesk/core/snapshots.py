"""Domain Snapshots — immutable values read from (or written to) the relational store.

Invariants:
    - Every snapshot is frozen: a change produces a NEW snapshot (copy-with)
    - Task assignment is one optional Assignment: all fields set or none
    - Wallet scope = its project; PaymentMethod scope = its wallet (project + type)
    - Snapshots never reach back into the store (no lazy loading)

Design Decisions:
    - dataclasses.replace for "same X but active=True": no wrapper objects
    - Decimal for money: cash and hourly rates never pass through float
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from contractdesk.core.domain_types import (
    ContractId, ProjectId, TaskKey, TaskState,
)


@dataclass(frozen=True)
class Project:
    """A repository managed by the platform."""
    repo_full_name: str
    provider: str
    owner_username: str
    webhook_token: str

    @property
    def id(self) -> ProjectId:
        return ProjectId(self.repo_full_name, self.provider)


@dataclass(frozen=True)
class Contributor:
    username: str
    provider: str


@dataclass(frozen=True)
class Contract:
    """A contributor's engagement on a project, in one role."""
    id: ContractId
    hourly_rate: Decimal
    marked_for_removal: datetime | None = None

    @property
    def contributor(self) -> Contributor:
        return Contributor(self.id.username, self.id.provider)

    @property
    def project_id(self) -> ProjectId:
        return self.id.project_id

    @property
    def role(self) -> str:
        return self.id.role

    def with_removal_mark(self, marked_at: datetime | None) -> "Contract":
        return replace(self, marked_for_removal=marked_at)


@dataclass(frozen=True)
class Issue:
    """An issue or pull request reported by the provider, not yet a task."""
    repo_full_name: str
    provider: str
    issue_id: str
    role: str
    is_pull_request: bool = False

    @property
    def project_id(self) -> ProjectId:
        return ProjectId(self.repo_full_name, self.provider)


@dataclass(frozen=True)
class Assignment:
    """Who holds a task, since when, and until when."""
    contract_id: ContractId
    assigned_at: datetime
    deadline: datetime


@dataclass(frozen=True)
class Task:
    """A unit of work; assigned iff assignment is not None."""
    project_id: ProjectId
    issue_id: str
    role: str
    estimation_minutes: int
    is_pull_request: bool = False
    assignment: Assignment | None = None

    @property
    def key(self) -> TaskKey:
        return TaskKey(self.project_id, self.issue_id, self.is_pull_request)

    @property
    def state(self) -> TaskState:
        if self.assignment is None:
            return TaskState.UNASSIGNED
        return TaskState.ASSIGNED

    @property
    def assignee(self) -> Contributor | None:
        if self.assignment is None:
            return None
        contract_id = self.assignment.contract_id
        return Contributor(contract_id.username, contract_id.provider)

    def with_assignment(self, assignment: Assignment | None) -> "Task":
        return replace(self, assignment=assignment)


@dataclass(frozen=True)
class Resignation:
    """Immutable record of a contributor giving up a task."""
    task_key: TaskKey
    contributor: Contributor
    timestamp: datetime
    reason: str


@dataclass(frozen=True)
class Wallet:
    """A project's funding source; at most one per project is active."""
    project_id: ProjectId
    type: str
    cash: Decimal
    identifier: str
    active: bool = False

    def with_active(self, active: bool) -> "Wallet":
        return replace(self, active=active)

    def with_cash(self, cash: Decimal) -> "Wallet":
        return replace(self, cash=cash)


@dataclass(frozen=True)
class PaymentMethod:
    """A wallet's means of payment; at most one per wallet is active."""
    project_id: ProjectId
    wallet_type: str
    identifier: str
    active: bool = False

    def with_active(self, active: bool) -> "PaymentMethod":
        return replace(self, active=active)
