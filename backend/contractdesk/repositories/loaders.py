"""Aggregate Loaders — turn flat ORM rows into immutable domain snapshots.

Invariants:
    - Loaders are pure: no session access, no lazy loads
    - Datetimes come back timezone-aware (UTC), whatever the backend returns
    - A task row with a partially-set assignment raises InvariantViolationError
"""

from datetime import datetime, timezone
from decimal import Decimal

from contractdesk.core.domain_types import ContractId, ProjectId, TaskKey
from contractdesk.core.errors import ErrorContext, InvariantViolationError
from contractdesk.core.snapshots import (
    Assignment, Contract, Contributor, PaymentMethod, Project, Resignation,
    Task, Wallet,
)
from contractdesk.models import (
    ContractRow, ContributorRow, PaymentMethodRow, ProjectRow,
    ResignationRow, TaskRow, WalletRow,
)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on the way back; treat naive values as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def load_project(row: ProjectRow) -> Project:
    return Project(
        repo_full_name=row.repo_full_name,
        provider=row.provider,
        owner_username=row.owner_username,
        webhook_token=row.webhook_token,
    )


def load_contributor(row: ContributorRow) -> Contributor:
    return Contributor(username=row.username, provider=row.provider)


def load_contract(row: ContractRow) -> Contract:
    return Contract(
        id=ContractId(
            repo_full_name=row.repo_full_name,
            username=row.username,
            provider=row.provider,
            role=row.role,
        ),
        hourly_rate=Decimal(row.hourly_rate),
        marked_for_removal=as_utc(row.marked_for_removal),
    )


def load_task(row: TaskRow) -> Task:
    project_id = ProjectId(row.repo_full_name, row.provider)
    assignment_fields = (row.username, row.assigned, row.deadline)
    if all(f is None for f in assignment_fields):
        assignment = None
    elif all(f is not None for f in assignment_fields):
        assignment = Assignment(
            contract_id=ContractId(
                repo_full_name=row.repo_full_name,
                username=row.username,
                provider=row.provider,
                role=row.role,
            ),
            assigned_at=as_utc(row.assigned),
            deadline=as_utc(row.deadline),
        )
    else:
        raise InvariantViolationError(
            f"Task #{row.issue_id} of {project_id} has a partial assignment.",
            ErrorContext(resource="task", operation="load_task"),
        )
    return Task(
        project_id=project_id,
        issue_id=row.issue_id,
        role=row.role,
        estimation_minutes=row.estimation_minutes,
        is_pull_request=row.is_pull_request,
        assignment=assignment,
    )


def load_resignation(row: ResignationRow) -> Resignation:
    return Resignation(
        task_key=TaskKey(
            ProjectId(row.repo_full_name, row.provider),
            row.issue_id,
            row.is_pull_request,
        ),
        contributor=Contributor(row.username, row.provider),
        timestamp=as_utc(row.timestamp),
        reason=row.reason,
    )


def load_wallet(row: WalletRow) -> Wallet:
    return Wallet(
        project_id=ProjectId(row.repo_full_name, row.provider),
        type=row.type,
        cash=Decimal(row.cash),
        identifier=row.identifier,
        active=bool(row.active),
    )


def load_payment_method(row: PaymentMethodRow) -> PaymentMethod:
    return PaymentMethod(
        project_id=ProjectId(row.repo_full_name, row.provider),
        wallet_type=row.type,
        identifier=row.identifier,
        active=bool(row.active),
    )
