"""Contracts — verifies the add preconditions, conflict policy and removal marks."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from contractdesk.core.domain_types import ContractId
from contractdesk.core.errors import (
    ConflictError, ContributorNotFoundError, InvariantViolationError,
    ProjectNotFoundError,
)
from contractdesk.core.snapshots import Contract

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_add_and_find(storage, dev_contract):
    assert storage.contracts.find_by_id(dev_contract.id) == dev_contract
    assert dev_contract.hourly_rate == Decimal("25.00")


def test_add_twice_conflicts(storage, project, dev_contract):
    with pytest.raises(ConflictError):
        storage.contracts.add(
            project.repo_full_name, "alice", "github", Decimal("99"), "DEV",
        )
    assert storage.contracts.find_by_id(dev_contract.id).hourly_rate == Decimal("25.00")


def test_same_contributor_other_role(storage, project, alice, dev_contract):
    storage.contracts.add(project.repo_full_name, "alice", "github", Decimal("30"), "REV")
    assert [c.role for c in storage.contracts.of_contributor(alice)] == ["DEV", "REV"]


def test_add_needs_project(storage, alice):
    with pytest.raises(ProjectNotFoundError):
        storage.contracts.add("nobody/nothing", "alice", "github", Decimal("1"), "DEV")


def test_add_needs_contributor(storage, project):
    with pytest.raises(ContributorNotFoundError):
        storage.contracts.add(project.repo_full_name, "zed", "github", Decimal("1"), "DEV")


def test_find_missing_is_none(storage, project):
    assert storage.contracts.find_by_id(
        ContractId(project.repo_full_name, "zed", "github", "DEV"),
    ) is None


def test_of_project(storage, project, other_project, alice, bob, dev_contract):
    storage.contracts.add(project.repo_full_name, "bob", "github", Decimal("1"), "QA")
    storage.contracts.add(other_project.repo_full_name, "bob", "github", Decimal("1"), "QA")
    assert {c.id.username for c in storage.contracts.of_project(project.id)} == {
        "alice", "bob",
    }


def test_mark_for_removal_and_restore(storage, dev_contract):
    marked = storage.contracts.mark_for_removal(dev_contract, NOW)
    assert marked.marked_for_removal == NOW
    assert storage.contracts.find_by_id(dev_contract.id).marked_for_removal == NOW

    restored = storage.contracts.restore(marked)
    assert restored.marked_for_removal is None
    assert storage.contracts.find_by_id(dev_contract.id).marked_for_removal is None


def test_mark_unknown_contract_fails(storage, project):
    ghost = Contract(ContractId(project.repo_full_name, "zed", "github", "DEV"), Decimal("1"))
    with pytest.raises(InvariantViolationError):
        storage.contracts.mark_for_removal(ghost, NOW)


def test_iter_all(storage, project, bob, dev_contract):
    storage.contracts.add(project.repo_full_name, "bob", "github", Decimal("1"), "DEV")
    storage.contracts.add(project.repo_full_name, "bob", "github", Decimal("1"), "QA")
    assert len(list(storage.contracts.iter_all())) == 3
