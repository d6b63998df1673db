"""Domain Types — identity keys and enums that replace bare tuples and strings.

Invariants:
    - ProjectId is (repo_full_name, provider); every owned row carries both
    - ContractId is (repo_full_name, username, provider, role) — exact-match identity
    - TaskKey is (project, issue_id, is_pull_request)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - Frozen dataclasses for composite keys: hashable, comparable by value
    - str Enums: stored as plain strings in the database and in log extras
"""

from dataclasses import dataclass
from enum import Enum


# ─── Identity Types ──────────────────────────────────────────────

@dataclass(frozen=True)
class ProjectId:
    """Composite key of a project: repository full name at a provider."""
    repo_full_name: str
    provider: str

    def __str__(self) -> str:
        return f"{self.repo_full_name} at {self.provider}"


@dataclass(frozen=True)
class ContractId:
    """Composite key of a contract."""
    repo_full_name: str
    username: str
    provider: str
    role: str

    @property
    def project_id(self) -> ProjectId:
        return ProjectId(self.repo_full_name, self.provider)

    def __str__(self) -> str:
        return (
            f"{self.username}/{self.role} on "
            f"{self.repo_full_name} at {self.provider}"
        )


@dataclass(frozen=True)
class TaskKey:
    """Composite key of a task: an issue (or pull request) of a project."""
    project_id: ProjectId
    issue_id: str
    is_pull_request: bool = False

    def __str__(self) -> str:
        kind = "PR" if self.is_pull_request else "issue"
        return f"{kind} #{self.issue_id} of {self.project_id}"


# ─── Enums ───────────────────────────────────────────────────────

class Provider(str, Enum):
    """Repository hosting providers."""
    GITHUB = "github"
    GITLAB = "gitlab"


class Role(str, Enum):
    """Contract roles a contributor can hold on a project."""
    DEV = "DEV"
    REV = "REV"
    QA = "QA"
    ARCH = "ARCH"
    PO = "PO"


class WalletType(str, Enum):
    """Wallet kinds a project may fund itself with."""
    FAKE = "FAKE"
    STRIPE = "STRIPE"


class TaskState(str, Enum):
    """Task assignment states."""
    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"
