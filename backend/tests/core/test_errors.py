"""Error Hierarchy — verifies codes, categories and the error envelope."""

from contractdesk.core.errors import (
    CannotRemoveActiveResourceError, ConflictError, ContractDeskError,
    ContributorNotFoundError, DatabaseError, ErrorCategory, ErrorContext,
    ExhaustedError, InvariantViolationError, ProjectNotFoundError,
    ResourceNotFoundError, UnsupportedTypeError,
)


def test_all_errors_share_one_base():
    for error in (
        ExhaustedError(),
        InvariantViolationError("x"),
        ProjectNotFoundError("a/b", "github"),
        ConflictError("dup"),
        DatabaseError("down", "execute"),
    ):
        assert isinstance(error, ContractDeskError)


def test_not_found_errors_are_resource_not_found():
    project = ProjectNotFoundError("a/b", "github")
    contributor = ContributorNotFoundError("alice", "github")
    assert isinstance(project, ResourceNotFoundError)
    assert project.code == "PROJECT_NOT_FOUND"
    assert contributor.code == "CONTRIBUTOR_NOT_FOUND"
    assert project.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_exhausted_has_default_message():
    assert ExhaustedError().message == "No more records"
    assert ExhaustedError().category is ErrorCategory.ITERATION


def test_to_dict_envelope():
    error = InvariantViolationError(
        "bad count", ErrorContext(operation="assign task", debug_info={"affected": 0}),
    )
    envelope = error.to_dict()["error"]
    assert envelope["code"] == "INVARIANT_VIOLATION"
    assert envelope["category"] == "invariant"
    assert envelope["severity"] == "critical"
    assert envelope["context"]["operation"] == "assign task"
    assert envelope["context"]["debug_info"] == {"affected": 0}


def test_messages_name_the_resource():
    assert "FAKE" in str(CannotRemoveActiveResourceError("Wallet", "FAKE"))
    assert "PAYPAL" in str(UnsupportedTypeError("wallets", "PAYPAL", ["FAKE"]))
