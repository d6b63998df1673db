"""Payment Methods — verifies exclusive activation per wallet."""

from decimal import Decimal

import pytest

from contractdesk.core.errors import (
    CannotRemoveActiveResourceError, ConflictError, ResourceNotFoundError,
)
from contractdesk.core.snapshots import Wallet


@pytest.fixture
def wallet(storage, project):
    return storage.wallets.register(project, "STRIPE", Decimal("0"), "acct_1")


@pytest.fixture
def other_wallet(storage, project):
    return storage.wallets.register(project, "FAKE", Decimal("0"), "fake")


def test_new_method_is_inactive(storage, wallet):
    method = storage.payment_methods.register(wallet, "card-1")
    assert not method.active
    assert storage.payment_methods.of_wallet(wallet) == [method]


def test_method_needs_existing_wallet(storage, project):
    ghost = Wallet(project.id, "FAKE", Decimal("0"), "none")
    with pytest.raises(ResourceNotFoundError):
        storage.payment_methods.register(ghost, "card-1")


def test_duplicate_method_conflicts(storage, wallet):
    storage.payment_methods.register(wallet, "card-1")
    with pytest.raises(ConflictError):
        storage.payment_methods.register(wallet, "card-1")


def test_activate_switches_active_method(storage, wallet):
    first = storage.payment_methods.register(wallet, "card-1")
    second = storage.payment_methods.register(wallet, "card-2")

    storage.payment_methods.activate(first)
    storage.payment_methods.activate(second)

    assert storage.payment_methods.active_of(wallet) == second.with_active(True)
    active = [m for m in storage.payment_methods.of_wallet(wallet) if m.active]
    assert len(active) == 1


def test_activation_is_scoped_to_the_wallet(storage, wallet, other_wallet):
    mine = storage.payment_methods.register(wallet, "card-1")
    theirs = storage.payment_methods.register(other_wallet, "card-1")

    storage.payment_methods.activate(theirs)
    storage.payment_methods.activate(mine)

    assert storage.payment_methods.active_of(other_wallet) == theirs.with_active(True)
    assert storage.payment_methods.active_of(wallet) == mine.with_active(True)


def test_remove_active_method_fails_until_deactivated(storage, wallet):
    method = storage.payment_methods.activate(
        storage.payment_methods.register(wallet, "card-1"),
    )
    with pytest.raises(CannotRemoveActiveResourceError):
        storage.payment_methods.remove(method)

    storage.payment_methods.deactivate(method)
    storage.payment_methods.remove(method)
    assert storage.payment_methods.of_wallet(wallet) == []


def test_deactivate_leaves_zero_active(storage, wallet):
    method = storage.payment_methods.activate(
        storage.payment_methods.register(wallet, "card-1"),
    )
    storage.payment_methods.deactivate(method)
    assert storage.payment_methods.active_of(wallet) is None


def test_activate_returns_stored_method(storage, wallet):
    method = storage.payment_methods.register(wallet, "card-1")
    storage.payment_methods.activate(method)

    reloaded = storage.payment_methods.activate(method.with_active(False))

    assert reloaded == method.with_active(True)
    assert storage.payment_methods.deactivate(reloaded) == method
