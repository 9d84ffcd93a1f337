import pytest

from rug_roulette.game import SessionRegistry
from rug_roulette.game.errors import InsufficientBalance, NotRegistered


def test_register_uses_starting_balance():
    registry = SessionRegistry(starting_balance=1000)
    session = registry.register("s1", "wallet-a")

    assert session.address == "wallet-a"
    assert session.balance == 1000
    assert "s1" in registry
    assert len(registry) == 1


def test_register_accepts_client_balance():
    registry = SessionRegistry(starting_balance=1000)
    assert registry.register("s1", "wallet-a", 250).balance == 250


def test_register_is_idempotent_per_connection():
    registry = SessionRegistry(starting_balance=1000)
    registry.register("s1", "wallet-a")
    registry.debit("s1", 40)

    session = registry.register("s1", "wallet-b", 5000)

    assert session.address == "wallet-b"
    assert session.balance == 960
    assert len(registry) == 1


def test_get_unknown_session():
    registry = SessionRegistry()
    with pytest.raises(NotRegistered):
        registry.get("missing")


def test_debit_and_credit():
    registry = SessionRegistry(starting_balance=100)
    registry.register("s1", "wallet-a")

    assert registry.debit("s1", 30) == 70
    assert registry.credit("s1", 45) == 115


def test_debit_rejected_without_mutation():
    registry = SessionRegistry(starting_balance=100)
    registry.register("s1", "wallet-a")

    with pytest.raises(InsufficientBalance):
        registry.debit("s1", 100.5)
    assert registry.get("s1").balance == 100


def test_release():
    registry = SessionRegistry()
    registry.register("s1", "wallet-a")

    registry.release("s1")
    registry.release("s1")

    assert "s1" not in registry
    assert len(registry) == 0
