from __future__ import annotations

import pytest

from takeprofit.state.balances import BalanceTable
from takeprofit.state.journal import Journal
from takeprofit.state.receipts import ReceiptTable


def _journal() -> tuple[Journal, BalanceTable, ReceiptTable]:
    journal = Journal()
    balances = BalanceTable()
    receipts = ReceiptTable()
    journal.register(balances)
    journal.register(receipts)
    balances.set("alice", "tokenA", 100)
    return journal, balances, receipts


def test_commit_keeps_changes() -> None:
    journal, balances, receipts = _journal()
    with journal.atomic():
        balances.transfer("alice", "bob", "tokenA", 10)
        receipts.mint("alice", "0xorder", 10)
    assert balances.get("bob", "tokenA") == 10
    assert receipts.balance_of("alice", "0xorder") == 10
    assert not journal.in_transaction


def test_failure_restores_every_store() -> None:
    journal, balances, receipts = _journal()
    with pytest.raises(RuntimeError):
        with journal.atomic():
            balances.transfer("alice", "bob", "tokenA", 10)
            receipts.mint("alice", "0xorder", 10)
            raise RuntimeError("abort")
    assert balances.get("alice", "tokenA") == 100
    assert balances.get("bob", "tokenA") == 0
    assert receipts.get_all_balances() == {}


def test_nested_failure_rolls_back_outer_work() -> None:
    journal, balances, _ = _journal()
    with pytest.raises(ValueError):
        with journal.atomic():
            balances.transfer("alice", "bob", "tokenA", 10)
            with journal.atomic():
                assert journal.in_transaction
                balances.transfer("alice", "bob", "tokenA", 500)
    assert balances.get("alice", "tokenA") == 100
    assert not journal.in_transaction


def test_inner_failure_caught_by_outer_keeps_inner_changes() -> None:
    # Only the outermost frame snapshots; callers that swallow an inner error
    # keep whatever the inner frame wrote before raising.
    journal, balances, _ = _journal()
    with journal.atomic():
        try:
            with journal.atomic():
                balances.transfer("alice", "bob", "tokenA", 10)
                raise KeyError("inner")
        except KeyError:
            pass
    assert balances.get("bob", "tokenA") == 10


def test_register_is_idempotent_and_closed_during_transaction() -> None:
    journal, balances, _ = _journal()
    journal.register(balances)
    with journal.atomic():
        with pytest.raises(RuntimeError):
            journal.register(BalanceTable())
