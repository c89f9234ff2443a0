"""TDD: SqlCreditLedger tests written FIRST"""
import asyncio

import pytest
from sqlalchemy import insert, select
from sqlalchemy.exc import OperationalError
from unittest.mock import patch

from prompt_enhancer.credits.ledger import CreditLedger
from prompt_enhancer.credits.models import UserCredits
from prompt_enhancer.credits.sql import SqlCreditLedger
from prompt_enhancer.errors import LedgerError
from prompt_enhancer.identity.resolver import Identity

ALICE = Identity(user_id="alice")


@pytest.fixture
async def ledger(tmp_path):
    ledger = SqlCreditLedger.from_url(f"sqlite+aiosqlite:///{tmp_path / 'credits.db'}")
    await ledger.init_schema()
    yield ledger
    await ledger.dispose()


async def seed(ledger: SqlCreditLedger, user_id: str, credits: int) -> None:
    async with ledger._engine.begin() as conn:
        await conn.execute(insert(UserCredits).values(id=user_id, credits=credits))


async def stored_credits(ledger: SqlCreditLedger, user_id: str) -> int:
    async with ledger._engine.connect() as conn:
        return await conn.scalar(select(UserCredits.credits).where(UserCredits.id == user_id))


def test_sql_ledger_implements_abc():
    assert issubclass(SqlCreditLedger, CreditLedger)


async def test_get_balance_reads_stored_credits(ledger):
    await seed(ledger, "alice", 5)

    assert await ledger.get_balance(ALICE) == 5


async def test_get_balance_unknown_user_is_zero(ledger):
    assert await ledger.get_balance(Identity(user_id="nobody")) == 0


async def test_decrement_one_spends_exactly_one_credit(ledger):
    await seed(ledger, "alice", 3)

    assert await ledger.decrement_one(ALICE) is True
    assert await stored_credits(ledger, "alice") == 2


async def test_decrement_one_never_goes_below_zero(ledger):
    await seed(ledger, "alice", 0)

    assert await ledger.decrement_one(ALICE) is False
    assert await stored_credits(ledger, "alice") == 0


async def test_decrement_one_unknown_user_fails(ledger):
    assert await ledger.decrement_one(Identity(user_id="nobody")) is False


async def test_decrement_one_only_touches_that_user(ledger):
    await seed(ledger, "alice", 2)
    await seed(ledger, "bob", 7)

    await ledger.decrement_one(ALICE)

    assert await stored_credits(ledger, "bob") == 7


async def test_concurrent_decrements_do_not_double_spend(ledger):
    await seed(ledger, "alice", 2)

    results = await asyncio.gather(*(ledger.decrement_one(ALICE) for _ in range(5)))

    assert sorted(results) == [False, False, False, True, True]
    assert await stored_credits(ledger, "alice") == 0


async def test_get_balance_wraps_store_error(ledger):
    error = OperationalError("SELECT", {}, Exception("database is locked"))
    with patch("sqlalchemy.ext.asyncio.AsyncSession.scalar", side_effect=error):
        with pytest.raises(LedgerError):
            await ledger.get_balance(ALICE)


async def test_decrement_one_wraps_store_error(ledger):
    error = OperationalError("UPDATE", {}, Exception("database is locked"))
    with patch("sqlalchemy.ext.asyncio.AsyncSession.execute", side_effect=error):
        with pytest.raises(LedgerError):
            await ledger.decrement_one(ALICE)
