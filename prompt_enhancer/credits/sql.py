"""SqlCreditLedger — credit balances in a SQL table via SQLAlchemy's asyncio engine."""
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from prompt_enhancer.credits.ledger import CreditLedger
from prompt_enhancer.credits.models import Base, UserCredits
from prompt_enhancer.errors import LedgerError
from prompt_enhancer.identity.resolver import Identity


class SqlCreditLedger(CreditLedger):

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlCreditLedger":
        return cls(create_async_engine(database_url))

    async def init_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    async def get_balance(self, identity: Identity) -> int:
        try:
            async with self._sessions() as session:
                credits = await session.scalar(
                    select(UserCredits.credits).where(UserCredits.id == identity.user_id)
                )
        except SQLAlchemyError as exc:
            raise LedgerError(str(exc)) from exc
        # No ledger row means the user was never granted credits.
        return credits or 0

    async def decrement_one(self, identity: Identity) -> bool:
        statement = (
            update(UserCredits)
            .where(UserCredits.id == identity.user_id, UserCredits.credits > 0)
            .values(credits=UserCredits.credits - 1)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._sessions() as session, session.begin():
                result = await session.execute(statement)
        except SQLAlchemyError as exc:
            raise LedgerError(str(exc)) from exc
        return result.rowcount == 1
