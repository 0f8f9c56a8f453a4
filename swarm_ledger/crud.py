"""Typed account reads and writes inside a caller-owned session.

None of these helpers commit: the services layer opens the transaction with
``session.begin()`` and owns commit/rollback. Database exceptions propagate
unchanged so the caller can abort and map them.
"""

from typing import List, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from swarm_ledger.models.schema_models import AccountRecord, Hive
from swarm_ledger.models.schemas import TABLES, HiveTable

RecordT = TypeVar("RecordT", bound=AccountRecord)


class ReadData:
    @staticmethod
    async def read_account(
        record_cls: Type[RecordT],
        pubkey: str,
        session: AsyncSession,
        for_update: bool = False,
    ) -> RecordT | None:
        """Read one account record by pubkey

        Args:
            record_cls (Type[RecordT]): Swarm, Hive or SacredHive
            pubkey (str): Owner of the record
            session (AsyncSession): Session of the surrounding transaction
            for_update (bool): Lock the row until the transaction ends

        Returns:
            RecordT | None: The record, None if the pubkey has no such record
        """
        table = TABLES[record_cls.collection]
        stmt = select(table).where(table.pubkey == pubkey)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        row = result.scalars().first()
        if row is None:
            return None
        return record_cls.model_validate(row)

    @staticmethod
    async def read_top_hives(limit: int, session: AsyncSession) -> List[Hive]:
        stmt = select(HiveTable).order_by(HiveTable.eggs.desc()).limit(limit)
        result = await session.execute(stmt)
        return [Hive.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def read_hives_above(eggs: int, limit: int, session: AsyncSession) -> List[Hive]:
        """Hives with more than ``eggs`` eggs, closest first"""
        stmt = (
            select(HiveTable)
            .where(HiveTable.eggs > eggs)
            .order_by(HiveTable.eggs.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [Hive.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def read_hives_at_or_below(eggs: int, limit: int, session: AsyncSession) -> List[Hive]:
        """Non-empty hives with at most ``eggs`` eggs, closest first"""
        stmt = (
            select(HiveTable)
            .where(HiveTable.eggs <= eggs, HiveTable.eggs > 0)
            .order_by(HiveTable.eggs.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [Hive.model_validate(row) for row in result.scalars().all()]


class CreateData:
    @staticmethod
    async def add_account(record: AccountRecord, session: AsyncSession) -> None:
        """Insert a new account record. Flushes so key clashes surface here."""
        table = TABLES[record.collection]
        session.add(table(**record.model_dump()))
        await session.flush()


class UpdateData:
    @staticmethod
    async def replace_account(record: AccountRecord, session: AsyncSession) -> None:
        """Overwrite every resource field of an existing record"""
        table = TABLES[record.collection]
        stmt = (
            update(table)
            .where(table.pubkey == record.pubkey)
            .values(**record.model_dump(exclude={"pubkey"}))
        )
        await session.execute(stmt)
