"""Read-only hive rankings. No authentication, no transaction."""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from swarm_ledger.crud import ReadData
from swarm_ledger.errors import StoreError, StoreOperationContext
from swarm_ledger.models.schema_models import Hive

TOP_HIVES_LIMIT = 10
NEIGHBORS_PER_SIDE = 5
# Range of the BigInteger egg column.
EGGS_MIN = -(2**63)
EGGS_MAX = 2**63 - 1


class HiveQuery:
    def __init__(self, Session: async_sessionmaker):
        self.Session: async_sessionmaker = Session

    async def top_hives(self, limit: int = TOP_HIVES_LIMIT) -> List[Hive]:
        """Richest hives first, never more than ten"""
        limit = max(0, min(limit, TOP_HIVES_LIMIT))
        try:
            async with self.Session() as session:
                return await ReadData.read_top_hives(limit, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read top hives: {e}")
            raise StoreError(context=StoreOperationContext("hives.top"), cause=e) from e

    async def neighbor_hives(self, target: int) -> List[Hive]:
        """Up to five hives just above ``target`` eggs and five non-empty ones at or below it

        Returns:
            List[Hive]: Both halves merged, richest first
        """
        target = max(EGGS_MIN, min(target, EGGS_MAX))
        try:
            async with self.Session() as session:
                hives = await ReadData.read_hives_above(target, NEIGHBORS_PER_SIDE, session)
                hives += await ReadData.read_hives_at_or_below(target, NEIGHBORS_PER_SIDE, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read hives around {target} eggs: {e}")
            raise StoreError(
                context=StoreOperationContext("hives.neighbors", str(target)), cause=e
            ) from e
        hives.sort(key=lambda hive: hive.eggs, reverse=True)
        return hives
