"""DB service layer for ledger mutations.

- Routers never touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries: one ``session.begin()`` per
  mutation, every read locks its row (on SQLite the ``WRITE_LOCK`` option
  takes the store write lock instead). Writes happen after the domain layer
  has validated the new state.
- Plain reads run without the write lock and never wait on a mutation.
- Raising inside the transaction rolls it back, so a failed operation never
  leaves partial writes.
- Use CRUD helpers that do NOT commit inside session.begin().
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Type

import numpy as np
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from swarm_ledger.authentication.keys import decode_pubkey
from swarm_ledger.create_sqlite_engine import WRITE_LOCK
from swarm_ledger.crud import CreateData, ReadData, RecordT, UpdateData
from swarm_ledger.domain import combat, ledger_rules
from swarm_ledger.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    StoreError,
    StoreOperationContext,
)
from swarm_ledger.models.dc_models import Attack, AttackResult, HatchRequest
from swarm_ledger.models.schema_models import STAKEABLE, AccountRecord, Hive, SacredHive, Swarm


async def _read_or_raise(
    record_cls: Type[RecordT],
    pubkey: str,
    session: AsyncSession,
    missing: Exception,
) -> RecordT:
    record = await ReadData.read_account(record_cls, pubkey, session, for_update=True)
    if record is None:
        raise missing
    return record


def _no_account(pubkey: str) -> InsufficientFundsError:
    return InsufficientFundsError(f"no account for {pubkey}")


class LedgerService:
    """Money-movement operations over one authoritative store.

    Args:
        Session (async_sessionmaker): Factory for sessions bound to the store
        rng (np.random.Generator | None): Source of hatch and combat draws
    """

    def __init__(self, Session: async_sessionmaker, rng: np.random.Generator | None = None):
        self.Session: async_sessionmaker = Session
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @asynccontextmanager
    async def _write_transaction(self) -> AsyncIterator[AsyncSession]:
        """One mutation: a session inside a transaction that holds the write lock from its first read"""
        async with self.Session() as session:
            async with session.begin():
                await session.connection(execution_options={WRITE_LOCK: True})
                yield session

    async def read_account(self, record_cls: Type[RecordT], pubkey: str) -> RecordT:
        """Read one record outside any mutation (point-in-time snapshot)

        Raises:
            ValidationError: Malformed pubkey
            NotFoundError: No such record
            StoreError: Storage failure
        """
        decode_pubkey(pubkey)
        try:
            async with self.Session() as session:
                record = await ReadData.read_account(record_cls, pubkey, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read {record_cls.collection} for {pubkey}: {e}")
            raise StoreError(
                context=StoreOperationContext("ledger.read_account", record_cls.collection),
                cause=e,
            ) from e
        if record is None:
            raise NotFoundError(f"no {record_cls.collection} record for {pubkey}")
        return record

    async def airdrop(self, pubkey: str) -> Swarm:
        """Create the three records of a new player, once per pubkey

        Raises:
            ValidationError: Malformed pubkey
            ConflictError: The pubkey already owns a swarm
            StoreError: Storage failure
        """
        decode_pubkey(pubkey)
        swarm, hive, sacred_hive = ledger_rules.airdrop_records(pubkey)
        try:
            async with self._write_transaction() as session:
                existing = await ReadData.read_account(Swarm, pubkey, session, for_update=True)
                if existing is not None:
                    raise ConflictError(f"{pubkey} already received its airdrop")
                await CreateData.add_account(swarm, session)
                await CreateData.add_account(hive, session)
                await CreateData.add_account(sacred_hive, session)
        except IntegrityError as e:
            # Lost a race against a concurrent airdrop for the same pubkey.
            logging.warning(f"Airdrop for {pubkey} collided with an existing account: {e}")
            raise ConflictError(f"{pubkey} already received its airdrop") from e
        except SQLAlchemyError as e:
            raise self._store_error("ledger.airdrop", pubkey, e) from e
        logging.info(f"Airdropped {swarm.sacred_queens} sacred queens to {pubkey}")
        return swarm

    async def stake(self, request: AccountRecord) -> None:
        """Move the amounts in ``request`` from the owner's swarm into the pool of its kind

        Args:
            request (AccountRecord): Hive or SacredHive carrying the amounts to stake

        Raises:
            ValidationError: Malformed pubkey
            InsufficientFundsError: Missing account, or either side would go negative
            StoreError: Storage failure
        """
        if not isinstance(request, STAKEABLE):
            raise TypeError(f"cannot stake into {type(request).__name__}")
        pubkey = request.owner_pubkey()
        decode_pubkey(pubkey)
        try:
            async with self._write_transaction() as session:
                swarm = await _read_or_raise(Swarm, pubkey, session, _no_account(pubkey))
                pool = await _read_or_raise(type(request), pubkey, session, _no_account(pubkey))
                swarm, pool = ledger_rules.apply_stake(swarm, pool, request)
                await UpdateData.replace_account(pool, session)
                await UpdateData.replace_account(swarm, session)
        except SQLAlchemyError as e:
            raise self._store_error("ledger.stake", pubkey, e) from e
        logging.info(f"Staked into {request.collection} for {pubkey}: {request.model_dump(exclude={'pubkey'})}")

    async def unstake(self, request: AccountRecord) -> None:
        """Move the amounts in ``request`` from the pool back into the swarm"""
        await self.stake(request.negative())

    async def hatch(self, request: HatchRequest) -> Swarm:
        """Turn eggs into queens, guardians and berserkers

        Raises:
            ValidationError: Malformed pubkey or negative egg count
            InsufficientFundsError: Missing swarm or not enough eggs
            StoreError: Storage failure
        """
        pubkey = request.owner_pubkey()
        decode_pubkey(pubkey)
        try:
            async with self._write_transaction() as session:
                swarm = await _read_or_raise(Swarm, pubkey, session, _no_account(pubkey))
                swarm = ledger_rules.hatch(swarm, request.eggs, self.rng)
                await UpdateData.replace_account(swarm, session)
        except SQLAlchemyError as e:
            raise self._store_error("ledger.hatch", pubkey, e) from e
        logging.info(f"Hatched {request.eggs} eggs for {pubkey}")
        return swarm

    async def trigger(self, pubkey: str) -> SacredHive:
        """Credit the sacred hive with the eggs its sacred queens lay

        Raises:
            ValidationError: Malformed pubkey
            NotFoundError: No sacred hive for the pubkey
            StoreError: Storage failure
        """
        decode_pubkey(pubkey)
        try:
            async with self._write_transaction() as session:
                sacred_hive = await _read_or_raise(
                    SacredHive,
                    pubkey,
                    session,
                    NotFoundError(f"no sacred hive for {pubkey}"),
                )
                sacred_hive = ledger_rules.lay_eggs(sacred_hive)
                await UpdateData.replace_account(sacred_hive, session)
        except SQLAlchemyError as e:
            raise self._store_error("ledger.trigger", pubkey, e) from e
        logging.info(f"Sacred hive of {pubkey} now holds {sacred_hive.eggs} eggs")
        return sacred_hive

    async def attack(self, request: Attack) -> AttackResult:
        """Raid another player's hive

        The committed berserkers are spent whether the raid is won or lost.

        Raises:
            ValidationError: Malformed pubkey or negative berserker count
            InsufficientFundsError: Missing swarm or hive, or not enough berserkers
            NotFoundError: The hive holds no eggs
            StoreError: Storage failure
        """
        decode_pubkey(request.swarm_pubkey)
        decode_pubkey(request.hive_pubkey)
        try:
            async with self._write_transaction() as session:
                swarm = await _read_or_raise(
                    Swarm, request.swarm_pubkey, session, _no_account(request.swarm_pubkey)
                )
                hive = await _read_or_raise(
                    Hive, request.hive_pubkey, session, _no_account(request.hive_pubkey)
                )
                swarm, hive, outcome = combat.apply_attack(
                    swarm, hive, request.berserkers, self.rng
                )
                await UpdateData.replace_account(hive, session)
                await UpdateData.replace_account(swarm, session)
        except SQLAlchemyError as e:
            raise self._store_error("ledger.attack", request.swarm_pubkey, e) from e
        logging.info(
            f"{request.swarm_pubkey} attacked {request.hive_pubkey} with {outcome.attack_power} "
            f"berserkers against {outcome.defense_power}: "
            f"{'won ' + str(outcome.eggs_captured) + ' eggs' if outcome.attacker_wins else 'lost'}"
        )
        return AttackResult(attacker_wins=outcome.attacker_wins, eggs_captured=outcome.eggs_captured)

    @staticmethod
    def _store_error(operation: str, pubkey: str, cause: Exception) -> StoreError:
        logging.error(f"Failed {operation} for {pubkey}: {cause}")
        return StoreError(context=StoreOperationContext(operation, pubkey), cause=cause)
