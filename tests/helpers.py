"""Test doubles and small store helpers shared across the suite."""

from typing import Type

import numpy as np
from sqlalchemy.ext.asyncio import async_sessionmaker

from swarm_ledger.authentication.keys import canonical_message, sign_request
from swarm_ledger.crud import CreateData, ReadData, RecordT
from swarm_ledger.models.schema_models import AccountRecord


class ScriptedRng:
    """Generator stand-in returning queued draws in order.

    Scalar ``integers`` draws pop one value, ``multinomial`` draws pop one
    sequence of counts. Multinomial calls are recorded as ``(n, pvals)``.
    """

    def __init__(self, *values):
        self.values = list(values)
        self.multinomial_calls = []

    def integers(self, low, high, size=None):
        return self.values.pop(0)

    def multinomial(self, n, pvals):
        self.multinomial_calls.append((n, tuple(pvals)))
        return np.array(self.values.pop(0))


class ExactOddsRng:
    """Generator stand-in splitting every hatch exactly by its odds."""

    def integers(self, low, high, size=None):
        return low

    def multinomial(self, n, pvals):
        counts = np.rint(n * np.asarray(pvals)).astype(np.int64)
        counts[-1] = n - counts[:-1].sum()
        return counts


async def insert_account(Session: async_sessionmaker, *records: AccountRecord) -> None:
    async with Session() as session:
        async with session.begin():
            for record in records:
                await CreateData.add_account(record, session)


async def read_account(Session: async_sessionmaker, record_cls: Type[RecordT], pubkey: str) -> RecordT | None:
    async with Session() as session:
        return await ReadData.read_account(record_cls, pubkey, session)


async def signed_post(client, url: str, private_key, request, signature: str | None = None):
    """POST the canonical body of ``request`` signed by ``private_key``."""
    if signature is None:
        signature = sign_request(private_key, request)
    return await client.post(
        url,
        content=canonical_message(request),
        headers={"content-type": "application/json", "ed25519-signature": signature},
    )
