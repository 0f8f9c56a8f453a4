"""Balance arithmetic for the ledger operations that do not involve combat.

Rule of thumb:
- OK: arithmetic on records, validation, random draws from an injected generator.
- Not OK: touching DB sessions, FastAPI, global RNG state.

Conservation: stake, unstake and hatch never change the total of a resource
across a player's three records. Only ``airdrop_records`` and ``lay_eggs``
create resources.
"""

import numpy as np

from swarm_ledger.errors import InsufficientFundsError, ValidationError
from swarm_ledger.models.schema_models import AccountRecord, Hive, SacredHive, Swarm

AIRDROP_SACRED_QUEENS = 10
EGGS_PER_SACRED_QUEEN = 100

# Every egg hatches independently into exactly one of (queen, guardian, berserker).
HATCH_ODDS = (0.01, 0.09, 0.90)


def airdrop_records(pubkey: str) -> tuple[Swarm, Hive, SacredHive]:
    swarm = Swarm.empty(pubkey).model_copy(update={"sacred_queens": AIRDROP_SACRED_QUEENS})
    return swarm, Hive.empty(pubkey), SacredHive.empty(pubkey)


def apply_stake(
    swarm: Swarm, pool: AccountRecord, request: AccountRecord
) -> tuple[Swarm, AccountRecord]:
    """Move ``request`` from the swarm into the pool.

    Unstaking is staking the negated request, so this check is also what
    refuses to unstake more than is staked.

    Raises:
        InsufficientFundsError: either side would end up with a negative field.
    """
    new_swarm = swarm.add(request.as_swarm().negative())
    new_pool = pool.add(request)
    if new_swarm.is_negative() or new_pool.is_negative():
        raise InsufficientFundsError(f"not enough tokens to move into {pool.collection}")
    return new_swarm, new_pool


def draw_hatch(egg_count: int, rng: np.random.Generator) -> tuple[int, int, int]:
    """Resolve ``egg_count`` eggs independently into (queens, guardians, berserkers).

    A single multinomial draw; memory is constant in ``egg_count``.
    """
    if egg_count == 0:
        return 0, 0, 0
    queens, guardians, berserkers = (int(n) for n in rng.multinomial(egg_count, HATCH_ODDS))
    return queens, guardians, berserkers


def hatch(swarm: Swarm, egg_count: int, rng: np.random.Generator) -> Swarm:
    """Spend ``egg_count`` eggs and add exactly that many units.

    Raises:
        ValidationError: negative egg count.
        InsufficientFundsError: the swarm holds fewer eggs than requested.
    """
    if egg_count < 0:
        raise ValidationError("cannot hatch a negative number of eggs")
    if swarm.eggs < egg_count:
        raise InsufficientFundsError(f"swarm holds {swarm.eggs} eggs, {egg_count} requested")
    queens, guardians, berserkers = draw_hatch(egg_count, rng)
    return swarm.model_copy(
        update={
            "eggs": swarm.eggs - egg_count,
            "queens": swarm.queens + queens,
            "guardians": swarm.guardians + guardians,
            "berserkers": swarm.berserkers + berserkers,
        }
    )


def lay_eggs(sacred_hive: SacredHive) -> SacredHive:
    """Yield claim: every staked sacred queen lays a fixed batch of eggs."""
    return sacred_hive.model_copy(
        update={"eggs": sacred_hive.eggs + sacred_hive.sacred_queens * EGGS_PER_SACRED_QUEEN}
    )
