"""Hive raid resolution.

Defense per unit is random for every attack: queens defend at 0..9 and
guardians at 9 or 10, one draw of each shared by the whole hive. The attacker
wins only with strictly more berserkers than the defense (ties hold).
"""

from dataclasses import dataclass

import numpy as np

from swarm_ledger.errors import InsufficientFundsError, NotFoundError, ValidationError
from swarm_ledger.models.schema_models import Hive, Swarm

QUEEN_DEFENSE_ROLL = 10
GUARDIAN_BASE_DEFENSE = 9
GUARDIAN_DEFENSE_ROLL = 2


@dataclass(frozen=True)
class AttackOutcome:
    attack_power: int
    defense_power: int
    attacker_wins: bool
    eggs_captured: int


def defense_power(hive: Hive, rng: np.random.Generator) -> int:
    queen_defense = int(rng.integers(0, QUEEN_DEFENSE_ROLL))
    guardian_defense = GUARDIAN_BASE_DEFENSE + int(rng.integers(0, GUARDIAN_DEFENSE_ROLL))
    return hive.queens * queen_defense + hive.guardians * guardian_defense


def resolve_attack(berserkers: int, hive: Hive, rng: np.random.Generator) -> AttackOutcome:
    defense = defense_power(hive, rng)
    wins = berserkers > defense
    return AttackOutcome(
        attack_power=berserkers,
        defense_power=defense,
        attacker_wins=wins,
        eggs_captured=hive.eggs if wins else 0,
    )


def apply_attack(
    swarm: Swarm, hive: Hive, berserkers: int, rng: np.random.Generator
) -> tuple[Swarm, Hive, AttackOutcome]:
    """Spend the attacking berserkers and, on victory, empty the hive into the swarm.

    Raises:
        ValidationError: negative berserker count.
        InsufficientFundsError: the swarm has fewer berserkers than committed.
        NotFoundError: the hive holds no eggs.
    """
    if berserkers < 0:
        raise ValidationError("cannot attack with a negative number of berserkers")
    if swarm.berserkers < berserkers:
        raise InsufficientFundsError(
            f"swarm holds {swarm.berserkers} berserkers, {berserkers} committed"
        )
    swarm = swarm.model_copy(update={"berserkers": swarm.berserkers - berserkers})
    if hive.eggs == 0:
        raise NotFoundError(f"hive {hive.pubkey} has no eggs")

    outcome = resolve_attack(berserkers, hive, rng)
    if outcome.attacker_wins:
        swarm = swarm.model_copy(update={"eggs": swarm.eggs + hive.eggs})
        hive = hive.model_copy(update={"eggs": 0, "queens": 0, "guardians": 0})
    return swarm, hive, outcome
