"""Pure balance rules: stake arithmetic, hatching, yield, airdrop."""

import numpy as np
import pytest

from swarm_ledger.domain import ledger_rules
from swarm_ledger.errors import InsufficientFundsError, ValidationError
from swarm_ledger.models.schema_models import Hive, SacredHive, Swarm
from tests.helpers import ExactOddsRng, ScriptedRng


def make_swarm(**fields) -> Swarm:
    return Swarm.empty("p").model_copy(update=fields)


def totals(*records) -> dict:
    combined = Swarm.empty("p")
    for record in records:
        combined = combined.add(record.as_swarm())
    return combined.model_dump(exclude={"pubkey"})


def test_airdrop_grants_ten_sacred_queens_only():
    swarm, hive, sacred_hive = ledger_rules.airdrop_records("p")
    assert swarm == make_swarm(sacred_queens=10)
    assert hive == Hive.empty("p")
    assert sacred_hive == SacredHive.empty("p")


class TestApplyStake:
    def test_stake_conserves_resources(self):
        swarm = make_swarm(queens=50, guardians=20, eggs=100, berserkers=7)
        hive = Hive(pubkey="p", guardians=1, queens=1, eggs=1)
        request = Hive(pubkey="p", guardians=20, queens=10, eggs=60)

        new_swarm, new_hive = ledger_rules.apply_stake(swarm, hive, request)

        assert new_swarm == make_swarm(queens=40, guardians=0, eggs=40, berserkers=7)
        assert new_hive == Hive(pubkey="p", guardians=21, queens=11, eggs=61)
        assert totals(new_swarm, new_hive) == totals(swarm, hive)

    def test_unstake_is_stake_of_the_negation(self):
        swarm = make_swarm(sacred_queens=0)
        pool = SacredHive(pubkey="p", sacred_queens=200, eggs=100)
        request = SacredHive(pubkey="p", sacred_queens=0, eggs=100)

        new_swarm, new_pool = ledger_rules.apply_stake(swarm, pool, request.negative())

        assert new_swarm == make_swarm(eggs=100)
        assert new_pool == SacredHive(pubkey="p", sacred_queens=200, eggs=0)

    def test_staking_more_than_held(self):
        swarm = make_swarm(sacred_queens=5)
        pool = SacredHive.empty("p")
        with pytest.raises(InsufficientFundsError):
            ledger_rules.apply_stake(swarm, pool, SacredHive(pubkey="p", sacred_queens=6, eggs=0))

    def test_unstaking_more_than_staked(self):
        swarm = make_swarm()
        pool = SacredHive(pubkey="p", sacred_queens=0, eggs=10)
        request = SacredHive(pubkey="p", sacred_queens=0, eggs=11)
        with pytest.raises(InsufficientFundsError):
            ledger_rules.apply_stake(swarm, pool, request.negative())


class TestHatch:
    def test_example_split_of_ten_thousand_eggs(self):
        swarm = ledger_rules.hatch(make_swarm(eggs=10000), 10000, ExactOddsRng())

        assert swarm.eggs == 0
        assert swarm.queens + swarm.guardians + swarm.berserkers == 10000
        assert swarm.queens <= 120
        assert swarm.guardians <= 1100
        assert swarm.berserkers >= 8800

    def test_one_draw_at_one_nine_ninety_percent(self):
        rng = ScriptedRng((1, 2, 2))
        assert ledger_rules.draw_hatch(5, rng) == (1, 2, 2)
        assert rng.multinomial_calls == [(5, (0.01, 0.09, 0.90))]

    def test_huge_hatch_is_drawn_without_per_egg_work(self):
        eggs = 10**15
        queens, guardians, berserkers = ledger_rules.draw_hatch(eggs, np.random.default_rng(3))
        assert queens + guardians + berserkers == eggs
        assert abs(queens / eggs - 0.01) < 0.001

    def test_long_run_distribution(self):
        rng = np.random.default_rng(2024)
        queens, guardians, berserkers = ledger_rules.draw_hatch(200_000, rng)
        assert queens + guardians + berserkers == 200_000
        assert 0.008 < queens / 200_000 < 0.012
        assert 0.085 < guardians / 200_000 < 0.095
        assert 0.895 < berserkers / 200_000 < 0.905

    def test_hatch_keeps_existing_units(self):
        swarm = make_swarm(eggs=5, queens=1, guardians=2, berserkers=3, sacred_queens=4)
        swarm = ledger_rules.hatch(swarm, 5, ScriptedRng((2, 1, 2)))
        assert swarm == make_swarm(eggs=0, queens=3, guardians=3, berserkers=5, sacred_queens=4)

    def test_hatch_zero_is_a_no_op(self):
        swarm = make_swarm(eggs=3)
        assert ledger_rules.hatch(swarm, 0, ScriptedRng()) == swarm

    def test_not_enough_eggs(self):
        with pytest.raises(InsufficientFundsError):
            ledger_rules.hatch(make_swarm(eggs=10000), 10001, ExactOddsRng())

    def test_negative_egg_count(self):
        with pytest.raises(ValidationError):
            ledger_rules.hatch(make_swarm(eggs=10), -5, ExactOddsRng())


def test_lay_eggs_compounds():
    sacred_hive = SacredHive(pubkey="p", sacred_queens=200, eggs=0)
    once = ledger_rules.lay_eggs(sacred_hive)
    twice = ledger_rules.lay_eggs(once)
    assert once.eggs == 20000
    assert twice.eggs == 40000
    assert twice.sacred_queens == 200
