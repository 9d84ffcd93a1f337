import random

import pytest

from rug_roulette.game.errors import InsufficientBalance
from rug_roulette.game.spin import evaluate_spin, win_chance

from .conftest import FixedRandom


def test_win_chance():
    assert win_chance(5) == 20
    assert win_chance(2) == 50
    assert win_chance(1000) == pytest.approx(0.1)


def test_loss_debits_bet_only():
    outcome = evaluate_spin(100, 10, 5, FixedRandom(0.99))

    assert not outcome.won
    assert outcome.amount == -10
    assert outcome.balance == 90


def test_win_pays_bet_times_multiplier():
    # 0.1 * 100 = 10 < 20
    outcome = evaluate_spin(100, 10, 5, FixedRandom(0.1))

    assert outcome.won
    assert outcome.amount == 50
    assert outcome.balance == 140


def test_boundary_draw_loses():
    # a draw exactly at the threshold is not below it
    assert not evaluate_spin(100, 10, 5, FixedRandom(0.2)).won


def test_bet_above_balance_rejected():
    with pytest.raises(InsufficientBalance):
        evaluate_spin(5, 10, 2, FixedRandom(0.0))


def test_whole_balance_can_be_bet():
    assert evaluate_spin(10, 10, 2, FixedRandom(0.99)).balance == 0


@pytest.mark.parametrize("multiplier", [1.2, 2, 5, 10])
def test_long_run_win_frequency(multiplier):
    rng = random.Random(42)
    spins = 20000
    wins = sum(evaluate_spin(1e9, 1, multiplier, rng).won for _ in range(spins))

    assert wins / spins == pytest.approx(1 / multiplier, abs=0.015)
