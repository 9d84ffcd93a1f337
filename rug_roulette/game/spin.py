import random
from dataclasses import dataclass

from .errors import InsufficientBalance


@dataclass(frozen=True)
class SpinOutcome:
    won: bool
    amount: float
    balance: float


def win_chance(multiplier: float) -> float:
    """Win probability in percent for a payout multiplier."""
    return 100 / multiplier


def evaluate_spin(
    balance: float, bet_amount: float, multiplier: float, rng: random.Random
) -> SpinOutcome:
    """Resolve one quick spin against `balance`.

    The bet is always debited; a win credits `bet_amount * multiplier`.
    `amount` is the signed change reported to the player.
    """
    if bet_amount > balance:
        raise InsufficientBalance()

    won = rng.random() * 100 < win_chance(multiplier)
    balance -= bet_amount
    if won:
        payout = bet_amount * multiplier
        return SpinOutcome(won=True, amount=payout, balance=balance + payout)
    return SpinOutcome(won=False, amount=-bet_amount, balance=balance)
