"""
Table rules: betting limits, shoe size, shuffling, and reshuffle penetration.
"""

from typing import Optional

MAX_DECKS = 19231
MAX_SHUFFLES = 32


class RulesError(ValueError):
    """Raised when a rule set is inconsistent."""

    pass


class TableRules:
    def __init__(
        self,
        min_bet: int = 500,
        max_bet: Optional[int] = None,
        num_decks: int = 8,
        initial_shuffle: int = 8,
        subsequent_shuffle: int = 4,
        reshuffle_min: float = 0.10,
        reshuffle_max: float = 0.15,
        blackjack_payout: float = 1.5,
        insurance_payout: int = 2,
    ):
        """
        :param min_bet: smallest accepted bet
        :param max_bet: largest accepted bet, or None for no limit
        :param num_decks: decks in the shoe
        :param initial_shuffle: shuffle passes when the shoe is first filled
        :param subsequent_shuffle: shuffle passes on every reshuffle
        :param reshuffle_min: lower bound of the reshuffle point as a fraction of the shoe
        :param reshuffle_max: upper bound of the reshuffle point as a fraction of the shoe
        :raises RulesError: if any value is out of range
        """
        if min_bet < 1:
            raise RulesError(f"Minimum bet must be at least 1, got {min_bet}")
        if max_bet is not None and max_bet < min_bet:
            raise RulesError(
                f"Maximum bet {max_bet} is below the minimum bet {min_bet}"
            )
        if not 1 <= num_decks <= MAX_DECKS:
            raise RulesError(f"Number of decks must be 1-{MAX_DECKS}, got {num_decks}")
        for name, times in (
            ("initial_shuffle", initial_shuffle),
            ("subsequent_shuffle", subsequent_shuffle),
        ):
            if not 1 <= times <= MAX_SHUFFLES:
                raise RulesError(f"{name} must be 1-{MAX_SHUFFLES}, got {times}")
        if not 0 <= reshuffle_min <= reshuffle_max <= 1:
            raise RulesError(
                "Reshuffle bounds must satisfy 0 <= min <= max <= 1, "
                f"got {reshuffle_min} and {reshuffle_max}"
            )

        self.min_bet = min_bet
        self.max_bet = max_bet
        self.num_decks = num_decks
        self.initial_shuffle = initial_shuffle
        self.subsequent_shuffle = subsequent_shuffle
        self.reshuffle_min = reshuffle_min
        self.reshuffle_max = reshuffle_max
        self.blackjack_payout = blackjack_payout
        self.insurance_payout = insurance_payout

    def check_bet(self, amount: int) -> bool:
        """Whether `amount` lies within the table limits."""
        if amount < self.min_bet:
            return False
        return self.max_bet is None or amount <= self.max_bet

    def to_dict(self) -> dict:
        """Convert rules to a dictionary for serialization."""
        return {
            "min_bet": self.min_bet,
            "max_bet": self.max_bet,
            "num_decks": self.num_decks,
            "initial_shuffle": self.initial_shuffle,
            "subsequent_shuffle": self.subsequent_shuffle,
            "reshuffle_min": self.reshuffle_min,
            "reshuffle_max": self.reshuffle_max,
            "blackjack_payout": self.blackjack_payout,
            "insurance_payout": self.insurance_payout,
        }

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"TableRules({args})"
