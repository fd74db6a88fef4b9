"""
Bet sizing policies.

Each player owns one policy instance. The table calls `seat` once when the
player sits down and `decide_ante` at the start of every round; an ante of 0
sits the round out. Policies that watch the cards subscribe to the table's
events when seated.
"""

from abc import ABC, abstractmethod

from bjsim.blackjack.constants import HI_LO_COUNT
from bjsim.blackjack.decision_logger import decision_logger
from bjsim.events import TableEventType


class BettingPolicy(ABC):
    def __init__(self):
        self.table = None

    def seat(self, player, table) -> None:
        """Bind the policy to the table `player` has joined."""
        self.table = table

    @abstractmethod
    def decide_ante(self, player) -> int:
        pass


class FlatBetting(BettingPolicy):
    """Always bet the table minimum."""

    def decide_ante(self, player) -> int:
        return self.table.rules.min_bet


class CountingBetting(BettingPolicy):
    """
    Size bets by a running Hi-Lo count.

    The betting unit is the table minimum. Each ante follows the count, but
    may not fall below half or rise above double the previous bet, and never
    exceeds a quarter of the table maximum. After a push the previous bet is
    repeated.
    """

    def __init__(self):
        super().__init__()
        self.count = 0
        self.units = 1
        self.increment = 0
        self.pushes_seen = 0

    def seat(self, player, table) -> None:
        super().seat(player, table)
        self.increment = table.rules.min_bet
        self.pushes_seen = player.score.pushed
        table.events.on(TableEventType.CARD_EXPOSED, self.on_card_exposed)
        table.events.on(TableEventType.SHOE_SHUFFLED, self.on_shoe_shuffled)

    def on_card_exposed(self, event) -> None:
        self.count += HI_LO_COUNT[event["card"].value - 1]

    def on_shoe_shuffled(self, event) -> None:
        self.count = 0

    def decide_ante(self, player) -> int:
        rules = self.table.rules
        inc = self.increment
        cash = player.purse.value
        prior = self.units

        if player.score.pushed != self.pushes_seen:
            self.pushes_seen = player.score.pushed
            self.units = min(self.units, cash // inc)
            decision_logger.log_bet(player.name, self.units * inc, "repeat after push")
            return self.units * inc

        units = self.count
        if units < prior // 2:
            units = prior // 2
        if units * inc < rules.min_bet:
            units = rules.min_bet // inc
        if units > prior * 2:
            units = prior * 2
        if rules.max_bet is not None and units * inc > rules.max_bet / 4:
            units = rules.max_bet // (inc * 4)
        if units * inc > cash:
            units = cash // inc

        self.units = units
        decision_logger.log_bet(player.name, units * inc, f"count {self.count}")
        return units * inc


class PositiveProgressionBetting(BettingPolicy):
    """
    Add a unit after every winning round, drop back to one unit otherwise.

    Bets are capped at the table maximum, or five units at a table without one.
    """

    def __init__(self):
        super().__init__()
        self.units = 1
        self.increment = 0
        self.max_bet = 0
        self.wins_seen = 0

    def seat(self, player, table) -> None:
        super().seat(player, table)
        rules = table.rules
        self.increment = rules.min_bet
        self.max_bet = rules.max_bet if rules.max_bet is not None else self.increment * 5
        self.wins_seen = player.score.won

    def decide_ante(self, player) -> int:
        if self.wins_seen < player.score.won:
            self.wins_seen = player.score.won
            if self.units * self.increment < self.max_bet:
                self.units += 1
        else:
            self.units = 1

        bet = min(self.units * self.increment, self.max_bet, player.purse.value)
        decision_logger.log_bet(player.name, bet, f"{self.units} units")
        return bet
