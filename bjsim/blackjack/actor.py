"""
This module provides the `Player` and `Dealer` classes for a blackjack table.

A `Player` couples a purse with a playing strategy and a bet sizing policy,
plays its hands through the table it is seated at, and keeps its own
scoreboard. The `Dealer` is a player that never antes and follows the house
rule of hitting below 17.

Player kinds used by the simulator are registered by name in
`PlayerRegistry`, so rosters can be built from the command line.

Exceptions:
    - `TableLimitError`: Raised when a player's ante falls outside the table limits.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from bjsim.blackjack.action import Action
from bjsim.blackjack.betting import (
    BettingPolicy,
    CountingBetting,
    FlatBetting,
    PositiveProgressionBetting,
)
from bjsim.blackjack.hand import BlackjackHand, InvalidActionError
from bjsim.blackjack.stats import ScorePerHand
from bjsim.blackjack.strategy import (
    BasicStrategy,
    DealerStrategy,
    NoBustStrategy,
    Strategy,
)
from bjsim.common.card import Card
from bjsim.common.chips import ChipStack, InsufficientFundsError


class TableLimitError(Exception):
    """Raised when a bet would fall outside the table limits."""

    pass


@dataclass
class PlayTrack:
    """Running tally of the actions a player has taken."""

    splits: int = 0
    doubles: int = 0
    hits: int = 0
    stands: int = 0
    busts: int = 0


class Player:
    """A player seated at a blackjack table."""

    def __init__(
        self,
        name: str,
        strategy: Strategy,
        betting: Optional[BettingPolicy] = None,
        purse: int = 0,
        kind: Optional[str] = None,
    ):
        self.name = name
        self.kind = kind or self.__class__.__name__
        self.strategy = strategy
        self.betting = betting if betting is not None else FlatBetting()
        self.purse = ChipStack(purse)
        self.hands: List[BlackjackHand] = []
        self.insurance = ChipStack()
        self.score = ScorePerHand()
        self.track = PlayTrack()
        self.table = None

    @property
    def cash(self) -> int:
        return self.purse.value

    def seat(self, table) -> None:
        """
        Sit down at `table`.

        :raises InvalidActionError: if the player is already seated
        """
        if self.table is not None:
            raise InvalidActionError(f"{self.name} is already seated at a table")
        self.table = table
        self.betting.seat(self, table)

    def is_bankrupt(self) -> bool:
        """True once the purse can no longer cover the table minimum."""
        return self.purse.value < self.table.rules.min_bet

    def can_match(self, hand: BlackjackHand) -> bool:
        """Whether the player can put up a second bet equal to `hand`'s."""
        bet = hand.bet.value
        return self.purse.value > bet and self.table.rules.check_bet(bet * 2)

    def request_ante(self) -> Optional[ChipStack]:
        """
        Take this round's ante out of the purse.

        Returns None when the player cannot cover the table minimum or
        decides to sit the round out.

        :raises InsufficientFundsError: if the decided ante exceeds the purse
        :raises TableLimitError: if the decided ante is outside the table limits
        """
        rules = self.table.rules
        if self.purse.value < rules.min_bet:
            return None
        amount = self.betting.decide_ante(self)
        if amount > self.purse.value:
            raise InsufficientFundsError(
                f"{self.name} decided on an ante of {amount} with only {self.purse.value}"
            )
        if amount == 0:
            return None
        if not rules.check_bet(amount):
            raise TableLimitError(
                f"{self.name} decided on an ante of {amount} outside the table limits"
            )
        return self.purse.remove_chips(amount)

    def accept_chips(self, stack: ChipStack) -> None:
        self.purse.add_chips(stack)

    def offer_insurance(self, hand: BlackjackHand) -> Optional[ChipStack]:
        """Return the insurance stake if the player takes insurance, else None."""
        if not self.strategy.decide_insurance(self):
            return None
        stake = hand.bet.value // 2
        if stake == 0 or stake > self.purse.value:
            return None
        return self.purse.remove_chips(stake)

    def play_hand(self, hand: BlackjackHand, up_card: Card) -> None:
        """Act on `hand` until it stands, doubles down, or busts."""
        table = self.table
        while hand.value <= 21 and not hand.doubled_down:
            action = self.strategy.decide_action(self, up_card, hand)
            if action is Action.HIT:
                self.track.hits += 1
                table.hit(hand)
            elif action is Action.STAND:
                self.track.stands += 1
                return
            elif action is Action.DOUBLE:
                self.track.doubles += 1
                table.double_down(hand, self.purse.remove_chips(hand.bet.value))
            elif action is Action.SPLIT:
                self.track.splits += 1
                table.split(hand, self, self.purse.remove_chips(hand.bet.value))
            else:
                raise InvalidActionError(f"{self.name} chose an unknown action {action}")
        if hand.value > 21:
            self.track.busts += 1

    def scoreboard(self) -> str:
        return f"[{self.name}]: Cash={self.cash}\n  {self.score.scoreboard()}"

    def csv_header(self) -> List[str]:
        return [f"{self.name} {column}" for column in ["Cash"] + self.score.csv_header()]

    def csv_row(self) -> List[int]:
        return [self.cash] + self.score.csv_row()

    def __repr__(self) -> str:
        return f"Player({self.name!r}, kind={self.kind!r}, cash={self.cash})"


class Dealer(Player):
    """The house. Never antes and plays by the fixed dealer rule."""

    def __init__(self, name: str = "Dealer"):
        super().__init__(name, DealerStrategy(), kind="dealer")

    @property
    def hand(self) -> BlackjackHand:
        return self.hands[0]

    def request_ante(self) -> Optional[ChipStack]:
        return None


class PlayerRegistry:
    """Registry of named player kinds."""

    _factories: Dict[str, Callable[[], tuple]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[[], tuple]) -> None:
        """Register a factory returning ``(strategy, betting policy)`` for a kind."""
        cls._factories[name.lower()] = factory

    @classmethod
    def get(cls, name: str) -> Callable[[], tuple]:
        factory = cls._factories.get(name.lower())
        if not factory:
            raise ValueError(f"Unknown player kind: {name}")
        return factory

    @classmethod
    def list_kinds(cls) -> List[str]:
        return list(cls._factories.keys())

    @classmethod
    def create(cls, kind: str, name: Optional[str] = None, purse: int = 0) -> Player:
        strategy, betting = cls.get(kind)()
        return Player(name or kind, strategy, betting, purse, kind=kind.lower())


PlayerRegistry.register("dealer", lambda: (DealerStrategy(), FlatBetting()))
PlayerRegistry.register("nobust", lambda: (NoBustStrategy(), FlatBetting()))
PlayerRegistry.register("darwin", lambda: (BasicStrategy.from_name("darwin"), FlatBetting()))
PlayerRegistry.register("wiki", lambda: (BasicStrategy.from_name("wiki"), FlatBetting()))
PlayerRegistry.register(
    "darwin_cc", lambda: (BasicStrategy.from_name("darwin"), CountingBetting())
)
PlayerRegistry.register(
    "positive_prog",
    lambda: (BasicStrategy.from_name("darwin"), PositiveProgressionBetting()),
)
