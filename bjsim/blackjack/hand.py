"""
BlackjackHand: cards, the bet riding on them, and the pre-play snapshot.

The hand value is recomputed from scratch after every change. The first time
the hand holds exactly two cards its value and softness are frozen into
`pre_play`; statistics are keyed by that snapshot rather than by the final
value, so a split 8 that ends on 18 is still scored as a hard 16.
"""

from dataclasses import dataclass
from typing import List, Optional

from bjsim.common.card import Card
from bjsim.common.chips import ChipStack
from bjsim.common.hand import Hand


class InvalidActionError(Exception):
    """Raised when an action is not legal for the hand it is applied to."""

    pass


@dataclass(frozen=True)
class PrePlay:
    """Value and softness of a hand as it was first dealt."""

    value: int
    is_soft: bool


class BlackjackHand(Hand):
    """A hand in the game of Blackjack."""

    def __init__(
        self,
        bet: Optional[ChipStack] = None,
        pre_play: Optional[PrePlay] = None,
        from_split: bool = False,
    ):
        super().__init__()
        self.bet = bet if bet is not None else ChipStack()
        self.pre_play = pre_play
        self.from_split = from_split
        self._doubled_down = False
        self._value = 0
        self._is_soft = False

    def _recompute(self) -> None:
        value = 0
        aces = 0
        for card in self._cards:
            value += card.value
            if card.is_ace:
                aces += 1
        soft = False
        while value < 12 and aces > 0:
            soft = True
            aces -= 1
            value += 10
        self._value = value
        self._is_soft = soft
        if len(self._cards) == 2 and self.pre_play is None:
            self.pre_play = PrePlay(value, soft)

    def add_card(self, card: Card) -> None:
        """Adds a dealt card without any legality checks."""
        super().add_card(card)
        self._recompute()

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_soft(self) -> bool:
        return self._is_soft

    @property
    def doubled_down(self) -> bool:
        return self._doubled_down

    @property
    def is_busted(self) -> bool:
        return self._value > 21

    @property
    def is_splittable(self) -> bool:
        """Two cards of equal blackjack value; a King and a Ten qualify."""
        return len(self._cards) == 2 and self._cards[0].value == self._cards[1].value

    @property
    def is_natural(self) -> bool:
        """A two-card 21 as dealt. Hands created by a split never count."""
        return len(self._cards) == 2 and self._value == 21 and not self.from_split

    @property
    def value_pre_play(self) -> Optional[int]:
        return self.pre_play.value if self.pre_play else None

    @property
    def is_soft_pre_play(self) -> Optional[bool]:
        return self.pre_play.is_soft if self.pre_play else None

    def hit(self, card: Card) -> None:
        """
        Take one more card.

        :raises InvalidActionError: if the hand is already over 21 or has been doubled down
        """
        if self._value > 21:
            raise InvalidActionError(f"Cannot hit a busted hand ({self._value})")
        if self._doubled_down:
            raise InvalidActionError("Cannot hit a hand that has doubled down")
        self.add_card(card)

    def double_down(self, card: Card, bet: ChipStack) -> None:
        """
        Match the bet, take exactly one card, and finish the hand.

        :param card: the single card the hand receives
        :param bet: chips equal to the current bet
        :raises InvalidActionError: if `bet` differs from the current bet, or
            the hand is busted or already doubled
        """
        if bet.value != self.bet.value:
            raise InvalidActionError(
                f"Double down needs {self.bet.value} chips, got {bet.value}"
            )
        if self._value > 21:
            raise InvalidActionError(f"Cannot double a busted hand ({self._value})")
        if self._doubled_down:
            raise InvalidActionError("Cannot double a hand twice")
        self.bet.add_chips(bet)
        self.hit(card)
        self._doubled_down = True

    def split(self, new_bet: ChipStack) -> "BlackjackHand":
        """
        Move the second card into a new hand carrying `new_bet`.

        Both hands keep this hand's pre-play snapshot.

        :raises InvalidActionError: if the hand is not a splittable pair
        """
        if not self.is_splittable:
            raise InvalidActionError(f"Cannot split {self}")
        card = self._cards.pop()
        self.from_split = True
        self._recompute()
        new_hand = BlackjackHand(bet=new_bet, pre_play=self.pre_play, from_split=True)
        new_hand.add_card(card)
        return new_hand

    def return_cards(self) -> List[Card]:
        """Empty the hand, returning its cards. The pre-play snapshot is kept."""
        cards = self.clear()
        self._recompute()
        return cards

    def pay_out(self) -> ChipStack:
        """Return the bet riding on this hand and leave the hand with none."""
        return self.bet.remove_chips(self.bet.value)

    def __repr__(self) -> str:
        return f"BlackjackHand({self._cards!r}, bet={self.bet.value})"
