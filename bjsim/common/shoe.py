"""
A FIFO supply of cards.

The same class serves as the table's draw shoe and as its discard pile: cards
are drawn from the front and returned cards are queued at the back.
"""

import random
from collections import deque
from typing import Iterable, Iterator, List, Optional

from bjsim.common.card import Card, Face, Suit


class EmptyShoeError(IndexError):
    """Raised when a card is drawn from an empty shoe."""


class Shoe:
    """
    An ordered multiset of cards.

    >>> shoe = Shoe()
    >>> shoe.fill(1)
    >>> shoe.cards_left
    52
    >>> print(shoe.draw())
    A of ♥
    """

    def __init__(
        self,
        cards: Optional[Iterable[Card]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        :param cards: Optional initial cards, front of the shoe first
        :param rng: Random source used by `shuffle`; a fresh one is created if omitted
        """
        self._cards = deque(cards or ())
        self.rng = rng if rng is not None else random.Random()

    def fill(self, num_decks: int) -> None:
        """Queue `num_decks` fresh decks, each in suit then face order."""
        for _ in range(num_decks):
            for suit in Suit:
                for face in Face:
                    self._cards.append(Card(suit, face))

    def shuffle(self, times: int = 1) -> None:
        """Fisher-Yates shuffle the whole contents, `times` separate passes."""
        cards = list(self._cards)
        for _ in range(times):
            for n in range(len(cards) - 1, 0, -1):
                k = self.rng.randrange(n + 1)
                cards[n], cards[k] = cards[k], cards[n]
        self._cards = deque(cards)

    def draw(self) -> Card:
        """
        Take the card at the front of the shoe.

        :raises EmptyShoeError: if the shoe holds no cards
        """
        if not self._cards:
            raise EmptyShoeError("Cannot draw from an empty shoe")
        return self._cards.popleft()

    def add_card(self, card: Card) -> None:
        self._cards.append(card)

    def return_cards(self, cards: Iterable[Card]) -> None:
        """Queue the given cards at the back of the shoe."""
        self._cards.extend(cards)

    def take_all(self) -> List[Card]:
        """Empty the shoe and return its cards in order."""
        cards = list(self._cards)
        self._cards.clear()
        return cards

    @property
    def cards_left(self) -> int:
        return len(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"Shoe(cards_left={len(self._cards)})"
