"""
This module contains the base class for a hand of cards.

Hand: an ordered collection of cards with methods for adding and taking back cards.
Game-specific hands subclass it and add scoring.
"""
from typing import List

from bjsim.common.card import Card


class Hand:
    """
    An ordered hand of cards.
    """

    def __init__(self):
        self._cards: List[Card] = []

    @property
    def cards(self) -> List[Card]:
        """Returns the cards in the hand."""
        return self._cards

    def add_card(self, card: Card) -> None:
        """
        Adds a card to the hand.

        Args:
            card: The card to add.
        """
        self._cards.append(card)

    def clear(self) -> List[Card]:
        """
        Empties the hand.

        Returns:
            The cards that were held, in the order they were received.
        """
        cards = self._cards
        self._cards = []
        return cards

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._cards!r})"

    def __str__(self) -> str:
        return ", ".join(str(card) for card in self._cards)
