"""
This module defines the `Suit`, `Face`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards, in the order a fresh deck is filled: Hearts, Diamonds, Spades, Clubs.

- `Face`: An enum representing the thirteen faces of a standard deck, Ace (1)
through King (13).

- `Card`: An immutable playing card. A card has a suit and a face, and a
blackjack value which is the face value capped at 10.

This module is part of the `bjsim` package, an automated blackjack table simulator.
"""

from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    SPADES = "♠"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value


@unique
class Face(Enum):
    """
    Enum for faces in a card deck. Ace is low.
    """

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def face_str(self) -> str:
        """A short string representation of the face."""
        if self in (Face.ACE, Face.JACK, Face.QUEEN, Face.KING):
            return self.name[0]
        return str(self.value)

    def __str__(self) -> str:
        return self.face_str


class Card:
    """
    Class representing a playing card. Cards are value objects and cannot be
    changed once created.

    >>> card = Card(Suit.HEARTS, Face.KING)
    >>> print(card)
    K of ♥
    >>> card.value
    10
    """

    __slots__ = ("_suit", "_face")

    def __init__(self, suit: Suit, face: Face):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param face: Face of the card (one of the Face enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(face, Face):
            raise TypeError(f"Invalid face: {face}")
        self._suit = suit
        self._face = face

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def face(self) -> Face:
        return self._face

    @property
    def value(self) -> int:
        """The blackjack value of the card, 1 for an Ace and 10 for picture cards."""
        return min(self._face.value, 10)

    @property
    def is_ace(self) -> bool:
        return self._face is Face.ACE

    def clone(self) -> "Card":
        """Return a new card equal to this one."""
        return Card(self._suit, self._face)

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same face and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self._face == other._face and self._suit == other._suit
        return NotImplemented

    def __hash__(self):
        return hash((self._suit, self._face))

    def __repr__(self) -> str:
        return f"Card(Suit.{self._suit.name}, Face.{self._face.name})"

    def __str__(self) -> str:
        return f"{self._face.face_str} of {self._suit}"
