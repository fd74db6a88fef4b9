"""
Pytest configuration for tests at the root level.

Tables in tests are usually built on a scripted shoe so every card of a round
is known in advance. Cards are written as face + suit letter, e.g. "AH",
"10S", "KD". A scripted shoe is dealt in this order: dealer hole card, first
card to each seat, dealer up card, second card to each seat, then hits in
play order, then the dealer's hits.
"""

import random

import pytest

from bjsim.blackjack.decision_logger import decision_logger
from bjsim.blackjack.rules import TableRules
from bjsim.blackjack.table import Table
from bjsim.common.card import Card, Face, Suit
from bjsim.common.shoe import Shoe

FACES = {
    "A": Face.ACE,
    "2": Face.TWO,
    "3": Face.THREE,
    "4": Face.FOUR,
    "5": Face.FIVE,
    "6": Face.SIX,
    "7": Face.SEVEN,
    "8": Face.EIGHT,
    "9": Face.NINE,
    "10": Face.TEN,
    "J": Face.JACK,
    "Q": Face.QUEEN,
    "K": Face.KING,
}
SUITS = {"H": Suit.HEARTS, "D": Suit.DIAMONDS, "S": Suit.SPADES, "C": Suit.CLUBS}


def parse_cards(codes):
    return [Card(SUITS[token[-1]], FACES[token[:-1]]) for token in codes.split()]


@pytest.fixture
def cards():
    """Build cards from a space separated string such as "AH 10S"."""
    return parse_cards


@pytest.fixture
def scripted_rules():
    """Rules for scripted tables: min bet 10, no limit, never reshuffle on penetration."""
    return TableRules(
        min_bet=10,
        max_bet=None,
        num_decks=1,
        initial_shuffle=1,
        subsequent_shuffle=1,
        reshuffle_min=0.0,
        reshuffle_max=0.0,
    )


@pytest.fixture
def scripted_table(scripted_rules):
    """Factory for a table whose shoe holds exactly the given cards, in order."""

    def _make(deal, players, rules=None):
        shoe = Shoe(parse_cards(deal))
        return Table(rules or scripted_rules, players, rng=random.Random(0), shoe=shoe)

    return _make


@pytest.fixture(autouse=True)
def reset_decision_history():
    """Clear retained decisions before each test."""
    decision_logger.clear()
    yield
    decision_logger.clear()
