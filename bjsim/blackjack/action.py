"""Defines the Action enum for the choices a player makes while playing a blackjack hand."""
from enum import Enum


class Action(Enum):
    """Enum for the possible actions a player can take on a blackjack hand."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
