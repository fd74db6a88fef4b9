"""Blackjack-specific constants shared by the table, strategies, and statistics."""

from enum import IntEnum


class GameResult(IntEnum):
    """Outcome of one hand from the player's side. Values index score arrays."""

    LOST = 0
    PUSHED = 1
    WON = 2


# Running count delta per card, indexed by blackjack value - 1 (Ace first)
HI_LO_COUNT = (-1, 1, 1, 1, 1, 1, 0, 0, 0, -1)

# Dealer stands on 17 and above
DEALER_STAND_VALUE = 17

# No-bust players stop hitting once a bust is possible
NO_BUST_STAND_VALUE = 12

# Pre-play values covered by the per-hand score matrices
HARD_MIN_VALUE, HARD_MAX_VALUE = 4, 20
SOFT_MIN_VALUE, SOFT_MAX_VALUE = 12, 21
