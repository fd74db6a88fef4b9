"""
This module contains the scoreboards used to track blackjack outcomes.

`Score` keeps flat won/lost/pushed counters and a streak tracker.
`ScorePerHand` adds matrices keyed by dealer up card and the player's
pre-play hand, kept separately for hard and soft hands. Counters are numpy
int64 arrays so per-player scores from long runs can be summed and stored
without loss.
"""

import logging
from typing import List, Optional

import numpy as np

from bjsim.blackjack.constants import (
    GameResult,
    HARD_MAX_VALUE,
    HARD_MIN_VALUE,
    SOFT_MAX_VALUE,
    SOFT_MIN_VALUE,
)
from bjsim.blackjack.streak import ScoreStreak, checked_add
from bjsim.common.card import Card

logger = logging.getLogger("bjsim.stats")

UP_CARD_VALUES = 10
HARD_VALUES = HARD_MAX_VALUE - HARD_MIN_VALUE + 1
SOFT_VALUES = SOFT_MAX_VALUE - SOFT_MIN_VALUE + 1


class Score:
    """
    Won/lost/pushed counters.

    >>> score = Score()
    >>> score.record(GameResult.WON)
    >>> score.scoreboard()
    '[Total/W-L-P]= 1 / 1-0-0'
    """

    def __init__(
        self,
        results: Optional[np.ndarray] = None,
        streak: Optional[ScoreStreak] = None,
    ):
        if results is None:
            results = np.zeros(len(GameResult), dtype=np.int64)
        elif results.shape != (len(GameResult),):
            raise ValueError(f"Results array has unexpected shape {results.shape}")
        self.results = results.astype(np.int64, copy=True)
        self.streak = streak if streak is not None else ScoreStreak()

    @property
    def won(self) -> int:
        return int(self.results[GameResult.WON])

    @property
    def lost(self) -> int:
        return int(self.results[GameResult.LOST])

    @property
    def pushed(self) -> int:
        return int(self.results[GameResult.PUSHED])

    @property
    def total_played(self) -> int:
        return int(self.results.sum())

    def record(self, result: GameResult) -> None:
        """Add one result to the tally and to the streak tracker."""
        self.results[result] += 1
        self.streak.update(result)

    def __add__(self, other: "Score") -> "Score":
        if not isinstance(other, Score):
            return NotImplemented
        return Score(checked_add(self.results, other.results), self.streak + other.streak)

    def scoreboard(self) -> str:
        return (
            f"[Total/W-L-P]= {self.total_played} / "
            f"{self.won}-{self.lost}-{self.pushed}"
        )

    def streak_report(self) -> str:
        return self.streak.stats_report(self.won, self.lost, self.pushed)

    def csv_header(self) -> List[str]:
        return ["Hands Played", "Hands Won", "Hands Lost", "Hands Pushed"]

    def csv_row(self) -> List[int]:
        return [self.total_played, self.won, self.lost, self.pushed]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.scoreboard()})"


class ScorePerHand(Score):
    """
    A `Score` broken out by (dealer up card, pre-play hand value).

    Matrix cells are indexed ``[up card value - 1, pre-play value - minimum, result]``
    with hard values 4-20 and soft values 12-21. Their sum always equals the
    flat counters.
    """

    def __init__(
        self,
        results: Optional[np.ndarray] = None,
        streak: Optional[ScoreStreak] = None,
        hard: Optional[np.ndarray] = None,
        soft: Optional[np.ndarray] = None,
    ):
        super().__init__(results, streak)
        self.hard = self._matrix(hard, HARD_VALUES, "hard")
        self.soft = self._matrix(soft, SOFT_VALUES, "soft")

    @staticmethod
    def _matrix(data: Optional[np.ndarray], values: int, name: str) -> np.ndarray:
        shape = (UP_CARD_VALUES, values, len(GameResult))
        if data is None:
            return np.zeros(shape, dtype=np.int64)
        if data.shape != shape:
            raise ValueError(f"{name} hand matrix has unexpected shape {data.shape}")
        return data.astype(np.int64, copy=True)

    def record_outcome(self, result: GameResult, up_card: Card, hand) -> None:
        """
        Score one settled hand against the dealer's up card.

        The hand is filed under its pre-play value and softness.
        """
        pre_play = hand.pre_play
        if pre_play is None:
            raise ValueError(f"Cannot score a hand that was never dealt two cards: {hand!r}")
        if hand.value == 21 and result == GameResult.LOST:
            logger.warning("A 21 lost against the dealer: %r", hand)

        up = up_card.value - 1
        if pre_play.is_soft:
            self.soft[up, pre_play.value - SOFT_MIN_VALUE, result] += 1
        else:
            self.hard[up, pre_play.value - HARD_MIN_VALUE, result] += 1
        self.record(result)

    def cell(self, up_card_value: int, value: int, soft: bool = False) -> Score:
        """The counters of one matrix cell as a standalone `Score`."""
        if soft:
            counts = self.soft[up_card_value - 1, value - SOFT_MIN_VALUE]
        else:
            counts = self.hard[up_card_value - 1, value - HARD_MIN_VALUE]
        return Score(counts)

    def __add__(self, other: "ScorePerHand") -> "ScorePerHand":
        if not isinstance(other, ScorePerHand):
            return NotImplemented
        return ScorePerHand(
            checked_add(self.results, other.results),
            self.streak + other.streak,
            checked_add(self.hard, other.hard),
            checked_add(self.soft, other.soft),
        )

    def per_hand_csv_header(self) -> List[str]:
        return ["Player Soft/Hard Hand", "Up Card Value", "Player Hand Value"] + self.csv_header()

    def per_hand_csv_rows(self) -> List[List]:
        """One row per matrix cell, hard hands first."""
        rows = []
        for label, matrix, minimum in (
            ("Hard", self.hard, HARD_MIN_VALUE),
            ("Soft", self.soft, SOFT_MIN_VALUE),
        ):
            for i in range(UP_CARD_VALUES):
                for j in range(matrix.shape[1]):
                    counts = matrix[i, j]
                    rows.append(
                        [
                            label,
                            i + 1,
                            j + minimum,
                            int(counts.sum()),
                            int(counts[GameResult.WON]),
                            int(counts[GameResult.LOST]),
                            int(counts[GameResult.PUSHED]),
                        ]
                    )
        return rows
