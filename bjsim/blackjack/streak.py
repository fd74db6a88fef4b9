"""
Win, loss, and push streak tracking.

A streak ends when a result differs from the one before it. Completed streaks
are counted in a histogram indexed by result and length; the open streak only
appears in snapshots taken through `streaks`.
"""

from typing import List, Optional

import numpy as np

from bjsim.blackjack.constants import GameResult

MAX_STREAK_LEN = 48


class ScoreStreak:
    """Histogram of streak lengths per result, plus the streak in progress."""

    def __init__(self, histogram: Optional[np.ndarray] = None):
        if histogram is None:
            histogram = np.zeros((len(GameResult), MAX_STREAK_LEN), dtype=np.int64)
        elif histogram.shape != (len(GameResult), MAX_STREAK_LEN):
            raise ValueError(
                f"Streak histogram has unexpected shape {histogram.shape}"
            )
        self._histogram = histogram.astype(np.int64, copy=True)
        self.direction: Optional[GameResult] = None
        self.length = 0

    def update(self, result: GameResult, length: int = 1) -> None:
        """Extend the open streak, closing it first if `result` changes direction."""
        if result != self.direction:
            self._write(self._histogram)
            self.direction = result
            self.length = 0
        self.length += length

    def _write(self, histogram: np.ndarray) -> None:
        if self.length > 0:
            bucket = min(self.length, MAX_STREAK_LEN) - 1
            histogram[self.direction, bucket] += 1

    @property
    def streaks(self) -> np.ndarray:
        """A copy of the histogram with the open streak folded in."""
        snapshot = self._histogram.copy()
        self._write(snapshot)
        return snapshot

    @property
    def current_streak(self) -> str:
        if self.direction is None:
            return "None 0"
        return f"{self.direction.name.capitalize()} {self.length}"

    def longest_streak(self) -> int:
        """Length of the longest completed streak, 0 if there is none."""
        lengths = np.nonzero(self._histogram.any(axis=0))[0]
        return int(lengths[-1]) + 1 if lengths.size else 0

    def __add__(self, other: "ScoreStreak") -> "ScoreStreak":
        if not isinstance(other, ScoreStreak):
            return NotImplemented
        return ScoreStreak(checked_add(self.streaks, other.streaks))

    def stats_report(self, won: int, lost: int, pushed: int) -> str:
        """
        Describe how often each streak length occurred.

        The percentage beside each length is the share of all hands with that
        result that were played inside streaks of that length.
        """
        tallies = {GameResult.LOST: lost, GameResult.PUSHED: pushed, GameResult.WON: won}
        streaks = self.streaks
        lines = []
        for direction in GameResult:
            lines.append("")
            lines.append(f"Streak frequency where player {direction.name.capitalize()}:")
            for i in range(MAX_STREAK_LEN):
                count = int(streaks[direction, i])
                if count > 0:
                    tally = tallies[direction]
                    share = count * (i + 1) / tally if tally else 0.0
                    lines.append(f"  Length {i + 1}: {count} ({share:.2%})")
        return "\n".join(lines)

    def csv_header(self) -> List[str]:
        return ["Result"] + [f"Length {i + 1}" for i in range(self.longest_streak())]

    def csv_rows(self) -> List[List]:
        """One row per result, covering lengths up to the longest completed streak."""
        longest = self.longest_streak()
        return [
            [direction.name.capitalize()]
            + [int(n) for n in self._histogram[direction, :longest]]
            for direction in GameResult
        ]


def checked_add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Element-wise sum of two non-negative count arrays.

    :raises OverflowError: if any element would exceed the int64 range
    """
    limit = np.iinfo(np.int64).max
    if np.any(a > limit - b):
        raise OverflowError("Score counter overflow while adding scores")
    return a + b
