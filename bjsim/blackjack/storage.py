"""
Persistent cross-run score totals.

The aggregate is a single numpy ``.npz`` file holding the arrays of one
`ScorePerHand`. It is written without pickling, so a damaged or foreign file
can only fail to load, never execute anything.
"""

import logging
import zipfile
from pathlib import Path
from typing import Union

import numpy as np

from bjsim.blackjack.stats import ScorePerHand
from bjsim.blackjack.streak import ScoreStreak

logger = logging.getLogger("bjsim.storage")

DEFAULT_SCORE_FILE = "scores.npz"


class AggregateScoreStore:
    """
    Load and save the all-runs `ScorePerHand`.

    Args:
        path: File holding the aggregate.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_SCORE_FILE):
        self.path = Path(path)

    def load(self) -> ScorePerHand:
        """
        Read the stored aggregate.

        Returns an empty score if the file is missing or cannot be read.
        """
        if not self.path.exists():
            logger.info("No aggregate score file at %s, starting a new one", self.path)
            return ScorePerHand()
        try:
            with np.load(self.path, allow_pickle=False) as data:
                return ScorePerHand(
                    results=data["results"],
                    streak=ScoreStreak(data["streaks"]),
                    hard=data["hard"],
                    soft=data["soft"],
                )
        except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
            logger.warning(
                "Could not read aggregate scores from %s (%s), starting a new one",
                self.path,
                e,
            )
            return ScorePerHand()

    def save(self, score: ScorePerHand) -> bool:
        """
        Write `score` as the new aggregate.

        Returns:
            True on success. Failures are logged rather than raised.
        """
        try:
            with open(self.path, "wb") as f:
                np.savez(
                    f,
                    results=score.results,
                    streaks=score.streak.streaks,
                    hard=score.hard,
                    soft=score.soft,
                )
        except OSError as e:
            logger.error("Could not save aggregate scores to %s: %s", self.path, e)
            return False
        logger.info("Saved aggregate scores to %s", self.path)
        return True
