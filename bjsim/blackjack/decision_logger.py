"""
Logging for blackjack decision paths.

Strategy lookups, bet sizing, and round boundaries are reported on the
``bjsim.decisions`` logger. Decision contexts are only retained while DEBUG
is enabled, so long simulations pay nothing for them.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .action import Action


@dataclass
class DecisionContext:
    """Context for a single decision point."""

    timestamp: datetime
    player_name: str
    hand_cards: List[str]
    hand_value: int
    is_soft: bool
    is_pair: bool
    dealer_upcard: str
    chosen_action: Optional[Action] = None
    strategy_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "player": self.player_name,
            "cards": self.hand_cards,
            "value": self.hand_value,
            "soft": self.is_soft,
            "pair": self.is_pair,
            "dealer_up": self.dealer_upcard,
            "chosen": self.chosen_action.value if self.chosen_action else None,
            "reason": self.strategy_reason,
        }


class DecisionLogger:
    """Logs decision-making in blackjack."""

    def __init__(self, log_level=logging.NOTSET):
        self.logger = logging.getLogger("bjsim.decisions")
        # Simulations can silence decision logging entirely
        if os.environ.get("BJSIM_DISABLE_LOGGING", "").lower() in (
            "1",
            "true",
            "yes",
        ):
            self.logger.setLevel(logging.ERROR)
        else:
            self.logger.setLevel(log_level)

        self.decision_history: List[DecisionContext] = []

    def log_decision(self, player_name: str, hand, up_card, action: Action, reason: str):
        """Log the action chosen for a hand."""
        if self.logger.isEnabledFor(logging.DEBUG):
            context = DecisionContext(
                timestamp=datetime.now(),
                player_name=player_name,
                hand_cards=[str(c) for c in hand.cards],
                hand_value=hand.value,
                is_soft=hand.is_soft,
                is_pair=hand.is_splittable,
                dealer_upcard=str(up_card),
                chosen_action=action,
                strategy_reason=reason,
            )
            self.decision_history.append(context)
            self.logger.debug(
                f"{player_name} chose {action.value} with {context.hand_cards} "
                f"(value={hand.value}, soft={hand.is_soft}) vs dealer {up_card} "
                f"(reason: {reason})"
            )

    def log_strategy_lookup(self, table: str, hand_type: str, up_value: int, hit: bool):
        """Log a decision table lookup."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Strategy lookup [{table}]: {hand_type} vs {up_value} -> {'Y' if hit else 'N'}"
            )

    def log_bet(self, player_name: str, amount: int, reason: str):
        """Log a bet sizing decision."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"{player_name} antes {amount} ({reason})")

    def log_round_start(self, round_num: int, players: List[str]):
        """Log the start of a new round."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"=== Round {round_num} starting with players: {players} ==="
            )

    def log_round_end(self, round_num: int, cash: Dict[str, int]):
        """Log the end of a round with each player's cash."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"=== Round {round_num} ended: {cash} ===")

    def get_decision_summary(self) -> Dict[str, Any]:
        """Get a summary of all retained decisions."""
        summary: Dict[str, Any] = {
            "total_decisions": len(self.decision_history),
            "by_action": {},
            "by_player": {},
        }

        for decision in self.decision_history:
            action = decision.chosen_action.value if decision.chosen_action else "none"
            summary["by_action"][action] = summary["by_action"].get(action, 0) + 1

            player = decision.player_name
            summary["by_player"][player] = summary["by_player"].get(player, 0) + 1

        return summary

    def clear(self):
        self.decision_history = []


# Global logger instance
decision_logger = DecisionLogger()
