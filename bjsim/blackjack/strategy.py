"""
Playing strategies: how a player acts on a hand once the cards are dealt.

Strategies are stateless and may be shared between players. Bet sizing lives
in `bjsim.blackjack.betting`.
"""

import csv
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from bjsim.blackjack.action import Action
from bjsim.blackjack.constants import DEALER_STAND_VALUE, NO_BUST_STAND_VALUE
from bjsim.blackjack.decision_logger import decision_logger
from bjsim.common.card import Card

STRATEGY_DIR = os.path.join(os.path.dirname(__file__), "strategies")

UP_CARD_COLUMNS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10"]

# Rows per table; split rows are indexed by pair card value, the rest by hand value
TABLE_ROWS = {
    "split": 11,
    "soft_double": 22,
    "soft_stand": 22,
    "hard_double": 22,
    "hard_stand": 22,
}

Table = Tuple[Tuple[bool, ...], ...]


class Strategy(ABC):
    @abstractmethod
    def decide_action(self, player, up_card: Card, hand) -> Action:
        pass

    @abstractmethod
    def decide_insurance(self, player) -> bool:
        """Decide whether to buy insurance. Returns True if the player wants to buy insurance."""
        pass


class DealerStrategy(Strategy):
    """Hit below 17, stand otherwise. Soft 17 stands."""

    def decide_action(self, player, up_card, hand) -> Action:
        if hand.value < DEALER_STAND_VALUE:
            return Action.HIT
        return Action.STAND

    def decide_insurance(self, player):
        return False


class NoBustStrategy(Strategy):
    """Hit only while no single card can bust the hand."""

    def decide_action(self, player, up_card, hand) -> Action:
        if hand.value < NO_BUST_STAND_VALUE:
            return Action.HIT
        return Action.STAND

    def decide_insurance(self, player):
        return False


@dataclass(frozen=True)
class DecisionTables:
    """
    Yes/no lookup tables for basic strategy.

    Each table is indexed ``[row][up card value - 1]``. `split` rows are the
    value of the paired card; every other table is indexed by hand value.
    """

    name: str
    split: Table
    soft_double: Table
    soft_stand: Table
    hard_double: Table
    hard_stand: Table


def _parse_flag(cell: str, source: str) -> bool:
    cell = cell.strip().upper()
    if cell not in ("Y", "N"):
        raise ValueError(f"{source}: expected Y or N, got {cell!r}")
    return cell == "Y"


@lru_cache(maxsize=None)
def load_decision_tables(name: str) -> DecisionTables:
    """
    Load a set of decision tables from the bundled ``strategies/<name>.csv``.

    Rows not listed in the file are all "N". Results are cached, so every
    player using the same tables shares one immutable copy.
    """
    strategy_file = os.path.join(STRATEGY_DIR, f"{name}.csv")
    tables = {
        table: [[False] * len(UP_CARD_COLUMNS) for _ in range(rows)]
        for table, rows in TABLE_ROWS.items()
    }
    with open(strategy_file, "r", newline="") as f:
        reader = csv.reader(f)
        header = next(reader)
        if [h.strip() for h in header[2:]] != UP_CARD_COLUMNS:
            raise ValueError(f"{strategy_file}: unexpected header {header}")
        for line_no, row in enumerate(reader, start=2):
            if not row:
                continue
            source = f"{strategy_file}:{line_no}"
            if len(row) != 2 + len(UP_CARD_COLUMNS):
                raise ValueError(f"{source}: expected 12 columns, got {len(row)}")
            table, value = row[0].strip(), int(row[1])
            if table not in tables:
                raise ValueError(f"{source}: unknown table {table!r}")
            if not 0 <= value < TABLE_ROWS[table]:
                raise ValueError(f"{source}: row {value} out of range for {table}")
            tables[table][value] = [_parse_flag(cell, source) for cell in row[2:]]

    frozen = {t: tuple(tuple(r) for r in rows) for t, rows in tables.items()}
    return DecisionTables(name=name, **frozen)


class BasicStrategy(Strategy):
    """
    Table-driven basic strategy.

    Checked in order: split a pair, then double, then stand, otherwise hit.
    Splitting and doubling also require the player to be able to match the
    bet.
    """

    def __init__(self, tables: DecisionTables):
        self.tables = tables

    @classmethod
    def from_name(cls, name: str) -> "BasicStrategy":
        return cls(load_decision_tables(name))

    def decide_action(self, player, up_card: Card, hand) -> Action:
        tables = self.tables
        up = up_card.value - 1
        value = hand.value
        if value > 21:
            return Action.STAND

        if hand.is_splittable:
            pair = hand.cards[0].value
            wants_split = tables.split[pair][up]
            decision_logger.log_strategy_lookup(tables.name, f"Pair{pair}", up + 1, wants_split)
            if wants_split and player.can_match(hand):
                return self._decided(player, hand, up_card, Action.SPLIT, f"split {pair}s")

        if hand.is_soft:
            double, stand, kind = tables.soft_double, tables.soft_stand, "Soft"
        else:
            double, stand, kind = tables.hard_double, tables.hard_stand, "Hard"

        decision_logger.log_strategy_lookup(tables.name, f"{kind}{value}", up + 1, double[value][up])
        if double[value][up] and player.can_match(hand):
            return self._decided(player, hand, up_card, Action.DOUBLE, f"double {kind.lower()} {value}")
        if stand[value][up]:
            return self._decided(player, hand, up_card, Action.STAND, f"stand {kind.lower()} {value}")
        return self._decided(player, hand, up_card, Action.HIT, f"hit {kind.lower()} {value}")

    def _decided(self, player, hand, up_card, action: Action, reason: str) -> Action:
        decision_logger.log_decision(player.name, hand, up_card, action, reason)
        return action

    def decide_insurance(self, player) -> bool:
        return False

    def __repr__(self) -> str:
        return f"BasicStrategy({self.tables.name!r})"
