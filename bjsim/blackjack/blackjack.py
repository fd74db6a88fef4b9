"""
This module runs an automated blackjack table until its players go broke.

A roster of player kinds (see `PlayerRegistry`) is seated at one table with
equal stakes, and rounds are played until every player is below the table
minimum or a round limit is reached. Along the way it can:

- write one CSV row per round with every player's cash and score, followed by
  the per-hand and streak totals for the run (`--csv`);
- fold the run's scores into a persistent all-runs aggregate (`--score_file`);
- show a live graph of each player's cash (`--vis`).

Example:
    python -m bjsim.blackjack.blackjack --min_bet 500 --stake 100000 --csv run.csv
"""

import argparse
import csv
import logging
import random
import sys
import time
from typing import List, Optional

import matplotlib.pyplot as plt

from bjsim.blackjack.actor import Player, PlayerRegistry
from bjsim.blackjack.rules import RulesError, TableRules
from bjsim.blackjack.storage import DEFAULT_SCORE_FILE, AggregateScoreStore
from bjsim.blackjack.table import Table
from bjsim.common.io_interface import (
    ConsoleIOInterface,
    DummyIOInterface,
    IOInterface,
    LoggingIOInterface,
)

logger = logging.getLogger("bjsim")

DEFAULT_ROSTER = "wiki,darwin_cc,positive_prog,nobust,dealer,darwin,darwin"
PROGRESS_EVERY = 500
SCOREBOARD_EVERY = 5000


class CashGraph:
    """Live line plot of every player's cash, one point per round."""

    def __init__(self, player_names: List[str], stake: int):
        self.rounds = []
        self.cash = {name: [] for name in player_names}

        plt.ion()  # Turn on interactive mode
        self.fig, self.ax = plt.subplots(figsize=(12, 6))
        self.lines = {
            name: self.ax.plot([], [], label=name)[0] for name in player_names
        }

        self.ax.set_xlim(0, PROGRESS_EVERY)
        self.ax.set_ylim(0, stake * 1.5)
        self.ax.set_title("Blackjack Table Cash")
        self.ax.set_xlabel("Games")
        self.ax.set_ylabel("Cash")
        self.ax.grid(True)
        self.ax.legend()

    def update(self, round_number: int, players: List[Player]):
        self.rounds.append(round_number)
        for player in players:
            self.cash[player.name].append(player.cash)
            self.lines[player.name].set_data(self.rounds, self.cash[player.name])

        if round_number > self.ax.get_xlim()[1]:
            self.ax.set_xlim(0, round_number * 2)
        y_max = max(max(values) for values in self.cash.values())
        if y_max > self.ax.get_ylim()[1]:
            self.ax.set_ylim(0, y_max * 1.2)

        self.fig.canvas.draw()
        self.fig.canvas.flush_events()

    def close(self):
        plt.ioff()
        plt.show()  # Keep the graph window open after simulation ends


def create_rules(args) -> TableRules:
    """Create the TableRules object based on the command line arguments."""
    return TableRules(
        min_bet=args.min_bet,
        max_bet=args.max_bet,
        num_decks=args.decks,
        initial_shuffle=args.initial_shuffle,
        subsequent_shuffle=args.subsequent_shuffle,
        reshuffle_min=args.reshuffle_min,
        reshuffle_max=args.reshuffle_max,
    )


def create_players(kinds: List[str], stake: int) -> List[Player]:
    """One player per roster entry. Repeated kinds are numbered from the second on."""
    players = []
    seen = {}
    for kind in kinds:
        seen[kind] = seen.get(kind, 0) + 1
        name = kind if seen[kind] == 1 else f"{kind}-{seen[kind]}"
        players.append(PlayerRegistry.create(kind, name, stake))
    return players


def create_io_interface(args) -> IOInterface:
    """Create the IO interface based on the command line arguments."""
    if args.quiet:
        return DummyIOInterface()
    if args.log_file:
        return LoggingIOInterface(args.log_file)
    return ConsoleIOInterface()


def open_csv(path: Optional[str], io_interface: IOInterface):
    """Open the per-round CSV, or return (None, None) if it cannot be written."""
    if not path:
        return None, None
    try:
        csv_file = open(path, "w", newline="", encoding="utf-8")
    except OSError as e:
        logger.error("Cannot open CSV file %s: %s", path, e)
        io_interface.output(f"Cannot write to {path}, continuing without CSV logging.")
        return None, None
    return csv_file, csv.writer(csv_file)


def run_simulation(
    table: Table,
    io_interface: IOInterface,
    ignore_kinds=(),
    max_rounds: int = 0,
    csv_writer=None,
    graph: Optional[CashGraph] = None,
) -> int:
    """
    Play rounds until every tracked player is bankrupt or `max_rounds` is reached.

    Players whose kind is in `ignore_kinds` keep playing but are not waited for.
    Returns the number of rounds played.
    """
    pending = [
        p for p in table.players if p.kind not in ignore_kinds and not p.is_bankrupt()
    ]
    if csv_writer is not None:
        csv_writer.writerow(["Games Played", "Time in Play (ns)"] + table.csv_header())

    while pending and (not max_rounds or table.rounds_played < max_rounds):
        start = time.perf_counter_ns()
        table.play_round()
        elapsed = time.perf_counter_ns() - start
        games = table.rounds_played

        if csv_writer is not None:
            csv_writer.writerow([games, elapsed] + table.csv_row())
        if graph is not None:
            graph.update(games, table.players)

        for player in [p for p in pending if p.is_bankrupt()]:
            pending.remove(player)
            io_interface.output(f"{player.name} went bankrupt after {games:,} games.")

        if games % PROGRESS_EVERY == 0:
            io_interface.output(f"{games:,} games played.")
        if games % SCOREBOARD_EVERY == 0:
            io_interface.output(table.scoreboard())

    return table.rounds_played


def write_run_summary(csv_writer, table: Table) -> None:
    """Append the per-hand and streak totals for this run."""
    total = table.aggregate_score()
    csv_writer.writerow([])
    csv_writer.writerow(total.per_hand_csv_header())
    csv_writer.writerows(total.per_hand_csv_rows())
    csv_writer.writerow([])
    csv_writer.writerow(total.streak.csv_header())
    csv_writer.writerows(total.streak.csv_rows())


def update_aggregate(store: AggregateScoreStore, table: Table, io_interface: IOInterface):
    """Fold every player's score into the stored all-runs totals."""
    total = store.load()
    for player in table.players:
        try:
            total = total + player.score
        except OverflowError as e:
            logger.error("Cannot add %s to the aggregate: %s", player.name, e)
            io_interface.output(f"Scores for {player.name} overflow the aggregate, skipped.")
    store.save(total)
    return total


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run an automated blackjack table until the players go broke."
    )
    parser.add_argument("--min_bet", type=int, default=500, help="Minimum bet amount")
    parser.add_argument(
        "--max_bet", type=int, default=None, help="Maximum bet amount (default: no limit)"
    )
    parser.add_argument("--decks", type=int, default=8, help="Number of decks in the shoe")
    parser.add_argument(
        "--initial_shuffle", type=int, default=8, help="Shuffle passes for a new shoe"
    )
    parser.add_argument(
        "--subsequent_shuffle", type=int, default=4, help="Shuffle passes on every reshuffle"
    )
    parser.add_argument(
        "--reshuffle_min",
        type=float,
        default=0.10,
        help="Lowest reshuffle point, as a fraction of the shoe",
    )
    parser.add_argument(
        "--reshuffle_max",
        type=float,
        default=0.15,
        help="Highest reshuffle point, as a fraction of the shoe",
    )
    parser.add_argument("--stake", type=int, default=100000, help="Starting cash per player")
    parser.add_argument(
        "--players",
        type=str,
        default=DEFAULT_ROSTER,
        help=f"Comma-separated player kinds, in seat order. Known kinds: "
        f"{', '.join(PlayerRegistry.list_kinds())}",
    )
    parser.add_argument(
        "--ignore_kinds",
        type=str,
        default="darwin_cc",
        help="Comma-separated player kinds the run does not wait on to go bankrupt",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--max_rounds", type=int, default=0, help="Stop after this many rounds (0: no limit)"
    )
    parser.add_argument("--csv", type=str, default=None, help="Write per-round CSV to this file")
    parser.add_argument(
        "--score_file",
        type=str,
        default=DEFAULT_SCORE_FILE,
        help="All-runs aggregate score file ('' to skip)",
    )
    parser.add_argument("--log_file", type=str, help="Write progress output to this file")
    parser.add_argument(
        "--quiet", action="store_true", default=False, help="Suppress progress output"
    )
    parser.add_argument(
        "--vis",
        action="store_true",
        default=False,
        help="Visualize each player's cash in a real-time graph.",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function to run the simulator.

    Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        rules = create_rules(args)
    except RulesError as e:
        parser.error(str(e))

    kinds = [k.strip().lower() for k in args.players.split(",") if k.strip()]
    try:
        players = create_players(kinds, args.stake)
    except ValueError as e:
        parser.error(str(e))
    if not players:
        parser.error("At least one player is required")
    ignore_kinds = {k.strip().lower() for k in args.ignore_kinds.split(",") if k.strip()}

    io_interface = create_io_interface(args)
    table = Table(rules, players, rng=random.Random(args.seed))
    graph = CashGraph([p.name for p in players], args.stake) if args.vis else None

    csv_file, csv_writer = open_csv(args.csv, io_interface)
    start_time = time.time()
    try:
        games = run_simulation(
            table, io_interface, ignore_kinds, args.max_rounds, csv_writer, graph
        )
        if csv_writer is not None:
            write_run_summary(csv_writer, table)
    finally:
        if csv_file is not None:
            csv_file.close()
    duration = time.time() - start_time

    io_interface.output(f"Simulation completed: {games:,} games in {duration:.2f} seconds.")
    io_interface.output(table.scoreboard())
    for player in table.players:
        track = player.track
        io_interface.output(
            f"[{player.name}] splits={track.splits} doubles={track.doubles} "
            f"hits={track.hits} stands={track.stands} busts={track.busts}"
        )

    if args.score_file:
        total = update_aggregate(AggregateScoreStore(args.score_file), table, io_interface)
        io_interface.output("Statistics for all runs")
        io_interface.output(total.scoreboard())
        io_interface.output(total.streak_report())

    if graph is not None:
        graph.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
