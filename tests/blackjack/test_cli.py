import csv
import random

import numpy as np
import pytest

from bjsim.blackjack import blackjack
from bjsim.blackjack.actor import Player
from bjsim.blackjack.rules import TableRules
from bjsim.blackjack.storage import AggregateScoreStore
from bjsim.blackjack.strategy import NoBustStrategy
from bjsim.blackjack.table import Table
from bjsim.common.io_interface import (
    DummyIOInterface,
    LoggingIOInterface,
    TestIOInterface,
)


def run(*extra):
    return blackjack.main(
        [
            "--quiet",
            "--min_bet",
            "10",
            "--stake",
            "100000",
            "--decks",
            "2",
            "--seed",
            "1",
            "--players",
            "darwin,nobust,darwin_cc",
        ]
        + list(extra)
    )


def test_csv_output(tmp_path):
    path = tmp_path / "run.csv"
    assert run("--max_rounds", "50", "--csv", str(path), "--score_file", "") == 0

    with open(path, newline="") as f:
        rows = list(csv.reader(f))

    assert rows[0][:3] == ["Games Played", "Time in Play (ns)", "darwin Cash"]
    assert len(rows[0]) == 2 + 3 * 5
    assert [row[0] for row in rows[1:51]] == [str(n) for n in range(1, 51)]
    assert rows[51] == []
    assert rows[52][0] == "Player Soft/Hard Hand"
    assert rows[53][:3] == ["Hard", "1", "4"]
    assert rows[52 + 270 + 1] == []
    assert rows[52 + 270 + 2][0] == "Result"
    assert [row[0] for row in rows[-3:]] == ["Lost", "Pushed", "Won"]


def test_score_file_accumulates(tmp_path):
    path = tmp_path / "scores.npz"
    run("--max_rounds", "20", "--score_file", str(path))
    first = AggregateScoreStore(path).load()
    run("--max_rounds", "20", "--score_file", str(path))
    second = AggregateScoreStore(path).load()

    assert first.total_played > 0
    assert np.array_equal(second.results, first.results * 2)
    assert np.array_equal(second.hard, first.hard * 2)


def test_unwritable_csv_is_not_fatal(tmp_path):
    assert run("--max_rounds", "5", "--csv", str(tmp_path), "--score_file", "") == 0


def test_unknown_player_kind():
    with pytest.raises(SystemExit):
        blackjack.main(["--quiet", "--players", "darwin,martingale"])


def test_invalid_rules():
    with pytest.raises(SystemExit):
        blackjack.main(["--quiet", "--min_bet", "100", "--max_bet", "50"])


def test_create_players_numbers_repeats():
    players = blackjack.create_players(["darwin", "wiki", "darwin", "darwin"], 500)
    assert [p.name for p in players] == ["darwin", "wiki", "darwin-2", "darwin-3"]
    assert all(p.cash == 500 for p in players)


def test_create_io_interface(tmp_path):
    parser = blackjack.build_parser()
    assert isinstance(blackjack.create_io_interface(parser.parse_args(["--quiet"])), DummyIOInterface)
    args = parser.parse_args(["--log_file", str(tmp_path / "out.log")])
    assert isinstance(blackjack.create_io_interface(args), LoggingIOInterface)


def test_defaults():
    args = blackjack.build_parser().parse_args([])
    assert args.min_bet == 500
    assert args.decks == 8
    assert args.stake == 100000
    assert args.players == "wiki,darwin_cc,positive_prog,nobust,dealer,darwin,darwin"
    assert args.ignore_kinds == "darwin_cc"


class TestRunSimulation:
    def test_runs_until_everyone_is_bankrupt(self):
        rules = TableRules(min_bet=10, num_decks=1)
        players = [Player("short", NoBustStrategy(), purse=30, kind="nobust")]
        table = Table(rules, players, rng=random.Random(5))
        io = TestIOInterface()

        games = blackjack.run_simulation(table, io)

        assert players[0].is_bankrupt()
        assert games == table.rounds_played
        assert f"short went bankrupt after {games:,} games." in io.sent_messages

    def test_ignored_kinds_are_not_waited_on(self):
        rules = TableRules(min_bet=10, num_decks=1)
        rich = Player("rich", NoBustStrategy(), purse=10_000, kind="darwin_cc")
        broke = Player("broke", NoBustStrategy(), purse=5, kind="nobust")
        table = Table(rules, [rich, broke], rng=random.Random(5))

        assert blackjack.run_simulation(table, TestIOInterface(), {"darwin_cc"}) == 0

    def test_max_rounds(self):
        rules = TableRules(min_bet=10, num_decks=1)
        table = Table(rules, [Player("p", NoBustStrategy(), purse=10_000)], rng=random.Random(5))
        assert blackjack.run_simulation(table, TestIOInterface(), max_rounds=7) == 7

    def test_progress_report(self, mocker):
        mocker.patch.object(blackjack, "PROGRESS_EVERY", 3)
        rules = TableRules(min_bet=10, num_decks=1)
        table = Table(rules, [Player("p", NoBustStrategy(), purse=10_000)], rng=random.Random(5))
        io = TestIOInterface()
        blackjack.run_simulation(table, io, max_rounds=6)
        assert io.sent_messages == ["3 games played.", "6 games played."]
