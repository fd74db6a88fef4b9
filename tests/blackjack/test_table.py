"""Round-level tests on scripted shoes, plus long seeded runs for the bookkeeping."""

import random

import numpy as np
import pytest

from bjsim.blackjack.actor import Player, PlayerRegistry, TableLimitError
from bjsim.blackjack.constants import GameResult
from bjsim.blackjack.hand import BlackjackHand, InvalidActionError
from bjsim.blackjack.rules import TableRules
from bjsim.blackjack.state import DealingState
from bjsim.blackjack.strategy import BasicStrategy, NoBustStrategy
from bjsim.blackjack.streak import MAX_STREAK_LEN
from bjsim.blackjack.table import Table
from bjsim.common.chips import ChipStack
from bjsim.events import TableEventType


class InsuringStrategy(NoBustStrategy):
    def decide_insurance(self, player):
        return True


@pytest.fixture
def hundred_rules():
    return TableRules(
        min_bet=100,
        num_decks=1,
        initial_shuffle=1,
        subsequent_shuffle=1,
        reshuffle_min=0.0,
        reshuffle_max=0.0,
    )


def nobust(purse=1000):
    return Player("nobust", NoBustStrategy(), purse=purse)


def darwin(purse=1000):
    return Player("darwin", BasicStrategy.from_name("darwin"), purse=purse)


class TestScriptedRounds:
    def test_insurance_against_dealer_natural(self, scripted_table, hundred_rules):
        player = Player("insurer", InsuringStrategy(), purse=1000)
        table = scripted_table("KH 9C AD 8S", [player], hundred_rules)
        table.play_round()

        # Insurance pays 2:1 and the 17 loses to the natural
        assert player.cash == 1000
        assert table.house.value == 100
        assert table.paid_out == 100
        assert player.insurance.value == 0
        assert player.score.lost == 1
        assert player.score.hard[0, 13, GameResult.LOST] == 1
        assert player.hands == []

    def test_uninsured_player_loses_to_dealer_natural(self, scripted_table, hundred_rules):
        player = nobust()
        table = scripted_table("KH 9C AD 8S", [player], hundred_rules)
        table.play_round()
        assert player.cash == 900
        assert table.house.value == 100
        assert table.paid_out == 0

    def test_insurance_lost_without_dealer_natural(self, scripted_table, hundred_rules):
        player = Player("insurer", InsuringStrategy(), purse=1000)
        table = scripted_table("7H 9C AD 8S", [player], hundred_rules)
        table.play_round()
        # Stake of 50 goes to the house and 17 loses to soft 18
        assert player.score.lost == 1
        assert player.cash == 850
        assert table.house.value == 150

    def test_player_natural_pays_three_to_two(self, scripted_table, hundred_rules):
        player = nobust()
        table = scripted_table("9H AC 7D KS 5C", [player], hundred_rules)
        table.play_round()
        assert player.cash == 1000 - 100 + 100 + 150
        assert table.paid_out == 150
        assert player.score.won == 1
        assert player.score.soft[6, 9, GameResult.WON] == 1

    def test_naturals_push(self, scripted_table, hundred_rules):
        player = nobust()
        table = scripted_table("KH AC AD KS", [player], hundred_rules)
        table.play_round()
        assert player.cash == 1000
        assert player.score.pushed == 1
        assert player.score.soft[0, 9, GameResult.PUSHED] == 1

    def test_push(self, scripted_table, hundred_rules):
        player = nobust()
        table = scripted_table("10H 10C 8D 8S", [player], hundred_rules)
        table.play_round()
        assert player.cash == 1000
        assert player.score.pushed == 1
        assert table.house.value == 0
        assert table.paid_out == 0

    def test_split_eights(self, scripted_table):
        player = darwin()
        table = scripted_table("10H 8H 6D 8S 10C 10D 9S", [player])
        table.play_round()
        assert player.track.splits == 1
        assert player.score.won == 2
        assert player.score.hard[5, 12, GameResult.WON] == 2
        assert player.cash == 1020

    def test_split_hands_filed_under_pair_value(self, scripted_table):
        player = darwin()
        table = scripted_table("10H 8H 7D 8S 3C 6C 10S KH", [player])
        table.play_round()

        # First hand doubles to 21, second busts; both count as hard 16 vs 7
        assert player.track.splits == 1
        assert player.track.doubles == 1
        assert player.track.busts == 1
        assert player.score.hard[6, 12].tolist() == [1, 0, 1]
        assert player.score.hard.sum() == 2
        assert player.score.soft.sum() == 0
        assert player.cash == 1010

    def test_double_eleven_against_six(self, scripted_table):
        player = darwin()
        table = scripted_table("10H 6C 6D 5S 9H 10S", [player])
        table.play_round()
        assert player.track.doubles == 1
        assert player.score.won == 1
        assert player.score.hard[5, 7, GameResult.WON] == 1
        assert player.cash == 1020

    def test_bust(self, scripted_table):
        player = darwin()
        table = scripted_table("10H 10C 2D 2S KH 5C", [player])
        table.play_round()
        assert player.track.busts == 1
        assert player.score.lost == 1
        assert player.score.hard[1, 8, GameResult.LOST] == 1
        assert player.cash == 990
        assert table.house.value == 10

    def test_dealer_bust_pays_every_standing_hand(self, scripted_table):
        first, second = nobust(), darwin()
        first.name = "first"
        table = scripted_table("10H 10C 9D 6S 8C 10S 6H", [first, second])
        table.play_round()
        assert first.score.won == 1
        assert second.score.won == 1
        assert first.cash == 1010
        assert second.cash == 1010

    def test_broke_player_sits_out(self, scripted_table):
        broke = Player("broke", NoBustStrategy(), purse=5)
        playing = nobust()
        table = scripted_table("10H 10C 8D 8S", [broke, playing])
        table.play_round()
        assert broke.score.total_played == 0
        assert broke.cash == 5
        assert playing.score.pushed == 1

    def test_cards_return_to_discard(self, scripted_table):
        player = darwin()
        table = scripted_table("10H 8H 6D 8S 10C 10D 9S", [player])
        table.play_round()
        assert table.shoe.cards_left == 0
        assert table.discard.cards_left == 7
        assert table.dealer.hands == []

    def test_round_ends_ready_for_next_deal(self, scripted_table):
        table = scripted_table("10H 10C 8D 8S", [nobust()])
        table.play_round()
        assert table.rounds_played == 1
        assert isinstance(table.current_state, DealingState)


class TestTableActions:
    def test_needs_players(self, scripted_rules):
        with pytest.raises(ValueError):
            Table(scripted_rules, [])

    def test_fresh_shoe(self):
        rules = TableRules(min_bet=10, num_decks=2)
        table = Table(rules, [nobust()], rng=random.Random(1))
        assert table.shoe.cards_left == 104
        assert 10 <= table.reshuffle_limit < 10 + 5

    def test_draw_from_empty_shoe_reshuffles_discards(self, scripted_table, cards):
        table = scripted_table("AH", [nobust()])
        shuffled = []
        table.events.on(TableEventType.SHOE_SHUFFLED, shuffled.append)
        table.draw_card()
        table.discard_cards(cards("KH QH"))
        card = table.draw_card()
        assert card in cards("KH QH")
        assert table.shoe.cards_left == 1
        assert shuffled == [{"cards_left": 2}]

    def test_face_down_card_not_exposed(self, scripted_table):
        table = scripted_table("AH 2H", [nobust()])
        seen = []
        table.events.on(TableEventType.CARD_EXPOSED, lambda e: seen.append(e["card"]))
        hole = table.draw_card(face_down=True)
        up = table.draw_card()
        assert seen == [up]
        assert seen[0] is not up
        assert hole not in seen

    def test_hit_twenty_one_raises(self, scripted_table, cards):
        table = scripted_table("2H", [nobust()])
        hand = BlackjackHand(bet=ChipStack(10))
        for card in cards("AH KH"):
            hand.add_card(card)
        with pytest.raises(InvalidActionError):
            table.hit(hand)

    def test_double_down_mismatched_bet(self, scripted_table, cards):
        table = scripted_table("2H", [nobust()])
        hand = BlackjackHand(bet=ChipStack(10))
        for card in cards("5H 6H"):
            hand.add_card(card)
        with pytest.raises(InvalidActionError):
            table.double_down(hand, ChipStack(20))

    def test_double_down_twenty_one_raises(self, scripted_table, cards):
        table = scripted_table("2H", [nobust()])
        hand = BlackjackHand(bet=ChipStack(10))
        for card in cards("AH KH"):
            hand.add_card(card)
        bet = ChipStack(10)
        with pytest.raises(InvalidActionError):
            table.double_down(hand, bet)
        assert hand.bet.value == 10
        assert bet.value == 10
        assert len(hand) == 2
        assert table.shoe.cards_left == 1

    def test_double_down_over_table_maximum(self, scripted_table, cards):
        rules = TableRules(min_bet=10, max_bet=15, num_decks=1)
        table = scripted_table("2H", [nobust()], rules)
        hand = BlackjackHand(bet=ChipStack(10))
        for card in cards("5H 6H"):
            hand.add_card(card)
        with pytest.raises(TableLimitError):
            table.double_down(hand, ChipStack(10))
        assert len(hand) == 2

    def test_split_non_pair_raises(self, scripted_table, cards):
        player = nobust()
        table = scripted_table("2H 3H", [player])
        hand = BlackjackHand(bet=ChipStack(10))
        for card in cards("8H 9H"):
            hand.add_card(card)
        with pytest.raises(InvalidActionError):
            table.split(hand, player, ChipStack(10))

    def test_pay_is_tracked(self, scripted_table):
        table = scripted_table("2H", [nobust()])
        assert table.pay(15).value == 15
        assert table.pay(5).value == 5
        assert table.paid_out == 20

    def test_round_events(self, scripted_table):
        table = scripted_table("10H 10C 8D 8S", [nobust()])
        events = []
        table.events.on(TableEventType.ROUND_STARTED, lambda e: events.append(("start", e["round"])))
        table.events.on(TableEventType.ROUND_ENDED, lambda e: events.append(("end", e["round"])))
        table.play_round()
        assert events == [("start", 1), ("end", 1)]

    def test_csv_and_scoreboard(self, scripted_table):
        first, second = nobust(), darwin()
        table = scripted_table("2H", [first, second])
        assert table.csv_header()[0] == "nobust Cash"
        assert table.csv_header()[5] == "darwin Cash"
        assert table.csv_row() == [1000, 0, 0, 0, 0, 1000, 0, 0, 0, 0]
        assert table.scoreboard().splitlines()[0] == "[nobust]: Cash=1000"

    def test_scoreboard_includes_table_totals(self, scripted_table):
        first, second = nobust(), nobust()
        first.name, second.name = "a", "b"
        # a pushes 18 against 18, b wins with 19
        table = scripted_table("10H 10C 10S 8D 8S 9C", [first, second])
        table.play_round()

        board = table.scoreboard()

        assert board.startswith("[a]: Cash=1000\n  [Total/W-L-P]= 1 / 0-0-1\n[b]: Cash=1010")
        assert "Totals on hands played\n  [Total/W-L-P]= 2 / 1-0-1" in board
        assert "Streak frequency where player Won:" in board
        assert "  Length 1: 1 (100.00%)" in board


class TestSeededPlay:
    @pytest.fixture
    def table(self):
        rules = TableRules(min_bet=10, max_bet=1000, num_decks=2)
        kinds = ["wiki", "darwin_cc", "positive_prog", "nobust", "dealer", "darwin"]
        players = [PlayerRegistry.create(kind, kind, 10_000) for kind in kinds]
        return Table(rules, players, rng=random.Random(42))

    def test_chips_and_cards_are_conserved(self, table):
        start = sum(p.cash for p in table.players)
        for _ in range(300):
            table.play_round()
            assert table.shoe.cards_left + table.discard.cards_left == 104
            purses = sum(p.cash for p in table.players)
            assert purses + table.house.value == start + table.paid_out
            assert all(not p.hands and not p.insurance for p in table.players)

    def test_scores_are_consistent(self, table):
        for _ in range(300):
            table.play_round()
        for player in table.players:
            score = player.score
            assert score.total_played == score.won + score.lost + score.pushed
            assert score.hard.sum() + score.soft.sum() == score.total_played
            lengths = np.arange(1, MAX_STREAK_LEN + 1)
            assert (score.streak.streaks[GameResult.WON] * lengths).sum() == score.won
        assert table.aggregate_score().total_played == sum(
            p.score.total_played for p in table.players
        )

    def test_same_seed_same_outcome(self):
        def run(seed):
            rules = TableRules(min_bet=10, num_decks=2)
            players = [PlayerRegistry.create(k, k, 5000) for k in ("darwin", "darwin_cc")]
            table = Table(rules, players, rng=random.Random(seed))
            for _ in range(100):
                table.play_round()
            return table.csv_row()

        assert run(7) == run(7)
