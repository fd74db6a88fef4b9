"""
The blackjack table: shoe, discard pile, dealer, seated players, and the
house bank.

`Table.play_round` runs one round through the states in
`bjsim.blackjack.state`. The table is also the only way players get cards:
`hit`, `double_down`, and `split` check the table rules before touching a
hand. Face-up cards are announced on `events` as CARD_EXPOSED with a copy of
the card.

The house collects lost bets and insurance in `house`; winnings are paid out
of an unlimited bank and totalled in `paid_out`, so

    sum(purses) + live bets + house.value == starting purses + paid_out
"""

import logging
import random
from typing import Iterable, List, Optional

from bjsim.blackjack.actor import Dealer, Player, TableLimitError
from bjsim.blackjack.hand import BlackjackHand, InvalidActionError
from bjsim.blackjack.rules import TableRules
from bjsim.blackjack.state import DealingState, EndRoundState, GameState
from bjsim.blackjack.stats import ScorePerHand
from bjsim.common.card import Card
from bjsim.common.chips import ChipStack
from bjsim.common.shoe import Shoe
from bjsim.events import EventEmitter, TableEventType

logger = logging.getLogger("bjsim.table")


class Table:
    """
    An automated blackjack table.

    Attributes
    ----------
    rules : TableRules
        Limits and shoe settings.
    players : list of Player
        Seated players, in play order.
    dealer : Dealer
        The house player.
    shoe, discard : Shoe
        Cards to draw and cards already played.
    house : ChipStack
        Chips the house has collected.
    reshuffle_limit : int
        The shoe is reshuffled at the end of a round with fewer cards left.
    """

    def __init__(
        self,
        rules: TableRules,
        players: Iterable[Player],
        rng: Optional[random.Random] = None,
        shoe: Optional[Shoe] = None,
        events: Optional[EventEmitter] = None,
    ):
        """
        :param rules: table rules
        :param players: players to seat, in play order
        :param rng: random source for shuffles and the reshuffle point
        :param shoe: a prepared shoe, used as-is; by default a fresh shoe is
            filled with `rules.num_decks` decks and shuffled
        :param events: emitter for table events; a new one is created if omitted
        """
        self.players: List[Player] = list(players)
        if not self.players:
            raise ValueError("A table needs at least one player")

        self.rules = rules
        self.rng = rng if rng is not None else random.Random()
        self.events = events if events is not None else EventEmitter()
        self.house = ChipStack()
        self.paid_out = 0
        self.rounds_played = 0
        self.up_card: Optional[Card] = None

        if shoe is None:
            logger.debug("Filling shoe with %d decks", rules.num_decks)
            shoe = Shoe(rng=self.rng)
            shoe.fill(rules.num_decks)
            shoe.shuffle(rules.initial_shuffle)
        self.shoe = shoe
        self.discard = Shoe(rng=self.rng)
        self.reshuffle_limit = self._reshuffle_point()

        self.dealer = Dealer()
        self.dealer.seat(self)
        for player in self.players:
            player.seat(self)

        self.current_state: GameState = DealingState()

    def _reshuffle_point(self) -> int:
        cards = self.shoe.cards_left
        span = int((self.rules.reshuffle_max - self.rules.reshuffle_min) * cards)
        point = int(self.rules.reshuffle_min * cards)
        if span > 0:
            point += self.rng.randrange(span)
        return point

    def set_state(self, state: GameState) -> None:
        """Change the current state of the round."""
        logger.debug("Changing state to %s", state)
        self.current_state = state

    def play_round(self) -> None:
        """Play one round from the deal until it reaches the end state."""
        while not isinstance(self.current_state, EndRoundState):
            self.current_state.handle(self)
        self.current_state.handle(self)

    def draw_card(self, face_down: bool = False) -> Card:
        """Draw from the shoe, reshuffling the discards in if it is empty."""
        if self.shoe.is_empty():
            logger.info("No cards left to deal, reshuffling discards")
            self.reshuffle()
        card = self.shoe.draw()
        if not face_down:
            self.expose(card)
        return card

    def expose(self, card: Card) -> None:
        self.events.emit(TableEventType.CARD_EXPOSED, {"card": card.clone()})

    def reshuffle(self) -> None:
        """Put the shoe's remaining cards on the discards, then shuffle them in as the new shoe."""
        self.discard.return_cards(self.shoe.take_all())
        self.shoe, self.discard = self.discard, self.shoe
        self.shoe.shuffle(self.rules.subsequent_shuffle)
        self.reshuffle_limit = self._reshuffle_point()
        logger.debug(
            "Reshuffled %d cards, next reshuffle below %d",
            self.shoe.cards_left,
            self.reshuffle_limit,
        )
        self.events.emit(
            TableEventType.SHOE_SHUFFLED, {"cards_left": self.shoe.cards_left}
        )

    def discard_cards(self, cards: Iterable[Card]) -> None:
        self.discard.return_cards(cards)

    def pay(self, amount: int) -> ChipStack:
        """Chips from the bank for a winning bet."""
        self.paid_out += amount
        return ChipStack(amount)

    def _check_matching_bet(self, hand: BlackjackHand, bet: ChipStack) -> None:
        if bet.value != hand.bet.value:
            raise InvalidActionError(
                f"Bet of {bet.value} does not match the hand's bet of {hand.bet.value}"
            )
        if not self.rules.check_bet(bet.value + hand.bet.value):
            raise TableLimitError(
                f"Bet of {bet.value + hand.bet.value} is outside the table limits"
            )

    def hit(self, hand: BlackjackHand) -> None:
        """
        Deal one card to `hand`.

        :raises InvalidActionError: if the hand already totals 21 or more
        """
        if hand.value > 20:
            raise InvalidActionError(f"Cannot hit a hand of {hand.value}")
        hand.hit(self.draw_card())

    def double_down(self, hand: BlackjackHand, bet: ChipStack) -> None:
        """
        Double the bet on `hand` and deal it its final card.

        :raises InvalidActionError: if `bet` differs from the hand's bet or the
            hand already totals 21 or more
        :raises TableLimitError: if the doubled bet breaks the table limits
        """
        if hand.value > 20:
            raise InvalidActionError(f"Cannot double a hand of {hand.value}")
        self._check_matching_bet(hand, bet)
        hand.double_down(self.draw_card(), bet)

    def split(self, hand: BlackjackHand, player: Player, new_bet: ChipStack) -> None:
        """
        Split `hand` into two, dealing one card to each, and give the new
        hand to `player`.

        :raises InvalidActionError: if the hand is not a pair or `new_bet` differs from its bet
        :raises TableLimitError: if the combined bet breaks the table limits
        """
        self._check_matching_bet(hand, new_bet)
        new_hand = hand.split(new_bet)
        self.hit(hand)
        self.hit(new_hand)
        player.hands.append(new_hand)

    def aggregate_score(self) -> ScorePerHand:
        """All players' scores summed."""
        total = ScorePerHand()
        for player in self.players:
            total = total + player.score
        return total

    def scoreboard(self) -> str:
        """Every player's line, then the table totals and their streak report."""
        total = self.aggregate_score()
        lines = [player.scoreboard() for player in self.players]
        lines.append("Totals on hands played")
        lines.append(f"  {total.scoreboard()}")
        lines.append(total.streak_report())
        return "\n".join(lines)

    def csv_header(self) -> List[str]:
        header = []
        for player in self.players:
            header.extend(player.csv_header())
        return header

    def csv_row(self) -> List[int]:
        row = []
        for player in self.players:
            row.extend(player.csv_row())
        return row
