"""
This module drives a blackjack round using the state design pattern. A round
moves through the following states, each of which does its work and then
hands the table to the next one:

DealingState: antes are collected and two cards dealt to every active seat.
OfferInsuranceState: insurance is offered when the dealer shows an Ace.
DealerNaturalState: a dealer natural pays insurance and ends play at once.
PlayersTurnState: naturals are paid, then each player plays every hand.
DealersTurnState: the hole card is exposed and the dealer plays.
SettlementState: remaining hands are settled against the dealer.
ReshuffleState: the shoe is reshuffled once it runs below the reshuffle point.
EndRoundState: the round is counted and the table is reset for the next deal.
"""

from abc import ABC, abstractmethod

from bjsim.blackjack.constants import GameResult
from bjsim.blackjack.decision_logger import decision_logger
from bjsim.blackjack.hand import BlackjackHand
from bjsim.events import TableEventType


class GameState(ABC):
    """
    Abstract base class for round states.
    """

    @abstractmethod
    def handle(self, table) -> None:
        """Do this state's work and move the table on."""

    def __str__(self) -> str:
        return self.__class__.__name__


class DealingState(GameState):
    """
    The state where antes are taken and the cards are dealt.
    """

    def handle(self, table):
        table.events.emit(
            TableEventType.ROUND_STARTED, {"round": table.rounds_played + 1}
        )
        decision_logger.log_round_start(
            table.rounds_played + 1, [p.name for p in table.players]
        )
        self.take_antes(table)
        self.deal(table)
        table.set_state(OfferInsuranceState())

    def take_antes(self, table):
        table.dealer.hands = [BlackjackHand()]
        for player in table.players:
            ante = player.request_ante()
            if ante is not None:
                player.hands.append(BlackjackHand(bet=ante))

    def deal(self, table):
        """
        Hole card to the dealer, one card to each seat, the dealer's up card,
        then a second card to each seat.
        """
        dealer_hand = table.dealer.hand
        active = [player for player in table.players if player.hands]

        dealer_hand.add_card(table.draw_card(face_down=True))
        for player in active:
            player.hands[0].add_card(table.draw_card())
        dealer_hand.add_card(table.draw_card())
        for player in active:
            player.hands[0].add_card(table.draw_card())

        table.up_card = dealer_hand.cards[1]


class OfferInsuranceState(GameState):
    """
    The state where insurance is offered if the dealer shows an Ace.
    """

    def handle(self, table):
        if table.up_card.is_ace:
            for player in table.players:
                if len(player.hands) == 1:
                    stake = player.offer_insurance(player.hands[0])
                    if stake is not None:
                        player.insurance = stake
        table.set_state(DealerNaturalState())


class DealerNaturalState(GameState):
    """
    The state where the dealer checks for a natural.

    With a natural the hole card is exposed, insurance pays 2:1, and play
    goes straight to settlement. Otherwise the house keeps every insurance
    stake and the players take their turns.
    """

    def handle(self, table):
        dealer_hand = table.dealer.hand
        if dealer_hand.value == 21:
            table.expose(dealer_hand.cards[0])
            for player in table.players:
                if player.insurance:
                    stake = player.insurance.value
                    player.accept_chips(player.insurance)
                    player.accept_chips(table.pay(stake * table.rules.insurance_payout))
            table.set_state(SettlementState())
        else:
            for player in table.players:
                if player.insurance:
                    table.house.add_chips(player.insurance)
            table.set_state(PlayersTurnState())


class PlayersTurnState(GameState):
    """The state where each player in turn plays all of their hands."""

    def handle(self, table):
        for player in table.players:
            if not player.hands:
                continue
            if player.hands[0].is_natural:
                self.pay_natural(table, player, player.hands[0])
                continue

            # Splits append hands while this loop runs
            i = 0
            while i < len(player.hands):
                player.play_hand(player.hands[i], table.up_card)
                i += 1

            for hand in [h for h in player.hands if h.is_busted]:
                player.score.record_outcome(GameResult.LOST, table.up_card, hand)
                table.house.add_chips(hand.pay_out())
                table.discard_cards(hand.return_cards())
                player.hands.remove(hand)
        table.set_state(DealersTurnState())

    def pay_natural(self, table, player, hand):
        """Pay a natural 3:2 and take the hand out of play."""
        bet = hand.bet.value
        player.score.record_outcome(GameResult.WON, table.up_card, hand)
        player.accept_chips(hand.pay_out())
        player.accept_chips(table.pay(int(bet * table.rules.blackjack_payout)))
        table.discard_cards(hand.return_cards())
        player.hands.remove(hand)


class DealersTurnState(GameState):
    """
    The state where the dealer exposes the hole card and plays.
    """

    def handle(self, table):
        dealer = table.dealer
        table.expose(dealer.hand.cards[0])
        dealer.play_hand(dealer.hand, table.up_card)
        table.set_state(SettlementState())


class SettlementState(GameState):
    """
    The state where every remaining hand is settled against the dealer.
    """

    def handle(self, table):
        dealer_value = table.dealer.hand.value
        for player in table.players:
            for hand in player.hands:
                result = self.settle(table, player, hand, dealer_value)
                player.score.record_outcome(result, table.up_card, hand)
                table.discard_cards(hand.return_cards())
            player.hands = []
        table.discard_cards(table.dealer.hand.return_cards())
        table.dealer.hands = []
        table.set_state(ReshuffleState())

    def settle(self, table, player, hand, dealer_value) -> GameResult:
        value = hand.value
        if dealer_value > 21 or value > dealer_value:
            winnings = table.pay(hand.bet.value)
            player.accept_chips(hand.pay_out())
            player.accept_chips(winnings)
            return GameResult.WON
        if value < dealer_value:
            table.house.add_chips(hand.pay_out())
            return GameResult.LOST
        player.accept_chips(hand.pay_out())
        return GameResult.PUSHED


class ReshuffleState(GameState):
    """
    The state where the shoe is replenished once it runs low.
    """

    def handle(self, table):
        if table.shoe.cards_left < table.reshuffle_limit:
            table.reshuffle()
        table.set_state(EndRoundState())


class EndRoundState(GameState):
    """
    The state where the round is ending.
    """

    def handle(self, table):
        table.rounds_played += 1
        decision_logger.log_round_end(
            table.rounds_played, {p.name: p.cash for p in table.players}
        )
        table.events.emit(TableEventType.ROUND_ENDED, {"round": table.rounds_played})
        table.set_state(DealingState())
