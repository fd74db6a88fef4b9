import pytest
from bjsim.common.card import Card, Face, Suit


def test_card_initialization():
    card = Card(Suit.HEARTS, Face.EIGHT)
    assert card.suit == Suit.HEARTS
    assert card.face == Face.EIGHT


def test_card_repr():
    card = Card(Suit.HEARTS, Face.EIGHT)
    assert repr(card) == "Card(Suit.HEARTS, Face.EIGHT)"


def test_card_str():
    assert str(Card(Suit.HEARTS, Face.EIGHT)) == "8 of ♥"
    assert str(Card(Suit.SPADES, Face.QUEEN)) == "Q of ♠"


@pytest.mark.parametrize(
    "face, value",
    [
        (Face.ACE, 1),
        (Face.TWO, 2),
        (Face.NINE, 9),
        (Face.TEN, 10),
        (Face.JACK, 10),
        (Face.QUEEN, 10),
        (Face.KING, 10),
    ],
)
def test_card_value_is_capped_at_ten(face, value):
    assert Card(Suit.CLUBS, face).value == value


def test_is_ace():
    assert Card(Suit.CLUBS, Face.ACE).is_ace
    assert not Card(Suit.CLUBS, Face.KING).is_ace


def test_invalid_suit():
    with pytest.raises(TypeError):
        Card("Z", Face.EIGHT)


def test_invalid_face():
    with pytest.raises(TypeError):
        Card(Suit.HEARTS, 8)


def test_card_equality_and_hash():
    card1 = Card(Suit.HEARTS, Face.ACE)
    card2 = Card(Suit.HEARTS, Face.ACE)
    card3 = Card(Suit.SPADES, Face.ACE)
    assert card1 == card2
    assert card1 != card3
    assert len({card1, card2, card3}) == 2


def test_card_is_immutable():
    card = Card(Suit.HEARTS, Face.ACE)
    with pytest.raises(AttributeError):
        card.face = Face.KING
    with pytest.raises(AttributeError):
        card.rank = Face.KING


def test_clone_is_equal_but_distinct():
    card = Card(Suit.DIAMONDS, Face.SEVEN)
    clone = card.clone()
    assert clone == card
    assert clone is not card
