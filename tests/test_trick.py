"""
Tests for trick turn order and winner determination
"""

import pytest

from euchre_engine.card import Card, Suit
from euchre_engine.errors import IllegalCardError, StructuralError, TurnError
from euchre_engine.trick import Trick, add_play, determine_winner

C = Card.from_string


def play_out(trick, trump, *seat_cards):
    for seat, code in seat_cards:
        trick = add_play(trick, seat, C(code), trump)
    return trick


class TestTurnOrder:
    """Test who plays next"""

    def test_lead_seat_plays_first(self):
        trick = Trick(number=0, lead_seat=2)
        assert trick.current_turn_seat == 2
        assert trick.seat_order == [2, 3, 0, 1]

    def test_turn_advances_clockwise(self):
        trick = play_out(Trick(number=0, lead_seat=3), Suit.HEARTS, (3, "9S"), (0, "TS"))
        assert trick.current_turn_seat == 1

    def test_out_of_turn_rejected(self):
        trick = Trick(number=0, lead_seat=1)
        with pytest.raises(TurnError, match="Not seat 2's turn"):
            add_play(trick, 2, C("9S"), Suit.HEARTS)

    def test_play_order_recorded(self):
        trick = play_out(Trick(number=0, lead_seat=1), Suit.HEARTS, (1, "9S"), (2, "TS"))
        assert [(p.seat, p.play_order) for p in trick.plays] == [(1, 0), (2, 1)]

    def test_complete_trick_rejects_more_cards(self):
        trick = play_out(
            Trick(number=0, lead_seat=0), Suit.HEARTS,
            (0, "9S"), (1, "TS"), (2, "QS"), (3, "KS"),
        )
        assert trick.is_complete()
        assert trick.current_turn_seat is None
        with pytest.raises(IllegalCardError, match="already complete"):
            add_play(trick, 0, C("AS"), Suit.HEARTS)

    def test_loner_partner_is_skipped(self):
        trick = Trick(number=0, lead_seat=0, sitting_out=2)
        assert trick.seat_order == [0, 1, 3]
        trick = play_out(trick, Suit.CLUBS, (0, "9S"), (1, "TS"))
        assert trick.current_turn_seat == 3
        trick = add_play(trick, 3, C("AS"), Suit.CLUBS)
        assert trick.is_complete()
        assert trick.winning_seat == 3


class TestStructure:
    """Test trick construction"""

    def test_number_out_of_range(self):
        with pytest.raises(StructuralError):
            Trick(number=5, lead_seat=0)

    def test_seat_out_of_range(self):
        with pytest.raises(StructuralError):
            Trick(number=0, lead_seat=4)

    def test_sitting_out_seat_cannot_lead(self):
        with pytest.raises(StructuralError):
            Trick(number=1, lead_seat=2, sitting_out=2)


class TestWinner:
    """Test trump and bower ranking"""

    def test_right_bower_wins(self):
        trick = play_out(
            Trick(number=1, lead_seat=1), Suit.HEARTS,
            (1, "9S"), (2, "JH"), (3, "TS"), (0, "KS"),
        )
        assert trick.winning_seat == 2

    def test_left_bower_wins(self):
        trick = play_out(
            Trick(number=1, lead_seat=1), Suit.HEARTS,
            (1, "9S"), (2, "JD"), (3, "TS"), (0, "KS"),
        )
        assert trick.winning_seat == 2

    def test_highest_lead_suit_wins_without_trump(self):
        trick = play_out(
            Trick(number=1, lead_seat=1), Suit.HEARTS,
            (1, "9S"), (2, "AS"), (3, "TS"), (0, "KS"),
        )
        assert trick.winning_seat == 2

    def test_right_bower_beats_left_bower(self):
        trick = play_out(
            Trick(number=0, lead_seat=0), Suit.HEARTS,
            (0, "JD"), (1, "AH"), (2, "JH"), (3, "KH"),
        )
        assert trick.winning_seat == 2

    def test_left_bower_beats_trump_ace(self):
        trick = play_out(
            Trick(number=0, lead_seat=0), Suit.HEARTS,
            (0, "AH"), (1, "JD"), (2, "KH"), (3, "9H"),
        )
        assert trick.winning_seat == 1

    def test_led_left_bower_leads_trump(self):
        trick = play_out(Trick(number=0, lead_seat=0), Suit.HEARTS, (0, "JD"))
        assert trick.lead_suit(Suit.HEARTS) == Suit.HEARTS

    def test_off_suit_ace_loses_to_lead_nine(self):
        trick = play_out(
            Trick(number=0, lead_seat=0), Suit.HEARTS,
            (0, "9S"), (1, "AC"), (2, "AD"), (3, "JC"),
        )
        assert trick.winning_seat == 0

    def test_lowest_trump_beats_everything_else(self):
        trick = play_out(
            Trick(number=0, lead_seat=3), Suit.CLUBS,
            (3, "AD"), (0, "KD"), (1, "9C"), (2, "QD"),
        )
        assert trick.winning_seat == 1

    def test_empty_trick_has_no_winner(self):
        with pytest.raises(StructuralError):
            determine_winner((), Suit.HEARTS, Suit.SPADES)
