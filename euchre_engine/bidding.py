"""
Trump selection for a round.

Bidding runs clockwise from the seat left of the dealer, the dealer
bidding last. In the ordering-up phase a player may order the up-card's
suit as trump, which hands the up-card to the dealer. If all four pass,
the calling-trump phase lets each player name any other suit. If all four
pass again the hand is thrown in.
"""

from dataclasses import replace
from typing import Union

from . import hand as hands_
from .card import Card, Suit
from .errors import IllegalBidError, PhaseError, TurnError
from .player import next_seat, team_for_seat
from .round import BiddingPhase, Round
from .scoring import thrown_in_score


def _check_bidder(round_: Round, seat: int, *phases: BiddingPhase):
    if round_.completed:
        raise PhaseError(f"Round {round_.number} is complete")
    if round_.phase not in phases:
        raise PhaseError(f"Cannot do that during {round_.phase.value}")
    if seat != round_.current_bidder_seat:
        raise TurnError(
            f"Not seat {seat}'s turn to bid (seat {round_.current_bidder_seat} to bid)"
        )


def _select_trump(round_: Round, seat: int, trump: Suit, go_alone: bool, **changes) -> Round:
    return replace(
        round_,
        phase=BiddingPhase.TRUMP_SELECTED,
        current_bidder_seat=None,
        trump_suit=trump,
        maker_team=team_for_seat(seat),
        maker_seat=seat,
        loner=bool(go_alone),
        **changes,
    )


def order_up(round_: Round, seat: int, go_alone: bool = False) -> Round:
    """Current bidder orders the up-card's suit as trump; the dealer picks it up"""
    _check_bidder(round_, seat, BiddingPhase.ORDERING_UP)

    hands = dict(round_.hands)
    hands[round_.dealer_seat] = hands_.add(round_.hand(round_.dealer_seat), round_.up_card)

    return _select_trump(
        round_, seat, round_.up_card.suit, go_alone, ordered_up=True, hands=hands
    )


def pass_bidding(round_: Round, seat: int) -> Round:
    """
    Current bidder passes.

    The dealer passing ends the phase: ordering-up falls through to
    calling-trump, calling-trump throws the hand in.
    """
    _check_bidder(round_, seat, BiddingPhase.ORDERING_UP, BiddingPhase.CALLING_TRUMP)

    if seat != round_.dealer_seat:
        return replace(round_, current_bidder_seat=next_seat(seat))

    if round_.phase == BiddingPhase.ORDERING_UP:
        return replace(
            round_,
            phase=BiddingPhase.CALLING_TRUMP,
            current_bidder_seat=round_.first_bidder_seat,
        )
    if round_.phase == BiddingPhase.CALLING_TRUMP:
        return replace(round_, current_bidder_seat=None, score=thrown_in_score())

    raise PhaseError(f"Cannot pass during {round_.phase.value}")


def call_trump(round_: Round, seat: int, suit: Union[Suit, str], go_alone: bool = False) -> Round:
    """Current bidder names trump; the up-card's suit was refused and is not allowed"""
    _check_bidder(round_, seat, BiddingPhase.CALLING_TRUMP)

    if not isinstance(suit, Suit):
        try:
            suit = Suit.from_string(suit)
        except ValueError:
            raise IllegalBidError(f"Invalid trump suit: {suit!r}") from None

    if suit == round_.up_card.suit:
        raise IllegalBidError(f"Cannot call turned up suit {suit} after it was passed")

    return _select_trump(round_, seat, suit, go_alone)


def dealer_discard(round_: Round, seat: int, card: Card) -> Round:
    """Dealer returns to five cards after picking up the up-card"""
    if not round_.dealer_needs_to_discard:
        raise PhaseError("No discard needed")
    if seat != round_.dealer_seat:
        raise TurnError("Only dealer can discard")

    hands = dict(round_.hands)
    hands[seat] = hands_.remove(round_.hand(seat), card)
    return replace(round_, hands=hands, discarded=card)
