"""
A single round (hand) of Euchre: deal, trump selection state and trick play
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from . import hand as hands_
from .card import Card, Suit
from .errors import CardNotInHandError, IllegalCardError, PhaseError, StructuralError, TurnError
from .hand import Hand
from .player import SEATS, Player, next_seat, partner_seat
from .scoring import RoundScore, ScoringReason, score_round, tricks_won_by_team
from .trick import TRICKS_PER_ROUND, Trick, add_play


class BiddingPhase(Enum):
    """Trump selection phases of a round"""
    ORDERING_UP = "ordering_up"  # Can order the up-card's suit
    CALLING_TRUMP = "calling_trump"  # Can call any suit except the up-card's
    TRUMP_SELECTED = "trump_selected"


@dataclass(frozen=True)
class Round:
    """
    Immutable snapshot of one round.

    Hands are keyed by seat. `score` is set exactly once, when the fifth
    trick completes or the hand is thrown in, and is never recomputed.
    """

    number: int
    dealer_seat: int
    up_card: Card
    hands: Dict[int, Hand]
    kitty: Tuple[Card, ...] = ()
    phase: BiddingPhase = BiddingPhase.ORDERING_UP
    current_bidder_seat: Optional[int] = None
    trump_suit: Optional[Suit] = None
    maker_team: Optional[int] = None
    maker_seat: Optional[int] = None
    ordered_up: bool = False
    loner: bool = False
    discarded: Optional[Card] = None
    tricks: Tuple[Trick, ...] = ()
    score: Optional[RoundScore] = field(default=None)

    def __post_init__(self):
        if self.number < 1:
            raise StructuralError(f"Round number {self.number} must start at 1")
        if self.dealer_seat not in SEATS:
            raise StructuralError(f"Dealer seat {self.dealer_seat} out of range")

    @property
    def first_bidder_seat(self) -> int:
        return next_seat(self.dealer_seat)

    @property
    def sitting_out(self) -> Optional[int]:
        """Partner of a loner, who contributes no cards to any trick"""
        if self.loner and self.maker_seat is not None:
            return partner_seat(self.maker_seat)
        return None

    @property
    def first_leader(self) -> int:
        """Seat left of the dealer, skipping a loner's partner"""
        seat = self.first_bidder_seat
        if seat == self.sitting_out:
            seat = next_seat(seat)
        return seat

    @property
    def dealer_needs_to_discard(self) -> bool:
        return (
            self.ordered_up
            and self.phase == BiddingPhase.TRUMP_SELECTED
            and self.discarded is None
        )

    @property
    def current_trick(self) -> Optional[Trick]:
        return self.tricks[-1] if self.tricks else None

    @property
    def completed(self) -> bool:
        return self.score is not None

    @property
    def thrown_in(self) -> bool:
        return self.score is not None and self.score.reason == ScoringReason.THROWN_IN

    @property
    def winning_team(self) -> Optional[int]:
        return self.score.winning_team if self.score else None

    @property
    def points(self) -> int:
        return self.score.points if self.score else 0

    def tricks_won_by_team(self, team: int) -> int:
        return tricks_won_by_team(self.tricks, team)

    def hand(self, seat: int) -> Hand:
        return self.hands.get(seat, ())

    @property
    def turn_seat(self) -> Optional[int]:
        """Seat expected to act next, whatever the phase"""
        if self.completed:
            return None
        if self.phase != BiddingPhase.TRUMP_SELECTED:
            return self.current_bidder_seat
        if self.dealer_needs_to_discard:
            return self.dealer_seat
        trick = self.current_trick
        return trick.current_turn_seat if trick else None


def deal_round(
    players: Sequence[Player],
    number: int,
    dealer_seat: int,
    rng: Optional[np.random.Generator] = None,
) -> Round:
    """Create a freshly dealt round; bidding starts left of the dealer"""
    dealt = hands_.deal(players, rng)
    return Round(
        number=number,
        dealer_seat=dealer_seat,
        up_card=dealt.up_card,
        hands=dealt.hands,
        kitty=dealt.kitty,
        current_bidder_seat=next_seat(dealer_seat),
    )


def new_trick(round_: Round, lead_seat: int) -> Trick:
    """Build the next trick of the round, checking the table layout"""
    number = len(round_.tricks)
    if number >= TRICKS_PER_ROUND:
        raise StructuralError(f"Round {round_.number} already has {number} tricks")
    if number == 0 and lead_seat != round_.first_leader:
        raise StructuralError(
            f"First trick must be led by seat {round_.first_leader}, not {lead_seat}"
        )
    return Trick(number=number, lead_seat=lead_seat, sitting_out=round_.sitting_out)


def start_tricks(round_: Round) -> Round:
    """Open trick #0 once trump is chosen (and the dealer has discarded)"""
    if round_.completed:
        raise PhaseError(f"Round {round_.number} is complete")
    if round_.phase != BiddingPhase.TRUMP_SELECTED:
        raise PhaseError("Trump has not been selected")
    if round_.dealer_needs_to_discard:
        raise PhaseError("Dealer must discard before tricks start")
    if round_.tricks:
        raise PhaseError("Tricks already started")

    return replace(round_, tricks=(new_trick(round_, round_.first_leader),))


def play_card(round_: Round, seat: int, card: Card) -> Round:
    """
    Play `card` from `seat` into the current trick.

    When a trick completes its winner leads the next one; when the fifth
    trick completes the round is scored.
    """
    if round_.completed:
        raise PhaseError(f"Round {round_.number} is complete")
    trick = round_.current_trick
    if trick is None or trick.is_complete():
        raise PhaseError("No trick in progress")
    if seat == round_.sitting_out:
        raise TurnError(f"Seat {seat} is sitting out this round")
    if seat != trick.current_turn_seat:
        raise TurnError(f"Not seat {seat}'s turn (seat {trick.current_turn_seat} to play)")

    trump = round_.trump_suit
    hand = round_.hand(seat)
    lead_suit = trick.lead_suit(trump)
    if card not in hand:
        raise CardNotInHandError(f"Card {card} not in hand")
    if not hands_.is_legal_play(hand, card, lead_suit, trump):
        raise IllegalCardError(f"Must follow suit {lead_suit}; cannot play {card}")

    trick = add_play(trick, seat, card, trump)
    hands = dict(round_.hands)
    hands[seat] = hands_.remove(hand, card)
    round_ = replace(round_, hands=hands, tricks=round_.tricks[:-1] + (trick,))

    if not trick.is_complete():
        return round_

    if len(round_.tricks) < TRICKS_PER_ROUND:
        return replace(round_, tricks=round_.tricks + (new_trick(round_, trick.winning_seat),))

    return replace(round_, score=score_round(round_.tricks, round_.maker_team, round_.loner))
