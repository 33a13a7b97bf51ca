"""
Trick management for Euchre
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .card import Card, Suit
from .errors import IllegalCardError, StructuralError, TurnError
from .player import SEATS, next_seat

TRICKS_PER_ROUND = 5


@dataclass(frozen=True)
class CardPlay:
    """One card laid on a trick. Immutable once recorded"""

    seat: int
    card: Card
    play_order: int


@dataclass(frozen=True)
class Trick:
    """
    A single trick in Euchre.

    Args:
        number: Trick number within the round (0-4)
        lead_seat: Seat of the player who leads
        sitting_out: Partner of a loner, skipped in turn order
    """

    number: int
    lead_seat: int
    plays: Tuple[CardPlay, ...] = ()
    winning_seat: Optional[int] = None
    sitting_out: Optional[int] = None

    def __post_init__(self):
        if self.number not in range(TRICKS_PER_ROUND):
            raise StructuralError(f"Trick number {self.number} out of range")
        if self.lead_seat not in SEATS:
            raise StructuralError(f"Lead seat {self.lead_seat} out of range")
        if self.sitting_out is not None and self.lead_seat == self.sitting_out:
            raise StructuralError(f"Seat {self.lead_seat} is sitting out and cannot lead")

    @property
    def seat_order(self) -> List[int]:
        """Seats in the order they play this trick"""
        order = []
        seat = self.lead_seat
        for _ in SEATS:
            if seat != self.sitting_out:
                order.append(seat)
            seat = next_seat(seat)
        return order

    @property
    def size(self) -> int:
        """Number of plays that complete this trick"""
        return len(self.seat_order)

    def is_complete(self) -> bool:
        """Check if every participating player has played"""
        return len(self.plays) == self.size

    @property
    def current_turn_seat(self) -> Optional[int]:
        if self.is_complete():
            return None
        return self.seat_order[len(self.plays)]

    def lead_suit(self, trump: Optional[Suit]) -> Optional[Suit]:
        """Effective suit of the first card, or None before anyone leads"""
        if not self.plays:
            return None
        return self.plays[0].card.effective_suit(trump)

    def get_card_for_seat(self, seat: int) -> Optional[Card]:
        """Get the card played by a specific seat"""
        for play in self.plays:
            if play.seat == seat:
                return play.card
        return None

    def __str__(self):
        cards_str = ", ".join(f"S{play.seat}: {play.card}" for play in self.plays)
        return f"Trick(#{self.number}, lead={self.lead_seat}, cards=[{cards_str}])"


def determine_winner(plays: Tuple[CardPlay, ...], trump: Suit, lead_suit: Suit) -> int:
    """
    Determine which seat won the trick.

    Ties are impossible since no two plays share a card.
    """
    if not plays:
        raise StructuralError("Cannot determine winner of an empty trick")

    winning_play = max(plays, key=lambda play: play.card.value(trump, lead_suit))
    return winning_play.seat


def add_play(trick: Trick, seat: int, card: Card, trump: Suit) -> Trick:
    """
    Record `card` played from `seat`.

    Hand legality is the caller's concern; this only enforces turn order.
    The winner is set as soon as the last play lands.
    """
    if trick.is_complete():
        raise IllegalCardError(f"Trick {trick.number} already complete")
    if seat != trick.current_turn_seat:
        raise TurnError(f"Not seat {seat}'s turn (seat {trick.current_turn_seat} to play)")
    if trick.get_card_for_seat(seat) is not None:
        raise IllegalCardError(f"Seat {seat} already played to trick {trick.number}")

    plays = trick.plays + (CardPlay(seat=seat, card=card, play_order=len(trick.plays)),)
    trick = replace(trick, plays=plays)

    if trick.is_complete():
        winner = determine_winner(plays, trump, trick.lead_suit(trump))
        trick = replace(trick, winning_seat=winner)

    return trick
