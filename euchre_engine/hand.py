"""
Hand custody and the follow-suit rule
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .card import Card, Suit
from .deck import new_shuffled_deck
from .errors import CardNotInHandError, DealError
from .player import Player, SEATS

HAND_SIZE = 5

# A hand is an ordered tuple of distinct cards
Hand = Tuple[Card, ...]


@dataclass(frozen=True)
class Deal:
    """Result of dealing one round"""

    hands: Dict[int, Hand]
    up_card: Card
    kitty: Tuple[Card, ...]


def deal(players: Sequence[Player], rng: Optional[np.random.Generator] = None) -> Deal:
    """
    Slice a freshly shuffled deck into four hands of five in seat order.

    The 21st card is turned up; the last three stay in the kitty.
    """
    seats = sorted(p.seat for p in players if p.seat is not None)
    if seats != list(SEATS):
        raise DealError(f"Cannot deal without 4 seated players (seated: {seats})")

    cards = new_shuffled_deck(rng)
    hands = {
        seat: tuple(cards[seat * HAND_SIZE:(seat + 1) * HAND_SIZE])
        for seat in SEATS
    }
    dealt = len(SEATS) * HAND_SIZE
    return Deal(hands, cards[dealt], tuple(cards[dealt + 1:]))


def holds_suit(hand: Hand, suit: Suit, trump: Optional[Suit]) -> bool:
    """Check if the hand holds any card whose effective suit is `suit`"""
    return any(card.effective_suit(trump) == suit for card in hand)


def is_legal_play(hand: Hand, card: Card, lead_suit: Optional[Suit], trump: Optional[Suit]) -> bool:
    """
    A card is legal if the hand holds it and it either leads the trick,
    follows the lead suit, or the hand is void in the lead suit.

    Left bower is considered trump suit for following purposes.
    """
    if card not in hand:
        return False
    if lead_suit is None:
        return True
    if card.effective_suit(trump) == lead_suit:
        return True
    return not holds_suit(hand, lead_suit, trump)


def valid_cards(hand: Hand, lead_suit: Optional[Suit], trump: Optional[Suit]) -> List[Card]:
    """Get list of cards from the hand that may legally be played"""
    return [card for card in hand if is_legal_play(hand, card, lead_suit, trump)]


def remove(hand: Hand, card: Card) -> Hand:
    """Return the hand without `card`"""
    if card not in hand:
        raise CardNotInHandError(f"Card {card} not in hand")
    return tuple(c for c in hand if c != card)


def add(hand: Hand, card: Card) -> Hand:
    """Return the hand with `card` added (the dealer picking up the up-card)"""
    if card in hand:
        raise DealError(f"Card {card} already in hand")
    return hand + (card,)
