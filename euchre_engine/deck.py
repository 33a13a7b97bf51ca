"""
Deck implementation for Euchre
"""

from typing import List, Optional

import numpy as np

from .card import Card, Suit, Rank

DECK_SIZE = 24


def full_deck() -> List[Card]:
    """The 24 canonical Euchre cards (9-A in each suit) in a fixed order"""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def new_shuffled_deck(rng: Optional[np.random.Generator] = None) -> List[Card]:
    """
    Return the 24 cards in a uniformly random order.

    The default PCG64 generator carries far more state than log2(24!) bits,
    so every ordering is reachable.
    """
    if rng is None:
        rng = np.random.default_rng()

    cards = full_deck()
    order = rng.permutation(len(cards))
    return [cards[i] for i in order]
