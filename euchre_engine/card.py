"""
Card and Suit definitions for Euchre
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Suit(Enum):
    """Card suits in Euchre"""
    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, s: str) -> "Suit":
        """Create Suit from a letter, a suit name or a suit symbol"""
        mapping = {
            "C": cls.CLUBS,
            "D": cls.DIAMONDS,
            "H": cls.HEARTS,
            "S": cls.SPADES,
            "CLUBS": cls.CLUBS,
            "DIAMONDS": cls.DIAMONDS,
            "HEARTS": cls.HEARTS,
            "SPADES": cls.SPADES,
            "♣": cls.CLUBS,
            "♦": cls.DIAMONDS,
            "♥": cls.HEARTS,
            "♠": cls.SPADES,
        }
        try:
            return mapping[s.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid suit: {s!r}") from None

    def same_color(self) -> "Suit":
        """Get the other suit of the same color (for determining left bower)"""
        partners = {
            Suit.CLUBS: Suit.SPADES,
            Suit.SPADES: Suit.CLUBS,
            Suit.DIAMONDS: Suit.HEARTS,
            Suit.HEARTS: Suit.DIAMONDS,
        }
        return partners[self]


class Rank(Enum):
    """Card ranks in Euchre (9 through Ace)"""
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self):
        return self.code

    @property
    def code(self) -> str:
        codes = {9: "9", 10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"}
        return codes[self.value]

    @classmethod
    def from_string(cls, s: str) -> "Rank":
        """Create Rank from string representation"""
        mapping = {
            "9": cls.NINE,
            "10": cls.TEN,
            "T": cls.TEN,
            "J": cls.JACK,
            "Q": cls.QUEEN,
            "K": cls.KING,
            "A": cls.ACE,
        }
        try:
            return mapping[s.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid rank: {s!r}") from None


RIGHT_BOWER_VALUE = 1000
LEFT_BOWER_VALUE = 900
TRUMP_BASE_VALUE = 100


@dataclass(frozen=True)
class Card:
    """A single Euchre card. Compared for trick-taking only through value()"""

    suit: Suit
    rank: Rank

    def __str__(self):
        return self.code

    def __repr__(self):
        return f"Card({self.suit.name}, {self.rank.name})"

    @property
    def code(self) -> str:
        """Two character wire code, e.g. '9H', 'TC', 'JD'"""
        return f"{self.rank.code}{self.suit.value}"

    def is_bower(self, trump: Suit) -> bool:
        """Check if this card is a bower (Jack of trump or same color)"""
        return self.is_right_bower(trump) or self.is_left_bower(trump)

    def is_right_bower(self, trump: Suit) -> bool:
        """Check if this card is the right bower (Jack of trump suit)"""
        return self.rank == Rank.JACK and self.suit == trump

    def is_left_bower(self, trump: Suit) -> bool:
        """Check if this card is the left bower (Jack of same color)"""
        return self.rank == Rank.JACK and self.suit == trump.same_color()

    def is_trump(self, trump: Optional[Suit]) -> bool:
        return trump is not None and self.effective_suit(trump) == trump

    def effective_suit(self, trump: Optional[Suit]) -> Suit:
        """Get the effective suit of the card (left bower counts as trump)"""
        if trump and self.is_left_bower(trump):
            return trump
        return self.suit

    def value(self, trump: Suit, lead_suit: Optional[Suit] = None) -> int:
        """
        Get card value for comparison in a trick.
        Higher value wins the trick; 0 means the card cannot win.
        """
        if self.is_right_bower(trump):
            return RIGHT_BOWER_VALUE

        # Left bower sits between the right bower and the trump Ace
        if self.is_left_bower(trump):
            return LEFT_BOWER_VALUE

        effective_suit = self.effective_suit(trump)

        if effective_suit == trump:
            return TRUMP_BASE_VALUE + self.rank.value

        if lead_suit and effective_suit == lead_suit:
            return self.rank.value

        return 0

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """
        Create a Card from string like '9C', 'AS', 'JH', 'TD' or '10D'.
        """
        if not isinstance(s, str) or len(s.strip()) < 2:
            raise ValueError(f"Invalid card string: {s!r}")

        s = s.strip()
        rank = Rank.from_string(s[:-1])
        suit = Suit.from_string(s[-1])

        return cls(suit, rank)
