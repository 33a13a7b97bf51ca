"""
Player abstraction for Euchre
"""

from dataclasses import dataclass
from typing import Optional, Tuple

SEATS = (0, 1, 2, 3)
TEAMS = (0, 1)


def team_for_seat(seat: int) -> int:
    """Seats 0 & 2 are team 0, seats 1 & 3 are team 1"""
    return seat % 2


def next_seat(seat: int) -> int:
    """Seat to the left (clockwise)"""
    return (seat + 1) % 4


def partner_seat(seat: int) -> int:
    return (seat + 2) % 4


@dataclass(frozen=True)
class Player:
    """
    A player in a Euchre game.

    Args:
        identity: Stable caller identity (session id or equivalent)
        name: Display name
        seat: Position at table (0-3), assigned at game start
        team: Team number (0 or 1), assigned at game start
    """

    identity: str
    name: str
    seat: Optional[int] = None
    team: Optional[int] = None

    @property
    def is_seated(self) -> bool:
        return self.seat is not None

    @property
    def teammate_seat(self) -> Optional[int]:
        if self.seat is None:
            return None
        return partner_seat(self.seat)

    @property
    def opponent_seats(self) -> Tuple[int, ...]:
        if self.seat is None:
            return ()
        return (next_seat(self.seat), next_seat(partner_seat(self.seat)))

    def is_teammate(self, other: "Player") -> bool:
        return self.team is not None and self.team == other.team and self != other

    def __str__(self):
        return f"{self.name} (seat {self.seat})"
