"""
Round scoring for Euchre
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .errors import StructuralError
from .player import TEAMS, team_for_seat
from .trick import TRICKS_PER_ROUND, Trick

WINNING_SCORE = 10


class ScoringReason(Enum):
    """How a round's points were earned"""
    MADE = "made"
    SWEEP = "sweep"
    LONER_SWEEP = "loner_sweep"
    EUCHRE = "euchre"
    THROWN_IN = "thrown_in"


@dataclass(frozen=True)
class RoundScore:
    """Outcome of a round, fixed once the round completes"""

    reason: ScoringReason
    points: int = 0
    winning_team: Optional[int] = None
    scoring_team: Optional[int] = None
    tricks_won: Tuple[int, int] = (0, 0)


def tricks_won_by_team(tricks: Sequence[Trick], team: int) -> int:
    return sum(
        1 for trick in tricks
        if trick.winning_seat is not None and team_for_seat(trick.winning_seat) == team
    )


def score_round(tricks: Sequence[Trick], maker_team: int, loner: bool = False) -> RoundScore:
    """
    Score five completed tricks.

    - Defenders take the majority: euchre, defenders score 2
    - Makers take all five alone: loner sweep, 4
    - Makers take all five: sweep, 2
    - Makers take three or four: made, 1
    """
    if len(tricks) != TRICKS_PER_ROUND or not all(t.is_complete() for t in tricks):
        raise StructuralError(f"Cannot score a round with {len(tricks)} tricks played")
    if maker_team not in TEAMS:
        raise StructuralError(f"Invalid maker team {maker_team}")

    tricks_won = (tricks_won_by_team(tricks, 0), tricks_won_by_team(tricks, 1))
    winning_team = 0 if tricks_won[0] > tricks_won[1] else 1

    if winning_team != maker_team:
        reason, points = ScoringReason.EUCHRE, 2
    elif tricks_won[maker_team] == TRICKS_PER_ROUND and loner:
        reason, points = ScoringReason.LONER_SWEEP, 4
    elif tricks_won[maker_team] == TRICKS_PER_ROUND:
        reason, points = ScoringReason.SWEEP, 2
    else:
        reason, points = ScoringReason.MADE, 1

    return RoundScore(
        reason=reason,
        points=points,
        winning_team=winning_team,
        scoring_team=winning_team,
        tricks_won=tricks_won,
    )


def thrown_in_score() -> RoundScore:
    """A hand nobody called: nothing for either team"""
    return RoundScore(reason=ScoringReason.THROWN_IN)
