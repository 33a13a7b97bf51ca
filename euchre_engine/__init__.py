"""
Euchre rules engine
"""

from .card import Card, Suit, Rank
from .deck import new_shuffled_deck
from .errors import (
    EuchreError,
    TurnError,
    PhaseError,
    IllegalCardError,
    CardNotInHandError,
    IllegalBidError,
    StructuralError,
    DealError,
    CapacityError,
    InvalidActionError,
    GameNotFoundError,
    ConcurrentUpdateError,
)
from .player import Player
from .trick import Trick, CardPlay
from .scoring import RoundScore, ScoringReason
from .round import Round, BiddingPhase
from .game import (
    Game,
    GameState,
    Action,
    create_game,
    join_game,
    start_game,
    advance_round,
    submit_action,
    get_state,
)
from .engine import EuchreEngine, create_engine

__version__ = "0.1.0"

__all__ = [
    "Card",
    "Suit",
    "Rank",
    "new_shuffled_deck",
    "EuchreError",
    "TurnError",
    "PhaseError",
    "IllegalCardError",
    "CardNotInHandError",
    "IllegalBidError",
    "StructuralError",
    "DealError",
    "CapacityError",
    "InvalidActionError",
    "GameNotFoundError",
    "ConcurrentUpdateError",
    "Player",
    "Trick",
    "CardPlay",
    "RoundScore",
    "ScoringReason",
    "Round",
    "BiddingPhase",
    "Game",
    "GameState",
    "Action",
    "create_game",
    "join_game",
    "start_game",
    "advance_round",
    "submit_action",
    "get_state",
    "EuchreEngine",
    "create_engine",
]
