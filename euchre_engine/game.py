"""
Main Euchre Game Engine
"""

import secrets
import string
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from . import bidding
from .card import Card
from .errors import (
    CapacityError,
    DealError,
    IllegalBidError,
    IllegalCardError,
    InvalidActionError,
    PhaseError,
    TurnError,
)
from .hand import valid_cards as legal_cards
from .player import TEAMS, Player, next_seat, team_for_seat
from .round import BiddingPhase, Round, deal_round, play_card, start_tricks
from .scoring import WINNING_SCORE
from .trick import Trick

MAX_PLAYERS = 4
CODE_LENGTH = 8
CODE_ALPHABET = string.ascii_uppercase + string.digits


class GameState(Enum):
    """Lifecycle of a game: waiting -> active -> finished, never backwards"""
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class Action(Enum):
    """Actions a seated player may submit"""
    ORDER_UP = "order_up"
    CALL_TRUMP = "call_trump"
    PASS = "pass"
    PLAY_CARD = "play_card"
    DISCARD_CARD = "discard_card"


@dataclass(frozen=True)
class Game:
    """
    Immutable snapshot of a Euchre game.

    `version` grows with every committed transition so stores can detect
    lost updates.
    """

    code: str
    state: GameState = GameState.WAITING
    players: Tuple[Player, ...] = ()
    rounds: Tuple[Round, ...] = ()
    winning_team: Optional[int] = None
    version: int = 0

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def can_start(self) -> bool:
        return len(self.players) == MAX_PLAYERS and self.state == GameState.WAITING

    @property
    def current_round(self) -> Optional[Round]:
        return self.rounds[-1] if self.rounds else None

    def player_for(self, identity: str) -> Optional[Player]:
        for player in self.players:
            if player.identity == identity:
                return player
        return None

    def player_at(self, seat: int) -> Optional[Player]:
        for player in self.players:
            if player.seat == seat:
                return player
        return None

    def team_score(self, team: int) -> int:
        return team_score(self, team)

    @property
    def scores(self) -> Tuple[int, int]:
        return (team_score(self, 0), team_score(self, 1))


def _commit(game: Game, **changes) -> Game:
    return replace(game, version=game.version + 1, **changes)


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def create_game(code: Optional[str] = None) -> Game:
    """Create a new game waiting for players"""
    if code is None:
        code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return Game(code=code)


def join_game(game: Game, identity: str, name: str) -> Tuple[Game, Player]:
    """
    Add a player to the game.

    A caller already in the game gets their existing player back.
    """
    existing = game.player_for(identity)
    if existing is not None:
        return game, existing

    if game.state == GameState.FINISHED:
        raise CapacityError("Game has finished")
    if game.is_full or game.state != GameState.WAITING:
        raise CapacityError("Game is full")

    player = Player(identity=identity, name=name or f"Player {len(game.players) + 1}")
    return _commit(game, players=game.players + (player,)), player


def start_game(game: Game, rng: Optional[np.random.Generator] = None) -> Game:
    """Seat the four players at random, then deal round 1 with a random dealer"""
    if game.state != GameState.WAITING:
        raise PhaseError(f"Cannot start a game that is {game.state.value}")
    if len(game.players) != MAX_PLAYERS:
        raise DealError(f"Exactly {MAX_PLAYERS} players required, have {len(game.players)}")

    rng = _rng(rng)
    order = rng.permutation(MAX_PLAYERS)
    players = tuple(
        replace(game.players[int(index)], seat=seat, team=team_for_seat(seat))
        for seat, index in enumerate(order)
    )
    dealer_seat = int(rng.integers(MAX_PLAYERS))
    first_round = deal_round(players, 1, dealer_seat, rng)

    return _commit(game, state=GameState.ACTIVE, players=players, rounds=(first_round,))


def team_score(game: Game, team: int) -> int:
    """Points credited to `team` across all completed rounds"""
    return sum(
        r.score.points for r in game.rounds
        if r.score is not None and r.score.scoring_team == team
    )


def advance_round(game: Game, rng: Optional[np.random.Generator] = None) -> Game:
    """
    Close out a completed round.

    Finishes the game if a team has reached the winning score, otherwise
    deals the next round with the deal passed to the left.
    """
    if game.state != GameState.ACTIVE:
        raise PhaseError(f"Game is {game.state.value}")
    current = game.current_round
    if current is None or not current.completed:
        raise PhaseError("Current round is still in progress")

    winners = [team for team in TEAMS if team_score(game, team) >= WINNING_SCORE]
    if winners:
        # Only one team scores per round, so a tie is settled by who just scored
        winner = winners[0] if len(winners) == 1 else current.score.scoring_team
        return _commit(game, state=GameState.FINISHED, winning_team=winner)

    next_round = deal_round(
        game.players, current.number + 1, next_seat(current.dealer_seat), _rng(rng)
    )
    return _commit(game, rounds=game.rounds + (next_round,))


def _parse_action(action: Union[Action, str]) -> Action:
    if isinstance(action, Action):
        return action
    try:
        return Action(action)
    except ValueError:
        raise InvalidActionError(f"Invalid action type: {action!r}") from None


def _parse_card(payload: Dict[str, Any]) -> Card:
    card = payload.get("card")
    if isinstance(card, Card):
        return card
    if not card:
        raise InvalidActionError("Card is required")
    try:
        return Card.from_string(card)
    except ValueError as e:
        raise IllegalCardError(f"Invalid card: {e}") from None


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _parse_go_alone(payload: Dict[str, Any]) -> bool:
    value = payload.get("go_alone", payload.get("loner", False))
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise InvalidActionError(f"Invalid go_alone value: {value!r}")


def submit_action(
    game: Game,
    identity: str,
    action: Union[Action, str],
    payload: Optional[Dict[str, Any]] = None,
    rng: Optional[np.random.Generator] = None,
) -> Game:
    """
    Apply one player action and return the new game snapshot.

    Raises an EuchreError subclass, leaving `game` untouched, when the
    action is rejected.
    """
    action = _parse_action(action)
    payload = payload or {}

    if game.state != GameState.ACTIVE:
        raise PhaseError("Game is not active")
    player = game.player_for(identity)
    if player is None:
        raise TurnError("Not in this game")

    round_ = game.current_round
    seat = player.seat

    if action == Action.ORDER_UP:
        round_ = bidding.order_up(round_, seat, go_alone=_parse_go_alone(payload))
    elif action == Action.CALL_TRUMP:
        suit = payload.get("suit", payload.get("trump_suit"))
        if not suit:
            raise IllegalBidError("Invalid trump suit")
        round_ = bidding.call_trump(round_, seat, suit, go_alone=_parse_go_alone(payload))
        round_ = start_tricks(round_)
    elif action == Action.PASS:
        round_ = bidding.pass_bidding(round_, seat)
    elif action == Action.DISCARD_CARD:
        round_ = bidding.dealer_discard(round_, seat, _parse_card(payload))
        round_ = start_tricks(round_)
    elif action == Action.PLAY_CARD:
        round_ = play_card(round_, seat, _parse_card(payload))
    else:
        raise InvalidActionError(f"Unhandled action {action.value}")

    game = _commit(game, rounds=game.rounds[:-1] + (round_,))

    if round_.completed:
        game = advance_round(game, rng)

    return game


def valid_cards(game: Game, identity: str) -> List[Card]:
    """
    Cards the caller may act with right now: legal plays when it is their
    turn in a trick, any card when they are the dealer owing a discard.
    """
    player = game.player_for(identity)
    round_ = game.current_round
    if player is None or round_ is None or game.state != GameState.ACTIVE:
        return []
    if round_.turn_seat != player.seat:
        return []

    hand = round_.hand(player.seat)
    if round_.dealer_needs_to_discard:
        return list(hand)
    trick = round_.current_trick
    if trick is None:
        return []
    return legal_cards(hand, trick.lead_suit(round_.trump_suit), round_.trump_suit)


def legal_actions(game: Game, identity: str) -> List[Action]:
    """Actions the caller could submit without being rejected for turn or phase"""
    player = game.player_for(identity)
    round_ = game.current_round
    if player is None or round_ is None or game.state != GameState.ACTIVE:
        return []
    if round_.turn_seat != player.seat:
        return []

    if round_.phase == BiddingPhase.ORDERING_UP:
        return [Action.ORDER_UP, Action.PASS]
    if round_.phase == BiddingPhase.CALLING_TRUMP:
        return [Action.CALL_TRUMP, Action.PASS]
    if round_.dealer_needs_to_discard:
        return [Action.DISCARD_CARD]
    return [Action.PLAY_CARD]


def _player_view(player: Player) -> Dict[str, Any]:
    return {"name": player.name, "seat": player.seat, "team": player.team}


def _trick_view(trick: Trick) -> Dict[str, Any]:
    return {
        "number": trick.number,
        "lead_seat": trick.lead_seat,
        "winning_seat": trick.winning_seat,
        "current_turn_seat": trick.current_turn_seat,
        "cards_played": [
            {"player_seat": play.seat, "card": play.card.code, "play_order": play.play_order}
            for play in trick.plays
        ],
        "completed": trick.is_complete(),
    }


def _round_view(round_: Round) -> Dict[str, Any]:
    completed_tricks = [t for t in round_.tricks if t.is_complete()]
    return {
        "number": round_.number,
        "dealer_seat": round_.dealer_seat,
        "turned_up_card": round_.up_card.code,
        "trump_selection_phase": round_.phase.value,
        "current_bidder_seat": round_.current_bidder_seat,
        "trump_suit": round_.trump_suit.value if round_.trump_suit else None,
        "maker_team": round_.maker_team,
        "ordered_up": round_.ordered_up,
        "loner": round_.loner,
        "sitting_out": round_.sitting_out,
        "dealer_needs_to_discard": round_.dealer_needs_to_discard,
        "turn_seat": round_.turn_seat,
        "hand_sizes": {str(seat): len(cards) for seat, cards in sorted(round_.hands.items())},
        "tricks_won": {f"team_{team}": round_.tricks_won_by_team(team) for team in TEAMS},
        "current_trick": _trick_view(round_.current_trick) if round_.current_trick else None,
        "last_trick": _trick_view(completed_tricks[-1]) if completed_tricks else None,
        "completed": round_.completed,
        "thrown_in": round_.thrown_in,
        "winning_team": round_.winning_team,
        "points_scored": round_.points,
        "scoring_reason": round_.score.reason.value if round_.score else None,
    }


def get_state(game: Game, identity: Optional[str] = None) -> Dict[str, Any]:
    """
    Snapshot of the game for display.

    Only the caller's own hand is revealed.
    """
    player = game.player_for(identity) if identity is not None else None
    round_ = game.current_round
    hand = round_.hand(player.seat) if player and player.seat is not None and round_ else ()

    return {
        "code": game.code,
        "state": game.state.value,
        "version": game.version,
        "winning_team": game.winning_team,
        "player_count": len(game.players),
        "players": [
            _player_view(p)
            for p in sorted(game.players, key=lambda p: (p.seat is None, p.seat or 0))
        ],
        "scores": {f"team_{team}": team_score(game, team) for team in TEAMS},
        "current_round": _round_view(round_) if round_ else None,
        "previous_round": _round_view(game.rounds[-2]) if len(game.rounds) > 1 else None,
        "current_player": _player_view(player) if player else None,
        "hand": [card.code for card in hand],
        "valid_cards": [card.code for card in valid_cards(game, identity)] if player else [],
        "legal_actions": [a.value for a in legal_actions(game, identity)] if player else [],
    }
