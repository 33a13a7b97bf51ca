"""
Game serialization for persistence.

Converts Game snapshots to JSON-safe dictionaries and back. Cards travel
as two character codes ("9H", "TC", "JD"), enums as their values.
"""

from typing import Any, Dict, List, Optional

from .card import Card, Suit
from .game import Game, GameState
from .player import Player
from .round import BiddingPhase, Round
from .scoring import RoundScore, ScoringReason
from .trick import CardPlay, Trick


def _card(code: Optional[str]) -> Optional[Card]:
    return Card.from_string(code) if code else None


def _cards(codes: List[str]) -> tuple:
    return tuple(Card.from_string(code) for code in codes)


def serialize_player(player: Player) -> Dict[str, Any]:
    """Serialize a Player to a dictionary."""
    return {
        "identity": player.identity,
        "name": player.name,
        "seat": player.seat,
        "team": player.team,
    }


def deserialize_player(data: Dict[str, Any]) -> Player:
    """Deserialize a Player from a dictionary."""
    return Player(
        identity=data["identity"],
        name=data.get("name", ""),
        seat=data.get("seat"),
        team=data.get("team"),
    )


def serialize_trick(trick: Trick) -> Dict[str, Any]:
    """Serialize a Trick to a dictionary."""
    return {
        "number": trick.number,
        "lead_seat": trick.lead_seat,
        "winning_seat": trick.winning_seat,
        "sitting_out": trick.sitting_out,
        "plays": [
            {"seat": play.seat, "card": play.card.code, "play_order": play.play_order}
            for play in trick.plays
        ],
    }


def deserialize_trick(data: Dict[str, Any]) -> Trick:
    """Deserialize a Trick from a dictionary."""
    plays = tuple(
        CardPlay(seat=p["seat"], card=Card.from_string(p["card"]), play_order=p["play_order"])
        for p in sorted(data.get("plays", []), key=lambda p: p["play_order"])
    )
    return Trick(
        number=data["number"],
        lead_seat=data["lead_seat"],
        plays=plays,
        winning_seat=data.get("winning_seat"),
        sitting_out=data.get("sitting_out"),
    )


def serialize_score(score: Optional[RoundScore]) -> Optional[Dict[str, Any]]:
    if score is None:
        return None
    return {
        "reason": score.reason.value,
        "points": score.points,
        "winning_team": score.winning_team,
        "scoring_team": score.scoring_team,
        "tricks_won": list(score.tricks_won),
    }


def deserialize_score(data: Optional[Dict[str, Any]]) -> Optional[RoundScore]:
    if data is None:
        return None
    return RoundScore(
        reason=ScoringReason(data["reason"]),
        points=data.get("points", 0),
        winning_team=data.get("winning_team"),
        scoring_team=data.get("scoring_team"),
        tricks_won=tuple(data.get("tricks_won", (0, 0))),
    )


def serialize_round(round_: Round) -> Dict[str, Any]:
    """Serialize a Round to a dictionary."""
    return {
        "number": round_.number,
        "dealer_seat": round_.dealer_seat,
        "up_card": round_.up_card.code,
        "hands": {str(seat): [card.code for card in cards] for seat, cards in round_.hands.items()},
        "kitty": [card.code for card in round_.kitty],
        "phase": round_.phase.value,
        "current_bidder_seat": round_.current_bidder_seat,
        "trump_suit": round_.trump_suit.value if round_.trump_suit else None,
        "maker_team": round_.maker_team,
        "maker_seat": round_.maker_seat,
        "ordered_up": round_.ordered_up,
        "loner": round_.loner,
        "discarded": round_.discarded.code if round_.discarded else None,
        "tricks": [serialize_trick(trick) for trick in round_.tricks],
        "score": serialize_score(round_.score),
    }


def deserialize_round(data: Dict[str, Any]) -> Round:
    """Deserialize a Round from a dictionary."""
    return Round(
        number=data["number"],
        dealer_seat=data["dealer_seat"],
        up_card=Card.from_string(data["up_card"]),
        hands={int(seat): _cards(codes) for seat, codes in data.get("hands", {}).items()},
        kitty=_cards(data.get("kitty", [])),
        phase=BiddingPhase(data.get("phase", BiddingPhase.ORDERING_UP.value)),
        current_bidder_seat=data.get("current_bidder_seat"),
        trump_suit=Suit(data["trump_suit"]) if data.get("trump_suit") else None,
        maker_team=data.get("maker_team"),
        maker_seat=data.get("maker_seat"),
        ordered_up=data.get("ordered_up", False),
        loner=data.get("loner", False),
        discarded=_card(data.get("discarded")),
        tricks=tuple(deserialize_trick(t) for t in data.get("tricks", [])),
        score=deserialize_score(data.get("score")),
    )


def game_to_dict(game: Game) -> Dict[str, Any]:
    """Serialize a Game to a dictionary."""
    return {
        "code": game.code,
        "state": game.state.value,
        "version": game.version,
        "winning_team": game.winning_team,
        "players": [serialize_player(p) for p in game.players],
        "rounds": [serialize_round(r) for r in game.rounds],
    }


def game_from_dict(data: Dict[str, Any]) -> Game:
    """Deserialize a Game from a dictionary."""
    return Game(
        code=data["code"],
        state=GameState(data.get("state", GameState.WAITING.value)),
        players=tuple(deserialize_player(p) for p in data.get("players", [])),
        rounds=tuple(deserialize_round(r) for r in data.get("rounds", [])),
        winning_team=data.get("winning_team"),
        version=data.get("version", 0),
    )
