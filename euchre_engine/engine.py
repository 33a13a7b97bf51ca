"""
Euchre engine facade

Binds the pure game transitions to a store and a source of randomness.
Every mutating call goes through `GameStore.update`, so actions on the
same game are applied one at a time.
"""

import logging
import threading
from typing import Any, Dict, Optional

import numpy as np
import redis

from . import game as rules
from .config import load_config
from .errors import EuchreError
from .game import Game, GameState
from .player import Player
from .store import GameStore, InMemoryGameStore, RedisGameStore

logger = logging.getLogger(__name__)


class EuchreEngine:
    """Entry point for callers such as an HTTP layer"""

    def __init__(self, store: Optional[GameStore] = None, seed: Optional[int] = None):
        self.store = store if store is not None else InMemoryGameStore()
        self._seed_sequence = np.random.SeedSequence(seed)
        self._seed_lock = threading.Lock()

    def _rng(self) -> np.random.Generator:
        """An independent generator per operation; Generators are not thread safe"""
        with self._seed_lock:
            child = self._seed_sequence.spawn(1)[0]
        return np.random.default_rng(child)

    def create_game(self) -> Game:
        """Create a new game"""
        game = self.store.create(rules.create_game())
        logger.info("Created game %s", game.code)
        return game

    def join_game(self, code: str, identity: str, name: str) -> Player:
        """
        Join a game, starting it once the fourth player arrives.

        Returns the caller's player, seated if the game started.
        """
        rng = self._rng()
        started = {}

        def transition(game: Game) -> Game:
            game, _ = rules.join_game(game, identity, name)
            started["now"] = game.can_start
            if game.can_start:
                game = rules.start_game(game, rng)
            return game

        game = self.store.update(code, transition)
        player = game.player_for(identity)
        logger.info("Player %s joined game %s (%d/4)", player.name, code, len(game.players))
        if started["now"]:
            logger.info(
                "Game %s active, round 1 dealt by seat %d", code, game.rounds[0].dealer_seat
            )
        return player

    def get_state(self, code: str, identity: Optional[str] = None) -> Dict[str, Any]:
        """Current state of a game as seen by `identity`"""
        return rules.get_state(self.store.load(code), identity)

    def submit_action(
        self,
        code: str,
        identity: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Apply a player's action.

        Returns {"success": True, "state": ...} or {"success": False, "error": ...};
        a rejected action leaves the stored game unchanged.
        """
        rng = self._rng()
        before = {}

        def transition(game: Game) -> Game:
            before["round"] = game.current_round.number if game.current_round else None
            return rules.submit_action(game, identity, action, payload, rng)

        try:
            game = self.store.update(code, transition)
        except EuchreError as e:
            logger.warning("Rejected %s by %s in game %s: %s", action, identity, code, e)
            return {"success": False, "error": str(e)}

        if game.state == GameState.FINISHED:
            logger.info(
                "Game %s finished, team %d wins %s", code, game.winning_team, game.scores
            )
        elif game.current_round.number != before["round"]:
            previous = game.rounds[-2]
            logger.info(
                "Game %s round %d over (%s), scores %s",
                code, previous.number, previous.score.reason.value, game.scores,
            )

        return {"success": True, "state": rules.get_state(game, identity)}

    def delete_game(self, code: str) -> None:
        self.store.delete(code)


def create_engine(config: Optional[Dict[str, Any]] = None) -> EuchreEngine:
    """Engine factory pattern"""
    settings = load_config()
    if config:
        settings.update(config)

    logging.getLogger("euchre_engine").setLevel(settings["LOG_LEVEL"])

    if settings["STORE"] == "redis":
        store = RedisGameStore(
            redis.from_url(settings["REDIS_URL"]),
            ttl=settings["GAME_TTL"],
            max_retries=settings["MAX_RETRIES"],
        )
    elif settings["STORE"] == "memory":
        store = InMemoryGameStore()
    else:
        raise ValueError(f"Unknown store backend: {settings['STORE']}")

    return EuchreEngine(store=store, seed=settings["SEED"])
