"""
Game stores.

Each store serializes writers per game: `update` reads the latest
snapshot, applies a transition and commits the result, or commits nothing
if the transition raises.
"""

import json
import logging
import threading
from typing import Callable, Dict, Optional

import redis

from .errors import ConcurrentUpdateError, GameNotFoundError, StructuralError
from .game import Game
from .serialization import game_from_dict, game_to_dict

logger = logging.getLogger(__name__)

Transition = Callable[[Game], Game]


class GameStore:
    """Interface shared by the stores"""

    def create(self, game: Game) -> Game:
        raise NotImplementedError

    def get(self, code: str) -> Optional[Game]:
        raise NotImplementedError

    def update(self, code: str, transition: Transition) -> Game:
        raise NotImplementedError

    def delete(self, code: str) -> None:
        raise NotImplementedError

    def load(self, code: str) -> Game:
        """Like get, but a missing game is an error"""
        game = self.get(code)
        if game is None:
            raise GameNotFoundError(f"Game {code} not found")
        return game


class InMemoryGameStore(GameStore):
    """
    Process-local store with one lock per game.

    Readers see the last committed snapshot without taking the lock; the
    snapshots are immutable so they are always consistent.
    """

    def __init__(self):
        self._games: Dict[str, Game] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def create(self, game: Game) -> Game:
        with self._registry_lock:
            if game.code in self._games:
                raise StructuralError(f"Game {game.code} already exists")
            self._games[game.code] = game
            self._locks[game.code] = threading.Lock()
        return game

    def get(self, code: str) -> Optional[Game]:
        return self._games.get(code)

    def _lock_for(self, code: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(code)
        if lock is None:
            raise GameNotFoundError(f"Game {code} not found")
        return lock

    def update(self, code: str, transition: Transition) -> Game:
        lock = self._lock_for(code)
        with lock:
            game = self.load(code)
            updated = transition(game)
            with self._registry_lock:
                # A delete may have landed while the transition ran
                if self._locks.get(code) is not lock:
                    raise GameNotFoundError(f"Game {code} not found")
                self._games[code] = updated
            return updated

    def delete(self, code: str) -> None:
        with self._registry_lock:
            self._games.pop(code, None)
            self._locks.pop(code, None)


class RedisGameStore(GameStore):
    """
    One JSON document per game under ``game:<code>``.

    Updates are optimistic: WATCH the key, apply the transition to the
    state read, then MULTI/EXEC. A concurrent writer aborts the EXEC and
    the transition is re-evaluated against the fresher state, at most
    `max_retries` times.
    """

    def __init__(
        self,
        client: "redis.Redis",
        ttl: int = 3600,
        max_retries: int = 5,
        key_prefix: str = "game:",
    ):
        self.client = client
        self.ttl = ttl
        self.max_retries = max_retries
        self.key_prefix = key_prefix

    def _key(self, code: str) -> str:
        return f"{self.key_prefix}{code}"

    @staticmethod
    def _dumps(game: Game) -> str:
        return json.dumps(game_to_dict(game))

    @staticmethod
    def _loads(data) -> Game:
        return game_from_dict(json.loads(data))

    def create(self, game: Game) -> Game:
        if not self.client.set(self._key(game.code), self._dumps(game), ex=self.ttl, nx=True):
            raise StructuralError(f"Game {game.code} already exists")
        return game

    def get(self, code: str) -> Optional[Game]:
        data = self.client.get(self._key(code))
        if not data:
            return None
        return self._loads(data)

    def update(self, code: str, transition: Transition) -> Game:
        key = self._key(code)
        with self.client.pipeline() as pipe:
            for attempt in range(1, self.max_retries + 1):
                try:
                    pipe.watch(key)
                    data = pipe.get(key)
                    if not data:
                        raise GameNotFoundError(f"Game {code} not found")
                    updated = transition(self._loads(data))
                    pipe.multi()
                    pipe.set(key, self._dumps(updated), ex=self.ttl)
                    pipe.execute()
                    return updated
                except redis.WatchError:
                    logger.debug("Game %s changed during update (attempt %d)", code, attempt)
                    continue
        raise ConcurrentUpdateError(
            f"Game {code} kept changing; gave up after {self.max_retries} attempts"
        )

    def delete(self, code: str) -> None:
        self.client.delete(self._key(code))
