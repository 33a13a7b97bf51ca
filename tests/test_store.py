"""
Tests for the game stores and per-game write serialization
"""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from unittest.mock import ANY, MagicMock

import pytest
import redis

from euchre_engine.errors import (
    ConcurrentUpdateError,
    EuchreError,
    GameNotFoundError,
    StructuralError,
    TurnError,
)
from euchre_engine.game import create_game, submit_action
from euchre_engine.serialization import game_to_dict
from euchre_engine.store import InMemoryGameStore, RedisGameStore


def bump(game):
    return replace(game, version=game.version + 1)


class TestInMemoryGameStore:
    """Process-local store"""

    def test_create_and_get(self):
        store = InMemoryGameStore()
        game = store.create(create_game("CODE0001"))
        assert store.get("CODE0001") is game
        assert store.get("MISSING") is None

    def test_duplicate_code(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))
        with pytest.raises(StructuralError):
            store.create(create_game("CODE0001"))

    def test_update_commits(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))
        updated = store.update("CODE0001", bump)
        assert updated.version == 1
        assert store.get("CODE0001") == updated

    def test_failed_update_commits_nothing(self):
        store = InMemoryGameStore()
        game = store.create(create_game("CODE0001"))

        def reject(_):
            raise TurnError("nope")

        with pytest.raises(TurnError):
            store.update("CODE0001", reject)
        assert store.get("CODE0001") is game

    def test_missing_game(self):
        store = InMemoryGameStore()
        with pytest.raises(GameNotFoundError):
            store.update("MISSING", bump)
        with pytest.raises(GameNotFoundError):
            store.load("MISSING")

    def test_delete(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))
        store.delete("CODE0001")
        assert store.get("CODE0001") is None

    def test_delete_during_update_is_not_undone(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))

        def delete_then_bump(game):
            store.delete("CODE0001")
            return bump(game)

        with pytest.raises(GameNotFoundError):
            store.update("CODE0001", delete_then_bump)
        assert store.get("CODE0001") is None
        with pytest.raises(GameNotFoundError):
            store.update("CODE0001", bump)

    def test_recreated_game_is_not_overwritten_by_stale_update(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))
        fresh = create_game("CODE0001")

        def recreate_then_bump(game):
            store.delete("CODE0001")
            store.create(fresh)
            return bump(game)

        with pytest.raises(GameNotFoundError):
            store.update("CODE0001", recreate_then_bump)
        assert store.get("CODE0001") is fresh

    def test_concurrent_updates_are_serialized(self):
        store = InMemoryGameStore()
        store.create(create_game("CODE0001"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: store.update("CODE0001", bump), range(200)))

        assert store.get("CODE0001").version == 200

    def test_racing_duplicate_action_applies_once(self, active_game):
        """The same bidder passing twice at once: one success, one rejection"""
        store = InMemoryGameStore()
        store.create(active_game)
        bidder = active_game.player_at(active_game.current_round.current_bidder_seat).identity
        barrier = threading.Barrier(2)
        results = []

        def attempt():
            barrier.wait()
            try:
                store.update(active_game.code, lambda g: submit_action(g, bidder, "pass"))
                results.append("ok")
            except EuchreError:
                results.append("rejected")

        threads = [threading.Thread(target=attempt) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(results) == ["ok", "rejected"]
        stored = store.get(active_game.code)
        assert stored.version == active_game.version + 1
        assert stored.current_round.current_bidder_seat == (
            active_game.current_round.current_bidder_seat + 1
        ) % 4


@pytest.fixture
def redis_client():
    client = MagicMock()
    pipe = MagicMock()
    client.pipeline.return_value.__enter__.return_value = pipe
    return client, pipe


class TestRedisGameStore:
    """Redis store with WATCH/MULTI compare-and-set"""

    def test_create_uses_nx_and_ttl(self, redis_client):
        client, _ = redis_client
        client.set.return_value = True
        store = RedisGameStore(client, ttl=60)
        store.create(create_game("CODE0001"))
        client.set.assert_called_once_with("game:CODE0001", ANY, ex=60, nx=True)

    def test_create_existing_code(self, redis_client):
        client, _ = redis_client
        client.set.return_value = None
        with pytest.raises(StructuralError):
            RedisGameStore(client).create(create_game("CODE0001"))

    def test_get(self, redis_client, active_game):
        client, _ = redis_client
        client.get.return_value = json.dumps(game_to_dict(active_game)).encode()
        assert RedisGameStore(client).get(active_game.code) == active_game
        client.get.assert_called_once_with(f"game:{active_game.code}")

    def test_get_missing(self, redis_client):
        client, _ = redis_client
        client.get.return_value = None
        store = RedisGameStore(client)
        assert store.get("MISSING") is None
        with pytest.raises(GameNotFoundError):
            store.load("MISSING")

    def test_update_watches_and_commits(self, redis_client):
        client, pipe = redis_client
        game = create_game("CODE0001")
        pipe.get.return_value = json.dumps(game_to_dict(game))
        store = RedisGameStore(client, ttl=120)

        updated = store.update("CODE0001", bump)

        assert updated.version == 1
        pipe.watch.assert_called_with("game:CODE0001")
        pipe.multi.assert_called_once()
        pipe.set.assert_called_once_with("game:CODE0001", ANY, ex=120)
        stored = json.loads(pipe.set.call_args[0][1])
        assert stored["version"] == 1
        pipe.execute.assert_called_once()

    def test_update_retries_after_watch_error(self, redis_client):
        client, pipe = redis_client
        pipe.get.return_value = json.dumps(game_to_dict(create_game("CODE0001")))
        pipe.execute.side_effect = [redis.WatchError(), [True]]

        updated = RedisGameStore(client).update("CODE0001", bump)

        assert updated.version == 1
        assert pipe.execute.call_count == 2

    def test_update_gives_up(self, redis_client):
        client, pipe = redis_client
        pipe.get.return_value = json.dumps(game_to_dict(create_game("CODE0001")))
        pipe.execute.side_effect = redis.WatchError()

        with pytest.raises(ConcurrentUpdateError):
            RedisGameStore(client, max_retries=3).update("CODE0001", bump)
        assert pipe.execute.call_count == 3

    def test_rejected_transition_writes_nothing(self, redis_client):
        client, pipe = redis_client
        pipe.get.return_value = json.dumps(game_to_dict(create_game("CODE0001")))

        def reject(_):
            raise TurnError("nope")

        with pytest.raises(TurnError):
            RedisGameStore(client).update("CODE0001", reject)
        pipe.set.assert_not_called()
        pipe.execute.assert_not_called()

    def test_update_missing_game(self, redis_client):
        client, pipe = redis_client
        pipe.get.return_value = None
        with pytest.raises(GameNotFoundError):
            RedisGameStore(client).update("MISSING", bump)

    def test_delete(self, redis_client):
        client, _ = redis_client
        RedisGameStore(client, key_prefix="euchre:").delete("CODE0001")
        client.delete.assert_called_once_with("euchre:CODE0001")
