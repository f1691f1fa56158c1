"""Redis-backed persistence for game sessions.

Keys:
    game:{id}    JSON-serialised GameState
    games:list   index of all game ids, newest first
"""

import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from game.errors import GameNotFoundError, MalformedStateError, UpstreamFailure
from game.models import GameState

logger = logging.getLogger(__name__)

GAME_KEY = "game:{game_id}"
GAMES_INDEX_KEY = "games:list"


def game_key(game_id: str) -> str:
    return GAME_KEY.format(game_id=game_id)


def _as_str(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class SessionStore:
    """Create/read of GameState records."""

    def __init__(self, redis: Redis, timeout_seconds: Optional[float] = 60.0):
        self._redis = redis
        self._timeout = timeout_seconds

    async def _call(self, awaitable, action: str):
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamFailure("store", f"{action} timed out after {self._timeout}s") from e
        except RedisError as e:
            raise UpstreamFailure("store", f"{action} failed: {e}") from e

    async def save(self, state: GameState) -> None:
        """Write the record and register its id in the index.

        Both writes go through one MULTI/EXEC so a game is never half-created.
        """
        payload = state.to_json()

        async def _write():
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.set(game_key(state.id), payload).lpush(
                    GAMES_INDEX_KEY, state.id
                ).execute()

        await self._call(_write(), f"save {state.id}")
        logger.info("[STORE] Saved game %s (%d bytes)", state.id, len(payload))

    async def load(self, game_id: str) -> GameState:
        """Read a game record.

        Raises:
            GameNotFoundError: no record for ``game_id``.
            MalformedStateError: the record is not a valid GameState.
        """
        raw = await self._call(self._redis.get(game_key(game_id)), f"load {game_id}")
        if raw is None:
            logger.info("[STORE] Game %s not found", game_id)
            raise GameNotFoundError(game_id)
        try:
            return GameState.model_validate_json(raw)
        except ValidationError as e:
            logger.error("[STORE] Game %s has a malformed record: %s", game_id, e)
            raise MalformedStateError(
                f"Stored record for game {game_id} is malformed", game_id=game_id
            ) from e

    async def list_ids(self, limit: Optional[int] = None) -> List[str]:
        """Return game ids, newest first."""
        if limit is not None and limit <= 0:
            return []
        end = -1 if limit is None else limit - 1
        ids = await self._call(
            self._redis.lrange(GAMES_INDEX_KEY, 0, end), "list games"
        )
        return [_as_str(i) for i in ids]
