"""Conversation history for defendant threads.

RedisHistoryService is the append-only message log, one Redis list per
thread. HistoryAdapter is what the game core talks to: it appends turns and
hands the full, ordered conversation back in chat-model form.
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from game.errors import MalformedStateError, UpstreamFailure
from game.models import ChatMessage, DefendantIdentity, Turn

logger = logging.getLogger(__name__)

HISTORY_KEY = "history:{app}:{user}:{session}"


def history_key(identity: DefendantIdentity) -> str:
    return HISTORY_KEY.format(
        app=identity.application_id,
        user=identity.user_id,
        session=identity.session_id,
    )


class RedisHistoryService:
    """Ordered message log keyed by (application, user, session)."""

    def __init__(
        self,
        redis: Redis,
        application_id: str,
        timeout_seconds: Optional[float] = 60.0,
    ):
        self._redis = redis
        self._application_id = application_id
        self._timeout = timeout_seconds

    async def _call(self, awaitable, action: str):
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamFailure("history", f"{action} timed out after {self._timeout}s") from e
        except RedisError as e:
            raise UpstreamFailure("history", f"{action} failed: {e}") from e

    async def create_thread(self) -> DefendantIdentity:
        """Allocate a new, empty thread.

        Nothing is written until the first message; the list key only
        exists once a turn is appended.
        """
        identity = DefendantIdentity(
            application_id=self._application_id,
            user_id=f"defendant-{uuid.uuid4()}",
            session_id=str(uuid.uuid4()),
        )
        logger.info("[HISTORY] Created thread %s", identity.session_id)
        return identity

    async def append_message(
        self, identity: DefendantIdentity, content: str, is_user: bool
    ) -> Turn:
        turn = Turn(id=str(uuid.uuid4()), content=content, is_user=is_user)
        length = await self._call(
            self._redis.rpush(history_key(identity), turn.to_json()),
            f"append to {identity.session_id}",
        )
        logger.debug(
            "[HISTORY] Appended %s turn to %s (length=%s)",
            "user" if is_user else "defendant",
            identity.session_id,
            length,
        )
        return turn

    async def list_messages(self, identity: DefendantIdentity) -> List[Turn]:
        raw_turns = await self._call(
            self._redis.lrange(history_key(identity), 0, -1),
            f"list {identity.session_id}",
        )
        turns = []
        for raw in raw_turns:
            try:
                turns.append(Turn.model_validate_json(raw))
            except ValidationError as e:
                raise MalformedStateError(
                    f"Undecodable turn in thread {identity.session_id}"
                ) from e
        return turns


class HistoryAdapter:
    """Turn log access for the game core."""

    def __init__(self, service: RedisHistoryService):
        self._service = service

    async def append_turn(
        self, identity: DefendantIdentity, content: str, is_user: bool
    ) -> Turn:
        return await self._service.append_message(identity, content, is_user)

    async def get_history(self, identity: DefendantIdentity) -> List[Turn]:
        """All turns for the thread, in the order they were appended."""
        return await self._service.list_messages(identity)

    async def get_chat_messages(self, identity: DefendantIdentity) -> List[ChatMessage]:
        """Full history mapped to user/assistant roles. No windowing."""
        turns = await self.get_history(identity)
        return [to_chat_message(turn) for turn in turns]


def to_chat_message(turn: Turn) -> ChatMessage:
    return ChatMessage(role="user" if turn.is_user else "assistant", content=turn.content)
