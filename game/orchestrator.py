"""Public game operations: create, load, and talk to the defendant.

This is the only surface a host (HTTP layer, CLI, UI) should use.
"""

import asyncio
import logging
import uuid
import weakref
from datetime import datetime, timezone
from typing import Callable, List, Optional

from game.case_generator import CaseGenerator
from game.models import GameStage, GameState, Turn
from game.turn_processor import TurnProcessor
from services.history import HistoryAdapter
from services.session_store import SessionStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameOrchestrator:
    """Composes case generation, session storage and the turn loop."""

    def __init__(
        self,
        case_generator: CaseGenerator,
        session_store: SessionStore,
        turn_processor: TurnProcessor,
        history: HistoryAdapter,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._case_generator = case_generator
        self._session_store = session_store
        self._turn_processor = turn_processor
        self._history = history
        self._clock = clock or _utc_now
        # game id -> lock; entries vanish once no coroutine holds the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, game_id: str) -> asyncio.Lock:
        lock = self._locks.get(game_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[game_id] = lock
        return lock

    async def create_game(self) -> GameState:
        """Generate a new case and persist it as a fresh game."""
        case = await self._case_generator.create_case()
        state = GameState(
            id=str(uuid.uuid4()),
            start_time=self._clock(),
            honcho_defendant=case.defendant,
            case_facts=case.case_facts,
            dossier=case.dossier,
            game_stage=GameStage.PRELUDE,
        )
        await self._session_store.save(state)
        logger.info("[GAME] Created game %s", state.id)
        return state

    async def get_game(self, game_id: str) -> GameState:
        """Load a game. Raises GameNotFoundError for unknown ids."""
        return await self._session_store.load(game_id)

    async def process_message(self, message: str, state: GameState) -> str:
        """Send a player message to the defendant and return the reply.

        Calls for the same game are serialised so turns never interleave.
        """
        lock = self._lock_for(state.id)
        if lock.locked():
            logger.info("[GAME] Game %s busy, queueing message", state.id)
        async with lock:
            return await self._turn_processor.process_message(message, state)

    async def list_games(self, limit: Optional[int] = None) -> List[str]:
        """Ids of all games, newest first."""
        return await self._session_store.list_ids(limit)

    async def get_transcript(self, state: GameState) -> List[Turn]:
        """The full conversation with the defendant, oldest first."""
        return await self._history.get_history(state.honcho_defendant)
