"""Shared fixtures for the game core tests."""

import asyncio
import random
from typing import List, Optional, Sequence

import fakeredis
import pytest

from game.case_generator import CaseGenerator
from game.models import ChatMessage
from game.orchestrator import GameOrchestrator
from game.turn_processor import TurnProcessor
from services.history import HistoryAdapter, RedisHistoryService
from services.session_store import SessionStore

APP_ID = "test-app"


class ScriptedGenerator:
    """Stands in for TextGenerator: records prompts, returns canned replies."""

    def __init__(self, replies: Optional[List[str]] = None, delay: float = 0.0):
        self.replies = list(replies or [])
        self.delay = delay
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    async def generate(self, system_prompt: str, messages: Sequence[ChatMessage]) -> str:
        self.calls.append((system_prompt, list(messages)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if self.replies:
            return self.replies.pop(0)
        return f"reply {len(self.calls)}"

    async def prompt(self, system_prompt: str, instruction: str) -> str:
        return await self.generate(
            system_prompt, [ChatMessage(role="user", content=instruction)]
        )


@pytest.fixture
def redis():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def history_service(redis):
    return RedisHistoryService(redis, APP_ID, timeout_seconds=5)


@pytest.fixture
def history(history_service):
    return HistoryAdapter(history_service)


@pytest.fixture
def session_store(redis):
    return SessionStore(redis, timeout_seconds=5)


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def orchestrator(generator, history_service, history, session_store):
    return GameOrchestrator(
        case_generator=CaseGenerator(generator, history_service, rng=random.Random(7)),
        session_store=session_store,
        turn_processor=TurnProcessor(generator, history),
        history=history,
    )

