"""Game startup wiring.

Builds every collaborator once (Redis client, chat model, history log) and
hands them to the orchestrator explicitly. Hosts call build_orchestrator()
at process start and keep the result for the life of the process.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from redis.asyncio import Redis

from config.settings import EnvironmentSettings, get_env_settings
from game.case_generator import CaseGenerator
from game.orchestrator import GameOrchestrator
from game.turn_processor import TurnProcessor
from services.generation import TextGenerator, create_chat_model
from services.history import HistoryAdapter, RedisHistoryService
from services.session_store import SessionStore

logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Optional[EnvironmentSettings] = None,
    redis: Optional[Redis] = None,
    llm: Optional[BaseChatModel] = None,
    rng: Optional[random.Random] = None,
) -> GameOrchestrator:
    """Wire up a GameOrchestrator.

    Any dependency not supplied is created from ``settings`` (or the
    environment when settings are omitted).
    """
    settings = settings or get_env_settings()
    timeout = settings.upstream_timeout_seconds

    if redis is None:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        logger.info("[STARTUP] Using Redis at %s", settings.redis_url)
    if llm is None:
        if not settings.openai_api_key:
            logger.warning("[STARTUP] OPENAI_API_KEY is not set; model calls will fail")
        llm = create_chat_model(settings)
        logger.info("[STARTUP] Using model %s", settings.model)

    generator = TextGenerator(llm, timeout_seconds=timeout)
    history_service = RedisHistoryService(
        redis, settings.history_app_id, timeout_seconds=timeout
    )
    history = HistoryAdapter(history_service)

    return GameOrchestrator(
        case_generator=CaseGenerator(generator, history_service, rng=rng),
        session_store=SessionStore(redis, timeout_seconds=timeout),
        turn_processor=TurnProcessor(generator, history),
        history=history,
    )
