"""Chat model wrapper used for every text generation in the game.

The model is a black box: a system prompt plus role-tagged turns go in, a
single reply comes out. Callers get plain text or an UpstreamFailure.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import openai
from langchain_core.exceptions import LangChainException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config.settings import EnvironmentSettings
from game.errors import UpstreamFailure
from game.models import ChatMessage

logger = logging.getLogger(__name__)

# Provider, LangChain and transport failures. Anything else is a local bug
# and propagates unchanged.
MODEL_ERRORS = (openai.OpenAIError, LangChainException, ConnectionError)


def create_chat_model(settings: EnvironmentSettings) -> ChatOpenAI:
    """Build the production chat model from settings."""
    return ChatOpenAI(
        model=settings.model,
        temperature=settings.temperature,
        api_key=settings.openai_api_key,
    )


def to_langchain_messages(
    system_prompt: str, messages: Sequence[ChatMessage]
) -> List[BaseMessage]:
    """Convert role-tagged messages to LangChain message objects."""
    converted: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for msg in messages:
        if msg.role == "user":
            converted.append(HumanMessage(content=msg.content))
        elif msg.role == "assistant":
            converted.append(AIMessage(content=msg.content))
        else:
            raise ValueError(f"Unsupported message role: {msg.role!r}")
    return converted


def _response_text(response) -> str:
    # Extract content if it's an AIMessage object
    if hasattr(response, "content"):
        content = response.content
    else:
        content = response
    if isinstance(content, list):
        # Content blocks: keep only the text parts
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        content = "".join(parts)
    return str(content).strip()


class TextGenerator:
    """Async text generation over any LangChain chat model."""

    def __init__(self, llm: BaseChatModel, timeout_seconds: Optional[float] = 60.0):
        self._llm = llm
        self._timeout = timeout_seconds

    async def generate(self, system_prompt: str, messages: Sequence[ChatMessage]) -> str:
        """Generate a reply to ``messages`` under ``system_prompt``.

        Raises:
            UpstreamFailure: if the model errors, times out or returns nothing.
        """
        lc_messages = to_langchain_messages(system_prompt, messages)
        t_start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._llm.ainvoke(lc_messages), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise UpstreamFailure(
                "generation", f"model call timed out after {self._timeout}s"
            ) from e
        except MODEL_ERRORS as e:
            raise UpstreamFailure("generation", f"model call failed: {e}") from e

        text = _response_text(response)
        logger.info(
            "[GEN] %d context messages -> %d chars in %.0fms",
            len(messages),
            len(text),
            (time.perf_counter() - t_start) * 1000,
        )
        if not text:
            raise UpstreamFailure("generation", "model returned an empty reply")
        return text

    async def prompt(self, system_prompt: str, instruction: str) -> str:
        """Single-instruction generation (no prior conversation)."""
        return await self.generate(
            system_prompt, [ChatMessage(role="user", content=instruction)]
        )
