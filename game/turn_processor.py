"""Defendant turn loop: player message in, defendant reply out."""

import logging

from game.models import GameState
from game.prompts import defendant_system_prompt
from services.generation import TextGenerator
from services.history import HistoryAdapter

logger = logging.getLogger(__name__)


class TurnProcessor:
    """Runs one interrogation exchange against the history log.

    The four steps (append, read, generate, append) are strictly sequential.
    If generation fails, the player's turn is already in the log and stays
    there; callers see the error and no defendant turn is written.
    """

    def __init__(self, generator: TextGenerator, history: HistoryAdapter):
        self._generator = generator
        self._history = history

    async def process_message(self, message: str, state: GameState) -> str:
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        identity = state.honcho_defendant
        await self._history.append_turn(identity, message, is_user=True)

        messages = await self._history.get_chat_messages(identity)
        logger.info(
            "[TURN] Game %s: generating reply over %d messages",
            state.id,
            len(messages),
        )
        reply = await self._generator.generate(
            defendant_system_prompt(state.case_facts), messages
        )

        await self._history.append_turn(identity, reply, is_user=False)
        return reply
