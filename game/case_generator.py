"""Case generation logic.

Runs once per game, before the session is persisted:
    1. Draw the secret verdict
    2. Generate the objective facts (hidden ground truth)
    3. Generate the player-facing dossier from those facts
    4. Open the defendant's conversation thread

Nothing is written to the session store here. If any step fails the whole
case is abandoned and the caller never sees a partial game.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

from game.models import CaseFacts, DefendantIdentity, Verdict
from game.prompts import (
    DOSSIER_INSTRUCTION,
    case_context_prompt,
    objective_facts_instruction,
    premise_prompt,
)
from services.generation import TextGenerator
from services.history import RedisHistoryService

logger = logging.getLogger(__name__)

VERDICTS = (Verdict.GUILTY, Verdict.INNOCENT)


def draw_verdict(rng: random.Random) -> Verdict:
    """Pick guilty or innocent with equal probability."""
    return rng.choice(VERDICTS)


@dataclass(frozen=True)
class GeneratedCase:
    """Everything a new game needs apart from its id and timestamp."""

    case_facts: CaseFacts
    dossier: str
    defendant: DefendantIdentity

    @property
    def true_verdict(self) -> Verdict:
        return self.case_facts.true_verdict


class CaseGenerator:
    """Builds a fresh case using the chat model and the history service."""

    def __init__(
        self,
        generator: TextGenerator,
        history_service: RedisHistoryService,
        rng: Optional[random.Random] = None,
    ):
        self._generator = generator
        self._history_service = history_service
        self._rng = rng or random.Random()

    async def generate_objective_facts(self, verdict: Verdict) -> str:
        return await self._generator.prompt(
            premise_prompt(verdict), objective_facts_instruction(verdict)
        )

    async def generate_dossier(self, case_facts: CaseFacts) -> str:
        return await self._generator.prompt(
            case_context_prompt(case_facts), DOSSIER_INSTRUCTION
        )

    async def create_case(self) -> GeneratedCase:
        t_start = time.perf_counter()
        verdict = draw_verdict(self._rng)

        logger.info("[CASE] Generating objective facts...")
        objective_facts = await self.generate_objective_facts(verdict)
        case_facts = CaseFacts(true_verdict=verdict, objective_facts=objective_facts)

        logger.info("[CASE] Generating dossier...")
        dossier = await self.generate_dossier(case_facts)

        defendant = await self._history_service.create_thread()

        logger.info(
            "[CASE] Case ready in %.0fms (facts=%d chars, dossier=%d chars)",
            (time.perf_counter() - t_start) * 1000,
            len(objective_facts),
            len(dossier),
        )
        return GeneratedCase(case_facts=case_facts, dossier=dossier, defendant=defendant)
