"""Data models for the interrogation game."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Verdict(str, Enum):
    """Secret ground truth, drawn once when the case is created."""

    GUILTY = "guilty"
    INNOCENT = "innocent"


class GameStage(str, Enum):
    """Progress marker recorded on the session.

    Only PRELUDE is ever written by the core. The later stages exist so
    presentation layers have somewhere to go; nothing here defines or
    enforces transitions between them.
    """

    PRELUDE = "prelude"
    INTERROGATION = "interrogation"
    DELIBERATION = "deliberation"
    CLOSED = "closed"


STAGE_ORDER: List[GameStage] = list(GameStage)


class _WireModel(BaseModel):
    """Base for records stored as JSON with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# =============================================================================
# CASE
# =============================================================================

class CaseFacts(_WireModel):
    """Hidden truth of the case. Never shown to the player."""

    true_verdict: Verdict
    objective_facts: str = Field(
        description="Omniscient narrative consistent with the verdict"
    )


class DefendantIdentity(_WireModel):
    """Handle for the defendant's thread in the history service."""

    application_id: str
    user_id: str
    session_id: str


class GameState(_WireModel):
    """A single game session, persisted once at creation."""

    id: str
    start_time: datetime
    honcho_defendant: DefendantIdentity
    case_facts: CaseFacts
    dossier: str = Field(description="Player-visible summary of the case")
    game_stage: GameStage = GameStage.PRELUDE


# =============================================================================
# CONVERSATION
# =============================================================================

class Turn(_WireModel):
    """One message in a defendant thread."""

    content: str
    is_user: bool
    id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChatMessage(BaseModel):
    """Role-tagged message in the shape the chat model expects."""

    role: str = Field(description="'user' or 'assistant'")
    content: str
