"""Tests for the game data models."""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from game.models import (
    STAGE_ORDER,
    CaseFacts,
    DefendantIdentity,
    GameStage,
    GameState,
    Turn,
    Verdict,
)


def make_state(**overrides) -> GameState:
    fields = dict(
        id="game-1",
        start_time=datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc),
        honcho_defendant=DefendantIdentity(
            application_id="app", user_id="user-1", session_id="session-1"
        ),
        case_facts=CaseFacts(true_verdict=Verdict.GUILTY, objective_facts="He did it."),
        dossier="A man stands accused.",
    )
    fields.update(overrides)
    return GameState(**fields)


def test_game_state_serialises_with_camel_case_keys():
    data = json.loads(make_state().to_json())
    assert set(data) == {"id", "startTime", "honchoDefendant", "caseFacts", "dossier", "gameStage"}
    assert data["caseFacts"] == {"trueVerdict": "guilty", "objectiveFacts": "He did it."}
    assert data["honchoDefendant"]["applicationId"] == "app"
    assert data["gameStage"] == "prelude"


def test_game_state_json_round_trip_is_equal():
    state = make_state()
    assert GameState.model_validate_json(state.to_json()) == state


def test_game_state_accepts_snake_case_input():
    state = GameState.model_validate(
        {
            "id": "g",
            "start_time": "2024-06-01T12:30:00Z",
            "honcho_defendant": {"application_id": "a", "user_id": "u", "session_id": "s"},
            "case_facts": {"true_verdict": "innocent", "objective_facts": "facts"},
            "dossier": "d",
        }
    )
    assert state.case_facts.true_verdict is Verdict.INNOCENT
    assert state.game_stage is GameStage.PRELUDE


def test_verdict_is_immutable():
    state = make_state()
    with pytest.raises(ValidationError):
        state.case_facts.true_verdict = Verdict.INNOCENT


def test_unknown_verdict_is_rejected():
    with pytest.raises(ValidationError):
        CaseFacts(true_verdict="maybe", objective_facts="x")


def test_stage_order_starts_with_prelude():
    assert STAGE_ORDER[0] is GameStage.PRELUDE
    assert [s.value for s in STAGE_ORDER] == [
        "prelude",
        "interrogation",
        "deliberation",
        "closed",
    ]


def test_turn_serialises_is_user_flag():
    data = json.loads(Turn(content="hello", is_user=True).to_json())
    assert data["isUser"] is True
    assert data["content"] == "hello"
