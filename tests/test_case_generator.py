"""Tests for case generation."""

import random

import pytest

from game.case_generator import CaseGenerator, draw_verdict
from game.errors import UpstreamFailure
from game.models import Verdict


def test_verdict_draw_is_uniform():
    rng = random.Random(1234)
    trials = 10_000
    guilty = sum(1 for _ in range(trials) if draw_verdict(rng) is Verdict.GUILTY)
    # 4 standard deviations of Binomial(10000, 0.5) is 200
    assert abs(guilty - trials / 2) < 200


def test_verdict_draw_only_yields_known_values():
    rng = random.Random(99)
    assert {draw_verdict(rng) for _ in range(200)} == {Verdict.GUILTY, Verdict.INNOCENT}


def _seed_for(verdict: Verdict) -> int:
    for seed in range(100):
        if draw_verdict(random.Random(seed)) is verdict:
            return seed
    raise AssertionError("no seed found")


@pytest.mark.asyncio
@pytest.mark.parametrize("verdict", [Verdict.GUILTY, Verdict.INNOCENT])
async def test_seeded_rng_forces_verdict(verdict, generator, history_service):
    case_generator = CaseGenerator(
        generator, history_service, rng=random.Random(_seed_for(verdict))
    )
    case = await case_generator.create_case()
    assert case.true_verdict is verdict


@pytest.mark.asyncio
async def test_create_case_uses_two_generations(generator, history_service):
    generator.replies = ["The secret facts.", "The public dossier."]
    case_generator = CaseGenerator(generator, history_service, rng=random.Random(3))

    case = await case_generator.create_case()

    assert case.case_facts.objective_facts == "The secret facts."
    assert case.dossier == "The public dossier."
    assert len(generator.calls) == 2
    assert case.defendant.application_id == "test-app"


@pytest.mark.asyncio
async def test_prompts_carry_verdict_and_facts(generator, history_service):
    generator.replies = ["Hidden narrative about the heist.", "Dossier."]
    case_generator = CaseGenerator(generator, history_service, rng=random.Random(3))

    case = await case_generator.create_case()
    verdict = case.true_verdict.value

    facts_system, facts_messages = generator.calls[0]
    assert verdict in facts_system
    assert "OBJECTIVE FACTS" in facts_messages[0].content

    dossier_system, dossier_messages = generator.calls[1]
    assert verdict in dossier_system
    assert "Hidden narrative about the heist." in dossier_system
    assert "dossier" in dossier_messages[0].content.lower()


@pytest.mark.asyncio
async def test_generation_failure_aborts_before_thread_creation(generator, redis):
    created = []

    class TrackingHistory:
        async def create_thread(self):
            created.append(True)

    generator.fail_with = UpstreamFailure("generation", "down")
    case_generator = CaseGenerator(generator, TrackingHistory(), rng=random.Random(1))

    with pytest.raises(UpstreamFailure):
        await case_generator.create_case()
    assert created == []
    assert await redis.keys("*") == []
