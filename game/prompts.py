"""Prompt text for case creation and defendant role-play.

Every prompt that mentions the verdict is built from the same CaseFacts, so
the defendant's answers stay consistent with the facts generated at start.
"""

from game.models import CaseFacts, Verdict

PREMISE = (
    "We are playing a RPG wherein the user is playing as a judge/jury, "
    "interrogating a defendant. In this instance, the defendant is {verdict}."
)

OBJECTIVE_FACTS_INSTRUCTION = """Create a fictional court case for this game. The user is going to interact and ask questions, attempting to determine the guilt of the defendant.

For now, we are just establishing a (secret) ground truth about the case, so generate a 300 word or so description of an interesting case.
Give all the OBJECTIVE FACTS about the case from an omniscient perspective, so that this response can be used as a reference later on when roleplaying as the defendant.

In this instance, the defendant should be {verdict}."""

FACTS_CONTEXT = (
    'We previously established these as the "objective facts" behind the scenes, '
    "not all of which the user should know: {objective_facts}"
)

DOSSIER_INSTRUCTION = """Generate a dossier summarizing the case for the user, giving them baseline background from which to begin their investigation.

Do not reveal information from the objective facts the defendant would have concealed or that gives away the answer.
Make this interesting and succinct (~300 words)."""

DEFENDANT_ROLE = (
    "For the purposes of this conversation, roleplay as the defendant trying to "
    "convince the judge of your innocence. Stay in character, answer only as the "
    "defendant, and never state the verdict outright."
)


def premise_prompt(verdict: Verdict) -> str:
    return PREMISE.format(verdict=verdict.value)


def objective_facts_instruction(verdict: Verdict) -> str:
    return OBJECTIVE_FACTS_INSTRUCTION.format(verdict=verdict.value)


def case_context_prompt(case_facts: CaseFacts) -> str:
    """System context shared by the dossier request and every defendant turn."""
    return "\n\n".join(
        [
            premise_prompt(case_facts.true_verdict),
            FACTS_CONTEXT.format(objective_facts=case_facts.objective_facts),
        ]
    )


def defendant_system_prompt(case_facts: CaseFacts) -> str:
    return "\n\n".join([case_context_prompt(case_facts), DEFENDANT_ROLE])
