"""Wording of everything the skill says."""

from __future__ import annotations

from collections.abc import Sequence

from lottery_skill.services.envelope import DelegateDirective, ElicitSlotDirective, SkillResponse
from lottery_skill.services.ledger import Applicant
from lottery_skill.services.speech import Speech


WINNER_COUNT_SLOT = "winnerCount"

START_PROMPT = "Shall we start the draw?"
REPEAT_PROMPT = "Shall I read the winners again?"
WINNER_COUNT_PROMPT = "How many winners should I draw?"
APOLOGY = "Sorry, I didn't catch that."
APOLOGY_REPROMPT = "Please say that again."
GOODBYE = "Goodbye."


def winners_speech(winners: Sequence[Applicant]) -> Speech:
    """Announce ``winners`` loudly, then once more."""

    pause = Speech.pause(1)
    names = Speech.join(pause + ",", (Speech.text(str(w)) for w in winners))
    single = (Speech.text("The winners are,") + pause + names + pause + ".").emphasized()
    return single + pause + "Once again. " + single


def launch(applicant_count: int) -> SkillResponse:
    return SkillResponse(
        speech=Speech.text(f"There are {applicant_count} applicants. {START_PROMPT}"),
        reprompt=START_PROMPT,
    )


def draw_result(skill_name: str, winners: Sequence[Applicant]) -> SkillResponse:
    speech = (
        Speech.text("Drawing lots.")
        + Speech.pause(3)
        + "The draw is complete. Here are the winners. "
        + winners_speech(winners)
        + REPEAT_PROMPT
    )
    return SkillResponse(
        speech=speech,
        reprompt=REPEAT_PROMPT,
        card_title=skill_name,
        card_body="Winners: " + ", ".join(str(w) for w in winners),
    )


def repeat_result(winners: Sequence[Applicant]) -> SkillResponse:
    return SkillResponse(speech=winners_speech(winners), reprompt=REPEAT_PROMPT)


def delegate() -> SkillResponse:
    return SkillResponse(directives=(DelegateDirective(),))


def ask_winner_count() -> SkillResponse:
    return SkillResponse(
        speech=Speech.text(WINNER_COUNT_PROMPT),
        reprompt=WINNER_COUNT_PROMPT,
        directives=(ElicitSlotDirective(WINNER_COUNT_SLOT),),
    )


def help_prompt(skill_name: str) -> SkillResponse:
    return SkillResponse(
        speech=Speech.text(f"This is {skill_name}. {START_PROMPT}"),
        reprompt=START_PROMPT,
    )


def goodbye() -> SkillResponse:
    return SkillResponse(speech=Speech.text(GOODBYE), end_session=True)


def apology() -> SkillResponse:
    return SkillResponse(speech=Speech.text(APOLOGY), reprompt=APOLOGY_REPROMPT)
