"""LLM-backed activity ideas and hangout plans, with deterministic fallbacks.

These sit on top of the matching engine and never feed back into scores. The
chat model is injected by the caller; when it is missing or its output is
unusable, the local fallback generators are used instead.
"""

import logging
from collections.abc import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from podmatch.config import (
    DEFAULT_HANGOUT_MINUTES,
    MAX_HANGOUT_MINUTES,
    MAX_SUGGESTION_SUMMARY_LENGTH,
    MAX_SUGGESTIONS,
)
from podmatch.schemas.profile import ParticipantSummary, clean_optional_string, clean_string_list
from podmatch.schemas.suggestion import ActivitySuggestion, AgendaItem, HangoutPlan

logger = logging.getLogger(__name__)

ACTIVITY_PROMPT = """\
You coach commuter students on quick on-campus meetups that strengthen community.

Guidelines:
- Suggest 2-3 concrete activities that can fit in 20-90 minutes.
- Use spaces on or near campus (student union, library patio, commuter lounge, etc.).
- Blend in the provided description and hobbies; reflect their vibe.
- When no hobbies are given, pick approachable ideas any commuter could try.
- Keep language warm, inclusive, and campus-oriented.

Student request: {description}
{hobby_line}

{format_instructions}\
"""

HANGOUT_PROMPT = """\
You are a campus hangout concierge crafting inclusive, commuter-friendly plans.

Guidelines:
- Suggest an agenda that fits within the provided time.
- Reference their hobbies/interests so everyone feels seen.
- Keep conversation starters inclusive and curiosity-driven.
- If information is sparse, recommend universally friendly prompts.
- Avoid suggesting alcohol and keep everything campus-accessible.

{focus_line}
{duration_line}

People attending:
{roster}

{format_instructions}\
"""

DEFAULT_DESCRIPTION = "Co-working sessions or quick meetups that help commuters feel connected."


class ActivitySuggestionsOutput(BaseModel):
    """Intermediate schema for LLM activity suggestion output."""

    suggestions: list[ActivitySuggestion] = Field(
        description="2-3 activity suggestions"
    )


class HangoutPlanOutput(BaseModel):
    """Intermediate schema for LLM hangout plan output.

    Every field is optional; missing ones are filled from the fallback plan.
    """

    title: str | None = Field(default=None, description="Short title")
    summary: str | None = Field(default=None, description="1-2 sentence overview")
    agenda: list[AgendaItem] = Field(default_factory=list, description="Timed agenda blocks")
    conversation_starters: list[str] = Field(default_factory=list, description="3 starters")
    shared_connections: list[str] = Field(
        default_factory=list, description="Shared hobby or interest insights"
    )
    prep_reminders: list[str] = Field(default_factory=list, description="Prep reminders")
    follow_up_ideas: list[str] = Field(default_factory=list, description="Next steps")


def clamp_suggestions(items: Sequence[ActivitySuggestion]) -> list[ActivitySuggestion]:
    """Drop untitled items, trim text, and keep at most MAX_SUGGESTIONS."""
    clamped = []
    for item in items:
        title = clean_optional_string(item.title)
        if not title:
            continue
        duration = item.duration_minutes
        clamped.append(
            ActivitySuggestion(
                title=title,
                summary=clean_optional_string(item.summary),
                duration_minutes=round(duration) if duration and duration > 0 else None,
                tags=clean_string_list(item.tags),
                primary_reason=clean_optional_string(item.primary_reason),
            )
        )
        if len(clamped) == MAX_SUGGESTIONS:
            break
    return clamped


def fallback_activity_suggestions(description: str, hobbies: Sequence[str]) -> list[ActivitySuggestion]:
    """Three deterministic ideas, personalised from hobbies and description."""
    ideas = [
        ActivitySuggestion(
            title="Commuter Coffee Catch-up",
            summary=(
                "Meet at the campus coffee bar before class for a 30-minute vibe check "
                "and quick planning sprint."
            ),
            duration_minutes=30,
            tags=["coffee", "hangout", "commuter"],
            primary_reason="Works for tight schedules and gets commuters face time with peers.",
        ),
        ActivitySuggestion(
            title="Library Focus Pod",
            summary=(
                "Block off 45 minutes in the library's quiet zone to co-work and swap "
                "study playlists."
            ),
            duration_minutes=45,
            tags=["study", "focus", "library"],
            primary_reason="Easy to schedule between classes and keeps energy accountable.",
        ),
        ActivitySuggestion(
            title="Campus Loop Reset",
            summary=(
                "Take a 25-minute walk around campus to stretch, compare notes from "
                "classes, and reset before the next block."
            ),
            duration_minutes=25,
            tags=["movement", "wellness"],
            primary_reason="Keeps commuters energized without needing extra gear or planning.",
        ),
    ]

    if len(hobbies) > 0:
        top = hobbies[0]
        ideas[0] = ActivitySuggestion(
            title=f"{top} Micro Meetup",
            summary=(
                f"Gather for a 30-minute {top.lower()} session in a common space so "
                "commuters can connect fast."
            ),
            duration_minutes=30,
            tags=[top.lower(), "commuter"],
            primary_reason=f"Taps into their interest in {top} while staying campus friendly.",
        )
    if len(hobbies) > 1:
        second = hobbies[1]
        ideas[1] = ActivitySuggestion(
            title=f"{second} Express Jam",
            summary=(
                f"Host a 45-minute {second.lower()} meetup in a lounge or multipurpose "
                "room and invite folks to bring a friend."
            ),
            duration_minutes=45,
            tags=[second.lower(), "community"],
            primary_reason=f"Builds on their {second} hobby to attract similar commuters.",
        )
    if description:
        limit = MAX_SUGGESTION_SUMMARY_LENGTH
        ideas[2] = ActivitySuggestion(
            title="Express Match Activity",
            summary=f"{description[:limit - 3]}…" if len(description) > limit else description,
            duration_minutes=35,
            tags=["custom", "commuter"],
            primary_reason=(
                "Echoes the student's own idea so they can rally others around it quickly."
            ),
        )

    return ideas


def generate_activity_suggestions(
    description: str,
    hobbies: Sequence[str],
    llm: BaseChatModel | None = None,
) -> list[ActivitySuggestion]:
    """Generate meetup ideas, using the LLM when one is provided.

    Args:
        description: Free-form request from the student (may be empty).
        hobbies: Student's hobbies.
        llm: Chat model to use; None goes straight to the fallback.

    Returns:
        Up to MAX_SUGGESTIONS suggestions. Never empty.
    """
    description = (description or "").strip()
    hobbies = clean_string_list(list(hobbies))
    fallback = clamp_suggestions(fallback_activity_suggestions(description, hobbies))

    if llm is None:
        return fallback

    parser = PydanticOutputParser(pydantic_object=ActivitySuggestionsOutput)
    prompt = ChatPromptTemplate.from_template(ACTIVITY_PROMPT)
    chain = prompt | llm | parser

    hobby_line = (
        f"The student enjoys: {', '.join(hobbies[:8])}."
        if hobbies
        else "No explicit hobbies provided."
    )
    try:
        result = chain.invoke({
            "description": description or DEFAULT_DESCRIPTION,
            "hobby_line": hobby_line,
            "format_instructions": parser.get_format_instructions(),
        })
    except Exception as e:
        logger.warning(f"Activity suggestion generation failed ({e}); using fallback")
        return fallback

    suggestions = clamp_suggestions(result.suggestions) if result is not None else []
    if not suggestions:
        logger.warning("Model response missing suggestions; using fallback")
        return fallback
    return suggestions


def clamp_duration(duration_minutes: int | None) -> int:
    if duration_minutes is None or duration_minutes <= 0:
        return DEFAULT_HANGOUT_MINUTES
    return min(round(duration_minutes), MAX_HANGOUT_MINUTES)


def describe_person(person: ParticipantSummary) -> str:
    parts = []
    if person.name:
        parts.append(person.name)
    if person.major:
        parts.append(f"studies {person.major}")
    if person.hobbies:
        parts.append(f"into {', '.join(person.hobbies[:3])}")
    elif person.interests:
        parts.append(f"interested in {', '.join(person.interests[:3])}")
    return " · ".join(parts)


def fallback_hangout_plan(
    seeker: ParticipantSummary,
    friends: Sequence[ParticipantSummary],
    focus: str | None = None,
    duration_minutes: int | None = None,
) -> HangoutPlan:
    """A three-block plan sized to the available time."""
    total = clamp_duration(duration_minutes)
    kickoff = min(20, round(total / 3))
    collaborate = min(25, round(total / 2))
    wrap = max(total - kickoff - collaborate, 15)

    hobbies = [h.lower() for h in [*seeker.hobbies, *(h for f in friends for h in f.hobbies)]]
    unique_hobbies = list(dict.fromkeys(hobbies))
    if unique_hobbies:
        shared = [f"Lean into your shared interest in {', '.join(unique_hobbies[:2])}."]
    else:
        shared = ["Swap quick wins from the week so everyone gets a turn to shine."]

    if focus:
        title = f"{focus} meetup"
        summary = (
            f"Swap stories and resources related to {focus.lower()} while catching up "
            "in a relaxed campus spot."
        )
        shared_focus = (
            f"Collaborate on something tied to {focus.lower()} or trade tips that help "
            "everyone move forward."
        )
    else:
        title = "Campus catch-up"
        summary = (
            "Gather for a relaxed campus catch-up, share wins from the week, and line up "
            "the next meetup."
        )
        shared_focus = "Work on personal goals side-by-side or share a playlist while you co-work."

    return HangoutPlan(
        title=title,
        summary=summary,
        agenda=[
            AgendaItem(
                label="Arrive & settle in",
                duration_minutes=kickoff,
                detail=(
                    "Grab drinks or snacks and do a quick high/low round so everyone "
                    "feels caught up."
                ),
            ),
            AgendaItem(label="Shared focus", duration_minutes=collaborate, detail=shared_focus),
            AgendaItem(
                label="Wrap & plan next touchpoint",
                duration_minutes=wrap,
                detail=(
                    "Recap key takeaways, jot down next steps, and snap a photo to mark "
                    "the moment."
                ),
            ),
        ],
        conversation_starters=[
            "What's something that energized you this week?",
            "If we had another hour together, what would you want to dive into?",
            "Any campus hack or hidden spot worth sharing?",
        ],
        shared_connections=shared,
        prep_reminders=[
            "Pick a spot with outlets and comfy seating so commuters can settle in.",
            "Bring a small treat or playlist suggestion to kick things off.",
        ],
        follow_up_ideas=[
            "Drop a quick recap or photo in your group chat after the meetup.",
            "Lock in the next hang while everyone's together.",
        ],
        participants=[seeker.name or "You", *(f.name for f in friends if f.name)],
    )


def merge_hangout_plan(output: HangoutPlanOutput | None, fallback: HangoutPlan) -> HangoutPlan:
    """Overlay model output on the fallback plan, field by field."""
    if output is None:
        return fallback

    agenda = [
        AgendaItem(
            label=item.label.strip(),
            duration_minutes=round(item.duration_minutes)
            if item.duration_minutes and item.duration_minutes > 0
            else None,
            detail=clean_optional_string(item.detail),
        )
        for item in output.agenda
        if item.label and item.label.strip()
    ]
    return HangoutPlan(
        title=clean_optional_string(output.title) or fallback.title,
        summary=clean_optional_string(output.summary) or fallback.summary,
        agenda=agenda or fallback.agenda,
        conversation_starters=clean_string_list(output.conversation_starters)
        or fallback.conversation_starters,
        shared_connections=clean_string_list(output.shared_connections)
        or fallback.shared_connections,
        prep_reminders=clean_string_list(output.prep_reminders) or fallback.prep_reminders,
        follow_up_ideas=clean_string_list(output.follow_up_ideas) or fallback.follow_up_ideas,
        participants=fallback.participants,
    )


def generate_hangout_plan(
    seeker: ParticipantSummary,
    friends: Sequence[ParticipantSummary],
    focus: str | None = None,
    duration_minutes: int | None = None,
    llm: BaseChatModel | None = None,
) -> HangoutPlan:
    """Generate a hangout plan for the seeker and friends.

    Args:
        seeker: Host of the hangout.
        friends: Everyone else attending.
        focus: Optional theme the group mentioned.
        duration_minutes: Time available (clamped to 1-240, default 60).
        llm: Chat model to use; None goes straight to the fallback.

    Returns:
        HangoutPlan. Participants always come from the given roster.
    """
    focus = clean_optional_string(focus)
    fallback = fallback_hangout_plan(seeker, friends, focus, duration_minutes)
    if llm is None:
        return fallback

    parser = PydanticOutputParser(pydantic_object=HangoutPlanOutput)
    prompt = ChatPromptTemplate.from_template(HANGOUT_PROMPT)
    chain = prompt | llm | parser

    roster_lines = []
    if seeker_summary := describe_person(seeker):
        roster_lines.append(f"Host: {seeker_summary}")
    described = [d for d in (describe_person(f) for f in friends) if d]
    roster_lines.extend(f"Friend {i}: {summary}" for i, summary in enumerate(described, start=1))

    try:
        result = chain.invoke({
            "focus_line": (
                f"Priority or vibe the group mentioned: {focus}."
                if focus
                else "No special focus was mentioned; suggest something energizing and welcoming."
            ),
            "duration_line": f"They have about {clamp_duration(duration_minutes)} minutes together.",
            "roster": "\n".join(roster_lines) or "No roster info provided.",
            "format_instructions": parser.get_format_instructions(),
        })
    except Exception as e:
        logger.warning(f"Hangout plan generation failed ({e}); using fallback")
        return fallback

    return merge_hangout_plan(result, fallback)
