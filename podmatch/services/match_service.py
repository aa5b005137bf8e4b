"""Match service: the request-handler facade over the matching engine.

This service handles:
- Validating raw match requests and running the assembler
- Loading a seeker's stored profile/availability through a repository
- Hobby search over the candidate pool
- Activity suggestions and hangout plans (LLM with local fallback)

Every call is stateless: nothing computed here outlives the request.
"""

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel

from podmatch.config import DEFAULT_LIMIT
from podmatch.data.repository import ProfileRepository
from podmatch.explainer.suggestions import generate_activity_suggestions, generate_hangout_plan
from podmatch.matching.assembler import assemble_matches
from podmatch.matching.filter import filter_by_hobby_query
from podmatch.matching.weights import DEFAULT_WEIGHTS, ScoreWeights
from podmatch.schemas.match import MatchResponse
from podmatch.schemas.profile import ParticipantSummary
from podmatch.schemas.request import MatchFilters, MatchMode, MatchRequest, clean_description
from podmatch.schemas.suggestion import ActivitySuggestion, HangoutPlan
from podmatch.utils import InvalidMatchRequestError, create_llm

logger = logging.getLogger(__name__)


def find_matches(
    request: MatchRequest | dict[str, Any],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> MatchResponse:
    """Run one matching pass.

    Args:
        request: Validated request, or a raw payload to validate.
        weights: Scoring constants.

    Returns:
        MatchResponse with ranked previews or an empty_reason.

    Raises:
        InvalidMatchRequestError: If the request is malformed.
    """
    if not isinstance(request, MatchRequest):
        request = MatchRequest.from_payload(request)

    logger.info(
        f"Matching seeker {request.seeker.id} in {request.mode.value} mode: "
        f"{len(request.candidate_pool)} candidates, "
        f"{len(request.availability)} availability slots, "
        f"filters={request.filters.active_keys()}"
    )
    response = assemble_matches(
        seeker=request.seeker,
        availability=request.availability,
        candidate_pool=request.candidate_pool,
        mode=request.mode,
        filters=request.filters,
        limit=request.limit,
        weights=weights,
    )
    if response.empty_reason:
        logger.info(f"No matches: {response.empty_reason}")
    else:
        logger.info(f"Returning {len(response.matches)} matches")
    return response


def find_matches_for_seeker(
    repository: ProfileRepository,
    seeker_id: str,
    mode: MatchMode | str = MatchMode.PAIR,
    filters: MatchFilters | None = None,
    limit: int | None = DEFAULT_LIMIT,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> MatchResponse:
    """Load the seeker's stored record and the pool, then match.

    Raises:
        InvalidMatchRequestError: If the seeker is unknown or the request is
            malformed.
    """
    dataset = repository.fetch_matchmaking_dataset(seeker_id=seeker_id)
    if dataset.seeker is None:
        raise InvalidMatchRequestError(f"Unknown seeker: {seeker_id}")

    try:
        parsed_mode = MatchMode(mode)
    except ValueError:
        raise InvalidMatchRequestError(f"Unknown match mode: {mode!r}") from None

    request = MatchRequest(
        seeker=dataset.seeker.profile,
        availability=dataset.seeker.availability,
        mode=parsed_mode,
        filters=filters or MatchFilters(),
        candidate_pool=dataset.candidates,
        limit=limit,
    )
    return find_matches(request, weights)


def search_hobbies(
    repository: ProfileRepository,
    hobby: str,
    seeker_id: str | None = None,
) -> list[ParticipantSummary]:
    """Find candidates whose hobbies contain the term (case-insensitive).

    Raises:
        InvalidMatchRequestError: If the hobby term is blank.
    """
    term = (hobby or "").strip()
    if not term:
        raise InvalidMatchRequestError("A hobby search term is required")

    dataset = repository.fetch_matchmaking_dataset(seeker_id=seeker_id)
    matches = filter_by_hobby_query(dataset.candidates, term)
    logger.info(f"Hobby search '{term}' matched {len(matches)} candidates")
    return [record.profile.to_summary() for record in matches]


def suggest_activities(
    description: str | None,
    hobbies: list[str],
    llm: BaseChatModel | None = None,
) -> list[ActivitySuggestion]:
    """Activity ideas for a description and/or hobbies.

    Args:
        description: Free-form request (trimmed, capped at 800 characters).
        hobbies: Hobbies to tailor ideas to.
        llm: Chat model; defaults to a fresh Groq client when configured.

    Raises:
        InvalidMatchRequestError: If neither a description nor a hobby is given.
    """
    description = clean_description(description)
    hobbies = [h.strip() for h in hobbies if h and h.strip()]
    if not description and not hobbies:
        raise InvalidMatchRequestError("Provide a short description or at least one hobby.")

    if llm is None:
        llm = create_llm()
    return generate_activity_suggestions(description, hobbies, llm=llm)


def plan_hangout(
    repository: ProfileRepository,
    seeker_id: str,
    friend_ids: list[str],
    focus: str | None = None,
    duration_minutes: int | None = None,
    llm: BaseChatModel | None = None,
) -> HangoutPlan:
    """Plan a hangout for the seeker and the given friends.

    Raises:
        InvalidMatchRequestError: If the seeker is unknown or no known friend
            is given.
    """
    seeker = repository.get_record(seeker_id)
    if seeker is None:
        raise InvalidMatchRequestError(f"Unknown seeker: {seeker_id}")

    friends = []
    for friend_id in friend_ids:
        record = repository.get_record(friend_id)
        if record is None:
            logger.warning(f"Skipping unknown friend id: {friend_id}")
            continue
        friends.append(record.profile.to_summary())
    if not friends:
        raise InvalidMatchRequestError(
            "Provide a seeker profile and at least one friend to generate a hangout plan."
        )

    if llm is None:
        llm = create_llm()
    return generate_hangout_plan(
        seeker.profile.to_summary(),
        friends,
        focus=focus,
        duration_minutes=duration_minutes,
        llm=llm,
    )
