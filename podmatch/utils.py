"""Shared utilities for podmatch."""

from langchain_groq import ChatGroq

from podmatch.config import GROQ_API_KEY, GROQ_MODEL, LLM_TEMPERATURE


class LLMConfigurationError(Exception):
    """Raised when LLM is not properly configured."""

    pass


class MatchRequestError(ValueError):
    """Base class for errors raised while handling a matching request."""

    pass


class InvalidMatchRequestError(MatchRequestError):
    """Raised for malformed requests (missing seeker id, empty pool, unknown mode).

    Requests that are well-formed but simply produce no matches never raise;
    they return an empty result with an explanatory reason instead.
    """

    pass


def check_llm_configured() -> None:
    """Check if Groq API key is configured.

    Raises:
        LLMConfigurationError: If GROQ_API_KEY is not set.
    """
    if not GROQ_API_KEY:
        raise LLMConfigurationError(
            "GROQ_API_KEY environment variable is not set. "
            "Please create a .env file with your Groq API key. "
            "Get your free API key at https://console.groq.com"
        )


def create_llm() -> ChatGroq | None:
    """Build a fresh Groq chat model, or None when no API key is configured.

    Callers own the returned client and pass it to whatever needs it.
    """
    try:
        check_llm_configured()
    except LLMConfigurationError:
        return None
    return ChatGroq(
        model=GROQ_MODEL,
        temperature=LLM_TEMPERATURE,
        api_key=GROQ_API_KEY,
    )
