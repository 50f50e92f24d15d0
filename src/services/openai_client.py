"""Helpers for configuring the OpenAI client used for speech synthesis."""

from openai import AsyncOpenAI


def build_openai_client(api_key: str, max_retries: int = 2) -> AsyncOpenAI:
    """Create a configured AsyncOpenAI client."""
    return AsyncOpenAI(api_key=api_key, max_retries=max_retries)
