# app/describe.py
"""Listing description synthesis.

Uses the OpenAI chat API when a key is configured. Any failure falls back to
a fixed template; this never raises.
"""
from openai import OpenAI

from .config import Settings
from .utils import get_logger, retry

logger = get_logger(__name__)

PROMPT = (
    'Generate a brief, professional description (max 100 words) for a location named "{name}". '
    "Focus on what type of place it might be and what visitors can expect."
)


def default_description(name: str) -> str:
    return (
        f"{name} is a point of interest that offers unique experiences for visitors. "
        "This location provides various amenities and services for guests to enjoy."
    )


def fallback_description(name: str) -> str:
    return f"{name} is a point of interest that offers unique experiences for visitors."


def make_client(settings: Settings) -> OpenAI:
    return OpenAI(api_key=settings.openai_api_key)


@retry(Exception, tries=2, delay=1, backoff=2)
def _complete(client: OpenAI, model: str, name: str) -> str:
    response = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": PROMPT.format(name=name)}],
        max_tokens=150,
        temperature=0.7,
    )
    text = (response.choices[0].message.content or "").strip()
    if not text:
        raise ValueError("empty completion")
    return text


def describe_location(name: str, settings: Settings) -> str:
    if not settings.openai_api_key:
        return default_description(name)
    try:
        return _complete(make_client(settings), settings.openai_model, name)
    except Exception as e:
        logger.warning("AI description generation failed for %r: %s", name, e)
        return fallback_description(name)
