"""
Grounded completions over the OpenAI Responses API.
"""

import logging
import os
from dataclasses import dataclass, field

from openai import AsyncOpenAI

from .models import Source

logger = logging.getLogger("ytinterp")

DEFAULT_MODEL = "gpt-4o-mini"
WEB_SEARCH_TOOL = {"type": "web_search_preview"}


@dataclass
class Completion:
    """Generated text and the web sources it cites."""

    text: str
    sources: list[Source] = field(default_factory=list)


def make_client(api_key: str | None = None) -> AsyncOpenAI:
    """Create an async OpenAI client from an explicit key or OPENAI_API_KEY."""
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY is not set. Put it in .env or environment.")
    return AsyncOpenAI(api_key=api_key)


async def complete(
    client: AsyncOpenAI,
    prompt: str,
    *,
    system: str | None = None,
    temperature: float = 0.4,
    grounded: bool = True,
    model: str = DEFAULT_MODEL,
) -> Completion:
    """Run one completion; errors from the API propagate to the caller."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    kwargs = {"model": model, "input": prompt, "temperature": temperature}
    if system:
        kwargs["instructions"] = system
    if grounded:
        kwargs["tools"] = [WEB_SEARCH_TOOL]

    logger.debug("Requesting completion (model=%s, grounded=%s, temperature=%s)", model, grounded, temperature)
    response = await client.responses.create(**kwargs)
    text = (getattr(response, "output_text", None) or "").strip()
    return Completion(text=text, sources=extract_sources(response))


def extract_sources(response) -> list[Source]:
    """Collect url citations from a response, in order, one per URI."""
    sources: list[Source] = []
    seen: set[str] = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for ann in getattr(part, "annotations", None) or []:
                if getattr(ann, "type", None) != "url_citation":
                    continue
                uri = getattr(ann, "url", None)
                if not uri or uri in seen:
                    continue
                seen.add(uri)
                sources.append(Source(title=getattr(ann, "title", None) or "Source", uri=uri))
    return sources
