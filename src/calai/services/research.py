"""Nutrition research answers grounded on web search."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from calai.domain.estimation import ResearchAnswer, ResearchSource

ERROR_TEXT = "Sorry, I encountered an error searching for that."
EMPTY_TEXT = "I couldn't find that information."

_logger = logging.getLogger(__name__)


class ResearchClient(Protocol):
    """Interface for a search-grounded LLM."""

    async def ask(self, *, model: str, prompt: str) -> dict[str, object]:
        """Return {"text": str, "sources": [{"uri", "title"}]}."""


@dataclass
class ResearchService:
    """Answers nutrition questions; never raises to the caller."""

    client: ResearchClient | None
    model: str

    async def ask(
        self, question: str, context: str = "", today: date | None = None
    ) -> ResearchAnswer:
        """Answer a question using the user's context summary."""
        if self.client is None:
            return ResearchAnswer(text=ERROR_TEXT)
        day = (today or date.today()).isoformat()
        if context:
            prompt = (
                f"CONTEXT ABOUT USER:\n{context}\n\n"
                f"USER QUERY: {question}. Date: {day}"
            )
        else:
            prompt = f"User Query: {question}. Date: {day}"
        try:
            raw = await self.client.ask(model=self.model, prompt=prompt)
        except Exception:
            _logger.exception("Research request failed")
            return ResearchAnswer(text=ERROR_TEXT)
        return _parse_answer(raw)


def _parse_answer(raw: dict[str, object]) -> ResearchAnswer:
    text = raw.get("text")
    sources: list[ResearchSource] = []
    raw_sources = raw.get("sources")
    for item in raw_sources if isinstance(raw_sources, list) else []:
        if not isinstance(item, dict) or not item.get("uri"):
            continue
        uri = str(item["uri"])
        sources.append(ResearchSource(uri=uri, title=str(item.get("title") or uri)))
    if not isinstance(text, str) or not text.strip():
        text = EMPTY_TEXT
    return ResearchAnswer(text=text, sources=sources)
