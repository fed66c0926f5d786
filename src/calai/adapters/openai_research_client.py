"""OpenAI Responses API client for search-grounded research answers."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from calai.services.research import ResearchClient

SYSTEM_INSTRUCTIONS = (
    "You are a helpful nutrition expert. Use the user's stats, goals and food "
    "logs from the context to personalize advice. Search the web for accurate, "
    "up-to-date information. Be concise and factual."
)


@dataclass
class OpenAIResearchClient(ResearchClient):
    """Research client using the Responses API web search tool."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIResearchClient":
        """Create an OpenAI research client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def ask(self, *, model: str, prompt: str) -> dict[str, object]:
        """Return answer text and cited web sources."""
        response = await self.client.responses.create(
            model=model,
            instructions=SYSTEM_INSTRUCTIONS,
            input=prompt,
            tools=[{"type": "web_search"}],
        )
        return {"text": response.output_text, "sources": _extract_sources(response)}


def _extract_sources(response: object) -> list[dict[str, str]]:
    """Collect unique URL citations from message output."""
    sources: list[dict[str, str]] = []
    seen: set[str] = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                url = getattr(annotation, "url", None)
                if not url or url in seen:
                    continue
                seen.add(url)
                sources.append({"uri": url, "title": getattr(annotation, "title", url)})
    return sources
