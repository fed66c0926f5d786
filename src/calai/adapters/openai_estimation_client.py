"""OpenAI Responses API client for food estimation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from calai.errors import EstimationError
from calai.services.estimation import FoodEstimationClient

SYSTEM_INSTRUCTIONS = (
    "You are a highly accurate nutritionist assistant. Analyze food "
    "descriptions (text or image) and return structured nutritional data."
)


@dataclass
class OpenAIEstimationClient(FoodEstimationClient):
    """Food estimation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIEstimationClient":
        """Create an OpenAI estimation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> object:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = []
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        content.append({"type": "input_text", "text": prompt})
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": SYSTEM_INSTRUCTIONS,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_estimate",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise EstimationError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise EstimationError("OpenAI returned invalid JSON") from exc
