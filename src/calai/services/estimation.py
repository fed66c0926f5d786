"""Food estimation service using LLMs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from calai.domain.estimation import FoodEstimate, FoodEstimateBatch
from calai.errors import EstimationError

_NUMBER_OR_NULL = {"anyOf": [{"type": "number"}, {"type": "null"}]}

_MICRONUTRIENT_KEYS = (
    "fiber",
    "sugar",
    "sodium",
    "cholesterol",
    "potassium",
    "saturatedFat",
    "vitaminA",
    "vitaminC",
    "calcium",
    "iron",
)

ESTIMATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "foodName": {"type": "string"},
                    "description": {"type": "string"},
                    "calories": {"type": "number"},
                    "macros": {
                        "type": "object",
                        "properties": {
                            "protein": {"type": "number"},
                            "carbs": {"type": "number"},
                            "fat": {"type": "number"},
                        },
                        "required": ["protein", "carbs", "fat"],
                        "additionalProperties": False,
                    },
                    "micronutrients": {
                        "type": "object",
                        "properties": dict.fromkeys(
                            _MICRONUTRIENT_KEYS, _NUMBER_OR_NULL
                        ),
                        "required": list(_MICRONUTRIENT_KEYS),
                        "additionalProperties": False,
                    },
                },
                "required": [
                    "foodName",
                    "description",
                    "calories",
                    "macros",
                    "micronutrients",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

IMAGE_ONLY_DESCRIPTION = "Identify this food"

_logger = logging.getLogger(__name__)


class FoodEstimationClient(Protocol):
    """Interface for LLM food estimation."""

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
        """Return raw structured estimation data."""


@dataclass
class EstimationService:
    """Service that prepares estimation prompts and validates results."""

    client: FoodEstimationClient | None
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    async def estimate(
        self, description: str, image_bytes: bytes | None = None
    ) -> list[FoodEstimate]:
        """Estimate foods from a description and optional photo.

        Raises EstimationError on any collaborator or shape failure.
        """
        text = description.strip()
        if not text and not image_bytes:
            raise EstimationError("Nothing to analyze")
        if self.client is None:
            raise EstimationError("Food estimation is not configured")
        if not text:
            text = IMAGE_ONLY_DESCRIPTION

        prompt = (
            f'Analyze this food intake: "{text}". '
            "Return every food item identified with a short description of the "
            "estimated quantity, calories, macros in grams and micronutrients "
            "(fiber, sugar, saturatedFat in g; sodium, cholesterol, potassium in "
            "mg; vitaminA, vitaminC, calcium, iron in % daily value). "
            "Estimate portion sizes sensibly if not specified."
        )
        image_data_url = _to_data_url(image_bytes) if image_bytes else None
        try:
            raw = await self.client.estimate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                image_data_url=image_data_url,
                schema=ESTIMATION_SCHEMA,
            )
        except EstimationError:
            raise
        except Exception as exc:
            _logger.exception("Food estimation request failed")
            raise EstimationError("Food estimation request failed") from exc
        return parse_estimates(raw)


def parse_estimates(raw: object) -> list[FoodEstimate]:
    """Validate a raw estimation payload: a list of items or {"items": [...]}."""
    if isinstance(raw, dict):
        raw = raw.get("items")
    if not isinstance(raw, list):
        raise EstimationError("Estimation response is not a list of foods")
    try:
        return FoodEstimateBatch.model_validate({"items": raw}).items
    except PydanticValidationError as exc:
        _logger.warning("Estimation response failed validation: %s", exc)
        raise EstimationError("Estimation response has an unexpected shape") from exc


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
