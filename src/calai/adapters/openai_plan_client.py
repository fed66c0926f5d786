"""OpenAI Responses API client for nutrition plan recommendations."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from calai.adapters.records import profile_to_record
from calai.domain.profile import UserProfile
from calai.errors import PlanCalculationError
from calai.services.plan import PlanClient

SYSTEM_INSTRUCTIONS = (
    "You are an expert sports nutritionist and dietician. Calculate metabolic "
    "rates and recommend macronutrient splits based on user data."
)

PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number"},
        "protein": {"type": "number"},
        "carbs": {"type": "number"},
        "fat": {"type": "number"},
        "bmi": {"type": "number"},
        "tdee": {"type": "number"},
        "reasoning": {"type": "string"},
    },
    "required": ["calories", "protein", "carbs", "fat", "bmi", "tdee", "reasoning"],
    "additionalProperties": False,
}


def plan_prompt(profile: UserProfile) -> str:
    """Return the plan request prompt for a profile."""
    return (
        "Calculate the optimal daily nutrition plan for this user:\n"
        f"{json.dumps(profile_to_record(profile))}\n\n"
        "Use the Mifflin-St Jeor equation for BMR, scale by activity level for "
        "TDEE, subtract 500 kcal to lose weight and add 300 kcal to gain muscle. "
        "Protein: 1g/kg to maintain, 1.6-2.2g/kg to gain muscle, 1.2-1.5g/kg to "
        "lose weight. Explain the protein target based on their weight."
    )


@dataclass
class OpenAIPlanClient(PlanClient):
    """Plan client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIPlanClient":
        """Create an OpenAI plan client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def recommend(self, profile: UserProfile) -> dict[str, object]:
        """Return a raw plan; every failure becomes PlanCalculationError."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "instructions": SYSTEM_INSTRUCTIONS,
            "input": plan_prompt(profile),
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_plan",
                    "strict": True,
                    "schema": PLAN_SCHEMA,
                }
            },
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}
        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise PlanCalculationError("OpenAI plan request failed") from exc
        output_text = response.output_text
        if not output_text:
            raise PlanCalculationError("OpenAI returned an empty response")
        try:
            payload = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise PlanCalculationError("OpenAI returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise PlanCalculationError("OpenAI returned a non-object plan")
        return payload
