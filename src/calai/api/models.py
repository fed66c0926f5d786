"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field

from calai.domain.estimation import FoodEstimate
from calai.domain.logs import MealType


class AnalyzeRequest(BaseModel):
    """Food description and optional base64 photo to estimate."""

    description: str = ""
    image_base64: str | None = None


class AcceptRequest(BaseModel):
    """Estimates the user accepted, to be logged as one batch."""

    items: list[FoodEstimate] = Field(min_length=1)
    meal_type: MealType = MealType.SNACK


class ResearchRequest(BaseModel):
    """Nutrition question for the research assistant."""

    question: str = Field(min_length=1)
