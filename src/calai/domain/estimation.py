"""Models for collaborator responses: food estimates, plans, research."""

from pydantic import BaseModel, ConfigDict, Field


class EstimatedMacros(BaseModel):
    """Macronutrient grams for an estimated food."""

    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class EstimatedMicronutrients(BaseModel):
    """Micronutrients for an estimated food; any key may be absent."""

    model_config = ConfigDict(populate_by_name=True)

    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    cholesterol: float | None = None
    potassium: float | None = None
    saturated_fat: float | None = Field(default=None, alias="saturatedFat")
    vitamin_a: float | None = Field(default=None, alias="vitaminA")
    vitamin_c: float | None = Field(default=None, alias="vitaminC")
    calcium: float | None = None
    iron: float | None = None


class FoodEstimate(BaseModel):
    """Single food item estimated from text or an image."""

    model_config = ConfigDict(populate_by_name=True)

    food_name: str = Field(alias="foodName", min_length=1)
    description: str = ""
    calories: float
    macros: EstimatedMacros = Field(default_factory=EstimatedMacros)
    micronutrients: EstimatedMicronutrients | None = None


class FoodEstimateBatch(BaseModel):
    """Structured output wrapper for food estimation."""

    items: list[FoodEstimate]


class PlanRecommendation(BaseModel):
    """Daily plan returned by the plan collaborator."""

    calories: float = Field(gt=0, allow_inf_nan=False)
    protein: float = Field(gt=0, allow_inf_nan=False)
    carbs: float = Field(gt=0, allow_inf_nan=False)
    fat: float = Field(gt=0, allow_inf_nan=False)
    bmi: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    tdee: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    reasoning: str | None = None


class ResearchSource(BaseModel):
    """Web source cited by a research answer."""

    uri: str
    title: str


class ResearchAnswer(BaseModel):
    """Answer to a nutrition question with its sources."""

    text: str
    sources: list[ResearchSource] = Field(default_factory=list)
