"""Shared test fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from calai.config import Settings
from calai.containers import AppContainer
from calai.domain.logs import FoodLogEntry, MealType, Micronutrients
from calai.domain.profile import ActivityLevel, DailyGoals, Gender, Goal, UserProfile
from calai.services.estimation import EstimationService, FoodEstimationClient
from calai.services.plan import PlanClient, PlanService
from calai.services.research import ResearchClient, ResearchService
from calai.services.stats import StatsService
from calai.services.tracker import StateRepository, TrackerService


def make_entry(  # noqa: PLR0913
    *,
    calories: float = 0,
    protein_g: float = 0,
    carbs_g: float = 0,
    fat_g: float = 0,
    logged_at: datetime | None = None,
    meal_type: MealType = MealType.SNACK,
    name: str = "Food",
    micronutrients: Micronutrients | None = None,
) -> FoodLogEntry:
    return FoodLogEntry(
        id=uuid4(),
        name=name,
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        logged_at=logged_at or datetime.now(tz=UTC),
        meal_type=meal_type,
        micronutrients=micronutrients or Micronutrients(),
    )


def make_profile(**overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "name": "Sam",
        "age": 30,
        "gender": Gender.MALE,
        "height_cm": 180.0,
        "weight_kg": 80.0,
        "activity_level": ActivityLevel.MODERATE,
        "goal": Goal.MAINTAIN,
    }
    values.update(overrides)
    return UserProfile(**values)  # type: ignore[arg-type]


def estimate_payload(
    name: str = "Oatmeal", calories: float = 300, protein: float = 10
) -> dict[str, object]:
    return {
        "foodName": name,
        "description": "1 bowl",
        "calories": calories,
        "macros": {"protein": protein, "carbs": 50, "fat": 6},
        "micronutrients": {"fiber": 8, "sodium": 120, "saturatedFat": 1.2},
    }


@dataclass
class InMemoryStateRepository(StateRepository):
    """In-memory state repository for tests."""

    entries: list[FoodLogEntry] = field(default_factory=list)
    profile: UserProfile | None = None
    goals: DailyGoals | None = None
    saves: int = 0
    fail_saves: bool = False

    def load_entries(self) -> list[FoodLogEntry]:
        return list(self.entries)

    def save_entries(self, entries: Sequence[FoodLogEntry]) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.entries = list(entries)
        self.saves += 1

    def load_profile(self) -> UserProfile | None:
        return self.profile

    def load_goals(self) -> DailyGoals | None:
        return self.goals

    def save_onboarding(self, profile: UserProfile, goals: DailyGoals) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.profile = profile
        self.goals = goals


@dataclass
class FakeEstimationClient(FoodEstimationClient):
    """Fake estimation client returning a fixed payload."""

    payload: object = field(
        default_factory=lambda: {"items": [estimate_payload()]}
    )
    error: Exception | None = None
    gate: asyncio.Event | None = None
    prompts: list[str] = field(default_factory=list)
    images: list[str | None] = field(default_factory=list)

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
        self.prompts.append(prompt)
        self.images.append(image_data_url)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakePlanClient(PlanClient):
    """Fake plan collaborator."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "calories": 2500,
            "protein": 140,
            "carbs": 280,
            "fat": 80,
            "bmi": 24.7,
            "tdee": 2750,
            "reasoning": "Since you weigh 80kg...",
        }
    )
    error: Exception | None = None

    async def recommend(self, profile: UserProfile) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeResearchClient(ResearchClient):
    """Fake research client recording prompts."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "text": "Eat more lentils.",
            "sources": [{"uri": "https://example.org/lentils", "title": "Lentils"}],
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def ask(self, *, model: str, prompt: str) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_backend="file",
        state_path=str(tmp_path / "state.json"),
        timezone="UTC",
        environment="test",
    )


@pytest.fixture
def repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def estimation_client() -> FakeEstimationClient:
    return FakeEstimationClient()


@pytest.fixture
def research_client() -> FakeResearchClient:
    return FakeResearchClient()


@pytest.fixture
def tracker(
    repository: InMemoryStateRepository,
    estimation_client: FakeEstimationClient,
    research_client: FakeResearchClient,
) -> TrackerService:
    return TrackerService(
        repository=repository,
        plan_service=PlanService(),
        estimation_service=EstimationService(client=estimation_client, model="gpt-5.2"),
        research_service=ResearchService(client=research_client, model="gpt-5.2"),
        stats_service=StatsService("UTC"),
    )


@pytest.fixture
def container(settings: Settings, tracker: TrackerService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker_service=tracker,
        close_resources=close_resources,
    )
