"""Application controller owning the tracker state."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from calai.domain.estimation import FoodEstimate, ResearchAnswer
from calai.domain.logs import FoodLogEntry, MealType
from calai.domain.profile import DEFAULT_GOALS, DailyGoals, UserProfile
from calai.domain.stats import DayHistory, GoalProgress, MacroTotals
from calai.errors import DuplicateEntryError, RequestInProgressError, StorageError
from calai.services.aggregation import sum_totals
from calai.services.context import build_context_summary
from calai.services.estimation import EstimationService
from calai.services.goals import compare
from calai.services.ingestion import build_entries
from calai.services.log_store import LogStore
from calai.services.plan import PlanService
from calai.services.research import ResearchService
from calai.services.stats import ChartSummary, StatsService

_logger = logging.getLogger(__name__)


class StateRepository(Protocol):
    """Persistence interface for the tracker state."""

    def load_entries(self) -> list[FoodLogEntry]:
        """Return all persisted entries in insertion order."""

    def save_entries(self, entries: Sequence[FoodLogEntry]) -> None:
        """Persist the full ordered entry list."""

    def load_profile(self) -> UserProfile | None:
        """Return the stored profile, if onboarding has completed."""

    def load_goals(self) -> DailyGoals | None:
        """Return the stored goals, if any."""

    def save_onboarding(self, profile: UserProfile, goals: DailyGoals) -> None:
        """Persist a profile together with the goals derived from it."""


@dataclass
class TrackerState:
    """Snapshot of everything the tracker persists."""

    log_store: LogStore
    profile: UserProfile | None
    goals: DailyGoals

    @property
    def needs_onboarding(self) -> bool:
        return self.profile is None


@dataclass
class Dashboard:
    """Today's intake against goals."""

    totals: MacroTotals
    progress: GoalProgress
    goals: DailyGoals
    entries: list[FoodLogEntry]


@dataclass
class TrackerService:
    """Coordinates collaborators and the save boundary around pure views."""

    repository: StateRepository
    plan_service: PlanService
    estimation_service: EstimationService
    research_service: ResearchService
    stats_service: StatsService
    state: TrackerState = field(init=False)
    _estimating: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.state = self.load()

    def load(self) -> TrackerState:
        """Read state through the repository."""
        try:
            log_store = LogStore(self.repository.load_entries())
        except DuplicateEntryError as exc:
            raise StorageError(f"Stored food log is corrupt: {exc}") from exc
        return TrackerState(
            log_store=log_store,
            profile=self.repository.load_profile(),
            goals=self.repository.load_goals() or DEFAULT_GOALS,
        )

    @property
    def is_estimating(self) -> bool:
        return self._estimating

    async def onboard(self, profile: UserProfile) -> DailyGoals:
        """Store a new profile and recalculate goals wholesale."""
        goals = await self.plan_service.calculate(profile)
        self.repository.save_onboarding(profile, goals)
        self.state.profile = profile
        self.state.goals = goals
        _logger.info("Profile updated, goals set to %s kcal", goals.calories)
        return goals

    async def analyze(
        self, description: str, image_bytes: bytes | None = None
    ) -> list[FoodEstimate]:
        """Estimate foods without changing state; one request at a time."""
        if self._estimating:
            raise RequestInProgressError("An estimation is already in progress")
        self._estimating = True
        try:
            return await self.estimation_service.estimate(description, image_bytes)
        finally:
            self._estimating = False

    def accept(
        self,
        estimates: Sequence[FoodEstimate],
        meal_type: MealType = MealType.SNACK,
        logged_at: datetime | None = None,
    ) -> list[FoodLogEntry]:
        """Append accepted estimates as one batch and save.

        The batch is built and saved against a copy of the store, so a failure
        at any step commits nothing.
        """
        entries = build_entries(estimates, meal_type=meal_type, logged_at=logged_at)
        store = self.state.log_store.copy()
        store.append(entries)
        self.repository.save_entries(store.all())
        self.state.log_store = store
        _logger.info("Logged %s food entries", len(entries))
        return entries

    async def log_food(
        self,
        description: str,
        image_bytes: bytes | None = None,
        meal_type: MealType = MealType.SNACK,
    ) -> list[FoodLogEntry]:
        """Estimate and accept in one step."""
        estimates = await self.analyze(description, image_bytes)
        return self.accept(estimates, meal_type=meal_type)

    def entries(self) -> tuple[FoodLogEntry, ...]:
        return self.state.log_store.all()

    def get_entry(self, entry_id: UUID) -> FoodLogEntry | None:
        return self.state.log_store.get(entry_id)

    def dashboard(self, now: datetime | None = None) -> Dashboard:
        """Return today's totals and progress toward goals."""
        today = self.stats_service.today_entries(self.entries(), now)
        totals = sum_totals(today)
        return Dashboard(
            totals=totals,
            progress=compare(totals, self.state.goals),
            goals=self.state.goals,
            entries=today,
        )

    def chart(
        self, range_name: str, metric: str = "calories", now: datetime | None = None
    ) -> ChartSummary:
        return self.stats_service.chart(self.entries(), range_name, metric, now)

    def history(self) -> list[DayHistory]:
        return self.stats_service.history(self.entries())

    def context_summary(self, now: datetime | None = None) -> str:
        return build_context_summary(
            self.entries(),
            self.state.profile,
            self.state.goals,
            now=now,
            timezone_name=self.stats_service.timezone_name,
        )

    async def ask(self, question: str, now: datetime | None = None) -> ResearchAnswer:
        """Answer a nutrition question grounded on the user's intake."""
        reference = self.stats_service.now(now)
        return await self.research_service.ask(
            question, self.context_summary(reference), today=reference.date()
        )
