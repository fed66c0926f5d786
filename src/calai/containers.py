"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calai.adapters.file_state_repository import FileStateRepository
from calai.adapters.openai_estimation_client import OpenAIEstimationClient
from calai.adapters.openai_plan_client import OpenAIPlanClient
from calai.adapters.openai_research_client import OpenAIResearchClient
from calai.adapters.supabase_state_repository import SupabaseStateRepository
from calai.config import Settings, parse_storage_backend, parse_timezone
from calai.services.estimation import EstimationService
from calai.services.plan import PlanService
from calai.services.research import ResearchService
from calai.services.stats import StatsService
from calai.services.tracker import StateRepository, TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: TrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_repository(settings: Settings) -> StateRepository:
    """Create the configured state repository."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase storage needs SUPABASE_URL and SUPABASE_SERVICE_KEY"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStateRepository(client)
    return FileStateRepository.create(settings.state_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone_name = parse_timezone(resolved_settings.timezone)
    api_key = resolved_settings.openai_api_key

    estimation_client = OpenAIEstimationClient.create(api_key) if api_key else None
    research_client = OpenAIResearchClient.create(api_key) if api_key else None
    plan_client = (
        OpenAIPlanClient.create(
            api_key,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )
        if api_key and resolved_settings.use_remote_plan
        else None
    )

    tracker_service = TrackerService(
        repository=build_repository(resolved_settings),
        plan_service=PlanService(plan_client),
        estimation_service=EstimationService(
            client=estimation_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        ),
        research_service=ResearchService(
            client=research_client, model=resolved_settings.openai_model
        ),
        stats_service=StatsService(timezone_name),
    )

    async def close_resources() -> None:
        for client in (estimation_client, research_client, plan_client):
            if client is not None:
                await client.client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )
