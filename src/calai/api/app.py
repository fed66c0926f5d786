"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from calai.adapters.records import entry_to_record, goals_to_record, profile_to_record
from calai.api.models import AcceptRequest, AnalyzeRequest, ResearchRequest
from calai.app_logging import configure_logging
from calai.containers import AppContainer
from calai.domain.stats import DayHistory
from calai.errors import (
    EstimationError,
    RequestInProgressError,
    StorageError,
    ValidationError,
)
from calai.services.goals import nutrition_facts
from calai.services.ingestion import normalize_amount
from calai.services.profiles import ProfileInput
from calai.services.tracker import TrackerService


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(EstimationError)
    async def estimation_error(_request: Request, exc: EstimationError) -> JSONResponse:
        logger.warning("Estimation failed: %s", exc)
        detail = exc.user_message
        if container.settings.environment == "local":
            detail = f"{detail} (debug: {exc})"
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": detail}
        )

    @app.exception_handler(RequestInProgressError)
    async def request_in_progress(
        _request: Request, exc: RequestInProgressError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StorageError)
    async def storage_error(_request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Stored data could not be read."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the profile and goals; 404 until onboarding completes."""
        tracker = _tracker(request)
        if tracker.state.profile is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Onboarding required"
            )
        return {
            "profile": profile_to_record(tracker.state.profile),
            "goals": goals_to_record(tracker.state.goals),
        }

    @app.put("/profile")
    async def put_profile(payload: ProfileInput, request: Request) -> dict[str, object]:
        """Store the profile and recalculate goals."""
        tracker = _tracker(request)
        profile = payload.to_domain()
        goals = await tracker.onboard(profile)
        return {"profile": profile_to_record(profile), "goals": goals_to_record(goals)}

    @app.get("/goals")
    async def get_goals(request: Request) -> dict[str, object]:
        """Return the current goals."""
        tracker = _tracker(request)
        return {
            "goals": goals_to_record(tracker.state.goals),
            "needs_onboarding": tracker.state.needs_onboarding,
        }

    @app.post("/logs/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> dict[str, object]:
        """Estimate foods without logging them."""
        tracker = _tracker(request)
        image_bytes = _decode_image(payload.image_base64)
        estimates = await tracker.analyze(payload.description, image_bytes)
        return {
            "items": [estimate.model_dump(by_alias=True) for estimate in estimates],
            "total_calories": sum(
                normalize_amount(estimate.calories) for estimate in estimates
            ),
        }

    @app.post("/logs", status_code=status.HTTP_201_CREATED)
    async def accept(payload: AcceptRequest, request: Request) -> dict[str, object]:
        """Log accepted estimates as one batch."""
        tracker = _tracker(request)
        entries = tracker.accept(payload.items, meal_type=payload.meal_type)
        return {"entries": [entry_to_record(entry) for entry in entries]}

    @app.get("/logs")
    async def list_logs(request: Request) -> dict[str, object]:
        """Return all entries in insertion order."""
        tracker = _tracker(request)
        return {"entries": [entry_to_record(entry) for entry in tracker.entries()]}

    @app.get("/logs/{entry_id}")
    async def log_detail(entry_id: UUID, request: Request) -> dict[str, object]:
        """Return an entry with its nutrition label percentages."""
        tracker = _tracker(request)
        entry = tracker.get_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {
            "entry": entry_to_record(entry),
            "nutrition_facts": asdict(nutrition_facts(entry)),
        }

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return today's totals and progress toward goals."""
        tracker = _tracker(request)
        view = tracker.dashboard()
        return {
            "totals": asdict(view.totals),
            "progress": asdict(view.progress),
            "goals": goals_to_record(view.goals),
            "entries": [entry_to_record(entry) for entry in view.entries],
        }

    @app.get("/analytics")
    async def analytics(
        request: Request,
        range_name: str = Query(default="week", alias="range"),
        metric: str = "calories",
    ) -> dict[str, object]:
        """Return chart buckets with total and average."""
        tracker = _tracker(request)
        try:
            chart = tracker.chart(range_name, metric)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return {
            "range": chart.range,
            "metric": chart.metric,
            "buckets": [
                {"label": bucket.label, "value": bucket.value}
                for bucket in chart.buckets
            ],
            "total": chart.total,
            "average": chart.average,
        }

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return entries grouped by day, newest first."""
        tracker = _tracker(request)
        days = tracker.history()
        return {
            "total_entries": len(tracker.entries()),
            "days": [_format_day(day) for day in days],
        }

    @app.post("/research")
    async def research(payload: ResearchRequest, request: Request) -> dict[str, object]:
        """Answer a nutrition question grounded on the user's intake."""
        tracker = _tracker(request)
        answer = await tracker.ask(payload.question)
        return answer.model_dump()

    return app


def _tracker(request: Request) -> TrackerService:
    container: AppContainer = request.app.state.container
    return container.tracker_service


def _decode_image(image_base64: str | None) -> bytes | None:
    """Decode a base64 image, accepting data URLs."""
    if not image_base64:
        return None
    data = image_base64.split(",", 1)[1] if "," in image_base64 else image_base64
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="image_base64 is not valid base64",
        ) from exc


def _format_day(day: DayHistory) -> dict[str, object]:
    return {
        "day": day.day.isoformat(),
        "calories": day.calories,
        "protein_g": day.protein_g,
        "entries": [entry_to_record(entry) for entry in day.entries],
    }
