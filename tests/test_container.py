"""Tests for container wiring."""

import asyncio

import pytest

from calai.adapters.file_state_repository import FileStateRepository
from calai.containers import build_container, build_repository


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.tracker_service is not None
    assert isinstance(container.tracker_service.repository, FileStateRepository)
    assert container.tracker_service.plan_service.client is not None
    asyncio.run(container.close_resources())


def test_build_container_without_api_key(settings) -> None:
    container = build_container(settings.model_copy(update={"openai_api_key": None}))

    assert container.tracker_service.estimation_service.client is None
    assert container.tracker_service.plan_service.client is None
    asyncio.run(container.close_resources())


def test_supabase_backend_requires_credentials(settings) -> None:
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        build_repository(settings.model_copy(update={"storage_backend": "supabase"}))


def test_unknown_backend_is_rejected(settings) -> None:
    with pytest.raises(ValueError):
        build_repository(settings.model_copy(update={"storage_backend": "sqlite"}))


def test_unknown_timezone_is_rejected_at_startup(settings) -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        build_container(settings.model_copy(update={"timezone": "Mars/Olympus"}))
