"""Dependency wiring — connects infrastructure adapters to the application layer."""

from functools import lru_cache

import httpx

from projectdesk.application.interfaces import DraftStore, ProjectGateway
from projectdesk.application.services import DraftOverlay, ProjectWorkspace
from projectdesk.config import Settings, get_settings
from projectdesk.infrastructure.backend_api import ProjectApiClient
from projectdesk.infrastructure.database import create_draft_engine, create_session_factory
from projectdesk.infrastructure.database.repositories import SQLAlchemyDraftStore
from projectdesk.infrastructure.sandbox import InMemoryBackend, seed_demo_data


def build_project_gateway(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ProjectGateway:
    """Backend API client configured from settings."""
    settings = settings or get_settings()
    return ProjectApiClient(
        base_url=settings.api_base_url,
        token=settings.api_token,
        timeout=settings.api_timeout,
        http_client=http_client,
    )


def build_draft_store(settings: Settings | None = None) -> DraftStore:
    """SQLAlchemy-backed draft store at ``settings.draft_store_url``."""
    settings = settings or get_settings()
    engine = create_draft_engine(
        settings.draft_store_url,
        echo=(settings.log_level_sql.upper() == "DEBUG"),
    )
    return SQLAlchemyDraftStore(create_session_factory(engine))


def build_project_workspace(
    settings: Settings | None = None,
    *,
    gateway: ProjectGateway | None = None,
    draft_store: DraftStore | None = None,
) -> ProjectWorkspace:
    """A ready-to-load workspace; collaborators default to the configured ones."""
    settings = settings or get_settings()
    return ProjectWorkspace(
        gateway or build_project_gateway(settings),
        DraftOverlay(draft_store or build_draft_store(settings)),
        quiet_period=settings.autosave_quiet_period,
        output_source=settings.output_file_source,
    )


@lru_cache
def get_sandbox_backend() -> InMemoryBackend:
    """FastAPI dependency — the process-wide sandbox data set."""
    return seed_demo_data(InMemoryBackend())
