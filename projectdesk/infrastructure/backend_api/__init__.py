"""Backend REST API infrastructure package."""

from .project_api_client import ProjectApiClient

__all__ = ["ProjectApiClient"]
