"""In-memory stand-in for the CRM backend, used by the sandbox API."""

from .in_memory_backend import InMemoryBackend, seed_demo_data

__all__ = ["InMemoryBackend", "seed_demo_data"]
