"""
Orchestrator backend initialization module.
"""

from src.config.base_config import SDS_BACKEND
from .base import OrchestratorBackend, BackendError
from .memory_backend import InMemoryOrchestratorBackend
from .rest_backend import RestOrchestratorBackend


def get_backend(backend_type: str = SDS_BACKEND, **kwargs) -> OrchestratorBackend:
    """Factory function to get the configured orchestrator backend"""
    if backend_type == "rest":
        return RestOrchestratorBackend(**kwargs)
    if backend_type == "memory":
        return InMemoryOrchestratorBackend(**kwargs)
    raise ValueError(f"Unknown orchestrator backend: {backend_type}")


__all__ = [
    "get_backend",
    "OrchestratorBackend",
    "BackendError",
    "InMemoryOrchestratorBackend",
    "RestOrchestratorBackend",
]
