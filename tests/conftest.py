"""Global test configuration and fixtures."""
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Add project root to Python path for imports
sys.path.insert(0, str(PROJECT_ROOT))

# Test environment configuration
os.environ.setdefault('SDS_BACKEND', 'memory')
os.environ.setdefault('METRICS_PORT', '0')

from src.csi.controller import ControllerService  # noqa: E402
from src.csi.identity import IdentityService  # noqa: E402
from src.storage.backends.memory_backend import InMemoryOrchestratorBackend  # noqa: E402

HOST_IPS = {"host1": "10.0.0.1", "host2": "10.0.0.2"}


@pytest.fixture
def backend():
    """An orchestrator with a primary and a secondary pool and a default profile."""
    backend = InMemoryOrchestratorBackend(host_ips=dict(HOST_IPS))
    backend.add_pool("pool-primary", free_capacity=100, availability_zone="default",
                     access_protocol="iscsi")
    backend.add_pool("pool-secondary", free_capacity=100, availability_zone="secondary",
                     access_protocol="iscsi")
    backend.add_profile("default")
    return backend


@pytest.fixture
def default_profile(backend):
    return next(p for p in backend.list_profiles() if p.name == "default")


@pytest.fixture
def controller(backend):
    return ControllerService(backend)


@pytest.fixture
def identity():
    return IdentityService(name="csi-test", vendor_version="v0.0.1")


@pytest.fixture
def context():
    """Mock gRPC servicer context."""
    return MagicMock()
