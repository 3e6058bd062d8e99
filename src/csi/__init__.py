"""CSI controller plugin package."""

from .controller import ControllerService
from .identity import IdentityService
from .driver import build_server, serve

__all__ = ["ControllerService", "IdentityService", "build_server", "serve"]
