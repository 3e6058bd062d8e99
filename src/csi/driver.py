"""
Container Storage Interface (CSI) controller plugin server
"""
import grpc
from concurrent import futures
import time
from typing import Optional
import logging
import argparse

from prometheus_client import start_http_server

from src.config.base_config import (
    CSI_ENDPOINT,
    LOG_LEVEL,
    MAX_WORKERS,
    METRICS_PORT,
    SDS_BACKEND,
)
from src.storage.backends import get_backend
from src.storage.backends.base import OrchestratorBackend
from .controller import ControllerService
from .identity import IdentityService
from .proto import csi_pb2_grpc

logger = logging.getLogger(__name__)


def build_server(backend: OrchestratorBackend, endpoint: str = CSI_ENDPOINT,
                 max_workers: int = MAX_WORKERS) -> grpc.Server:
    """Create a gRPC server with the Identity and Controller services registered"""
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    csi_pb2_grpc.add_IdentityServicer_to_server(IdentityService(), server)
    csi_pb2_grpc.add_ControllerServicer_to_server(ControllerService(backend), server)
    server.add_insecure_port(endpoint)
    return server


def serve(endpoint: str = CSI_ENDPOINT, backend: Optional[OrchestratorBackend] = None,
          metrics_port: int = METRICS_PORT):
    """Start the CSI controller server and block until interrupted"""
    backend = backend or get_backend()
    server = build_server(backend, endpoint)

    if metrics_port:
        start_http_server(metrics_port)
        logger.info(f"Serving metrics on port {metrics_port}")

    server.start()
    logger.info(f"CSI controller listening on {endpoint}")

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        server.stop(0)


def main(argv=None):
    parser = argparse.ArgumentParser(description="CSI Controller Plugin")
    parser.add_argument("--endpoint", default=CSI_ENDPOINT,
                        help="CSI endpoint")
    parser.add_argument("--backend", choices=["rest", "memory"], default=SDS_BACKEND,
                        help="Orchestrator backend")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    serve(endpoint=args.endpoint, backend=get_backend(args.backend))


if __name__ == "__main__":
    main()
