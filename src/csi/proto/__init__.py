"""CSI protocol module."""

from . import csi_pb2, csi_pb2_grpc

__all__ = ["csi_pb2", "csi_pb2_grpc"]
