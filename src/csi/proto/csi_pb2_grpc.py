"""gRPC service definitions for the CSI Identity and Controller services.

Messages travel as JSON-encoded dataclasses.
"""

import dataclasses
import datetime
import json
import typing

import grpc

from . import csi_pb2


class JSONEncoder(json.JSONEncoder):
    """JSON encoder for message dataclasses and datetime fields"""
    def default(self, obj):
        if isinstance(obj, datetime.datetime):
            return obj.isoformat()
        if dataclasses.is_dataclass(obj):
            return dataclasses.asdict(obj)
        return super().default(obj)


def _unwrap_optional(tp):
    if typing.get_origin(tp) is typing.Union:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def message_from_dict(cls, data: dict):
    """Build message ``cls`` from a decoded JSON object, recursing into nested messages."""
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.name not in data or data[f.name] is None:
            continue
        value = data[f.name]
        tp = _unwrap_optional(hints[f.name])
        args = typing.get_args(tp)
        if dataclasses.is_dataclass(tp):
            value = message_from_dict(tp, value)
        elif typing.get_origin(tp) is list and args and dataclasses.is_dataclass(args[0]):
            value = [message_from_dict(args[0], v) for v in value]
        elif tp is datetime.datetime:
            value = datetime.datetime.fromisoformat(value)
        kwargs[f.name] = value
    return cls(**kwargs)


def serialize(message) -> bytes:
    return json.dumps(message, cls=JSONEncoder).encode("utf-8")


def deserializer(cls):
    def deserialize(payload: bytes):
        return message_from_dict(cls, json.loads(payload.decode("utf-8")) if payload else {})
    return deserialize


class IdentityServicer:
    """Identity service."""
    def GetPluginInfo(self, request, context):
        raise NotImplementedError()

    def GetPluginCapabilities(self, request, context):
        raise NotImplementedError()

    def Probe(self, request, context):
        raise NotImplementedError()


class ControllerServicer:
    """Controller service."""
    def CreateVolume(self, request, context):
        raise NotImplementedError()

    def DeleteVolume(self, request, context):
        raise NotImplementedError()

    def ControllerPublishVolume(self, request, context):
        raise NotImplementedError()

    def ControllerUnpublishVolume(self, request, context):
        raise NotImplementedError()

    def ValidateVolumeCapabilities(self, request, context):
        raise NotImplementedError()

    def ListVolumes(self, request, context):
        raise NotImplementedError()

    def GetCapacity(self, request, context):
        raise NotImplementedError()

    def ControllerGetCapabilities(self, request, context):
        raise NotImplementedError()

    def CreateSnapshot(self, request, context):
        raise NotImplementedError()

    def DeleteSnapshot(self, request, context):
        raise NotImplementedError()

    def ListSnapshots(self, request, context):
        raise NotImplementedError()


IDENTITY_METHODS = {
    "GetPluginInfo": csi_pb2.GetPluginInfoRequest,
    "GetPluginCapabilities": csi_pb2.GetPluginCapabilitiesRequest,
    "Probe": csi_pb2.ProbeRequest,
}

CONTROLLER_METHODS = {
    "CreateVolume": csi_pb2.CreateVolumeRequest,
    "DeleteVolume": csi_pb2.DeleteVolumeRequest,
    "ControllerPublishVolume": csi_pb2.ControllerPublishVolumeRequest,
    "ControllerUnpublishVolume": csi_pb2.ControllerUnpublishVolumeRequest,
    "ValidateVolumeCapabilities": csi_pb2.ValidateVolumeCapabilitiesRequest,
    "ListVolumes": csi_pb2.ListVolumesRequest,
    "GetCapacity": csi_pb2.GetCapacityRequest,
    "ControllerGetCapabilities": csi_pb2.ControllerGetCapabilitiesRequest,
    "CreateSnapshot": csi_pb2.CreateSnapshotRequest,
    "DeleteSnapshot": csi_pb2.DeleteSnapshotRequest,
    "ListSnapshots": csi_pb2.ListSnapshotsRequest,
}


def _generic_handler(service_name: str, methods: dict, servicer):
    handlers = {
        name: grpc.unary_unary_rpc_method_handler(
            getattr(servicer, name),
            request_deserializer=deserializer(request_cls),
            response_serializer=serialize,
        )
        for name, request_cls in methods.items()
    }
    return grpc.method_handlers_generic_handler(service_name, handlers)


def add_IdentityServicer_to_server(servicer, server):
    server.add_generic_rpc_handlers(
        (_generic_handler("csi.v1.Identity", IDENTITY_METHODS, servicer),)
    )


def add_ControllerServicer_to_server(servicer, server):
    server.add_generic_rpc_handlers(
        (_generic_handler("csi.v1.Controller", CONTROLLER_METHODS, servicer),)
    )
