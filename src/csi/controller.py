"""
CSI Controller service backed by the storage orchestrator.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from src.models.models import TIME_FORMAT, VolumeSpec, SnapshotSpec
from src.storage.backends.base import OrchestratorBackend
from .attacher import AttachmentReconciler
from .constants import (
    GiB,
    PARAM_PROFILE,
    PARAM_AZ,
    PARAM_ENABLE_REPLICATION,
    PARAM_SECONDARY_AZ,
    VOLUME_NAME,
    VOLUME_STATUS,
    VOLUME_AZ,
    VOLUME_POOL_ID,
    VOLUME_PROFILE_ID,
    VOLUME_LV_PATH,
    VOLUME_REPLICATION_ID,
)
from .errors import InvalidArgument, Internal, Unimplemented, handle_csi_errors
from .metrics import measure_rpc
from .pagination import filter_snapshots, paginate
from .proto import csi_pb2, csi_pb2_grpc
from .provisioner import VolumeProvisioner, size_in_units
from .replication import ReplicationOrchestrator

logger = logging.getLogger(__name__)

CONTROLLER_CAPABILITIES = (
    csi_pb2.ControllerServiceCapability.RPC.CREATE_DELETE_VOLUME,
    csi_pb2.ControllerServiceCapability.RPC.PUBLISH_UNPUBLISH_VOLUME,
    csi_pb2.ControllerServiceCapability.RPC.LIST_VOLUMES,
    csi_pb2.ControllerServiceCapability.RPC.GET_CAPACITY,
    csi_pb2.ControllerServiceCapability.RPC.CREATE_DELETE_SNAPSHOT,
    csi_pb2.ControllerServiceCapability.RPC.LIST_SNAPSHOTS,
)

TIMESTAMP_FORMATS = (
    TIME_FORMAT,
    TIME_FORMAT + ".%f",
    TIME_FORMAT + "%z",
    TIME_FORMAT + ".%f%z",
)


def _normalize(key: str) -> str:
    return key.lower().replace("_", "").replace("-", "")


def parse_timestamp(value: str) -> datetime:
    """Parse an orchestrator createdAt value into an aware UTC datetime.

    Fractional seconds and a UTC offset (or `Z`) are optional; a value
    without an offset is taken as UTC.
    """
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except (TypeError, ValueError):
            continue
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    raise Internal(f"cannot parse timestamp {value!r}")


def volume_context(volume: VolumeSpec) -> Dict[str, str]:
    return {
        VOLUME_NAME: volume.name,
        VOLUME_STATUS: volume.status,
        VOLUME_AZ: volume.availability_zone,
        VOLUME_POOL_ID: volume.pool_id,
        VOLUME_PROFILE_ID: volume.profile_id,
        VOLUME_LV_PATH: volume.metadata.get(VOLUME_LV_PATH, ""),
    }


def snapshot_message(snapshot: SnapshotSpec) -> csi_pb2.Snapshot:
    return csi_pb2.Snapshot(
        snapshot_id=snapshot.id,
        source_volume_id=snapshot.volume_id,
        size_bytes=snapshot.size * GiB,
        creation_time=parse_timestamp(snapshot.created_at),
        ready_to_use=True,
    )


class ControllerService(csi_pb2_grpc.ControllerServicer):
    """CSI Controller service translating requests into orchestrator reconciliation"""

    def __init__(self, backend: OrchestratorBackend,
                 provisioner: Optional[VolumeProvisioner] = None,
                 replication: Optional[ReplicationOrchestrator] = None,
                 attacher: Optional[AttachmentReconciler] = None):
        self.backend = backend
        self.provisioner = provisioner or VolumeProvisioner(backend)
        self.replication = replication or ReplicationOrchestrator(backend, self.provisioner)
        self.attacher = attacher or AttachmentReconciler(backend, self.replication)

    @measure_rpc
    @handle_csi_errors(csi_pb2.CreateVolumeResponse)
    def CreateVolume(self, request, context):
        """Create a volume, reusing a compatible one with the same name"""
        logger.debug(f"start to CreateVolume {request.name}")
        required_bytes = request.capacity_range.required_bytes if request.capacity_range else 0
        spec = VolumeSpec(name=request.name, size=size_in_units(required_bytes))

        enable_replication = False
        secondary_az = None
        for key, value in (request.parameters or {}).items():
            key = _normalize(key)
            if key in PARAM_PROFILE:
                spec.profile_id = value
            elif key in PARAM_AZ:
                spec.availability_zone = value
            elif key in PARAM_ENABLE_REPLICATION:
                enable_replication = value.lower() == "true"
            elif key in PARAM_SECONDARY_AZ:
                secondary_az = value

        source = request.volume_content_source
        if source is not None and source.snapshot is not None:
            spec.snapshot_id = source.snapshot.snapshot_id

        spec = self.provisioner.resolve(spec)
        volume, created = self.provisioner.create_volume(spec)

        context_map = volume_context(volume)
        if enable_replication and created:
            replication = self.replication.enable(spec, volume, secondary_az)
            context_map[VOLUME_REPLICATION_ID] = replication.id

        return csi_pb2.CreateVolumeResponse(
            volume=csi_pb2.Volume(
                volume_id=volume.id,
                capacity_bytes=volume.size * GiB,
                volume_context=context_map,
            )
        )

    @measure_rpc
    @handle_csi_errors(csi_pb2.DeleteVolumeResponse)
    def DeleteVolume(self, request, context):
        """Delete a volume and, if replicated, its pairing and partner"""
        if not request.volume_id:
            raise InvalidArgument("Volume ID cannot be empty")
        self.replication.delete_volume(request.volume_id)
        return csi_pb2.DeleteVolumeResponse()

    @measure_rpc
    @handle_csi_errors(csi_pb2.ControllerPublishVolumeResponse)
    def ControllerPublishVolume(self, request, context):
        """Attach a volume to the requesting node"""
        if not request.volume_id:
            raise InvalidArgument("Volume ID cannot be empty")
        capability = request.volume_capability
        if capability is None or capability.access_mode is None:
            raise InvalidArgument("Volume capability must be provided")

        multi_node = capability.access_mode.mode in csi_pb2.MULTI_NODE_ACCESS_MODES
        publish_context = self.attacher.publish(
            request.volume_id, request.node_id, multi_node, request.volume_context
        )
        return csi_pb2.ControllerPublishVolumeResponse(publish_context=publish_context)

    @measure_rpc
    @handle_csi_errors(csi_pb2.ControllerUnpublishVolumeResponse)
    def ControllerUnpublishVolume(self, request, context):
        """Detach a volume from one node, or from every node if none is given"""
        if not request.volume_id:
            raise InvalidArgument("Volume ID cannot be empty")
        self.attacher.unpublish(request.volume_id, request.node_id)
        return csi_pb2.ControllerUnpublishVolumeResponse()

    @measure_rpc
    @handle_csi_errors(csi_pb2.ValidateVolumeCapabilitiesResponse)
    def ValidateVolumeCapabilities(self, request, context):
        raise Unimplemented("ValidateVolumeCapabilities is not implemented")

    @measure_rpc
    @handle_csi_errors(csi_pb2.ListVolumesResponse)
    def ListVolumes(self, request, context):
        """List all volumes"""
        entries = [
            csi_pb2.ListVolumesResponse.Entry(
                volume=csi_pb2.Volume(
                    volume_id=v.id,
                    capacity_bytes=v.size * GiB,
                    volume_context=volume_context(v),
                )
            )
            for v in self.backend.list_volumes()
        ]
        return csi_pb2.ListVolumesResponse(entries=entries)

    @measure_rpc
    @handle_csi_errors(csi_pb2.GetCapacityResponse)
    def GetCapacity(self, request, context):
        """Sum the free capacity of all pools"""
        free_capacity = sum(p.free_capacity for p in self.backend.list_pools())
        return csi_pb2.GetCapacityResponse(available_capacity=free_capacity)

    @measure_rpc
    @handle_csi_errors(csi_pb2.ControllerGetCapabilitiesResponse)
    def ControllerGetCapabilities(self, request, context):
        """Return controller capabilities"""
        return csi_pb2.ControllerGetCapabilitiesResponse(
            capabilities=[
                csi_pb2.ControllerServiceCapability(
                    rpc=csi_pb2.ControllerServiceCapability.RPC(type=cap)
                )
                for cap in CONTROLLER_CAPABILITIES
            ]
        )

    @measure_rpc
    @handle_csi_errors(csi_pb2.CreateSnapshotResponse)
    def CreateSnapshot(self, request, context):
        """Create a snapshot, reusing a compatible one with the same name"""
        logger.debug(
            f"start to CreateSnapshot, name: {request.name}, "
            f"source volume: {request.source_volume_id}, parameters: {request.parameters}"
        )
        spec = SnapshotSpec(name=request.name, volume_id=request.source_volume_id)
        for key, value in (request.parameters or {}).items():
            if _normalize(key) in PARAM_PROFILE:
                spec.profile_id = value

        snapshot = self.provisioner.create_snapshot(spec)
        return csi_pb2.CreateSnapshotResponse(snapshot=snapshot_message(snapshot))

    @measure_rpc
    @handle_csi_errors(csi_pb2.DeleteSnapshotResponse)
    def DeleteSnapshot(self, request, context):
        """Delete a snapshot"""
        self.provisioner.delete_snapshot(request.snapshot_id)
        return csi_pb2.DeleteSnapshotResponse()

    @measure_rpc
    @handle_csi_errors(csi_pb2.ListSnapshotsResponse)
    def ListSnapshots(self, request, context):
        """List snapshots sorted by id, one page at a time"""
        logger.debug(
            f"start to ListSnapshots, max entries: {request.max_entries}, "
            f"starting token: {request.starting_token}, source volume: "
            f"{request.source_volume_id}, snapshot: {request.snapshot_id}"
        )
        snapshots = self.backend.list_snapshots()
        filtered = filter_snapshots(snapshots, request.snapshot_id, request.source_volume_id)
        if not filtered:
            return csi_pb2.ListSnapshotsResponse()

        page, next_token = paginate(filtered, request.max_entries, request.starting_token)
        entries = [
            csi_pb2.ListSnapshotsResponse.Entry(snapshot=snapshot_message(s)) for s in page
        ]
        return csi_pb2.ListSnapshotsResponse(entries=entries, next_token=next_token)
