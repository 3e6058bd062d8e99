"""CSI v1 message classes used by the Identity and Controller services."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


# Identity messages
@dataclass
class GetPluginInfoRequest:
    pass


@dataclass
class GetPluginInfoResponse:
    name: str = ""
    vendor_version: str = ""
    manifest: Dict[str, str] = field(default_factory=dict)


@dataclass
class GetPluginCapabilitiesRequest:
    pass


@dataclass
class PluginCapability:
    @dataclass
    class Service:
        UNKNOWN = 0
        CONTROLLER_SERVICE = 1
        VOLUME_ACCESSIBILITY_CONSTRAINTS = 2

        type: int = 0

    service: Optional["PluginCapability.Service"] = None


@dataclass
class GetPluginCapabilitiesResponse:
    capabilities: List[PluginCapability] = field(default_factory=list)


@dataclass
class ProbeRequest:
    pass


@dataclass
class ProbeResponse:
    ready: bool = False


# Shared controller messages
@dataclass
class CapacityRange:
    required_bytes: int = 0
    limit_bytes: int = 0


@dataclass
class VolumeCapability:
    @dataclass
    class AccessMode:
        UNKNOWN = 0
        SINGLE_NODE_WRITER = 1
        SINGLE_NODE_READER_ONLY = 2
        MULTI_NODE_READER_ONLY = 3
        MULTI_NODE_SINGLE_WRITER = 4
        MULTI_NODE_MULTI_WRITER = 5

        mode: int = 0

    access_mode: Optional["VolumeCapability.AccessMode"] = None
    mount: Optional[Dict[str, str]] = None
    block: Optional[Dict[str, str]] = None


MULTI_NODE_ACCESS_MODES = (
    VolumeCapability.AccessMode.MULTI_NODE_READER_ONLY,
    VolumeCapability.AccessMode.MULTI_NODE_SINGLE_WRITER,
    VolumeCapability.AccessMode.MULTI_NODE_MULTI_WRITER,
)


@dataclass
class VolumeContentSource:
    @dataclass
    class SnapshotSource:
        snapshot_id: str = ""

    @dataclass
    class VolumeSource:
        volume_id: str = ""

    snapshot: Optional["VolumeContentSource.SnapshotSource"] = None
    volume: Optional["VolumeContentSource.VolumeSource"] = None


@dataclass
class Volume:
    volume_id: str = ""
    capacity_bytes: int = 0
    volume_context: Dict[str, str] = field(default_factory=dict)
    content_source: Optional[VolumeContentSource] = None


@dataclass
class Snapshot:
    snapshot_id: str = ""
    source_volume_id: str = ""
    size_bytes: int = 0
    creation_time: Optional[datetime] = None
    ready_to_use: bool = False


# Controller requests and responses
@dataclass
class CreateVolumeRequest:
    name: str = ""
    capacity_range: Optional[CapacityRange] = None
    volume_capabilities: List[VolumeCapability] = field(default_factory=list)
    parameters: Dict[str, str] = field(default_factory=dict)
    secrets: Dict[str, str] = field(default_factory=dict)
    volume_content_source: Optional[VolumeContentSource] = None


@dataclass
class CreateVolumeResponse:
    volume: Optional[Volume] = None


@dataclass
class DeleteVolumeRequest:
    volume_id: str = ""
    secrets: Dict[str, str] = field(default_factory=dict)


@dataclass
class DeleteVolumeResponse:
    pass


@dataclass
class ControllerPublishVolumeRequest:
    volume_id: str = ""
    node_id: str = ""
    volume_capability: Optional[VolumeCapability] = None
    readonly: bool = False
    secrets: Dict[str, str] = field(default_factory=dict)
    volume_context: Dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerPublishVolumeResponse:
    publish_context: Dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerUnpublishVolumeRequest:
    volume_id: str = ""
    node_id: str = ""
    secrets: Dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerUnpublishVolumeResponse:
    pass


@dataclass
class ValidateVolumeCapabilitiesRequest:
    volume_id: str = ""
    volume_context: Dict[str, str] = field(default_factory=dict)
    volume_capabilities: List[VolumeCapability] = field(default_factory=list)
    parameters: Dict[str, str] = field(default_factory=dict)


@dataclass
class ValidateVolumeCapabilitiesResponse:
    message: str = ""


@dataclass
class ListVolumesRequest:
    max_entries: int = 0
    starting_token: str = ""


@dataclass
class ListVolumesResponse:
    @dataclass
    class Entry:
        volume: Optional[Volume] = None

    entries: List["ListVolumesResponse.Entry"] = field(default_factory=list)
    next_token: str = ""


@dataclass
class GetCapacityRequest:
    volume_capabilities: List[VolumeCapability] = field(default_factory=list)
    parameters: Dict[str, str] = field(default_factory=dict)


@dataclass
class GetCapacityResponse:
    available_capacity: int = 0


@dataclass
class ControllerGetCapabilitiesRequest:
    pass


@dataclass
class ControllerServiceCapability:
    @dataclass
    class RPC:
        UNKNOWN = 0
        CREATE_DELETE_VOLUME = 1
        PUBLISH_UNPUBLISH_VOLUME = 2
        LIST_VOLUMES = 3
        GET_CAPACITY = 4
        CREATE_DELETE_SNAPSHOT = 5
        LIST_SNAPSHOTS = 6

        type: int = 0

    rpc: Optional["ControllerServiceCapability.RPC"] = None


@dataclass
class ControllerGetCapabilitiesResponse:
    capabilities: List[ControllerServiceCapability] = field(default_factory=list)


@dataclass
class CreateSnapshotRequest:
    source_volume_id: str = ""
    name: str = ""
    secrets: Dict[str, str] = field(default_factory=dict)
    parameters: Dict[str, str] = field(default_factory=dict)


@dataclass
class CreateSnapshotResponse:
    snapshot: Optional[Snapshot] = None


@dataclass
class DeleteSnapshotRequest:
    snapshot_id: str = ""
    secrets: Dict[str, str] = field(default_factory=dict)


@dataclass
class DeleteSnapshotResponse:
    pass


@dataclass
class ListSnapshotsRequest:
    max_entries: int = 0
    starting_token: str = ""
    source_volume_id: str = ""
    snapshot_id: str = ""


@dataclass
class ListSnapshotsResponse:
    @dataclass
    class Entry:
        snapshot: Optional[Snapshot] = None

    entries: List["ListSnapshotsResponse.Entry"] = field(default_factory=list)
    next_token: str = ""
