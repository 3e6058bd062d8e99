"""Unified data models for the block storage orchestrator records."""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

# Timestamp layout used by the orchestrator for createdAt fields
TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


# Orchestrator records
@dataclass
class VolumeSpec:
    """A volume as requested from, or realized by, the orchestrator.

    Matching is done on ``name``; the orchestrator does not enforce unique
    names, so ``id`` is the only thing it guarantees to be unique.
    """
    name: str = ""
    size: int = 0  # GiB
    profile_id: str = ""
    availability_zone: str = ""
    snapshot_id: str = ""
    id: str = ""
    pool_id: str = ""
    status: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)

    def is_compatible(self, other: "VolumeSpec") -> bool:
        """Whether ``other`` describes the same logical volume."""
        return (
            self.size == other.size
            and self.profile_id == other.profile_id
            and self.availability_zone == other.availability_zone
            and self.snapshot_id == other.snapshot_id
        )

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "name": self.name,
            "size": self.size,
            "profileId": self.profile_id,
            "availabilityZone": self.availability_zone,
        }
        if self.snapshot_id:
            body["snapshotId"] = self.snapshot_id
        if self.metadata:
            body["metadata"] = dict(self.metadata)
        return body

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VolumeSpec":
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            size=int(data.get("size") or 0),
            profile_id=_str(data, "profileId"),
            availability_zone=_str(data, "availabilityZone"),
            snapshot_id=_str(data, "snapshotId"),
            pool_id=_str(data, "poolId"),
            status=_str(data, "status"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class SnapshotSpec:
    """A point-in-time snapshot of a volume."""
    name: str = ""
    volume_id: str = ""
    profile_id: str = ""
    id: str = ""
    size: int = 0  # GiB
    status: str = ""
    created_at: str = ""

    def is_compatible(self, other: "SnapshotSpec") -> bool:
        return self.volume_id == other.volume_id and self.profile_id == other.profile_id

    def to_dict(self) -> Dict[str, Any]:
        body = {"name": self.name, "volumeId": self.volume_id}
        if self.profile_id:
            body["profileId"] = self.profile_id
        return body

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotSpec":
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            volume_id=_str(data, "volumeId"),
            profile_id=_str(data, "profileId"),
            size=int(data.get("size") or 0),
            status=_str(data, "status"),
            created_at=_str(data, "createdAt"),
        )


@dataclass
class AttachmentSpec:
    """Binds a volume to a host initiator."""
    volume_id: str = ""
    host: str = ""
    platform: str = ""
    os_type: str = ""
    initiator: str = ""
    access_protocol: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)
    id: str = ""
    ip: str = ""
    status: str = ""

    def matches(self, other: "AttachmentSpec") -> bool:
        """Compare the host-side attributes that make two attachments equal."""
        return (
            self.platform == other.platform
            and self.os_type == other.os_type
            and self.initiator == other.initiator
            and self.metadata == other.metadata
            and self.access_protocol == other.access_protocol
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volumeId": self.volume_id,
            "host": self.host,
            "platform": self.platform,
            "osType": self.os_type,
            "initiator": self.initiator,
            "accessProtocol": self.access_protocol,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttachmentSpec":
        return cls(
            id=_str(data, "id"),
            volume_id=_str(data, "volumeId"),
            host=_str(data, "host"),
            ip=_str(data, "ip"),
            platform=_str(data, "platform"),
            os_type=_str(data, "osType"),
            initiator=_str(data, "initiator"),
            access_protocol=_str(data, "accessProtocol"),
            status=_str(data, "status"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class ReplicationSpec:
    """Pairing record for a primary/secondary volume."""
    primary_volume_id: str = ""
    secondary_volume_id: str = ""
    name: str = ""
    replication_mode: str = "sync"
    replication_period: int = 0
    id: str = ""
    status: str = ""

    def references(self, volume_id: str) -> bool:
        return volume_id in (self.primary_volume_id, self.secondary_volume_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "primaryVolumeId": self.primary_volume_id,
            "secondaryVolumeId": self.secondary_volume_id,
            "replicationMode": self.replication_mode,
            "replicationPeriod": self.replication_period,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReplicationSpec":
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            primary_volume_id=_str(data, "primaryVolumeId"),
            secondary_volume_id=_str(data, "secondaryVolumeId"),
            replication_mode=_str(data, "replicationMode") or "sync",
            replication_period=int(data.get("replicationPeriod") or 0),
            status=_str(data, "status"),
        )


@dataclass
class PoolSpec:
    """Storage pool as reported by the orchestrator"""
    id: str = ""
    name: str = ""
    availability_zone: str = ""
    total_capacity: int = 0  # GiB
    free_capacity: int = 0  # GiB
    access_protocol: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PoolSpec":
        extras = data.get("extras") or {}
        connectivity = extras.get("ioConnectivity") or {}
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            availability_zone=_str(data, "availabilityZone"),
            total_capacity=int(data.get("totalCapacity") or 0),
            free_capacity=int(data.get("freeCapacity") or 0),
            access_protocol=_str(connectivity, "accessProtocol"),
        )


@dataclass
class ProfileSpec:
    id: str = ""
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileSpec":
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            description=_str(data, "description"),
        )


# Host-side models
@dataclass
class NodeIdentity:
    """Host name and initiators decoded from a CSI node id."""
    host_name: str = ""
    wwpns: List[str] = field(default_factory=list)
    wwnns: List[str] = field(default_factory=list)
    iqns: List[str] = field(default_factory=list)

    def initiators(self, tag: str) -> Optional[List[str]]:
        return {"wwpn": self.wwpns, "wwnn": self.wwnns, "iqn": self.iqns}.get(tag)
