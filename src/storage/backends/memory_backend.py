"""
In-memory orchestrator backend implementation.
"""

import copy
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from src.models.models import (
    TIME_FORMAT,
    VolumeSpec,
    SnapshotSpec,
    AttachmentSpec,
    ReplicationSpec,
    PoolSpec,
    ProfileSpec,
)
from .base import OrchestratorBackend, BackendError

logger = logging.getLogger(__name__)


class InMemoryOrchestratorBackend(OrchestratorBackend):
    """Dict-backed orchestrator for local runs and tests.

    Records are copied in and out so callers can never mutate stored state,
    mirroring a remote orchestrator.
    """

    def __init__(self, host_ips: Optional[Dict[str, str]] = None):
        self._lock = threading.Lock()
        self.volumes: Dict[str, VolumeSpec] = {}
        self.attachments: Dict[str, AttachmentSpec] = {}
        self.snapshots: Dict[str, SnapshotSpec] = {}
        self.replications: Dict[str, ReplicationSpec] = {}
        self.pools: Dict[str, PoolSpec] = {}
        self.profiles: Dict[str, ProfileSpec] = {}
        self.host_ips = host_ips or {}

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).strftime(TIME_FORMAT)

    def _get(self, table: Dict, kind: str, record_id: str):
        with self._lock:
            if record_id not in table:
                raise BackendError(f"{kind} {record_id} not found", status_code=404)
            return copy.deepcopy(table[record_id])

    def _delete(self, table: Dict, kind: str, record_id: str) -> None:
        with self._lock:
            if record_id not in table:
                raise BackendError(f"{kind} {record_id} not found", status_code=404)
            del table[record_id]
        logger.debug(f"Deleted {kind} {record_id}")

    def _list(self, table: Dict) -> List:
        with self._lock:
            return [copy.deepcopy(r) for r in table.values()]

    # Seeding helpers
    def add_pool(self, name: str, free_capacity: int, availability_zone: str = "default",
                 access_protocol: str = "", total_capacity: Optional[int] = None) -> PoolSpec:
        pool = PoolSpec(
            id=self._new_id(),
            name=name,
            availability_zone=availability_zone,
            total_capacity=total_capacity if total_capacity is not None else free_capacity,
            free_capacity=free_capacity,
            access_protocol=access_protocol,
        )
        with self._lock:
            self.pools[pool.id] = pool
        return copy.deepcopy(pool)

    def add_profile(self, name: str, description: str = "") -> ProfileSpec:
        profile = ProfileSpec(id=self._new_id(), name=name, description=description)
        with self._lock:
            self.profiles[profile.id] = profile
        return copy.deepcopy(profile)

    def _select_pool(self, spec: VolumeSpec) -> PoolSpec:
        candidates = [
            p for p in self.pools.values()
            if p.availability_zone == spec.availability_zone and p.free_capacity >= spec.size
        ]
        if not candidates:
            raise BackendError(
                f"no pool in availability zone {spec.availability_zone} can hold {spec.size}GiB"
            )
        return max(candidates, key=lambda p: p.free_capacity)

    # Volumes
    def list_volumes(self) -> List[VolumeSpec]:
        return self._list(self.volumes)

    def get_volume(self, volume_id: str) -> VolumeSpec:
        return self._get(self.volumes, "volume", volume_id)

    def create_volume(self, spec: VolumeSpec) -> VolumeSpec:
        with self._lock:
            if spec.profile_id and spec.profile_id not in self.profiles:
                raise BackendError(f"profile {spec.profile_id} not found", status_code=404)
            pool = self._select_pool(spec)
            pool.free_capacity -= spec.size
            volume = copy.deepcopy(spec)
            volume.id = self._new_id()
            volume.pool_id = pool.id
            volume.status = "available"
            volume.metadata.setdefault("lvPath", f"/dev/{pool.name}/volume-{volume.id}")
            self.volumes[volume.id] = volume
        logger.info(f"Created volume {volume.id} ({volume.name}) in pool {pool.id}")
        return copy.deepcopy(volume)

    def delete_volume(self, volume_id: str) -> None:
        with self._lock:
            volume = self.volumes.pop(volume_id, None)
            if volume is None:
                raise BackendError(f"volume {volume_id} not found", status_code=404)
            if volume.pool_id in self.pools:
                self.pools[volume.pool_id].free_capacity += volume.size
        logger.debug(f"Deleted volume {volume_id}")

    # Attachments
    def list_attachments(self) -> List[AttachmentSpec]:
        return self._list(self.attachments)

    def create_attachment(self, spec: AttachmentSpec) -> AttachmentSpec:
        with self._lock:
            if spec.volume_id not in self.volumes:
                raise BackendError(f"volume {spec.volume_id} not found", status_code=404)
            attachment = copy.deepcopy(spec)
            attachment.id = self._new_id()
            attachment.ip = self.host_ips.get(spec.host, "")
            attachment.status = "available"
            self.attachments[attachment.id] = attachment
        logger.info(f"Attached volume {spec.volume_id} to host {spec.host} as {attachment.id}")
        return copy.deepcopy(attachment)

    def delete_attachment(self, attachment_id: str) -> None:
        self._delete(self.attachments, "attachment", attachment_id)

    # Snapshots
    def list_snapshots(self) -> List[SnapshotSpec]:
        return self._list(self.snapshots)

    def get_snapshot(self, snapshot_id: str) -> SnapshotSpec:
        return self._get(self.snapshots, "snapshot", snapshot_id)

    def create_snapshot(self, spec: SnapshotSpec) -> SnapshotSpec:
        with self._lock:
            volume = self.volumes.get(spec.volume_id)
            if volume is None:
                raise BackendError(f"volume {spec.volume_id} not found", status_code=404)
            snapshot = copy.deepcopy(spec)
            snapshot.id = self._new_id()
            snapshot.size = volume.size
            snapshot.status = "available"
            snapshot.created_at = self._now()
            self.snapshots[snapshot.id] = snapshot
        logger.info(f"Created snapshot {snapshot.id} of volume {spec.volume_id}")
        return copy.deepcopy(snapshot)

    def delete_snapshot(self, snapshot_id: str) -> None:
        self._delete(self.snapshots, "snapshot", snapshot_id)

    # Replications
    def list_replications(self) -> List[ReplicationSpec]:
        return self._list(self.replications)

    def get_replication(self, replication_id: str) -> ReplicationSpec:
        return self._get(self.replications, "replication", replication_id)

    def create_replication(self, spec: ReplicationSpec) -> ReplicationSpec:
        with self._lock:
            for volume_id in (spec.primary_volume_id, spec.secondary_volume_id):
                if volume_id not in self.volumes:
                    raise BackendError(f"volume {volume_id} not found", status_code=404)
            replication = copy.deepcopy(spec)
            replication.id = self._new_id()
            replication.status = "enabled"
            self.replications[replication.id] = replication
        logger.info(
            f"Created replication {replication.id}: "
            f"{spec.primary_volume_id} -> {spec.secondary_volume_id}"
        )
        return copy.deepcopy(replication)

    def delete_replication(self, replication_id: str) -> None:
        self._delete(self.replications, "replication", replication_id)

    # Pools and profiles
    def list_pools(self) -> List[PoolSpec]:
        return self._list(self.pools)

    def get_pool(self, pool_id: str) -> PoolSpec:
        return self._get(self.pools, "pool", pool_id)

    def list_profiles(self) -> List[ProfileSpec]:
        return self._list(self.profiles)
