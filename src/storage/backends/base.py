"""
Base class for orchestrator backend implementations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.models.models import (
    VolumeSpec,
    SnapshotSpec,
    AttachmentSpec,
    ReplicationSpec,
    PoolSpec,
    ProfileSpec,
)


class BackendError(Exception):
    """Failure reported by, or while talking to, the orchestrator."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class OrchestratorBackend(ABC):
    """Synchronous client for the storage orchestrator.

    The orchestrator owns all state. Implementations must return fresh records
    on every call and must not cache between calls.
    """

    # Volumes
    @abstractmethod
    def list_volumes(self) -> List[VolumeSpec]:
        """List all volumes"""

    @abstractmethod
    def get_volume(self, volume_id: str) -> VolumeSpec:
        """Get a volume by id"""

    @abstractmethod
    def create_volume(self, spec: VolumeSpec) -> VolumeSpec:
        """Create a volume"""

    @abstractmethod
    def delete_volume(self, volume_id: str) -> None:
        """Delete a volume"""

    # Attachments
    @abstractmethod
    def list_attachments(self) -> List[AttachmentSpec]:
        """List all volume attachments"""

    @abstractmethod
    def create_attachment(self, spec: AttachmentSpec) -> AttachmentSpec:
        """Create a volume attachment"""

    @abstractmethod
    def delete_attachment(self, attachment_id: str) -> None:
        """Delete a volume attachment"""

    # Snapshots
    @abstractmethod
    def list_snapshots(self) -> List[SnapshotSpec]:
        """List all volume snapshots"""

    @abstractmethod
    def get_snapshot(self, snapshot_id: str) -> SnapshotSpec:
        """Get a snapshot by id"""

    @abstractmethod
    def create_snapshot(self, spec: SnapshotSpec) -> SnapshotSpec:
        """Create a volume snapshot"""

    @abstractmethod
    def delete_snapshot(self, snapshot_id: str) -> None:
        """Delete a volume snapshot"""

    # Replications
    @abstractmethod
    def list_replications(self) -> List[ReplicationSpec]:
        """List all replication pairs"""

    @abstractmethod
    def get_replication(self, replication_id: str) -> ReplicationSpec:
        """Get a replication pair by id"""

    @abstractmethod
    def create_replication(self, spec: ReplicationSpec) -> ReplicationSpec:
        """Create a replication pair"""

    @abstractmethod
    def delete_replication(self, replication_id: str) -> None:
        """Delete a replication pair"""

    # Pools and profiles
    @abstractmethod
    def list_pools(self) -> List[PoolSpec]:
        """List all storage pools"""

    @abstractmethod
    def get_pool(self, pool_id: str) -> PoolSpec:
        """Get a storage pool by id"""

    @abstractmethod
    def list_profiles(self) -> List[ProfileSpec]:
        """List all profiles"""
