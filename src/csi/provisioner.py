"""
Idempotent provisioning of volumes and snapshots.

The orchestrator has no unique-name constraint, so every create first scans
the full listing for a record with the same name. A same-name record with the
same attributes is the same logical resource; one with different attributes
is a conflict.
"""

import dataclasses
import logging
from typing import Optional, Tuple

from src.config.base_config import DEFAULT_AVAILABILITY_ZONE
from src.models.models import VolumeSpec, SnapshotSpec, ProfileSpec
from src.storage.backends.base import OrchestratorBackend, BackendError
from .constants import GiB, DEFAULT_PROFILE_NAME
from .errors import AlreadyExists, FailedPrecondition, InvalidArgument

logger = logging.getLogger(__name__)


def size_in_units(required_bytes: Optional[int]) -> int:
    """Round a byte capacity up to whole GiB, never below one."""
    if not required_bytes or required_bytes < 0:
        return 1
    return max(1, (required_bytes + GiB - 1) // GiB)


class VolumeProvisioner:
    """Create/find/delete volumes and snapshots against the orchestrator"""

    def __init__(self, backend: OrchestratorBackend,
                 default_availability_zone: str = DEFAULT_AVAILABILITY_ZONE):
        self.backend = backend
        self.default_availability_zone = default_availability_zone

    def default_profile(self) -> ProfileSpec:
        try:
            profiles = self.backend.list_profiles()
        except BackendError as e:
            logger.error(f"Get default profile failed: {e}")
            raise

        for profile in profiles:
            if profile.name == DEFAULT_PROFILE_NAME:
                return profile
        raise FailedPrecondition("No default profile")

    def resolve(self, spec: VolumeSpec) -> VolumeSpec:
        """Fill in the default profile and availability zone."""
        if not spec.name:
            raise InvalidArgument("Volume name cannot be empty")
        profile_id = spec.profile_id or self.default_profile().id
        availability_zone = spec.availability_zone or self.default_availability_zone
        return dataclasses.replace(spec, profile_id=profile_id, availability_zone=availability_zone)

    def find_volume(self, spec: VolumeSpec) -> Tuple[bool, Optional[VolumeSpec]]:
        """Look up a volume by name.

        Returns:
            (exists, compatible volume or None)
        """
        volumes = self.backend.list_volumes()
        exists = False
        for volume in volumes:
            if volume.name != spec.name:
                continue
            exists = True
            if volume.is_compatible(spec):
                logger.debug(f"Volume {spec.name} already exists and is compatible")
                return True, volume
        return exists, None

    def create_volume(self, spec: VolumeSpec) -> Tuple[VolumeSpec, bool]:
        """Create the volume unless a compatible one already exists.

        Returns:
            (volume, whether this call created it)
        """
        logger.debug(f"CreateVolume spec: {spec}")
        exists, found = self.find_volume(spec)
        if exists:
            if found is None:
                raise AlreadyExists(f"Volume {spec.name} already exists but is incompatible")
            return found, False

        try:
            return self.backend.create_volume(spec), True
        except BackendError as create_error:
            # The create may have gone through despite the error, or a
            # concurrent request may have won the race.
            exists, found = self.find_volume(spec)
            if not (exists and found is not None):
                logger.error(f"Failed to create volume {spec.name}: {create_error}")
                raise create_error
            logger.warning(
                f"Create of volume {spec.name} reported failure but volume {found.id} exists"
            )
            return found, False

    def delete_volume(self, volume_id: str) -> None:
        logger.info(f"Deleting volume {volume_id}")
        self.backend.delete_volume(volume_id)

    def find_snapshot(self, spec: SnapshotSpec) -> Tuple[bool, Optional[SnapshotSpec]]:
        try:
            snapshots = self.backend.list_snapshots()
        except BackendError as e:
            logger.error(f"List volume snapshots failed: {e}")
            raise

        exists = False
        for snapshot in snapshots:
            if snapshot.name != spec.name:
                continue
            exists = True
            if snapshot.is_compatible(spec):
                logger.debug(f"Snapshot {spec.name} already exists and is compatible")
                return True, snapshot
        return exists, None

    def create_snapshot(self, spec: SnapshotSpec) -> SnapshotSpec:
        if not spec.name:
            raise InvalidArgument("Snapshot Name cannot be empty")
        if not spec.volume_id:
            raise InvalidArgument("Source Volume ID cannot be empty")

        exists, found = self.find_snapshot(spec)
        if exists:
            if found is None:
                raise AlreadyExists(f"Snapshot {spec.name} already exists but is incompatible")
            return found

        try:
            return self.backend.create_snapshot(spec)
        except BackendError as e:
            logger.error(f"Failed to create snapshot {spec.name}: {e}")
            raise

    def delete_snapshot(self, snapshot_id: str) -> None:
        if not snapshot_id:
            raise InvalidArgument("Snapshot ID cannot be empty")
        logger.info(f"Deleting snapshot {snapshot_id}")
        self.backend.delete_snapshot(snapshot_id)
