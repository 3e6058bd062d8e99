"""
Replication orchestration: a secondary volume plus its pairing record.
"""

import dataclasses
import logging
from typing import Optional

from src.config.base_config import DEFAULT_SECONDARY_AVAILABILITY_ZONE
from src.models.models import VolumeSpec, ReplicationSpec
from src.storage.backends.base import OrchestratorBackend, BackendError
from .constants import SECONDARY_PREFIX, REPLICATION_MODE_SYNC
from .errors import FailedPrecondition
from .provisioner import VolumeProvisioner

logger = logging.getLogger(__name__)


class ReplicationOrchestrator:
    """Creates and tears down synchronously replicated volume pairs.

    Neither step is compensated: if the pairing cannot be created the
    secondary volume is left behind and the error is returned to the caller.
    """

    def __init__(self, backend: OrchestratorBackend, provisioner: VolumeProvisioner,
                 secondary_availability_zone: str = DEFAULT_SECONDARY_AVAILABILITY_ZONE):
        self.backend = backend
        self.provisioner = provisioner
        self.secondary_availability_zone = secondary_availability_zone

    def enable(self, spec: VolumeSpec, primary: VolumeSpec,
               secondary_availability_zone: Optional[str] = None) -> ReplicationSpec:
        """Create the secondary for ``primary`` and pair them.

        Args:
            spec: The resolved spec the primary was created from
            primary: The freshly created primary volume
            secondary_availability_zone: Zone for the secondary, overriding the default
        """
        secondary_spec = dataclasses.replace(
            spec,
            name=SECONDARY_PREFIX + spec.name,
            availability_zone=secondary_availability_zone or self.secondary_availability_zone,
            metadata=dict(spec.metadata),
        )
        try:
            secondary = self.backend.create_volume(secondary_spec)
        except BackendError as e:
            logger.error(f"Failed to create secondary volume for {primary.id}: {e}")
            raise

        pairing = ReplicationSpec(
            name=spec.name,
            primary_volume_id=primary.id,
            secondary_volume_id=secondary.id,
            replication_mode=REPLICATION_MODE_SYNC,
            replication_period=0,
        )
        try:
            replication = self.backend.create_replication(pairing)
        except BackendError as e:
            logger.error(
                f"Create replication failed, secondary volume {secondary.id} left in place: {e}"
            )
            raise

        logger.info(f"Replication {replication.id} pairs {primary.id} with {secondary.id}")
        return replication

    def find_by_volume(self, volume_id: str) -> Optional[ReplicationSpec]:
        """Scan all pairings for one referencing ``volume_id`` on either side."""
        try:
            replications = self.backend.list_replications()
        except BackendError as e:
            raise FailedPrecondition(f"List replications failed: {e.message}") from e

        for replication in replications:
            if replication.references(volume_id):
                return replication
        return None

    def delete_volume(self, volume_id: str) -> None:
        """Delete a volume, taking its pairing and partner along if it has one."""
        replication = self.find_by_volume(volume_id)
        if replication is None:
            self.provisioner.delete_volume(volume_id)
            return

        logger.info(f"Volume {volume_id} is replicated by {replication.id}, deleting the pair")
        self.backend.delete_replication(replication.id)
        self.provisioner.delete_volume(replication.primary_volume_id)
        self.provisioner.delete_volume(replication.secondary_volume_id)
