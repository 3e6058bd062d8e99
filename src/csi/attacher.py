"""
Publishing volumes to hosts through orchestrator attachments.
"""

import dataclasses
import logging
import platform
from typing import Dict, List, Optional

from src.models.models import AttachmentSpec, NodeIdentity, VolumeSpec
from src.storage.backends.base import OrchestratorBackend, BackendError
from .constants import (
    DEFAULT_PROTOCOL,
    FC_PROTOCOL,
    ISCSI_PROTOCOL,
    RBD_PROTOCOL,
    VOLUME_REPLICATION_ID,
    PUBLISH_HOST_IP,
    PUBLISH_HOST_NAME,
    PUBLISH_ATTACH_ID,
    PUBLISH_ATTACH_STATUS,
    PUBLISH_SECONDARY_ATTACH_ID,
)
from .errors import AlreadyExists, FailedPrecondition, InvalidArgument, NotFound
from .node_identity import parse_node_id
from .replication import ReplicationOrchestrator

logger = logging.getLogger(__name__)


def select_initiator(protocol: str, identity: NodeIdentity) -> str:
    """Pick the initiator the access protocol needs from the node identity."""
    if protocol == FC_PROTOCOL:
        if not identity.wwpns:
            raise FailedPrecondition(f"protocol is {protocol}, but no wwpn")
        return ",".join(identity.wwpns)
    if protocol == ISCSI_PROTOCOL:
        if not identity.iqns:
            raise FailedPrecondition(f"protocol is {protocol}, but no iqn")
        return identity.iqns[0]
    if protocol == RBD_PROTOCOL:
        return ""
    raise InvalidArgument(f"protocol cannot be {protocol}")


class AttachmentReconciler:
    """Publish and unpublish volumes, reusing matching attachments."""

    def __init__(self, backend: OrchestratorBackend, replication: ReplicationOrchestrator,
                 host_platform: Optional[str] = None, host_os_type: Optional[str] = None):
        self.backend = backend
        self.replication = replication
        self.platform = host_platform or platform.machine()
        self.os_type = host_os_type or platform.system().lower()

    def _get_volume(self, volume_id: str) -> VolumeSpec:
        try:
            return self.backend.get_volume(volume_id)
        except BackendError as e:
            logger.error(f"Get volume {volume_id} failed: {e}")
            raise NotFound(f"the volume {volume_id} does not exist") from e

    def _list_attachments(self) -> List[AttachmentSpec]:
        try:
            return self.backend.list_attachments()
        except BackendError as e:
            logger.error(f"List volume attachments failed: {e}")
            raise FailedPrecondition(e.message) from e

    def find_attachment(self, request: AttachmentSpec,
                        multi_node: bool) -> Optional[AttachmentSpec]:
        """Return a reusable attachment for ``request``, or None to create one.

        Raises:
            FailedPrecondition: attached elsewhere without a multi-node mode
            AlreadyExists: attached to this host with different attributes
        """
        for attachment in self._list_attachments():
            if attachment.volume_id != request.volume_id:
                continue
            if attachment.host != request.host:
                if not multi_node:
                    raise FailedPrecondition(
                        f"the volume {request.volume_id} has been published to another node "
                        f"and does not have MULTI_NODE volume capability"
                    )
                continue
            if attachment.matches(request):
                logger.debug(f"Volume published and is compatible: {attachment.id}")
                return attachment
            logger.error(f"Volume published but is incompatible, attachment id = {attachment.id}")
            raise AlreadyExists("Volume published but is incompatible")

        logger.debug("Need to create a new attachment")
        return None

    def _ensure_attachment(self, request: AttachmentSpec, multi_node: bool,
                           node_id: str) -> AttachmentSpec:
        existing = self.find_attachment(request, multi_node)
        if existing is not None:
            return existing
        try:
            return self.backend.create_attachment(request)
        except BackendError as e:
            logger.error(f"Failed to create attachment {request}: {e}")
            raise FailedPrecondition(
                f"the volume {request.volume_id} failed to publish to node {node_id}."
            ) from e

    def publish(self, volume_id: str, node_id: str, multi_node: bool,
                volume_context: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Attach ``volume_id`` to the node, and its replica when paired.

        Returns:
            The publish context handed to the node plugin
        """
        volume_context = dict(volume_context or {})
        volume = self._get_volume(volume_id)
        try:
            pool = self.backend.get_pool(volume.pool_id)
        except BackendError as e:
            logger.error(f"Get pool {volume.pool_id} failed: {e}")
            raise NotFound(f"the pool {volume.pool_id} does not exist") from e

        protocol = pool.access_protocol.lower() or DEFAULT_PROTOCOL
        identity = parse_node_id(node_id)
        request = AttachmentSpec(
            volume_id=volume_id,
            host=identity.host_name,
            platform=self.platform,
            os_type=self.os_type,
            initiator=select_initiator(protocol, identity),
            access_protocol=protocol,
            metadata={**volume.metadata, **volume_context},
        )

        attachment = self._ensure_attachment(request, multi_node, node_id)
        publish_context = {
            PUBLISH_HOST_IP: attachment.ip,
            PUBLISH_HOST_NAME: attachment.host,
            PUBLISH_ATTACH_ID: attachment.id,
            PUBLISH_ATTACH_STATUS: attachment.status,
        }

        replication_id = volume_context.get(VOLUME_REPLICATION_ID) or volume.metadata.get(
            VOLUME_REPLICATION_ID
        )
        if replication_id:
            try:
                replication = self.backend.get_replication(replication_id)
            except BackendError as e:
                raise FailedPrecondition(f"Get replication {replication_id} failed") from e

            secondary_request = dataclasses.replace(
                request, volume_id=replication.secondary_volume_id
            )
            secondary = self._ensure_attachment(secondary_request, multi_node, node_id)
            publish_context[PUBLISH_SECONDARY_ATTACH_ID] = secondary.id

        return publish_context

    def unpublish(self, volume_id: str, node_id: str = "") -> None:
        """Detach the volume (and its replica) from one host, or all hosts if no node id."""
        self._get_volume(volume_id)
        attachments = self._list_attachments()
        host_name = parse_node_id(node_id).host_name if node_id else ""

        volume_ids = [volume_id]
        replication = self.replication.find_by_volume(volume_id)
        if replication is not None and replication.secondary_volume_id != volume_id:
            volume_ids.append(replication.secondary_volume_id)

        targets = [
            a for a in attachments
            if a.volume_id in volume_ids and (not node_id or a.host == host_name)
        ]
        for attachment in targets:
            try:
                self.backend.delete_attachment(attachment.id)
            except BackendError as e:
                logger.error(f"Failed to delete attachment {attachment.id}: {e}")
                raise FailedPrecondition(
                    f"the volume {volume_id} failed to unpublish from node {node_id}."
                ) from e
            logger.debug(f"Attachment {attachment.id} has been successfully deleted")
