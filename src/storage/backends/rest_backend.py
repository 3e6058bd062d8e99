"""
REST orchestrator backend implementation.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from src.config.base_config import (
    SDS_ENDPOINT,
    SDS_API_VERSION,
    SDS_TENANT_ID,
    SDS_AUTH_TOKEN,
    SDS_REQUEST_TIMEOUT,
)
from src.models.models import (
    VolumeSpec,
    SnapshotSpec,
    AttachmentSpec,
    ReplicationSpec,
    PoolSpec,
    ProfileSpec,
)
from .base import OrchestratorBackend, BackendError

logger = logging.getLogger(__name__)


class RestOrchestratorBackend(OrchestratorBackend):
    """Talks to the orchestrator's block API over HTTP"""

    def __init__(
        self,
        endpoint: str = SDS_ENDPOINT,
        tenant_id: str = SDS_TENANT_ID,
        auth_token: Optional[str] = SDS_AUTH_TOKEN,
        timeout: float = SDS_REQUEST_TIMEOUT,
        api_version: str = SDS_API_VERSION,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = f"{endpoint.rstrip('/')}/{api_version}/{tenant_id}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if auth_token:
            self.session.headers.update({"X-Auth-Token": auth_token})
        logger.info(f"Initialized orchestrator client for {self.base_url}")

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path}"
        logger.debug(f"{method} {url} body={body}")
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendError(f"{method} {url} failed: {str(e)}") from e

        if not response.ok:
            raise BackendError(
                f"{method} {url} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"{method} {url} returned invalid JSON: {str(e)}") from e

    def _list(self, path: str) -> List[Dict[str, Any]]:
        return self._request("GET", path) or []

    def _get(self, path: str) -> Dict[str, Any]:
        record = self._request("GET", path)
        if not record:
            raise BackendError(f"GET {self.base_url}/{path} returned no record", status_code=404)
        return record

    # Volumes
    def list_volumes(self) -> List[VolumeSpec]:
        return [VolumeSpec.from_dict(v) for v in self._list("block/volumes")]

    def get_volume(self, volume_id: str) -> VolumeSpec:
        return VolumeSpec.from_dict(self._get(f"block/volumes/{volume_id}"))

    def create_volume(self, spec: VolumeSpec) -> VolumeSpec:
        return VolumeSpec.from_dict(self._request("POST", "block/volumes", spec.to_dict()))

    def delete_volume(self, volume_id: str) -> None:
        self._request("DELETE", f"block/volumes/{volume_id}", {})

    # Attachments
    def list_attachments(self) -> List[AttachmentSpec]:
        return [AttachmentSpec.from_dict(a) for a in self._list("block/attachments")]

    def create_attachment(self, spec: AttachmentSpec) -> AttachmentSpec:
        return AttachmentSpec.from_dict(self._request("POST", "block/attachments", spec.to_dict()))

    def delete_attachment(self, attachment_id: str) -> None:
        self._request("DELETE", f"block/attachments/{attachment_id}", {})

    # Snapshots
    def list_snapshots(self) -> List[SnapshotSpec]:
        return [SnapshotSpec.from_dict(s) for s in self._list("block/snapshots")]

    def get_snapshot(self, snapshot_id: str) -> SnapshotSpec:
        return SnapshotSpec.from_dict(self._get(f"block/snapshots/{snapshot_id}"))

    def create_snapshot(self, spec: SnapshotSpec) -> SnapshotSpec:
        return SnapshotSpec.from_dict(self._request("POST", "block/snapshots", spec.to_dict()))

    def delete_snapshot(self, snapshot_id: str) -> None:
        self._request("DELETE", f"block/snapshots/{snapshot_id}", {})

    # Replications
    def list_replications(self) -> List[ReplicationSpec]:
        return [ReplicationSpec.from_dict(r) for r in self._list("block/replications/detail")]

    def get_replication(self, replication_id: str) -> ReplicationSpec:
        return ReplicationSpec.from_dict(self._get(f"block/replications/{replication_id}"))

    def create_replication(self, spec: ReplicationSpec) -> ReplicationSpec:
        return ReplicationSpec.from_dict(
            self._request("POST", "block/replications", spec.to_dict())
        )

    def delete_replication(self, replication_id: str) -> None:
        self._request("DELETE", f"block/replications/{replication_id}", {})

    # Pools and profiles
    def list_pools(self) -> List[PoolSpec]:
        return [PoolSpec.from_dict(p) for p in self._list("pools")]

    def get_pool(self, pool_id: str) -> PoolSpec:
        return PoolSpec.from_dict(self._get(f"pools/{pool_id}"))

    def list_profiles(self) -> List[ProfileSpec]:
        return [ProfileSpec.from_dict(p) for p in self._list("profiles")]
