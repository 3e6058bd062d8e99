"""Request builders shared by the controller tests."""
from typing import Dict, Optional

from src.csi.constants import GiB
from src.csi.proto import csi_pb2

ISCSI_NODE_ID = "host1,iqn:iqn.1993-08.org.debian:01:abc"
ISCSI_NODE_ID_2 = "host2,iqn:iqn.1993-08.org.debian:01:def"
FC_NODE_ID = "host1,wwpn:500143802426baf8,wwpn:500143802426baf9,wwnn:200143802426baf8"

SINGLE_WRITER = csi_pb2.VolumeCapability.AccessMode.SINGLE_NODE_WRITER
MULTI_WRITER = csi_pb2.VolumeCapability.AccessMode.MULTI_NODE_MULTI_WRITER


def create_volume_request(name: str = "vol-1", size_gib: int = 1,
                          parameters: Optional[Dict[str, str]] = None,
                          snapshot_id: Optional[str] = None) -> csi_pb2.CreateVolumeRequest:
    source = None
    if snapshot_id:
        source = csi_pb2.VolumeContentSource(
            snapshot=csi_pb2.VolumeContentSource.SnapshotSource(snapshot_id=snapshot_id)
        )
    return csi_pb2.CreateVolumeRequest(
        name=name,
        capacity_range=csi_pb2.CapacityRange(required_bytes=size_gib * GiB),
        parameters=parameters or {},
        volume_content_source=source,
    )


def publish_request(volume_id: str, node_id: str = ISCSI_NODE_ID, mode: int = SINGLE_WRITER,
                    volume_context: Optional[Dict[str, str]] = None
                    ) -> csi_pb2.ControllerPublishVolumeRequest:
    return csi_pb2.ControllerPublishVolumeRequest(
        volume_id=volume_id,
        node_id=node_id,
        volume_capability=csi_pb2.VolumeCapability(
            access_mode=csi_pb2.VolumeCapability.AccessMode(mode=mode)
        ),
        volume_context=volume_context or {},
    )
