"""Keys and fixed values shared by the controller components."""

GiB = 1024 * 1024 * 1024

# CreateVolume / CreateSnapshot parameters (normalized: lower case, no '_' or '-')
PARAM_PROFILE = ("profile",)
PARAM_AZ = ("availabilityzone", "az")
PARAM_ENABLE_REPLICATION = ("enablereplication",)
PARAM_SECONDARY_AZ = ("secondaryavailabilityzone", "secondaryaz")

DEFAULT_PROFILE_NAME = "default"
SECONDARY_PREFIX = "secondary-"

# Volume context
VOLUME_NAME = "name"
VOLUME_STATUS = "status"
VOLUME_AZ = "availabilityZone"
VOLUME_POOL_ID = "poolId"
VOLUME_PROFILE_ID = "profileId"
VOLUME_LV_PATH = "lvPath"
VOLUME_REPLICATION_ID = "replicationId"

# Publish context
PUBLISH_HOST_IP = "hostIp"
PUBLISH_HOST_NAME = "hostName"
PUBLISH_ATTACH_ID = "attachmentId"
PUBLISH_ATTACH_STATUS = "attachmentStatus"
PUBLISH_SECONDARY_ATTACH_ID = "secondaryAttachmentId"

# Access protocols
FC_PROTOCOL = "fibre_channel"
ISCSI_PROTOCOL = "iscsi"
RBD_PROTOCOL = "rbd"
DEFAULT_PROTOCOL = ISCSI_PROTOCOL

# Node id initiator tags, matched as "<tag>:"
WWPN = "wwpn"
WWNN = "wwnn"
IQN = "iqn"
NODE_ID_TAGS = {
    WWPN: WWPN,
    WWNN: WWNN,
    "wwn": WWNN,
    IQN: IQN,
}

REPLICATION_MODE_SYNC = "sync"
