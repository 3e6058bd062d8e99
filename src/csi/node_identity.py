"""Decoding of CSI node ids into a host name and its initiators.

A node id looks like ``host,iqn:<iqn>,wwpn:<wwpn>,wwpn:<wwpn>``. Initiator
values may themselves contain commas, so a segment that carries no known tag
is glued back onto the entry opened by the last tagged segment.
"""

import logging
from typing import Optional, Tuple

from src.models.models import NodeIdentity
from .constants import NODE_ID_TAGS

logger = logging.getLogger(__name__)


def _match_tag(segment: str) -> Optional[Tuple[str, str]]:
    for prefix, tag in NODE_ID_TAGS.items():
        marker = prefix + ":"
        if segment.startswith(marker):
            return tag, segment[len(marker):]
    return None


def parse_node_id(node_id: str) -> NodeIdentity:
    logger.debug(f"Parsing node id: {node_id}")
    segments = node_id.split(",")
    identity = NodeIdentity(host_name=segments[0])

    current = None
    for segment in segments[1:]:
        matched = _match_tag(segment)
        if matched is not None:
            tag, value = matched
            current = identity.initiators(tag)
            current.append(value)
        elif current is not None:
            current[-1] = f"{current[-1]},{segment}"
        else:
            logger.error(f"The format of node id {node_id} is incorrect, dropping '{segment}'")

    return identity
