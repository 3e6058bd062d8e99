"""Filtering and offset-token pagination for snapshot listings.

The orchestrator does not return listings in a stable order, so results are
sorted by id before the page window is taken. The token is the decimal offset
into that sorted sequence; it is not an opaque cursor and shifts if the
underlying set changes between calls.
"""

import logging
from typing import List, Optional, Tuple

from src.models.models import SnapshotSpec
from .errors import NotFound, Aborted, InvalidArgument

logger = logging.getLogger(__name__)


def filter_snapshots(snapshots: List[SnapshotSpec], snapshot_id: str = "",
                     source_volume_id: str = "") -> List[SnapshotSpec]:
    """Apply the optional id / source volume filters.

    Raises:
        NotFound: a filter was given and nothing matched it
    """
    if not snapshot_id and not source_volume_id:
        return list(snapshots)

    if not snapshot_id:
        result = [s for s in snapshots if s.volume_id == source_volume_id]
        if not result:
            raise NotFound(f"no snapshot with source volume id {source_volume_id}")
        return result

    by_id = [s for s in snapshots if s.id == snapshot_id]
    if not source_volume_id:
        if not by_id:
            raise NotFound(f"no snapshot with id {snapshot_id}")
        return by_id

    result = [s for s in by_id if s.volume_id == source_volume_id]
    if not result:
        raise NotFound(
            f"no snapshot with id {snapshot_id} and source volume id {source_volume_id}"
        )
    return result


def parse_token(token: str) -> int:
    if not token:
        return 0
    if not token.isdigit() or not token.isascii():
        raise Aborted(f"parsing the starting token {token!r} failed")
    return int(token)


def paginate(items: List[SnapshotSpec], max_entries: int = 0,
             starting_token: Optional[str] = "") -> Tuple[List[SnapshotSpec], str]:
    """Sort by id and cut one page starting at the token offset.

    Returns:
        The page and the next token ('' when nothing remains)

    Raises:
        Aborted: the token is malformed or points past the end
    """
    ordered = sorted(items, key=lambda s: s.id)
    offset = parse_token(starting_token or "")
    if offset >= len(ordered):
        raise Aborted(f"starting token {offset} >= number of snapshots {len(ordered)}")

    if max_entries < 0:
        raise InvalidArgument(f"max entries {max_entries} cannot be negative")

    end = offset + max_entries
    if max_entries == 0 or end >= len(ordered):
        page, next_token = ordered[offset:], ""
    else:
        page, next_token = ordered[offset:end], str(end)

    logger.debug(f"Returning {len(page)} of {len(ordered)} snapshots, next token '{next_token}'")
    return page, next_token
