"""Multi-poll inventory handshake.

The reader is told to start an inventory round, then polled a fixed
number of times. Each poll answers with either one tag or the all-zero
"no tag" reply. A failed poll ends the scan early with whatever was
collected so far.
"""

from __future__ import annotations

import logging

from ..errors import UhfError
from .commands import build_inventory_poll, build_inventory_start
from .framing import CHUNK_TIMEOUT_MS, ChunkIO, read_response, send_command
from .parser import parse_inventory_tag

logger = logging.getLogger(__name__)

MAX_POLLS = 10


def scan(device: ChunkIO, debug: bool = False) -> list[str]:
    """Run one inventory round and return tag identifiers in poll order.

    Duplicates are kept. Errors from the start command propagate.
    """
    send_command(device, build_inventory_start(), debug)
    read_response(device, CHUNK_TIMEOUT_MS, debug)

    tags: list[str] = []
    poll = build_inventory_poll()
    for attempt in range(MAX_POLLS):
        try:
            send_command(device, poll, debug)
        except UhfError as e:
            logger.debug("Inventory poll %d send failed: %s", attempt + 1, e)
            break

        try:
            response = read_response(device, CHUNK_TIMEOUT_MS, debug)
            tag = parse_inventory_tag(response)
        except UhfError as e:
            logger.debug("Inventory poll %d ended scan: %s", attempt + 1, e)
            break

        if tag is not None:
            tags.append(tag)

    if debug:
        logger.debug("Inventory found %d tag record(s)", len(tags))
    return tags
