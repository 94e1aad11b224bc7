"""Marker storage in the Telegram chat description.

Bots cannot read back their own channel history and the relay has no
database, so the link of the last posted item is kept in the chat
description and read back on the next run.
"""

import logging

logger = logging.getLogger(__name__)

# Telegram rejects chat descriptions longer than this
MAX_DESCRIPTION_LENGTH = 255


def encode_marker(link: str) -> str:
    """Turn an item link into the chat description value."""
    marker = link.strip()
    if len(marker) > MAX_DESCRIPTION_LENGTH:
        logger.warning(
            "Marker is %d characters, Telegram allows %d",
            len(marker),
            MAX_DESCRIPTION_LENGTH,
        )
    return marker


def decode_marker(description: str | None) -> str | None:
    """Read the marker back from a chat description, None if unset."""
    if not description:
        return None
    return description.strip() or None
