import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

ISO_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_iso_duration(value: Optional[str]) -> int:
    """Convert ``PT#H#M#S`` into seconds; anything else counts as zero."""
    if not value:
        return 0
    candidate = str(value).strip().upper()
    match = ISO_DURATION_PATTERN.fullmatch(candidate)
    if not match:
        logger.debug("Duration %r is not an ISO-8601 time duration", value)
        return 0
    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds
