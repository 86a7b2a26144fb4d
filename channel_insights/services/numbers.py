"""Human-readable count parsing ("1.2M subscribers") and formatting."""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 1000

# Unit must end the token so "999 subscribers" is not read as 999 billion.
COUNT_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?|\.\d+)\s*(thousand|millions?|billions?|mio|mrd|bn|[kmb])?\.?(?![a-z])",
    re.IGNORECASE,
)
MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "mio": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "bn": 1_000_000_000,
    "mrd": 1_000_000_000,
    "billion": 1_000_000_000,
}
FORMAT_UNITS = [
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_count(value: Any, default: int = DEFAULT_COUNT) -> int:
    """Return the integer behind a display count such as ``"45K"`` or ``"1.2M"``.

    Unparseable or empty input yields ``default`` instead of raising.
    """

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = _coerce_number(value)
        if number is None or number < 0:
            return default
        return _round_half_up(number)
    if value is None:
        return default

    text = str(value).replace(",", "").replace("_", "").strip()
    if not text:
        return default
    match = COUNT_PATTERN.search(text)
    if not match:
        logger.debug("Unparseable count %r, using default %s", value, default)
        return default

    number = float(match.group(1))
    suffix = match.group(2)
    if suffix:
        number *= MULTIPLIERS[suffix.lower().rstrip("s")]
    return _round_half_up(number)


def format_count(value: Any) -> str:
    number = _coerce_number(value)
    if number is None:
        return "0"
    magnitude = abs(number)
    for index, (threshold, suffix) in enumerate(FORMAT_UNITS):
        if magnitude < threshold:
            continue
        scaled = round(number / threshold, 1)
        if abs(scaled) >= 1000 and index > 0:
            threshold, suffix = FORMAT_UNITS[index - 1]
            scaled = round(number / threshold, 1)
        return f"{scaled:.1f}{suffix}"
    return str(_round_half_up(number))
