"""Canvas position helpers."""

import math
import re
from typing import Any, Dict, List, Tuple

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def coerce_int(value: Any) -> int:
    """
    Read a canvas coordinate as an integer.

    Strings are read up to the first non-digit (``"120px"`` is 120,
    ``"12.7"`` is 12); anything unreadable is 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.trunc(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return 0


def canvas_offset(steps: List[Dict[str, Any]], min_top: int, min_left: int) -> Tuple[int, int]:
    """
    Compute the (top, left) shift that lifts every step onto the visible canvas.

    The offset is chosen so that the smallest top coordinate is at least
    ``min_top`` and the smallest left coordinate at least ``min_left``.
    Definitions without steps need no offset.
    """
    if not steps:
        return 0, 0

    lowest_top = min(coerce_int(step.get("top")) for step in steps)
    lowest_left = min(coerce_int(step.get("left")) for step in steps)

    top_offset = min_top - lowest_top if lowest_top < min_top else 0
    left_offset = min_left - lowest_left if lowest_left < min_left else 0
    return top_offset, left_offset
