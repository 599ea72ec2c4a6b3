"""
Air temperature from a raw METAR report, most precise group first:
the remarks T-group (tenths), then the body's temp/dewpoint group (whole
degrees), then the feed's decoded value.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


_T_GROUP_RE = re.compile(r"\bT([01])(\d{3})[01]\d{3}\b")
_BODY_TEMP_RE = re.compile(r"\b(M?\d{2})/(?:M?\d{2}|//)(?=\s|$)")

SOURCE_T_GROUP = "t_group"
SOURCE_BODY = "body"
SOURCE_DECODED = "decoded"


def decode_temperature(raw_metar: str, decoded_c: Optional[float] = None) -> Tuple[Optional[float], Optional[str]]:
    """Return (temp_c, which group it came from); (None, None) if nothing usable."""
    raw = (raw_metar or "").strip()

    t_group = _T_GROUP_RE.search(raw)
    if t_group:
        sign = -1.0 if t_group.group(1) == "1" else 1.0
        return sign * int(t_group.group(2)) / 10.0, SOURCE_T_GROUP

    # Remark groups can look like temp/dewpoint pairs.
    body = _BODY_TEMP_RE.search(raw.split(" RMK ", 1)[0])
    if body:
        token = body.group(1)
        value = -float(token[1:]) if token.startswith("M") else float(token)
        return value, SOURCE_BODY

    if decoded_c is not None:
        return float(decoded_c), SOURCE_DECODED
    return None, None
