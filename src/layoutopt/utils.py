from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import List


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def round_half_up(value: float) -> int:
    # round() would give banker's rounding: 12.5 -> 12
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


def compact_list(values: List[str]) -> List[str]:
    return [v for v in values if v]
