from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def epoch_seconds() -> int:
    return int(time.time())


def epoch_millis() -> int:
    return int(time.time() * 1000)
