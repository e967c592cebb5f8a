"""Time helpers. Timestamps are epoch milliseconds throughout."""

import time
from datetime import date, datetime


def now_ms() -> int:
    return int(time.time() * 1000)


def local_day(timestamp_ms: int) -> date:
    """Local calendar day of an epoch-ms timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()
