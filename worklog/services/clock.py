# Rev 0.1.0
from __future__ import annotations
import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> int: ...


class SystemClock:
    """Wall clock in integer milliseconds since the epoch."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)
