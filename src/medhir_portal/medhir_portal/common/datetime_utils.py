from __future__ import annotations

import time


def now_ms() -> int:
    """Current wall-clock time in integer milliseconds since epoch.

    Note: Wrapped so tests can patch/inject a fixed clock.
    """
    return int(time.time() * 1000)


def now_seconds() -> int:
    """Current wall-clock time in integer seconds since epoch."""
    return int(time.time())
