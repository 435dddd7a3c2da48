# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Redirect Scheduler — delayed navigation to a callback URL.

Redirects are timers on the running event loop. A guard callable is
checked when the timer fires, so a redirect scheduled by a session that
has since been closed does nothing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger("widget.redirect")

Navigator = Callable[[str], Any]

# Product timing, in milliseconds
REDIRECT_DELAY_MS = 2000
VERIFICATION_REDIRECT_DELAY_MS = 3000


class RedirectScheduler:
    """Schedules ``navigator(url)`` after a delay on the event loop."""

    def __init__(self, navigator: Navigator) -> None:
        self._navigator = navigator
        self._handles: List[asyncio.TimerHandle] = []

    def schedule(
        self,
        url: str,
        delay_ms: int,
        guard: Optional[Callable[[], bool]] = None,
    ) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        handle = loop.call_later(delay_ms / 1000, self._fire, url, guard)
        self._handles.append(handle)
        logger.info("Redirect to %s scheduled in %d ms", url, delay_ms)
        return handle

    def _fire(self, url: str, guard: Optional[Callable[[], bool]]) -> None:
        if guard is not None and not guard():
            logger.info("Session closed, redirect to %s dropped", url)
            return
        logger.info("Redirecting to callback URL: %s", url)
        self._navigator(url)

    def cancel_all(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
