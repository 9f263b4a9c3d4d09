"""Periodic and event-driven autosave for the study wizard."""

from __future__ import annotations

import logging
import time
from typing import Callable

from config import DEFAULT_AUTOSAVE_INTERVAL

logger = logging.getLogger(__name__)


class AutosaveScheduler:
    """Route every autosave trigger to one idempotent ``save`` callable.

    The scheduler owns no thread. The host event loop calls :meth:`tick`
    whenever it gets control (a Streamlit rerun, a timer callback) and the
    scheduler saves once the interval has elapsed. Event triggers save
    immediately. Nothing fires before :meth:`arm` is called.
    """

    def __init__(
        self,
        save: Callable[[], object],
        *,
        interval_seconds: float = DEFAULT_AUTOSAVE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._save = save
        self._interval = float(interval_seconds)
        self._clock = clock
        self._armed = False
        self._last_tick: float | None = None
        self.save_count = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True
        self._last_tick = self._clock()

    def disarm(self) -> None:
        self._armed = False
        self._last_tick = None

    def tick(self, now: float | None = None) -> bool:
        """Save when at least one interval passed since the last periodic save."""

        if not self._armed:
            return False
        current = self._clock() if now is None else now
        if self._last_tick is None:
            self._last_tick = current
            return False
        if current - self._last_tick < self._interval:
            return False
        self._last_tick = current
        self._fire("interval")
        return True

    def on_input_change(self) -> None:
        self._fire("input")

    def on_visibility_change(self) -> None:
        self._fire("visibility")

    def on_before_unload(self) -> None:
        self._fire("unload")

    def save_now(self) -> None:
        self._fire("explicit")

    def _fire(self, trigger: str) -> None:
        if not self._armed:
            return
        logger.debug("Autosave triggered by %s", trigger)
        self._save()
        self.save_count += 1


__all__ = ["AutosaveScheduler"]
