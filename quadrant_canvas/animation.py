"""Progress counter and frame scheduling for the "drawing" animation.

Two pieces live here:

``AnimationDriver``
    A two-state machine (Idle/Running) around an integer progress counter.
    A plot request resets progress to 0 and enters Running; each tick adds
    ``PROGRESS_STEP`` until ``PROGRESS_TERMINAL`` is reached, at which point
    the driver drops back to Idle on its own. Requesting a plot while Running
    restarts the animation instead of stacking a second one.

``AnimationLoop``
    A self-rescheduling repeating task. It uses the running asyncio event loop
    (``call_later``) when there is one, which is the case inside a Jupyter
    kernel, and falls back to ``threading.Timer`` otherwise. Every scheduled
    continuation carries the generation it was scheduled for; restarting or
    stopping the loop bumps the generation so a continuation left over from a
    superseded animation exits without ticking; the check and the frame itself
    run under one lock, so a frame in flight never ticks a restarted animation.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

__all__ = [
    "PROGRESS_STEP",
    "PROGRESS_TERMINAL",
    "DEFAULT_FRAME_INTERVAL_MS",
    "AnimationState",
    "AnimationDriver",
    "AnimationLoop",
    "advance",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PROGRESS_STEP = 2
PROGRESS_TERMINAL = 360
DEFAULT_FRAME_INTERVAL_MS = 16


def advance(progress: int, running: bool) -> Tuple[int, bool]:
    """Return the ``(progress, running)`` pair after one animation tick."""
    if not running:
        return progress, False
    if progress < PROGRESS_TERMINAL:
        progress = min(progress + PROGRESS_STEP, PROGRESS_TERMINAL)
    return progress, progress < PROGRESS_TERMINAL


@dataclass
class AnimationState:
    """Mutable progress counter plus the running flag."""

    progress: int = 0
    is_animating: bool = False


class AnimationDriver:
    """Idle/Running state machine advancing :class:`AnimationState`.

    Parameters
    ----------
    state : AnimationState, optional
        State record to drive. A fresh Idle state is created when omitted.

    Examples
    --------
    >>> driver = AnimationDriver()
    >>> driver.request_plot()
    >>> for _ in range(180):
    ...     _ = driver.tick()
    >>> driver.progress, driver.is_animating
    (360, False)
    """

    def __init__(self, state: Optional[AnimationState] = None) -> None:
        self.state = state if state is not None else AnimationState()

    @property
    def progress(self) -> int:
        return self.state.progress

    @property
    def is_animating(self) -> bool:
        return self.state.is_animating

    def request_plot(self) -> None:
        """Reset progress to 0 and enter Running (restarts a running animation)."""
        self.state.progress = 0
        self.state.is_animating = True

    def tick(self) -> bool:
        """Advance one step; return ``True`` while the animation keeps running."""
        progress, running = advance(self.state.progress, self.state.is_animating)
        self.state.progress = progress
        self.state.is_animating = running
        return running


class AnimationLoop:
    """Repeatedly invoke ``on_frame`` until it returns ``False``.

    Parameters
    ----------
    on_frame:
        Callable run once per frame. Returning a falsy value ends the loop.
    frame_interval_ms:
        Delay between frames in milliseconds.

    Notes
    -----
    The generation check and ``on_frame`` run under one re-entrant lock, and
    :meth:`start` runs its ``prepare`` callable under the same lock. A frame
    already in flight therefore finishes against the animation it was
    scheduled for, and a continuation superseded by :meth:`start` or
    :meth:`stop` returns without calling ``on_frame``.
    """

    def __init__(
        self,
        on_frame: Callable[[], bool],
        *,
        frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
    ) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be > 0")
        self._on_frame = on_frame
        self._frame_interval_s = frame_interval_ms / 1000.0
        self._lock = threading.RLock()
        self._timer: Optional[Any] = None
        self._generation = 0

    @property
    def running(self) -> bool:
        """Return ``True`` while a continuation is scheduled."""
        with self._lock:
            return self._timer is not None

    def start(self, prepare: Optional[Callable[[], None]] = None) -> None:
        """Start the loop, superseding any continuation already scheduled.

        Parameters
        ----------
        prepare:
            Optional callable run under the loop lock after the old
            continuation is invalidated and before the first frame is
            scheduled (e.g. resetting the animation state).
        """
        with self._lock:
            self._generation += 1
            self._cancel_timer_locked()
            if prepare is not None:
                prepare()
            self._schedule_next_locked(self._generation)

    def stop(self) -> None:
        """Stop the loop; a pending continuation becomes stale."""
        with self._lock:
            self._generation += 1
            self._cancel_timer_locked()

    def _cancel_timer_locked(self) -> None:
        timer, self._timer = self._timer, None
        cancel = getattr(timer, "cancel", None)
        if cancel is not None:
            cancel()

    def _schedule_next_locked(self, generation: int) -> None:
        delay_s = self._frame_interval_s
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            timer = threading.Timer(delay_s, self._on_tick, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()
            return

        self._timer = loop.call_later(delay_s, self._on_tick, generation)

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None

            try:
                keep_going = bool(self._on_frame())
            except Exception:
                logger.exception("AnimationLoop frame callback failed; stopping.")
                keep_going = False

            if generation != self._generation or self._timer is not None:
                return
            if keep_going:
                self._schedule_next_locked(generation)
