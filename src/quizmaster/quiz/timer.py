"""Per-round countdown driven by a cooperative scheduler."""

from __future__ import annotations

from typing import Any, Callable, Protocol

TICK_INTERVAL_SECONDS = 1.0


class CancelHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with ``call_later``; an ``asyncio`` event loop qualifies."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> CancelHandle: ...


class Countdown:
    """Count whole seconds down to zero, one scheduler callback at a time.

    At most one tick callback is pending per countdown; ``cancel`` drops it
    and the countdown never fires again.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        seconds: int,
        *,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        if seconds <= 0:
            raise ValueError("countdown must start above zero")
        self._scheduler = scheduler
        self._remaining = seconds
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._interval = interval
        self._handle: CancelHandle | None = None
        self._cancelled = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None or self._cancelled:
            raise RuntimeError("countdown already started or cancelled")
        self._arm()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        self._remaining -= 1
        if self._remaining > 0:
            self._arm()
        self._on_tick(self._remaining)
        if self._remaining == 0 and not self._cancelled:
            self._cancelled = True
            self._on_expire()
