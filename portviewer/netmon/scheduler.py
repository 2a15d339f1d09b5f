"""
Refresh Scheduler Module - Cancellable periodic refresh

Handles:
- Idle/Polling state machine
- Timer creation through an injected set_interval factory
- Interval changes that re-arm the timer
- Enabled flag gating each tick
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, Set, Union

from portviewer.config import MIN_REFRESH_INTERVAL, MAX_REFRESH_INTERVAL


logger = logging.getLogger(__name__)


TickCallback = Callable[[], Union[Awaitable[Any], Any]]


class TimerHandle(Protocol):
    def stop(self) -> None: ...


IntervalFactory = Callable[[float, TickCallback], TimerHandle]


class AsyncioTimer:
    """Periodic timer backed by an asyncio task; must be created inside a running loop"""

    def __init__(self, interval: float, callback: TickCallback):
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.error("Timer callback failed; next tick still scheduled", exc_info=True)

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None


def validate_interval(seconds: int) -> int:
    """Return ``seconds`` if it is a whole number of seconds in range"""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise ValueError(f"Refresh interval must be a whole number of seconds, got {seconds!r}")
    if not MIN_REFRESH_INTERVAL <= seconds <= MAX_REFRESH_INTERVAL:
        raise ValueError(
            f"Refresh interval must be between {MIN_REFRESH_INTERVAL} and {MAX_REFRESH_INTERVAL} seconds"
        )
    return seconds


class RefreshScheduler:
    """
    Periodically re-invokes a refresh callback.

    States are ``idle`` (no timer) and ``polling`` (timer armed). Ticks run
    the callback only while ``enabled`` is True. A tick that fires while a
    previous refresh is still in flight is not suppressed here; the store
    drops stale results instead. Async refreshes are spawned as tasks held
    in ``in_flight``, so stopping the timer lets them finish.
    """

    IDLE = 'idle'
    POLLING = 'polling'

    def __init__(self, refresh: TickCallback, interval: int = 5, enabled: bool = False,
                 set_interval: Optional[IntervalFactory] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            refresh: Callback (sync or async) performing one fetch cycle
            interval: Tick period in whole seconds
            enabled: Initial auto-refresh flag
            set_interval: Timer factory returning a handle with ``stop()``
            logger: Logger for state transitions
        """
        self.refresh = refresh
        self.interval = validate_interval(interval)
        self.enabled = enabled
        self.set_interval_factory: IntervalFactory = set_interval or AsyncioTimer
        self.logger = logger or logging.getLogger(__name__)
        self.timer: Optional[TimerHandle] = None
        self.in_flight: Set[asyncio.Future] = set()

    @property
    def state(self) -> str:
        return self.POLLING if self.timer is not None else self.IDLE

    @property
    def is_polling(self) -> bool:
        return self.timer is not None

    async def _tick(self) -> None:
        # The fetch runs as its own task so stopping the timer never cancels it
        if not self.enabled:
            return
        result = self.refresh()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self.in_flight.add(task)
            task.add_done_callback(self._fetch_done)

    def _fetch_done(self, task: asyncio.Future) -> None:
        self.in_flight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.logger.error(f"Scheduled refresh failed: {error}", exc_info=error)

    def start(self) -> None:
        """Arm the timer, replacing any existing one"""
        if self.timer is not None:
            self.timer.stop()
        self.timer = self.set_interval_factory(self.interval, self._tick)
        self.logger.info(f"Auto-refresh polling every {self.interval}s")

    def stop(self) -> None:
        """Cancel the timer; no-op when idle"""
        if self.timer is None:
            return
        self.timer.stop()
        self.timer = None
        self.logger.info("Auto-refresh stopped")

    def set_interval(self, seconds: int) -> None:
        """Change the period; re-arms the timer when polling"""
        self.interval = validate_interval(seconds)
        self.logger.info(f"Refresh interval set to {self.interval}s")
        if self.is_polling:
            self.stop()
            self.start()

    def toggle_enabled(self) -> bool:
        """Flip the enabled flag, starting or stopping polling to match"""
        self.enabled = not self.enabled
        if self.enabled:
            self.start()
        else:
            self.stop()
        return self.enabled

    def teardown(self) -> None:
        self.stop()
