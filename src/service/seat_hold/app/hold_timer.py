"""
Hold Timer - countdown for a temporary seat hold

Ticks once per second on the injected scheduler. Each start() opens a new
run; ticks belonging to an earlier run are ignored, so at most one tick chain
is ever live and on_expire fires at most once per run.
"""

from typing import Callable, Optional

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_scheduler import IScheduler, ITimerHandle
from src.service.seat_hold.domain.entity.hold_entity import DEFAULT_HOLD_TTL_SECONDS


class HoldTimer:
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_HOLD_TTL_SECONDS,
        on_expire: Optional[Callable[[], None]] = None,
        *,
        scheduler: IScheduler,
        tick_seconds: float = 1.0,
    ) -> None:
        if ttl_seconds < 0:
            raise DomainError(f'ttl_seconds must be non-negative, got {ttl_seconds}')
        self.ttl_seconds = ttl_seconds
        # Read at expiry time, so owners may swap it after construction
        self.on_expire = on_expire
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._time_left = ttl_seconds
        self._is_active = False
        self._is_expired = False
        self._closed = False
        self._handle: Optional[ITimerHandle] = None
        self._generation = 0

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_expired(self) -> bool:
        return self._is_expired

    @property
    def formatted_time(self) -> str:
        minutes, seconds = divmod(max(self._time_left, 0), 60)
        return f'{minutes:02d}:{seconds:02d}'

    @property
    def progress_percentage(self) -> float:
        if self.ttl_seconds == 0:
            return 0.0
        elapsed = self.ttl_seconds - self._time_left
        return min(max(elapsed / self.ttl_seconds * 100, 0.0), 100.0)

    def start(self) -> None:
        """Start a fresh countdown from ttl_seconds, cancelling any run in progress"""
        if self._closed:
            Logger.base.warning('⚠️ [HOLD-TIMER] start() ignored on a closed timer')
            return

        self._cancel_pending()
        self._generation += 1
        self._time_left = self.ttl_seconds
        self._is_expired = False
        self._is_active = True
        Logger.base.debug(f'⏱️ [HOLD-TIMER] Started countdown of {self.ttl_seconds}s')
        self._schedule_tick(self._generation)

    def stop(self) -> None:
        self._cancel_pending()
        self._generation += 1
        self._is_active = False

    def reset(self) -> None:
        self.stop()
        self._time_left = self.ttl_seconds
        self._is_expired = False

    def close(self) -> None:
        """Release the scheduler handle; the timer cannot be restarted afterwards"""
        self.stop()
        self._closed = True

    def __enter__(self) -> 'HoldTimer':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _schedule_tick(self, generation: int) -> None:
        self._handle = self._scheduler.call_later(
            self._tick_seconds, lambda: self._tick(generation)
        )

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self, generation: int) -> None:
        if generation != self._generation or not self._is_active:
            return
        self._handle = None

        # The final second expires without displaying 00:00 first
        if self._time_left <= 1:
            self._expire()
            return

        self._time_left -= 1
        self._schedule_tick(generation)

    def _expire(self) -> None:
        self.stop()
        self._time_left = 0
        self._is_expired = True
        Logger.base.info('⌛ [HOLD-TIMER] Hold expired')
        if self.on_expire is not None:
            self.on_expire()
