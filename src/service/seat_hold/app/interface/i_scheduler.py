"""
Scheduler Interface

Delayed-callback capability used by the hold countdown and the stream
reconnect logic. Production code uses the running asyncio loop; tests use a
virtual clock.
"""

from typing import Callable, Protocol


class ITimerHandle(Protocol):
    def cancel(self) -> None: ...


class IScheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ITimerHandle:
        """
        Run callback once after delay seconds

        Returns:
            Handle whose cancel() guarantees the callback will not run
        """
        ...
