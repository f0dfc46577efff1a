import asyncio
from typing import Callable


class LoopScheduler:
    """Schedules callbacks on the running asyncio event loop"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)
