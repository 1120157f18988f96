"""
Clock and delay primitive used by the admission controllers
"""

import asyncio
import time


class Clock:
    """Monotonic time source with a non-blocking sleep"""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
        else:
            await asyncio.sleep(0)
