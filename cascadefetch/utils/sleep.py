import asyncio
import random


async def sleep_ms(ms: float) -> None:
    await asyncio.sleep(ms / 1000.0)


async def random_sleep(min_ms: float, max_ms: float) -> None:
    """Sleep between min_ms and max_ms, biased toward the lower bound."""
    r = random.random()
    delay = int(min_ms + (max_ms - min_ms) * r * r)
    await sleep_ms(delay)
