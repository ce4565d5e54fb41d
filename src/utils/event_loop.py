"""Run coroutines from the synchronous serverless handlers."""

import asyncio


def get_event_loop() -> asyncio.AbstractEventLoop:
    """Reuse the thread's loop across warm invocations so SDK sessions stay bound to it."""
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    if loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop


def run_sync(coro):
    return get_event_loop().run_until_complete(coro)
