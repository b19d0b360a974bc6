"""
Propagate client disconnects into in-flight backend work.
"""

import asyncio
from typing import Awaitable, TypeVar

from fastapi import Request

from shared.errors import ClientDisconnected
from shared.logging import get_logger

T = TypeVar("T")

logger = get_logger("gateway.cancellation")

DISCONNECT_POLL_INTERVAL = 0.05


async def _wait_for_disconnect(request: Request, poll_interval: float) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(poll_interval)


async def cancel_on_disconnect(
    request: Request,
    work: Awaitable[T],
    *,
    poll_interval: float = DISCONNECT_POLL_INTERVAL,
) -> T:
    """Await ``work`` unless the client disconnects first.

    When the client goes away the work task is cancelled, which aborts any
    outbound RPC it is waiting on, and ``ClientDisconnected`` is raised.
    """
    work_task = asyncio.ensure_future(work)
    watcher = asyncio.create_task(_wait_for_disconnect(request, poll_interval))

    try:
        done, _ = await asyncio.wait({work_task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work_task.cancel()
        watcher.cancel()
        raise

    if work_task in done:
        watcher.cancel()
        return work_task.result()

    work_task.cancel()
    try:
        await work_task
    except asyncio.CancelledError:
        pass
    except Exception as exc:
        # Work finished with an error while we were cancelling it
        logger.debug("Work failed during disconnect cancellation", error=str(exc))

    logger.info("Client disconnected, cancelled backend work", path=request.url.path)
    raise ClientDisconnected()
