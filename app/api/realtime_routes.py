"""
Change notifications for open pages.

A page subscribes to one resource of one tenant; every committed change is
pushed as a small JSON message and the page refetches what it shows.
"""
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from app.core.errors import TenantNotFound

log = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/realtime/{tenant_slug}/{resource}")
async def realtime_changes(websocket: WebSocket, tenant_slug: str, resource: str):
    data = websocket.app.state.data
    watched = data.watchable(resource)
    if watched is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    queue: asyncio.Queue = asyncio.Queue()
    try:
        handle = await watched.watch(tenant_slug, queue.put_nowait)
    except TenantNotFound:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    async def forward():
        while True:
            change = await queue.get()
            await websocket.send_json(
                {"event": "invalidate", "resource": resource, "type": change.type, "id": change.record_id}
            )

    forwarder = asyncio.create_task(forward())
    try:
        while True:
            # nothing is expected from the client; this only waits for disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        log.debug("realtime client left: tenant=%s resource=%s", tenant_slug, resource)
    finally:
        forwarder.cancel()
        # collects a send error from a client that vanished mid-message
        await asyncio.gather(forwarder, return_exceptions=True)
        handle.close()
