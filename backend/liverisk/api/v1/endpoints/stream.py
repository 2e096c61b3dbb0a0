"""
Server-Sent Events (SSE) endpoint for real-time risk streaming.

Pushes the full RiskState to the frontend after every processed tick.
"""

import asyncio
import logging

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from liverisk.services.dispatcher import get_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/risk")
async def stream_risk(
    heartbeat: int = Query(default=15000, ge=1000, le=60000, description="Heartbeat interval in ms"),
):
    """
    Stream metrics + suggestions via SSE.

    The current state is sent immediately, then one event per processed tick.

    Usage (JavaScript):
    ```js
    const eventSource = new EventSource('/api/v1/stream/risk');
    eventSource.onmessage = (event) => {
      const state = JSON.parse(event.data);
      console.log(state.metrics, state.suggestions);
    };
    ```
    """
    heartbeat_seconds = heartbeat / 1000.0

    async def event_generator():
        dispatcher = get_dispatcher()
        queue = dispatcher.subscribe()

        try:
            yield f"data: {dispatcher.state.model_dump_json()}\n\n"

            while True:
                try:
                    state = await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
                    yield f"data: {state.model_dump_json()}\n\n"
                except asyncio.TimeoutError:
                    # Keep the connection alive
                    yield ": heartbeat\n\n"

        except asyncio.CancelledError:
            logger.debug("Risk stream client disconnected")
            raise
        finally:
            dispatcher.unsubscribe(queue)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        },
    )
