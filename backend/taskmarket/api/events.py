"""Events API router for the SSE stream of workflow transitions."""

import json

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from taskmarket.core.events import event_bus

router = APIRouter()


@router.get("/events")
async def event_stream(request: Request):
    """
    Server-Sent Events (SSE) stream for real-time updates.

    Usage:
        const eventSource = new EventSource('/api/events');
        eventSource.addEventListener('task_approved', (e) => {
            console.log(JSON.parse(e.data));
        });
    """
    async def generate():
        async for event in event_bus.subscribe():
            # Check if client disconnected
            if await request.is_disconnected():
                break

            yield {
                "event": event["type"],
                "data": json.dumps({**event["data"], "timestamp": event["timestamp"]}, default=str)
            }

    return EventSourceResponse(generate())
