"""WebSocket handler pushing poll generation progress to browsers."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...config import settings
from ...core.survey import AnalysisStep

logger = logging.getLogger(__name__)

router = APIRouter()


class WSEventType(str, Enum):
    """WebSocket event types."""
    # Inbound
    SUBSCRIBE = "subscribe"

    # Outbound
    SUBSCRIBED = "subscribed"
    ANALYSIS_STEP = "analysisStep"
    ERROR = "error"


@dataclass
class WSEvent:
    """WebSocket event structure. ``data`` is merged into the top-level message."""
    type: WSEventType
    data: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"type": self.type.value, **self.data})


@dataclass
class Subscriber:
    """A connected browser and the poll it declared interest in."""
    websocket: WebSocket
    poll_id: Optional[int] = None


class ConnectionManager:
    """
    Tracks live-update connections and fans analysis steps out to them.

    A connection that subscribed to a poll only receives steps tagged
    with that poll's id; a connection without a subscription receives
    every step. Steps of a poll still being generated have no poll id
    yet, so they go to every connection. With ``filter_subscriptions``
    off, every connection receives every step. Steps are not replayed
    to connections that join later.
    """

    def __init__(self, filter_subscriptions: bool = True):
        self.filter_subscriptions = filter_subscriptions
        self.subscribers: Dict[WebSocket, Subscriber] = {}

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a WebSocket connection."""
        await websocket.accept()
        self.subscribers[websocket] = Subscriber(websocket=websocket)
        logger.info(f"WebSocket connected ({len(self.subscribers)} open)")

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a WebSocket connection."""
        self.subscribers.pop(websocket, None)
        logger.info(f"WebSocket disconnected ({len(self.subscribers)} open)")

    def subscribe(self, websocket: WebSocket, poll_id: int) -> None:
        """Record the poll a connection wants updates for."""
        subscriber = self.subscribers.get(websocket)
        if subscriber is None:
            return
        subscriber.poll_id = poll_id
        logger.debug(f"WebSocket subscribed to poll {poll_id}")

    def wants(self, subscriber: Subscriber, poll_id: Optional[int]) -> bool:
        """Whether a step of ``poll_id`` should be delivered to ``subscriber``."""
        if not self.filter_subscriptions or subscriber.poll_id is None or poll_id is None:
            return True
        return subscriber.poll_id == poll_id

    async def send_personal(self, websocket: WebSocket, event: WSEvent) -> None:
        """Send event to a specific connection."""
        try:
            await websocket.send_text(event.to_json())
        except Exception as e:
            logger.error(f"Error sending to websocket: {e}")

    async def broadcast_step(self, poll_id: Optional[int], step: AnalysisStep) -> int:
        """Send an analysis step to interested connections.

        Returns the number of connections it was delivered to.
        """
        event = WSEvent(
            type=WSEventType.ANALYSIS_STEP,
            data={
                "step": step.model_dump(mode="json", by_alias=True),
                "pollId": poll_id,
            },
        )
        message = event.to_json()

        delivered = 0
        disconnected = []
        for websocket, subscriber in list(self.subscribers.items()):
            if not self.wants(subscriber, poll_id):
                continue
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.error(f"Error broadcasting: {e}")
                disconnected.append(websocket)

        # Clean up disconnected clients
        for ws in disconnected:
            self.subscribers.pop(ws, None)

        return delivered


# Global connection manager
manager = ConnectionManager(filter_subscriptions=settings.ws_filter_subscriptions)


def get_connection_manager() -> ConnectionManager:
    """Get the process-wide connection manager."""
    return manager


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for analysis progress."""
    await manager.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_personal(websocket, WSEvent(
                    type=WSEventType.ERROR,
                    data={"message": "Invalid JSON"},
                ))
                continue

            await handle_event(websocket, message)

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
        manager.disconnect(websocket)


async def handle_event(websocket: WebSocket, message: Any) -> None:
    """Handle an incoming WebSocket message."""
    event_type = message.get("type") if isinstance(message, dict) else None

    if event_type == WSEventType.SUBSCRIBE.value:
        poll_id = message.get("pollId")
        if not isinstance(poll_id, int) or isinstance(poll_id, bool) or poll_id < 1:
            await manager.send_personal(websocket, WSEvent(
                type=WSEventType.ERROR,
                data={"message": "subscribe requires a positive integer pollId"},
            ))
            return

        manager.subscribe(websocket, poll_id)
        await manager.send_personal(websocket, WSEvent(
            type=WSEventType.SUBSCRIBED,
            data={"pollId": poll_id},
        ))

    else:
        await manager.send_personal(websocket, WSEvent(
            type=WSEventType.ERROR,
            data={"message": f"Unknown event type: {event_type}"},
        ))
