"""Typed session events and an in-process async event bus.

The session controller emits three kinds of event:

- :class:`SessionStarted` when a cleaning session begins,
- :class:`SessionTick` once per elapsed second with the remaining count,
- :class:`SessionEnded` when the session stops for any reason.

Listeners registered directly on the controller receive these objects
synchronously. Presentation layers that run as their own asyncio task (the
headless terminal presenter, for instance) consume them from an
:class:`EventBus` instead; :func:`bus_forwarder` bridges the two.

Bus usage:

    bus = EventBus(default_maxsize=64)
    sub = bus.subscribe(SESSION_TOPIC)
    controller.subscribe(bus_forwarder(bus))

    async for env in sub:
        event = decode_event(env.payload)

Notes
-----
- Each subscriber has its own bounded asyncio.Queue.
- Backpressure policy is drop-oldest when a subscriber queue is full.
- close() ends every subscription's iteration via a sentinel.
- Payloads are msgpack-encoded dicts (see encode_event/decode_event).
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from time import monotonic
from typing import Any, AsyncIterator, Callable, Dict, List, Union

import msgpack

__all__ = [
    "EndReason",
    "SessionStarted",
    "SessionTick",
    "SessionEnded",
    "SessionEvent",
    "SESSION_TOPIC",
    "EventBus",
    "Subscription",
    "Envelope",
    "BusMetrics",
    "encode_event",
    "decode_event",
    "bus_forwarder",
    "pack",
    "unpack",
]

SESSION_TOPIC = "session"


class EndReason(str, enum.Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    BACKGROUNDED = "backgrounded"


@dataclass(frozen=True, slots=True)
class SessionStarted:
    duration_s: int


@dataclass(frozen=True, slots=True)
class SessionTick:
    remaining: int

    @property
    def text(self) -> str:
        """Remaining seconds as shown on the countdown label."""
        return str(self.remaining)


@dataclass(frozen=True, slots=True)
class SessionEnded:
    reason: EndReason


SessionEvent = Union[SessionStarted, SessionTick, SessionEnded]


def encode_event(event: SessionEvent) -> bytes:
    """Serialize a session event to a msgpack payload."""
    if isinstance(event, SessionStarted):
        obj: Dict[str, Any] = {"type": "started", "duration_s": event.duration_s}
    elif isinstance(event, SessionTick):
        obj = {"type": "tick", "remaining": event.remaining}
    elif isinstance(event, SessionEnded):
        obj = {"type": "ended", "reason": event.reason.value}
    else:
        raise TypeError(f"not a session event: {event!r}")
    return pack(obj)


def decode_event(payload: bytes) -> SessionEvent:
    """Inverse of :func:`encode_event`."""
    obj = unpack(payload)
    kind = obj.get("type") if isinstance(obj, dict) else None
    if kind == "started":
        return SessionStarted(duration_s=int(obj["duration_s"]))
    if kind == "tick":
        return SessionTick(remaining=int(obj["remaining"]))
    if kind == "ended":
        return SessionEnded(reason=EndReason(obj["reason"]))
    raise ValueError(f"unknown session event payload: {obj!r}")


# Bus ----------------------------------------------------------------------


@dataclass(slots=True)
class Envelope:
    topic: str
    ts: float
    payload: bytes


@dataclass(slots=True)
class TopicStats:
    subscribers: int
    drops: int
    publishes: int
    deliveries: int


@dataclass(slots=True)
class BusMetrics:
    topics: Dict[str, TopicStats]


_Sentinel = object()


class _TopicState:
    __slots__ = ("maxsize", "subscribers", "drops", "publishes", "deliveries")

    def __init__(self, maxsize: int) -> None:
        self.maxsize: int = max(1, int(maxsize))
        self.subscribers: List[asyncio.Queue[Envelope | object]] = []
        self.drops: int = 0
        self.publishes: int = 0
        self.deliveries: int = 0


class EventBus:
    """Async event bus with per-subscriber bounded queues.

    All methods must be called from the event loop thread. Publishing never
    blocks: a full subscriber queue loses its oldest envelope.
    """

    def __init__(self, *, default_maxsize: int = 256) -> None:
        self._default_maxsize = max(1, int(default_maxsize))
        self._topics: Dict[str, _TopicState] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _state(self, topic: str) -> _TopicState:
        state = self._topics.get(topic)
        if state is None:
            state = _TopicState(self._default_maxsize)
            self._topics[topic] = state
        return state

    def subscribe(self, topic: str) -> "Subscription":
        """Create a subscription; each subscriber gets its own queue."""
        if self._closed:
            raise RuntimeError("EventBus is closed")
        state = self._state(topic)
        queue: asyncio.Queue[Envelope | object] = asyncio.Queue(maxsize=state.maxsize)
        state.subscribers.append(queue)
        return Subscription(self, topic, queue)

    def publish_nowait(self, topic: str, payload: bytes) -> None:
        """Deliver ``payload`` to every subscriber of ``topic`` immediately."""
        if self._closed:
            raise RuntimeError("EventBus is closed")
        env = Envelope(topic=topic, ts=monotonic(), payload=payload)
        state = self._state(topic)
        state.publishes += 1
        for q in list(state.subscribers):
            if q.full():
                q.get_nowait()
                state.drops += 1
            q.put_nowait(env)
            state.deliveries += 1

    async def publish(self, topic: str, payload: bytes) -> None:
        """Publish and yield once so consumers get a chance to run."""
        self.publish_nowait(topic, payload)
        await asyncio.sleep(0)

    async def close(self) -> None:
        """Close the bus and end all subscriptions after queued items."""
        if self._closed:
            return
        self._closed = True
        for state in self._topics.values():
            for q in list(state.subscribers):
                _force_put(q, _Sentinel)

    def metrics(self) -> BusMetrics:
        return BusMetrics(
            topics={
                name: TopicStats(
                    subscribers=len(state.subscribers),
                    drops=state.drops,
                    publishes=state.publishes,
                    deliveries=state.deliveries,
                )
                for name, state in self._topics.items()
            }
        )

    def _remove_subscription(
        self, topic: str, queue: asyncio.Queue[Envelope | object]
    ) -> None:
        state = self._topics.get(topic)
        if state is not None and queue in state.subscribers:
            state.subscribers.remove(queue)


def _force_put(q: asyncio.Queue[Envelope | object], item: object) -> None:
    # Drop the oldest entry to make room; the sentinel must always land.
    if q.full():
        q.get_nowait()
    q.put_nowait(item)


class Subscription:
    """Async iterator over the envelopes published to one topic."""

    def __init__(
        self,
        bus: EventBus,
        topic: str,
        queue: asyncio.Queue[Envelope | object],
    ) -> None:
        self._bus = bus
        self._topic = topic
        self._queue = queue
        self._closed = False

    @property
    def topic(self) -> str:
        return self._topic

    def __aiter__(self) -> AsyncIterator[Envelope]:
        return self

    async def __anext__(self) -> Envelope:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _Sentinel:
            self._closed = True
            raise StopAsyncIteration
        assert isinstance(item, Envelope)
        return item

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove_subscription(self._topic, self._queue)
        _force_put(self._queue, _Sentinel)


def bus_forwarder(
    bus: EventBus, topic: str = SESSION_TOPIC
) -> Callable[[SessionEvent], None]:
    """Return a session listener that republishes events on ``bus``.

    Events arriving after the bus is closed are dropped.
    """

    def _forward(event: SessionEvent) -> None:
        if bus.closed:
            return
        bus.publish_nowait(topic, encode_event(event))

    return _forward


# Serialization helpers -----------------------------------------------------


def pack(obj: Any) -> bytes:
    """Serialize an object to bytes using msgpack."""
    return msgpack.packb(obj, use_bin_type=True)


def unpack(b: bytes) -> Any:
    """Deserialize bytes into an object using msgpack."""
    return msgpack.unpackb(b, raw=False, strict_map_key=False)
