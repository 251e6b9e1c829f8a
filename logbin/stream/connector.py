"""
Stream Connector Module - Live subscription to a channel

Handles:
- Owning the transport for one channel subscription
- Decoding wire frames into typed stream events
- Delivering events to subscribers in arrival order
"""
import json
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError

from logbin.config import ClientConfig
from logbin.session import SessionContext

from .events import (
    LogEvent,
    StateChangeEvent,
    Stats,
    StatsEvent,
    StreamEvent,
    StreamState,
    Suspension,
    SuspensionEvent,
)
from .sse import SSEFrame
from .transport import SSETransport

Listener = Callable[[StreamEvent], None]

# Frames without an event name arrive as "message"; the server only sends
# unnamed frames for log lines
LOG_EVENT_NAMES = {"log", "message"}


def decode_frame(frame: SSEFrame, logger: Optional[logging.Logger] = None) -> Optional[StreamEvent]:
    """
    Convert one SSE frame into a typed event

    Log frames always produce a LogEvent, falling back to the frame data as
    the raw record when the payload is not the expected JSON envelope.
    Malformed stats or suspension payloads are dropped.

    Returns:
        The decoded event, or None for unknown or unusable frames
    """
    logger = logger or logging.getLogger(__name__)

    if frame.event in LOG_EVENT_NAMES:
        return _decode_log(frame.data)

    if frame.event == "stats":
        try:
            return StatsEvent(Stats.model_validate_json(frame.data))
        except ValidationError as e:
            logger.warning(f"Discarding malformed stats payload: {e}")
            return None

    if frame.event == "suspension":
        try:
            return SuspensionEvent(Suspension.model_validate_json(frame.data))
        except ValidationError as e:
            logger.warning(f"Discarding malformed suspension payload: {e}")
            return None

    logger.debug(f"Ignoring unknown event type {frame.event!r}")
    return None


def _decode_log(data: str) -> LogEvent:
    try:
        payload = json.loads(data)
    except ValueError:
        return LogEvent(raw=data)

    if not isinstance(payload, dict) or not isinstance(payload.get("raw"), str):
        return LogEvent(raw=data)

    arrived_at = payload.get("time")
    if isinstance(arrived_at, bool) or not isinstance(arrived_at, (int, float)):
        arrived_at = None
    return LogEvent(
        raw=payload["raw"],
        arrived_at=int(arrived_at) if arrived_at is not None else None,
    )


class StreamConnector:
    """
    Opens exactly one live subscription for a session and emits typed events

    Events are delivered on the transport's worker thread, one at a time and
    in arrival order. Consumers that need them on another thread (such as the
    UI thread) marshal them there inside their listener.
    """

    def __init__(
        self,
        session: SessionContext,
        config: ClientConfig,
        transport_factory: Callable[..., SSETransport] = SSETransport,
    ):
        """
        Initialize the connector

        Args:
            session: Session whose channel and subscription settings are used
            config: Client configuration (timeouts and retry delay)
            transport_factory: Builds the transport; swapped out in tests
        """
        if not session.channel_url:
            raise ValueError("Cannot connect without a channel")

        self.session = session
        self.config = config
        self.transport_factory = transport_factory
        self.transport: Optional[SSETransport] = None
        self.listeners: List[Listener] = []
        self.logger = logging.getLogger(__name__)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for every event

        Returns:
            Function that removes the listener again
        """
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def connect(self) -> None:
        """Open the subscription (no-op if already connected)"""
        if self.transport is not None:
            return

        self.logger.info(
            f"Connecting to channel {self.session.channel} "
            f"with params {self.session.stream_params}"
        )
        self.transport = self.transport_factory(
            url=self.session.channel_url,
            on_frame=self._handle_frame,
            on_state=self._handle_state,
            params=self.session.stream_params,
            retry_ms=self.config.retry_ms,
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
        )
        self.transport.start()

    def close(self) -> None:
        """Tear down the subscription and drop all listeners"""
        if self.transport is not None:
            self.transport.stop()
            self.transport = None
        self.listeners.clear()

    def _handle_frame(self, frame: SSEFrame) -> None:
        event = decode_frame(frame, self.logger)
        if event is not None:
            self._emit(event)

    def _handle_state(self, state: StreamState) -> None:
        self.logger.info(f"Stream state for {self.session.channel}: {state.value}")
        self._emit(StateChangeEvent(state))

    def _emit(self, event: StreamEvent) -> None:
        for listener in list(self.listeners):
            try:
                listener(event)
            except Exception as e:
                self.logger.error(f"Stream listener failed on {event!r}: {e}", exc_info=True)
