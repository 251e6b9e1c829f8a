"""
SSE Transport Module - Background streaming subscription

Handles:
- Background thread holding a streaming HTTP GET open
- Connectivity state reporting (connecting, open, closed, error)
- Reconnecting after the retry delay until stopped
- Non-blocking shutdown; the worker closes its session on exit
"""
import logging
from threading import Event, Lock, Thread
from typing import Callable, Dict, Optional

import requests

from .events import StreamState
from .sse import SSEDecoder, SSEFrame


class SSETransport:
    """Background worker keeping one event-stream subscription alive"""

    def __init__(
        self,
        url: str,
        on_frame: Callable[[SSEFrame], None],
        on_state: Callable[[StreamState], None],
        params: Optional[Dict[str, str]] = None,
        retry_ms: int = 3000,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transport

        Args:
            url: Channel URL to subscribe to
            on_frame: Called (on the worker thread) for every decoded frame
            on_state: Called (on the worker thread) for every state transition
            params: Query parameters sent with the subscription
            retry_ms: Delay before reconnecting; the server may override it
            connect_timeout: Seconds allowed to establish the connection
            read_timeout: Seconds of silence before the stream is considered dead
            session: requests session to use (one is created if omitted)
        """
        self.url = url
        self.on_frame = on_frame
        self.on_state = on_state
        self.params = params or {}
        self.retry_ms = retry_ms
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

        # Thread management
        self.stop_event = Event()
        self.worker_thread: Optional[Thread] = None
        self.is_running = False

        self._response_lock = Lock()
        self._response: Optional[requests.Response] = None
        self.state: Optional[StreamState] = None

    def start(self) -> None:
        """Start the background subscription"""
        if self.is_running:
            return

        # Fresh flag per run so a worker still winding down from an earlier stop() stays stopped
        self.stop_event = Event()
        self.worker_thread = Thread(target=self._worker_loop, args=(self.stop_event,), daemon=True)
        self.worker_thread.start()
        self.is_running = True
        self.logger.info(f"Transport started for {self.url}")

    def stop(self) -> None:
        """
        Signal the worker to exit without waiting for it

        Safe to call from the UI thread. The worker finishes on its own once
        any blocking network call returns, and closes the session itself.
        """
        if not self.is_running:
            return

        self.stop_event.set()

        # Closing the live response unblocks iter_lines()
        with self._response_lock:
            if self._response is not None:
                self._response.close()

        self.is_running = False
        self.logger.info(f"Transport stopped for {self.url}")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread to exit; returns True once it has"""
        if self.worker_thread is None:
            return True
        self.worker_thread.join(timeout)
        return not self.worker_thread.is_alive()

    def _set_state(self, state: StreamState, stop_event: Optional[Event] = None) -> None:
        stop_event = stop_event or self.stop_event
        if stop_event.is_set():
            return
        self.state = state
        self.on_state(state)

    def _worker_loop(self, stop_event: Event) -> None:
        """Main worker loop - runs in background thread"""
        try:
            while not stop_event.is_set():
                self._set_state(StreamState.CONNECTING, stop_event)

                try:
                    self._consume_stream(stop_event)
                    self._set_state(StreamState.CLOSED, stop_event)
                except requests.RequestException as e:
                    if stop_event.is_set():
                        break
                    self.logger.warning(f"Stream error for {self.url}: {e}")
                    self._set_state(StreamState.ERROR, stop_event)
                except Exception as e:
                    # Closing the response from stop() can surface as arbitrary errors
                    if stop_event.is_set():
                        break
                    self.logger.error(f"Unexpected stream failure for {self.url}: {e}", exc_info=True)
                    self._set_state(StreamState.ERROR, stop_event)
                finally:
                    with self._response_lock:
                        self._response = None

                # Wait before reconnecting; returns early when stopped
                stop_event.wait(self.retry_ms / 1000)
        finally:
            self.session.close()
            self.logger.debug(f"Transport worker for {self.url} exited")

    def _consume_stream(self, stop_event: Optional[Event] = None) -> None:
        """Open one streaming request and forward frames until it ends"""
        stop_event = stop_event or self.stop_event
        response = self.session.get(
            self.url,
            params=self.params,
            headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
            stream=True,
            timeout=self.timeout,
        )
        with self._response_lock:
            self._response = response
            if stop_event.is_set():
                # stop() ran while the request was still pending
                response.close()
                return

        with response:
            response.raise_for_status()
            self.logger.info(f"Subscribed to {self.url} (HTTP {response.status_code})")
            self._set_state(StreamState.OPEN, stop_event)

            # event-stream is always UTF-8; hand raw bytes to the decoder rather
            # than trusting requests' Latin-1 default for charset-less text/*
            decoder = SSEDecoder()
            for frame in decoder.iter_frames(response.iter_lines()):
                if stop_event.is_set():
                    return
                if decoder.retry is not None and decoder.retry != self.retry_ms:
                    self.logger.debug(f"Server requested retry delay of {decoder.retry} ms")
                    self.retry_ms = decoder.retry
                self.on_frame(frame)
