"""
Connection Health Module - Debounced disconnect detection

The monitor declares the stream disconnected after it has been
anything other than open for a full grace period.
"""
import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from .events import StreamState


class HealthStatus(Enum):
    HEALTHY = "healthy"
    DISCONNECTED = "disconnected"


class TimerHandle(Protocol):
    def stop(self) -> None: ...


# (delay in seconds, callback) -> cancelable handle; Widget.set_timer fits
Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class ConnectionHealthMonitor:
    """
    Two-state machine fed by stream state changes

    - Any non-open state (re)starts a single-shot timer of grace_ms
    - The timer firing moves the monitor to DISCONNECTED
    - An open state cancels the timer and restores HEALTHY immediately
    """

    def __init__(
        self,
        schedule: Scheduler,
        grace_ms: int = 3000,
        on_change: Optional[Callable[[HealthStatus], None]] = None,
    ):
        """
        Args:
            schedule: Starts a single-shot timer and returns a handle with stop()
            grace_ms: How long the stream may stay down before it counts as disconnected
            on_change: Called whenever the status changes
        """
        self.schedule = schedule
        self.grace_ms = grace_ms
        self.on_change = on_change
        self.status = HealthStatus.HEALTHY
        self._timer: Optional[TimerHandle] = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_disconnected(self) -> bool:
        return self.status is HealthStatus.DISCONNECTED

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    def observe(self, state: StreamState) -> None:
        """Feed one stateChange event"""
        self._cancel_timer()

        if state is StreamState.OPEN:
            self._set_status(HealthStatus.HEALTHY)
            return

        self._timer = self.schedule(self.grace_ms / 1000, self._on_timeout)

    def close(self) -> None:
        """Cancel any pending timer; call on teardown"""
        self._cancel_timer()

    def _on_timeout(self) -> None:
        self._timer = None
        self.logger.warning(f"Stream not open for {self.grace_ms} ms, marking disconnected")
        self._set_status(HealthStatus.DISCONNECTED)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _set_status(self, status: HealthStatus) -> None:
        if status is self.status:
            return
        self.status = status
        if self.on_change:
            self.on_change(status)
