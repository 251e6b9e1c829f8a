"""
Log Stream View Module - Main UI orchestration

Handles:
- View composition and layout
- Owning the channel subscription for as long as the view is mounted
- Turning stream events into records, stats and suspension state
- Debounced disconnect detection
- Filter edits and share-link updates
- Copy-to-clipboard actions
"""
import logging
from typing import Callable, List, Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Button, Input

from logbin.config import ClientConfig
from logbin.session import SessionContext
from logbin.stream import (
    ConnectionHealthMonitor,
    HealthStatus,
    LogEvent,
    StateChangeEvent,
    Stats,
    StatsEvent,
    StreamConnector,
    StreamEvent,
    Suspension,
    SuspensionEvent,
)

from .components import (
    DisconnectedOverlay,
    EmptyState,
    StreamHeader,
    SuspendedOverlay,
    WarningBanner,
)
from .log_list import LogStreamList
from .log_parser import LogRecord, LogRecordParser
from .view_model import ViewModel, build_view_model

COPY_FEEDBACK_SECONDS = 2.0


class LogStreamView(Vertical):
    """
    Live view of one channel

    Features:
    - Append-only record list with stick-to-bottom scrolling
    - OR-token search with highlighting
    - Separators between bursts of records
    - Live connection/client counts
    - Disconnected and suspended overlays
    """

    class SessionChanged(Message):
        """Posted when the filter edit produced a new session context"""

        def __init__(self, session: SessionContext):
            super().__init__()
            self.session = session

    class StreamEventReceived(Message):
        """Carries one stream event from the transport thread to the UI thread"""

        def __init__(self, event: StreamEvent):
            super().__init__()
            self.event = event

    def __init__(
        self,
        session: SessionContext,
        config: ClientConfig,
        connector_factory: Callable[..., StreamConnector] = StreamConnector,
        **kwargs,
    ):
        """
        Initialize the view

        Args:
            session: Session to display; must name a channel
            config: Client configuration
            connector_factory: Builds the StreamConnector; swapped out in tests
        """
        super().__init__(**kwargs)
        self.session = session
        self.config = config
        self.connector_factory = connector_factory
        self.logger = logging.getLogger(__name__)

        # Components
        self.parser = LogRecordParser(session.subscription)
        self.connector: Optional[StreamConnector] = None
        self.health: Optional[ConnectionHealthMonitor] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

        # State
        self.records: List[LogRecord] = []
        self.stats: Optional[Stats] = None
        self.suspension: Optional[Suspension] = None
        self.filter_text = session.filter_text
        self.view_model: Optional[ViewModel] = None
        self._copy_reset_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        """Compose the log stream layout"""
        yield StreamHeader(self.session.channel or "", self.filter_text, id="stream-header")
        yield WarningBanner(id="warning-banner")
        yield EmptyState(id="empty-state")
        yield LogStreamList(id="log-list")
        yield DisconnectedOverlay(id="disconnected-overlay", classes="overlay")
        yield SuspendedOverlay(id="suspended-overlay", classes="overlay")

    def on_mount(self) -> None:
        """Start the subscription once the widgets exist"""
        self.health = ConnectionHealthMonitor(
            schedule=lambda delay, callback: self.set_timer(delay, callback),
            grace_ms=self.config.disconnect_grace_ms,
            on_change=self._on_health_change,
        )
        self.refresh_view()

        try:
            self.connector = self.connector_factory(self.session, self.config)
            self._unsubscribe = self.connector.subscribe(self._on_stream_event)
            self.connector.connect()
        except Exception as e:
            self.logger.error(f"Could not open channel {self.session.channel}: {e}", exc_info=True)
            self.notify(f"Could not open channel: {e}", severity="error")

    def _on_stream_event(self, event: StreamEvent) -> None:
        # Called on the transport thread
        self.post_message(self.StreamEventReceived(event))

    @on(StreamEventReceived)
    def _handle_stream_event_message(self, message: StreamEventReceived) -> None:
        message.stop()
        self.handle_stream_event(message.event)

    def handle_stream_event(self, event: StreamEvent) -> None:
        """Apply one stream event to the view state (UI thread only)"""
        if isinstance(event, LogEvent):
            record = self.parser.parse_line(event.raw, len(self.records), event.arrived_at)
            self.records.append(record)
        elif isinstance(event, StatsEvent):
            self.stats = event.stats
        elif isinstance(event, SuspensionEvent):
            self.suspension = event.suspension
            if event.suspension.suspended:
                self.logger.warning(f"Channel {self.session.channel} suspended: {event.suspension.reason}")
        elif isinstance(event, StateChangeEvent):
            if self.health is not None:
                self.health.observe(event.state)
            return
        self.refresh_view()

    def _on_health_change(self, status: HealthStatus) -> None:
        self.logger.info(f"Channel {self.session.channel} is {status.value}")
        self.refresh_view()

    def refresh_view(self) -> None:
        """Rebuild the view model and push it into the widgets"""
        health = self.health.status if self.health else HealthStatus.HEALTHY
        view_model = build_view_model(
            self.records,
            self.filter_text,
            health,
            self.suspension,
            self.stats,
            self.session,
            self.config.separator_gap_ms,
        )
        self.view_model = view_model

        self.query_one("#stream-header", StreamHeader).apply(view_model.header)

        empty_state = self.query_one("#empty-state", EmptyState)
        log_list = self.query_one("#log-list", LogStreamList)
        if view_model.empty_state is not None:
            empty_state.apply(view_model.empty_state)
            empty_state.display = True
            log_list.display = False
        else:
            empty_state.display = False
            log_list.display = True
            log_list.sync_rows(view_model.rows)
            log_list.border_subtitle = f"{view_model.visible_count}/{len(view_model.rows)} shown"

        self.query_one("#disconnected-overlay", DisconnectedOverlay).display = view_model.show_disconnected

        suspended = self.query_one("#suspended-overlay", SuspendedOverlay)
        suspended.set_reason(view_model.suspension_reason)
        suspended.display = view_model.show_suspended

    # Filter

    @on(Input.Changed, "#filter-input")
    def handle_filter_changed(self, event: Input.Changed) -> None:
        """Re-filter on every keystroke and mirror the text into the share link"""
        if event.value == self.filter_text:
            return
        self.filter_text = event.value
        self.session = self.session.with_filter(event.value)
        self.post_message(self.SessionChanged(self.session))
        self.refresh_view()

    def focus_filter(self) -> None:
        self.query_one("#filter-input", Input).focus()

    def clear_filter(self) -> None:
        self.query_one("#filter-input", Input).value = ""

    # Scrolling

    def jump_to_top(self) -> None:
        self.query_one("#log-list", LogStreamList).jump_to_top()

    def jump_to_bottom(self) -> None:
        self.query_one("#log-list", LogStreamList).jump_to_bottom()

    # Clipboard

    @on(Button.Pressed, "#copy-example-btn")
    def handle_copy_example(self) -> None:
        """Copy the example curl command and flash the button"""
        if self.view_model is None or self.view_model.empty_state is None:
            return
        self._copy_to_clipboard(self.view_model.empty_state.curl_command)

        empty_state = self.query_one("#empty-state", EmptyState)
        empty_state.copied = True
        if self._copy_reset_timer:
            self._copy_reset_timer.stop()
        self._copy_reset_timer = self.set_timer(COPY_FEEDBACK_SECONDS, self._reset_copied)

    def _reset_copied(self) -> None:
        self._copy_reset_timer = None
        self.query_one("#empty-state", EmptyState).copied = False

    def copy_share_link(self) -> None:
        self._copy_to_clipboard(self.session.share_url)
        self.notify("Link copied", severity="information")

    def _copy_to_clipboard(self, text: str) -> None:
        try:
            self.app.copy_to_clipboard(text)
        except Exception as e:
            # Clipboard support depends on the terminal
            self.logger.debug(f"Clipboard copy failed: {e}")

    def on_unmount(self) -> None:
        """Release the subscription and every timer"""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        if self.connector:
            self.connector.close()
            self.connector = None

        if self.health:
            self.health.close()

        if self._copy_reset_timer:
            self._copy_reset_timer.stop()
            self._copy_reset_timer = None
