"""
Log Stream Components Module - Panels around the record list

Handles:
- Header strip (channel name, live counts, filter box)
- Empty state with copyable ingestion examples
- Disconnected and suspended overlays
"""
from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Button, Input, Label, Static

from .view_model import EmptyStateView, HeaderView


class StreamHeader(Horizontal):
    """Channel name, connection/client counts and the filter input"""

    def __init__(self, channel: str, filter_text: str = "", **kwargs):
        super().__init__(**kwargs)
        self.channel = channel
        self.initial_filter = filter_text

    def compose(self) -> ComposeResult:
        yield Label(Text(self.channel, style="bold"), id="channel-name")
        yield Static("", id="conn-count")
        yield Input(
            value=self.initial_filter,
            placeholder="Type to filter",
            id="filter-input",
        )

    def apply(self, header: HeaderView) -> None:
        """Show counts only while they are known and current"""
        counts = self.query_one("#conn-count", Static)
        if header.conn_count is not None:
            counts.update(f"{header.conn_count} conn / {header.client_count} clients")
            counts.tooltip = "\n".join(header.clients) or None
            counts.display = True
        else:
            counts.update("")
            counts.display = False


class WarningBanner(Static):
    """Standing reminder that channels are public"""

    def __init__(self, **kwargs):
        super().__init__(
            "[bold]NOT FOR PRODUCTION USE[/bold] - do not send confidential or sensitive "
            "data. Logs are visible to anyone who knows the channel name.",
            **kwargs,
        )


class EmptyState(Vertical):
    """Shown until the first record arrives"""

    copied: reactive[bool] = reactive(False)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.view: Optional[EmptyStateView] = None

    def compose(self) -> ComposeResult:
        yield Label("[bold]Waiting for logs...[/bold]", classes="panel-title")
        yield Static("Send logs to this channel by POSTing to:")
        yield Static("", id="ingest-url", markup=False)
        with Horizontal(classes="example-header"):
            yield Label("Try it:")
            yield Button("Copy", id="copy-example-btn", variant="primary")
        yield Static("", id="curl-command", markup=False)
        yield Label("Or from Python:")
        yield Static("", id="python-snippet", markup=False)

    def apply(self, view: EmptyStateView) -> None:
        if view == self.view:
            return
        self.view = view
        self.query_one("#ingest-url", Static).update(view.ingest_url)
        self.query_one("#curl-command", Static).update(view.curl_command)
        self.query_one("#python-snippet", Static).update(view.python_snippet)

    def watch_copied(self, value: bool) -> None:
        try:
            button = self.query_one("#copy-example-btn", Button)
        except Exception:
            return
        button.label = "✓ Copied" if value else "Copy"


class DisconnectedOverlay(Vertical):
    """Persistent notice once the stream has been down past the grace period"""

    def compose(self) -> ComposeResult:
        yield Label("[bold]Stream disconnected[/bold]", classes="heading")
        yield Static(
            "An error occurred connecting to the stream. This may happen if the "
            "channel has exceeded its maximum number of concurrent subscribers."
        )
        yield Static("Press Ctrl+R to reload and retry.")


class SuspendedOverlay(Vertical):
    """Blocking notice while the server reports the channel as throttled"""

    def compose(self) -> ComposeResult:
        yield Label("[bold]Channel Suspended[/bold]", classes="heading")
        yield Static("This channel has been suspended due to high traffic volumes.")
        yield Static(
            "LogBin is intended for development and debugging, and is not designed "
            "to handle high volumes of traffic."
        )
        yield Static("", id="suspension-reason", markup=False)

    def set_reason(self, reason: Optional[str]) -> None:
        reason_widget = self.query_one("#suspension-reason", Static)
        reason_widget.update(f"Reason: {reason}" if reason else "")
        reason_widget.display = bool(reason)
