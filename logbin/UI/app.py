"""
LogBin Main Application - Live log channel viewer using Textual
"""
from typing import Callable, Optional

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Footer, Header

from logbin.config import ClientConfig
from logbin.session import SessionContext
from logbin.stream import StreamConnector
from logbin.UI.views import LandingView, LogStreamView


class LogBinApp(App):
    """LogBin - Terminal viewer for live log channels"""

    TITLE = "LogBin"
    CSS_PATH = "logbin.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("slash", "focus_filter", "Filter"),
        ("escape", "clear_filter", "Clear Filter"),
        ("home", "jump_top", "Top"),
        ("end", "jump_bottom", "Bottom"),
        ("y", "copy_link", "Copy Link"),
        ("ctrl+r", "reload", "Reload"),
    ]

    def __init__(
        self,
        session: SessionContext,
        config: Optional[ClientConfig] = None,
        connector_factory: Callable[..., StreamConnector] = StreamConnector,
    ):
        super().__init__()
        self.session = session
        self.config = config or ClientConfig(server=session.server)
        self.connector_factory = connector_factory

    def compose(self) -> ComposeResult:
        """Compose the main UI layout"""
        yield Header(show_clock=True)

        with Container(id="main-container"):
            yield self._build_view()

        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self.session.share_url

    def _build_view(self) -> Widget:
        if self.session.channel:
            return LogStreamView(
                self.session,
                self.config,
                connector_factory=self.connector_factory,
                id="log-stream-view",
            )
        return LandingView(id="landing-view")

    async def _replace_view(self) -> None:
        """Tear down the current view and mount a fresh one for self.session"""
        container = self.query_one("#main-container", Container)
        await container.remove_children()
        await container.mount(self._build_view())
        self.sub_title = self.session.share_url

    def _stream_view(self) -> Optional[LogStreamView]:
        try:
            return self.query_one("#log-stream-view", LogStreamView)
        except NoMatches:
            # Landing view is showing
            return None

    @on(LogStreamView.SessionChanged)
    def handle_session_changed(self, message: LogStreamView.SessionChanged) -> None:
        """Mirror the filter into the share link shown in the header"""
        self.session = message.session
        self.sub_title = self.session.share_url

    @on(LandingView.ChannelRequested)
    async def handle_channel_requested(self, message: LandingView.ChannelRequested) -> None:
        """Switch from the landing view to the requested channel"""
        self.session = self.session.with_channel(message.channel)
        await self._replace_view()

    async def action_reload(self) -> None:
        """Drop all records and reopen the subscription"""
        if not self.session.channel:
            return
        await self._replace_view()
        self.notify("Reconnecting...", severity="information")

    def action_focus_filter(self) -> None:
        view = self._stream_view()
        if view:
            view.focus_filter()

    def action_clear_filter(self) -> None:
        view = self._stream_view()
        if view:
            view.clear_filter()

    def action_jump_top(self) -> None:
        view = self._stream_view()
        if view:
            view.jump_to_top()

    def action_jump_bottom(self) -> None:
        view = self._stream_view()
        if view:
            view.jump_to_bottom()

    def action_copy_link(self) -> None:
        view = self._stream_view()
        if view:
            view.copy_share_link()


def run_app(session: SessionContext, config: Optional[ClientConfig] = None) -> None:
    """Entry point to run the LogBin viewer"""
    app = LogBinApp(session, config)
    app.run()
