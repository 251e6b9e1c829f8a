"""
Landing View - Shown when no channel was given
"""
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label, Static

from logbin.session import MIN_CHANNEL_LENGTH, generate_channel_name


class LandingView(Vertical):
    """Introduction plus a way to open an existing or a fresh channel"""

    class ChannelRequested(Message):
        """Posted when the user picked a channel to open"""

        def __init__(self, channel: str):
            super().__init__()
            self.channel = channel

    def compose(self) -> ComposeResult:
        """Compose the landing layout"""
        yield Label("[bold]LogBin[/bold]", classes="panel-title")
        yield Static(
            "A live, shareable log stream. POST lines to a channel and watch them "
            "arrive here as they are sent. Anyone who knows the channel name can "
            "read and write it."
        )
        yield Button("Create a channel", id="create-channel-btn", variant="success")
        yield Label("Or open an existing one:")
        with Horizontal(classes="landing-controls"):
            yield Input(
                placeholder=f"Channel name (at least {MIN_CHANNEL_LENGTH} characters)",
                id="channel-input",
                classes="control-input",
            )
            yield Button("Open", id="open-channel-btn", variant="primary")

    @on(Button.Pressed, "#create-channel-btn")
    def handle_create(self) -> None:
        """Open a freshly generated channel"""
        self.post_message(self.ChannelRequested(generate_channel_name()))

    @on(Button.Pressed, "#open-channel-btn")
    @on(Input.Submitted, "#channel-input")
    def handle_open(self) -> None:
        """Open the channel typed into the input"""
        channel = self.query_one("#channel-input", Input).value.strip().strip("/")
        if len(channel) < MIN_CHANNEL_LENGTH:
            self.notify(
                f"Channel names need at least {MIN_CHANNEL_LENGTH} characters",
                severity="warning",
            )
            return
        self.post_message(self.ChannelRequested(channel))
