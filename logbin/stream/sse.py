"""
Server-Sent Events decoding

Turns the line stream of a text/event-stream response into frames.
Only the fields the log-bin server emits matter here, but the decoder
follows the usual EventSource rules so keep-alive comments, multi-line
data and retry hints are handled.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class SSEFrame:
    """A dispatched event"""
    event: str
    data: str
    id: Optional[str] = None
    retry: Optional[int] = None


class SSEDecoder:
    """Incremental decoder; feed it lines as they arrive"""

    def __init__(self):
        self._reset()
        self.last_event_id: Optional[str] = None
        self.retry: Optional[int] = None

    def _reset(self) -> None:
        self._event = ""
        self._data: list = []
        self._has_data = False

    def feed(self, line: str) -> Optional[SSEFrame]:
        """
        Process one line (without its terminator)

        Returns:
            The completed frame when the line is the blank dispatch line
            and data was collected, otherwise None
        """
        if line == "":
            return self._dispatch()

        if line.startswith(":"):
            # Comment / keep-alive
            return None

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
            self._has_data = True
        elif name == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif name == "retry":
            if value.isdigit():
                self.retry = int(value)
        return None

    def _dispatch(self) -> Optional[SSEFrame]:
        if not self._has_data:
            self._reset()
            return None

        frame = SSEFrame(
            event=self._event or "message",
            data="\n".join(self._data),
            id=self.last_event_id,
            retry=self.retry,
        )
        self._reset()
        return frame

    def iter_frames(self, lines: Iterable[str]) -> Iterator[SSEFrame]:
        """Decode a whole line iterable, yielding frames in order"""
        for line in lines:
            if isinstance(line, bytes):
                line = line.decode("utf-8", errors="replace")
            frame = self.feed(line.rstrip("\r"))
            if frame is not None:
                yield frame
