"""
Session Context Module - Channel identity and subscription settings

Handles:
- Parsing a channel URL (or bare channel name) into an immutable context
- Subscription configuration (message, meta and time keys)
- Rebuilding the shareable URL when the filter text changes
- Generating fresh random channel names
"""
import re
import secrets
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple
from urllib.parse import quote, unquote, urlencode, urlsplit, parse_qs

# Server rejects bin ids shorter than this
MIN_CHANNEL_LENGTH = 10

_KEY_SEPARATORS = re.compile(r"[,|]")

_ADJECTIVES = [
    "amber", "brisk", "calm", "dusty", "eager", "fuzzy", "gentle", "hollow",
    "icy", "jolly", "keen", "lucky", "mellow", "nimble", "olive", "proud",
    "quiet", "rapid", "silent", "tidy", "urban", "vivid", "witty", "young",
]
_NOUNS = [
    "badger", "canyon", "delta", "ember", "falcon", "glacier", "harbor",
    "island", "jungle", "kettle", "lantern", "meadow", "nebula", "orchard",
    "pebble", "quartz", "river", "summit", "thistle", "valley", "willow",
]


def parse_key_list(text: Optional[str]) -> Tuple[str, ...]:
    """Split a comma- or pipe-delimited list of field names, dropping blanks"""
    if not text:
        return ()
    return tuple(part.strip() for part in _KEY_SEPARATORS.split(text) if part.strip())


def generate_channel_name() -> str:
    """Generate an unguessable, readable channel name like 'quiet-harbor-4821'"""
    # Shortest combination ("icy-delta-1000") is still above MIN_CHANNEL_LENGTH
    return "-".join([
        secrets.choice(_ADJECTIVES),
        secrets.choice(_NOUNS),
        str(secrets.randbelow(9000) + 1000),
    ])


@dataclass(frozen=True)
class SubscriptionConfig:
    """Field selection fixed for the lifetime of one subscription"""
    msg_keys: Tuple[str, ...] = ()
    meta_keys: Tuple[str, ...] = ()
    time_keys: Tuple[str, ...] = ()

    def as_params(self) -> Dict[str, str]:
        """Query parameters describing this configuration (only the configured ones)"""
        params = {}
        if self.msg_keys:
            params["msg"] = ",".join(self.msg_keys)
        if self.meta_keys:
            params["meta"] = ",".join(self.meta_keys)
        if self.time_keys:
            params["time"] = ",".join(self.time_keys)
        return params


@dataclass(frozen=True)
class SessionContext:
    """
    Everything the viewer would otherwise read from the page location

    Instances are immutable; use with_filter() and with_channel() to derive
    updated contexts.
    """
    server: str
    channel: Optional[str] = None
    filter_text: str = ""
    subscription: SubscriptionConfig = field(default_factory=SubscriptionConfig)

    @classmethod
    def from_url(cls, url: str) -> "SessionContext":
        """
        Build a context from a full channel URL

        Args:
            url: e.g. "https://logbin.example/quiet-harbor-4821?filter=error&msg=message"

        Raises:
            ValueError: If the URL has no scheme or host
        """
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Not an absolute URL: {url!r}")

        segments = [s for s in parts.path.split("/") if s]
        channel = unquote(segments[0]) if segments else None
        query = parse_qs(parts.query)

        def first(name: str) -> Optional[str]:
            values = query.get(name)
            return values[0] if values else None

        return cls(
            server=f"{parts.scheme}://{parts.netloc}",
            channel=channel,
            filter_text=first("filter") or "",
            subscription=SubscriptionConfig(
                msg_keys=parse_key_list(first("msg")),
                meta_keys=parse_key_list(first("meta")),
                time_keys=parse_key_list(first("time")),
            ),
        )

    @classmethod
    def from_target(cls, target: Optional[str], default_server: str) -> "SessionContext":
        """Accept either a full URL or a bare channel name (resolved against default_server)"""
        if not target:
            return cls(server=default_server.rstrip("/"))
        if "://" in target:
            return cls.from_url(target)
        return cls(server=default_server.rstrip("/"), channel=target.strip("/"))

    @property
    def channel_url(self) -> Optional[str]:
        """Endpoint for both subscribing and ingesting"""
        if not self.channel:
            return None
        return f"{self.server}/{quote(self.channel, safe='')}"

    @property
    def stream_params(self) -> Dict[str, str]:
        return self.subscription.as_params()

    @property
    def share_url(self) -> str:
        """URL that reopens this session, including the active filter"""
        base = self.channel_url or self.server
        params = self.stream_params
        if self.filter_text:
            params["filter"] = self.filter_text
        if not params:
            return base
        return f"{base}?{urlencode(params)}"

    def with_filter(self, filter_text: Optional[str]) -> "SessionContext":
        return replace(self, filter_text=filter_text or "")

    def with_channel(self, channel: str) -> "SessionContext":
        return replace(self, channel=channel)
