"""
View Model Module - What the log stream view displays

A pure function of (records, filter text, health, suspension, stats and
session). The widgets only apply the result.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from logbin.session import SessionContext
from logbin.stream.events import Stats, Suspension
from logbin.stream.health import HealthStatus

from .filter_engine import SEPARATOR_GAP_MS, FilterEngine, Span, separators
from .log_parser import LogRecord


@dataclass(frozen=True)
class RowView:
    """One record as it should currently be rendered"""
    record: LogRecord
    visible: bool
    separator: bool
    highlights: Tuple[Span, ...] = ()
    filtered: bool = False


@dataclass(frozen=True)
class HeaderView:
    channel: str
    share_url: str
    filter_text: str
    conn_count: Optional[int] = None
    client_count: Optional[int] = None
    clients: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EmptyStateView:
    """Call to action shown until the first record arrives"""
    ingest_url: str
    curl_command: str
    python_snippet: str


@dataclass(frozen=True)
class ViewModel:
    header: HeaderView
    rows: Tuple[RowView, ...]
    empty_state: Optional[EmptyStateView]
    show_disconnected: bool
    show_suspended: bool
    suspension_reason: Optional[str] = None
    visible_count: int = 0


def example_commands(ingest_url: str) -> EmptyStateView:
    """Ready-to-copy ingestion examples for a channel"""
    curl_command = f"curl -X POST {ingest_url} -d 'Hello from the terminal!'"
    python_snippet = (
        "import requests\n"
        f"requests.post({ingest_url!r}, json={{\"msg\": \"Hello from Python!\", \"level\": \"info\"}})"
    )
    return EmptyStateView(
        ingest_url=ingest_url,
        curl_command=curl_command,
        python_snippet=python_snippet,
    )


def build_view_model(
    records: Sequence[LogRecord],
    filter_text: Optional[str],
    health: HealthStatus,
    suspension: Optional[Suspension],
    stats: Optional[Stats],
    session: SessionContext,
    separator_gap_ms: int = SEPARATOR_GAP_MS,
) -> ViewModel:
    """
    Compose everything the log stream view shows

    Returns:
        ViewModel; rows cover every record (hidden ones included) in arrival order
    """
    disconnected = health is HealthStatus.DISCONNECTED
    engine = FilterEngine(filter_text)

    results = engine.apply(records)
    seps = separators(records, separator_gap_ms)
    rows = tuple(
        RowView(
            record=record,
            visible=result.visible,
            separator=sep,
            highlights=result.highlights,
            filtered=engine.is_active,
        )
        for record, result, sep in zip(records, results, seps)
    )

    # Counts are stale once the stream is down
    show_counts = stats is not None and not disconnected
    header = HeaderView(
        channel=session.channel or "",
        share_url=session.share_url,
        filter_text=filter_text or "",
        conn_count=stats.conn_count if show_counts else None,
        client_count=stats.client_count if show_counts else None,
        clients=tuple(stats.clients or ()) if show_counts else (),
    )

    empty_state = None
    if not records:
        empty_state = example_commands(session.channel_url or session.server)

    suspended = bool(suspension and suspension.suspended)
    return ViewModel(
        header=header,
        rows=rows,
        empty_state=empty_state,
        show_disconnected=disconnected,
        show_suspended=suspended,
        suspension_reason=suspension.reason if suspended else None,
        visible_count=sum(1 for row in rows if row.visible),
    )
