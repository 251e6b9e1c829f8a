"""
Log Stream Package - Live view of a single channel

This package provides the channel viewer with:
- Normalization of raw lines into structured records
- OR-token search with highlighting and burst separators
- Stick-to-bottom scrolling
- Disconnected and suspended overlays
- Copyable ingestion examples while the channel is empty

Package Structure:
- view: Main view orchestration (LogStreamView)
- components: Header, empty state and overlays
- log_list: Scrollable record list (LogStreamList)
- log_parser: Record normalization (LogRecordParser, LogRecord)
- filter_engine: Visibility, highlights and separators (FilterEngine)
- scroll: Stick-to-bottom logic (ScrollController)
- view_model: Pure view composition (build_view_model)
"""

from .view import LogStreamView

from .components import (
    StreamHeader,
    WarningBanner,
    EmptyState,
    DisconnectedOverlay,
    SuspendedOverlay,
)
from .log_list import LogStreamList, LogRow
from .log_parser import LogRecordParser, LogRecord, FieldValue
from .filter_engine import FilterEngine, FilterResult, separators
from .scroll import ScrollController
from .view_model import ViewModel, build_view_model

__all__ = [
    # Main view
    'LogStreamView',

    # UI components
    'StreamHeader',
    'WarningBanner',
    'EmptyState',
    'DisconnectedOverlay',
    'SuspendedOverlay',
    'LogStreamList',
    'LogRow',

    # Core components
    'LogRecordParser',
    'FilterEngine',
    'ScrollController',
    'build_view_model',
    'separators',

    # Data models
    'LogRecord',
    'FieldValue',
    'FilterResult',
    'ViewModel',
]
