"""
Stream Package - Live channel subscription

Package Structure:
- events: Typed stream events and wire payload models
- sse: Server-Sent Events decoding
- transport: Background streaming HTTP worker (SSETransport)
- connector: Channel subscription and event decoding (StreamConnector)
- health: Debounced disconnect detection (ConnectionHealthMonitor)
"""

from .events import (
    StreamState,
    Stats,
    Suspension,
    LogEvent,
    StatsEvent,
    SuspensionEvent,
    StateChangeEvent,
    StreamEvent,
)
from .sse import SSEDecoder, SSEFrame
from .transport import SSETransport
from .connector import StreamConnector, decode_frame
from .health import ConnectionHealthMonitor, HealthStatus

__all__ = [
    'StreamState',
    'Stats',
    'Suspension',
    'LogEvent',
    'StatsEvent',
    'SuspensionEvent',
    'StateChangeEvent',
    'StreamEvent',
    'SSEDecoder',
    'SSEFrame',
    'SSETransport',
    'StreamConnector',
    'decode_frame',
    'ConnectionHealthMonitor',
    'HealthStatus',
]
