"""
Stream Events Module - Typed events emitted by the StreamConnector

Handles:
- Transport connectivity states
- Wire payload models for stats and suspension notices
- The tagged union of events consumers subscribe to
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StreamState(Enum):
    """Connectivity of the underlying transport"""
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERROR = "error"


class Stats(BaseModel):
    """Connection statistics snapshot; always replaces the previous one"""
    model_config = ConfigDict(populate_by_name=True)

    conn_count: int = Field(default=0, alias="connCount")
    client_count: int = Field(default=0, alias="clientCount")
    clients: Optional[List[str]] = None


class Suspension(BaseModel):
    """Channel throttling status at a point in time"""
    suspended: bool = False
    reason: Optional[str] = None


@dataclass(frozen=True)
class LogEvent:
    """One raw record arrived; arrived_at is epoch ms when the server stamped it"""
    raw: str
    arrived_at: Optional[int] = None


@dataclass(frozen=True)
class StatsEvent:
    stats: Stats


@dataclass(frozen=True)
class SuspensionEvent:
    suspension: Suspension


@dataclass(frozen=True)
class StateChangeEvent:
    state: StreamState


StreamEvent = Union[LogEvent, StatsEvent, SuspensionEvent, StateChangeEvent]
