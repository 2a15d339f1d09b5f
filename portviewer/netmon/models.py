"""
Connection Models Module - Typed records for the connection state pipeline

Handles:
- Single socket entries (Connection)
- Atomically captured connection lists (Snapshot)
- User filter and sort state (FilterCriteria, SortCriteria)
- Aggregate counts (Statistics)
"""
from datetime import datetime
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


Protocol = Literal['all', 'tcp', 'udp']
SortDirection = Literal['asc', 'desc']
SnapshotSource = Literal['live', 'fallback']


class Connection(BaseModel):
    """One observed socket entry"""

    model_config = ConfigDict(frozen=True)

    protocol: str
    local_address: str = ""
    local_port: int = Field(default=0, ge=0, le=65535)
    remote_address: str = ""
    remote_port: int = Field(default=0, ge=0, le=65535)
    state: str = ""
    pid: int = Field(default=0, ge=0)
    process_name: str = ""
    id: Optional[str] = None


class Snapshot(BaseModel):
    """
    Ordered connection list captured from one fetch.

    Replaced wholesale on every refresh. ``source`` tells live data apart
    from the fallback dataset.
    """

    model_config = ConfigDict(frozen=True)

    connections: Tuple[Connection, ...] = ()
    source: SnapshotSource = 'live'
    captured_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode='after')
    def _check_unique_ids(self) -> 'Snapshot':
        seen = set()
        for conn in self.connections:
            if conn.id is None:
                continue
            if conn.id in seen:
                raise ValueError(f"duplicate connection id in snapshot: {conn.id}")
            seen.add(conn.id)
        return self


class FilterCriteria(BaseModel):
    """Filter state: protocol, port prefix and process-name substring"""

    model_config = ConfigDict(frozen=True)

    protocol: Protocol = 'all'
    port: str = ""
    process: str = ""


class SortCriteria(BaseModel):
    """Sort state; ``column=None`` keeps snapshot order"""

    model_config = ConfigDict(frozen=True)

    column: Optional[str] = None
    direction: SortDirection = 'asc'


class Statistics(BaseModel):
    """Whole-system protocol and state counts"""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    tcp_count: int = 0
    udp_count: int = 0
    listening_count: int = 0
    established_count: int = 0
