"""
Network Monitor Package - Connection state pipeline

Package Structure:
- models: Connection, Snapshot, filter/sort criteria, Statistics
- backend: Socket table providers and the async fetch boundary
- lsof_parser: lsof output parsing
- fallback: Synthetic dataset used when the backend fails
- filter_sort: Derived view computation
- statistics: Protocol/state counts
- store: Snapshot owner with fetch/fallback discipline (ConnectionStore)
- scheduler: Cancellable periodic refresh (RefreshScheduler)
- monitor: Presentation-facing facade (ConnectionMonitor)
"""

from .models import Connection, Snapshot, FilterCriteria, SortCriteria, Statistics
from .errors import ConnectionFetchError, MissingDependencyError, classify_fetch_error
from .backend import (
    ConnectionProvider,
    PsutilConnectionProvider,
    LsofConnectionProvider,
    create_connection_provider,
    fetch_connection_snapshot,
    platform_info,
)
from .fallback import fallback_connections
from .filter_sort import SORT_ACCESSORS, derive, toggle_sort, use_system_collation
from .statistics import compute_statistics
from .store import ConnectionStore
from .scheduler import AsyncioTimer, RefreshScheduler
from .monitor import ConnectionMonitor

__all__ = [
    # Models
    'Connection',
    'Snapshot',
    'FilterCriteria',
    'SortCriteria',
    'Statistics',

    # Errors
    'ConnectionFetchError',
    'MissingDependencyError',
    'classify_fetch_error',

    # Data source
    'ConnectionProvider',
    'PsutilConnectionProvider',
    'LsofConnectionProvider',
    'create_connection_provider',
    'fetch_connection_snapshot',
    'platform_info',
    'fallback_connections',

    # Pipeline
    'SORT_ACCESSORS',
    'derive',
    'toggle_sort',
    'use_system_collation',
    'compute_statistics',
    'ConnectionStore',
    'AsyncioTimer',
    'RefreshScheduler',
    'ConnectionMonitor',
]
