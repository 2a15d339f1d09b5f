"""
Filter/Sort Engine - Derives the displayed connection list

Handles:
- Protocol, port-prefix and process-name filtering
- Column sorting through a fixed table of typed accessors
- Sort toggling (same column flips direction, new column resets to asc)
"""
import locale
import logging
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Union

from .models import Connection, FilterCriteria, SortCriteria


logger = logging.getLogger(__name__)

SortValue = Union[int, str]

SORT_ACCESSORS: Dict[str, Callable[[Connection], SortValue]] = {
    'protocol': lambda conn: conn.protocol,
    'local_address': lambda conn: conn.local_address,
    'local_port': lambda conn: conn.local_port,
    'remote_address': lambda conn: conn.remote_address,
    'remote_port': lambda conn: conn.remote_port,
    'state': lambda conn: conn.state,
    'pid': lambda conn: conn.pid,
    'process_name': lambda conn: conn.process_name,
}


def filter_by_protocol(connections: Iterable[Connection], protocol: str) -> List[Connection]:
    """Keep rows whose protocol matches case-insensitively; 'all' keeps everything"""
    if protocol == 'all':
        return list(connections)
    protocol = protocol.lower()
    return [conn for conn in connections if conn.protocol.lower() == protocol]


def filter_by_port_prefix(connections: Iterable[Connection], prefix: str) -> List[Connection]:
    """Keep rows where the local or remote port starts with ``prefix``"""
    prefix = prefix.strip()
    if not prefix:
        return list(connections)
    return [
        conn for conn in connections
        if str(conn.local_port).startswith(prefix) or str(conn.remote_port).startswith(prefix)
    ]


def filter_by_process(connections: Iterable[Connection], substring: str) -> List[Connection]:
    """Keep rows whose process name contains ``substring``, ignoring case"""
    if not substring:
        return list(connections)
    substring = substring.lower()
    return [conn for conn in connections if substring in conn.process_name.lower()]


def compare_values(a: SortValue, b: SortValue) -> int:
    """Numeric comparison for two numbers, locale-aware string comparison otherwise"""
    if isinstance(a, int) and isinstance(b, int):
        return (a > b) - (a < b)
    return locale.strcoll(str(a), str(b))


def use_system_collation() -> bool:
    """
    Switch string collation to the user's locale

    ``compare_values`` uses ``locale.strcoll``, which stays byte-ordered
    under the default C locale until this runs.

    Returns:
        True if the environment's locale was applied
    """
    try:
        locale.setlocale(locale.LC_COLLATE, '')
    except locale.Error as e:
        logger.warning(f"Keeping default collation, locale not available: {e}")
        return False
    return True


def sort_connections(connections: Iterable[Connection], sort: SortCriteria) -> List[Connection]:
    """Sort by ``sort.column``; a None column keeps the input order"""
    connections = list(connections)
    if sort.column is None:
        return connections

    accessor = SORT_ACCESSORS[sort.column]
    sign = -1 if sort.direction == 'desc' else 1

    def comparator(a: Connection, b: Connection) -> int:
        return sign * compare_values(accessor(a), accessor(b))

    connections.sort(key=cmp_to_key(comparator))
    return connections


def derive(connections: Iterable[Connection], filters: FilterCriteria, sort: SortCriteria) -> List[Connection]:
    """
    Derive the displayed view from a snapshot

    Args:
        connections: Snapshot rows in capture order
        filters: Current filter state
        sort: Current sort state

    Returns:
        A new list; the input is never modified
    """
    rows = filter_by_protocol(connections, filters.protocol)
    rows = filter_by_port_prefix(rows, filters.port)
    rows = filter_by_process(rows, filters.process)
    return sort_connections(rows, sort)


def toggle_sort(current: SortCriteria, column: str) -> SortCriteria:
    """Next sort state after the user selects ``column``"""
    if column not in SORT_ACCESSORS:
        raise ValueError(f"Unknown sort column: {column!r}")

    if current.column == column:
        direction = 'desc' if current.direction == 'asc' else 'asc'
        return SortCriteria(column=column, direction=direction)
    return SortCriteria(column=column, direction='asc')
