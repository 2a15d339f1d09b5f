"""
One-shot listing mode - Prints the socket table once and exits

Handles:
- Command line parsing for the listing options
- A single fetch through the configured backend
- Protocol, port-prefix and process filtering plus optional sorting
- Rendering a rich table and a protocol summary
"""
import argparse
import asyncio
from typing import Iterable, List, Optional

from rich.console import Console
from rich.table import Table

from portviewer.config import load_settings
from portviewer.netmon.backend import PROVIDERS, create_connection_provider, fetch_connection_snapshot
from portviewer.netmon.errors import classify_fetch_error
from portviewer.netmon.filter_sort import SORT_ACCESSORS, derive, use_system_collation
from portviewer.netmon.models import Connection, FilterCriteria, SortCriteria
from portviewer.netmon.statistics import compute_statistics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portviewer",
        description="Live TCP/UDP socket table viewer. Starts the terminal UI unless --list is given.",
    )
    parser.add_argument("--list", action="store_true", help="Print the current socket table once and exit")
    parser.add_argument("-p", "--protocol", choices=["all", "tcp", "udp"], default="all",
                        help="Protocol to show (default: all)")
    parser.add_argument("-P", "--port", default="", help="Show rows whose local or remote port starts with PORT")
    parser.add_argument("--process", default="", help="Show rows whose process name contains PROCESS")
    parser.add_argument("--sort", choices=sorted(SORT_ACCESSORS), help="Column to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--backend", choices=sorted(PROVIDERS),
                        help="Enumeration backend (default: PORTVIEW_BACKEND or psutil)")
    return parser


def _format_endpoint(address: str, port: int) -> str:
    if port == 0:
        return f"{address or '*'}:*"
    return f"{address}:{port}"


def build_connection_table(connections: Iterable[Connection]) -> Table:
    """Render connections as a rich Table"""
    table = Table(show_header=True, header_style="bold cyan", title="Port Usage")
    for column in ("Protocol", "Local Address", "Remote Address", "State", "PID", "Process Name"):
        table.add_column(column)

    for conn in connections:
        remote = "*:*" if conn.remote_port == 0 else _format_endpoint(conn.remote_address, conn.remote_port)
        table.add_row(
            conn.protocol,
            _format_endpoint(conn.local_address, conn.local_port),
            remote,
            conn.state or "-",
            str(conn.pid),
            conn.process_name,
        )
    return table


def list_connections(protocol: str = "all", port: str = "", process: str = "",
                     sort: Optional[str] = None, descending: bool = False,
                     backend: Optional[str] = None, console: Optional[Console] = None,
                     error_console: Optional[Console] = None) -> int:
    """
    Fetch once, filter and print

    Returns:
        Process exit code: 0 on success, 1 when the fetch failed
    """
    console = console or Console()
    error_console = error_console or Console(stderr=True)

    provider = create_connection_provider(backend or load_settings().backend)
    try:
        connections: List[Connection] = asyncio.run(fetch_connection_snapshot(provider))
    except Exception as e:
        error = classify_fetch_error(e)
        error_console.print(f"[bold red]{error.diagnostic}[/]")
        return 1

    use_system_collation()
    filters = FilterCriteria(protocol=protocol, port=port, process=process)
    shown = derive(connections, filters, SortCriteria(column=sort, direction='desc' if descending else 'asc'))

    console.print(build_connection_table(shown))

    stats = compute_statistics(shown)
    console.print(f"TCP connections: {stats.tcp_count}")
    console.print(f"UDP connections: {stats.udp_count}")
    console.print(f"Total connections: {stats.total}")
    return 0
