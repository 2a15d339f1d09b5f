"""
Connection Table Module - DataTable for displaying the derived view

Handles:
- Column setup keyed by sortable field
- Full redraw from an ordered connection list
- State coloring and sort indicators
"""
from typing import Dict, List, Optional

from rich.text import Text
from textual.widgets import DataTable

from portviewer.netmon.models import Connection, SortCriteria


class ConnectionTable(DataTable):
    """DataTable showing socket table rows"""

    COLUMN_KEYS = {
        "protocol": "Proto",
        "local_address": "Local Address",
        "local_port": "Local Port",
        "remote_address": "Remote Address",
        "remote_port": "Remote Port",
        "state": "State",
        "pid": "PID",
        "process_name": "Process",
    }

    STATE_STYLES = {
        "established": "green",
        "listening": "yellow",
        "time_wait": "cyan",
        "close_wait": "magenta",
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.connection_data: Dict[str, Connection] = {}

    def on_mount(self) -> None:
        """Initialize the connection table"""
        for key, label in self.COLUMN_KEYS.items():
            if key in ("local_address", "remote_address"):
                self.add_column(label, width=28, key=key)
            elif key == "process_name":
                self.add_column(label, width=24, key=key)
            elif key == "state":
                self.add_column(label, width=14, key=key)
            else:
                self.add_column(label, width=11, key=key)

        self.cursor_type = "row"
        self.zebra_stripes = True
        self.show_cursor = True

    def _format_state(self, state: str) -> Text:
        return Text(state, style=self.STATE_STYLES.get(state.lower(), ""))

    @staticmethod
    def _format_port(port: int) -> str:
        return str(port) if port else "*"

    @staticmethod
    def row_key_for(conn: Connection, position: int) -> str:
        """Connection id when present, otherwise the row position"""
        return f"conn_{conn.id}" if conn.id else f"row_{position}"

    def show_connections(self, connections: List[Connection]) -> None:
        """Replace all rows with ``connections`` in order"""
        self.clear()
        self.connection_data = {}

        for position, conn in enumerate(connections):
            row_key = self.row_key_for(conn, position)
            self.connection_data[row_key] = conn
            self.add_row(
                conn.protocol,
                conn.local_address or "*",
                self._format_port(conn.local_port),
                conn.remote_address or "*",
                self._format_port(conn.remote_port),
                self._format_state(conn.state),
                str(conn.pid),
                conn.process_name or "unknown",
                key=row_key
            )

    def show_sort_indicator(self, sort: SortCriteria) -> None:
        """Mark the sorted column header with an arrow"""
        for key, label in self.COLUMN_KEYS.items():
            if key == sort.column:
                arrow = "▲" if sort.direction == "asc" else "▼"
                label = f"{label} {arrow}"
            column = self.columns.get(key)
            if column is not None:
                column.label = Text(label)
        self.refresh()

    def get_connection(self, row_key: str) -> Optional[Connection]:
        return self.connection_data.get(row_key)
