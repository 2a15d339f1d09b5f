"""
UI Components Module - Panels and controls for the connection monitor

Handles:
- Filter panel (protocol, port prefix, process name)
- Control panel (refresh, auto-refresh, interval)
- Statistics panel
"""
from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Static, Label, Button, Input, Checkbox, Select

from portviewer.netmon.models import Statistics


PROTOCOL_OPTIONS = [
    ("All", "all"),
    ("TCP", "tcp"),
    ("UDP", "udp"),
]


class ConnectionFilterPanel(Horizontal):
    """Filter controls for the connection table"""

    def compose(self) -> ComposeResult:
        """Compose the filter panel"""
        yield Label("Protocol:", classes="control-label")
        yield Select(
            options=PROTOCOL_OPTIONS,
            value="all",
            id="protocol-select",
            allow_blank=False
        )
        yield Input(
            placeholder="Port prefix...",
            id="port-filter-input",
            classes="control-input"
        )
        yield Input(
            placeholder="Process name...",
            id="process-filter-input",
            classes="control-input"
        )
        yield Button("Clear", variant="warning", id="clear-filters-btn")


class ConnectionControlPanel(Horizontal):
    """Refresh controls"""

    def __init__(self, refresh_interval: int = 5, auto_refresh: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.refresh_interval = refresh_interval
        self.auto_refresh_enabled = auto_refresh

    def compose(self) -> ComposeResult:
        """Compose the control panel"""
        yield Button("Refresh", variant="primary", id="refresh-btn")
        yield Checkbox("Auto-refresh", value=self.auto_refresh_enabled, id="auto-refresh-checkbox")

        yield Label("Interval:", classes="control-label")
        yield Input(
            placeholder=str(self.refresh_interval),
            value=str(self.refresh_interval),
            id="refresh-interval-input",
            classes="interval-input"
        )
        yield Label("sec", classes="control-label")


class ConnectionStatsPanel(Static):
    """Panel showing whole-system connection counts"""

    total = reactive(0)
    tcp_count = reactive(0)
    udp_count = reactive(0)
    listening_count = reactive(0)
    established_count = reactive(0)
    source = reactive("")
    error = reactive("")

    def compose(self) -> ComposeResult:
        yield Label("[bold]Statistics[/bold]", classes="panel-title")
        yield Static(self._render_stats(), id="connection-stats")

    def update_statistics(self, statistics: Statistics, source: Optional[str], error: Optional[str]) -> None:
        """Copy counts from a Statistics record"""
        self.total = statistics.total
        self.tcp_count = statistics.tcp_count
        self.udp_count = statistics.udp_count
        self.listening_count = statistics.listening_count
        self.established_count = statistics.established_count
        self.source = source or ""
        self.error = error or ""
        self._update_stats_display()

    def _render_stats(self) -> str:
        text = (
            f"Total: {self.total}  TCP: {self.tcp_count}  UDP: {self.udp_count}  "
            f"Listening: {self.listening_count}  Established: {self.established_count}"
        )
        if self.source == "fallback":
            text += "\n[yellow]Showing fallback data[/yellow]"
        if self.error:
            text += f"\n[red]{self.error}[/red]"
        return text

    def _update_stats_display(self) -> None:
        """Update the stats display widget"""
        try:
            stats_widget = self.query_one("#connection-stats", Static)
            stats_widget.update(self._render_stats())
        except Exception:
            # Widget might not be mounted yet
            pass
