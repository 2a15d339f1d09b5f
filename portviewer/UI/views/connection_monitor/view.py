"""
Connection Monitor View Module - Main UI orchestration

Handles:
- View composition and layout
- Wiring UI events to ConnectionMonitor actions
- Redrawing the table and statistics after each snapshot
- Stopping auto-refresh on unmount
"""
from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Label, DataTable, Button, Input, Checkbox, Select

from portviewer.context import AppContext
from portviewer.netmon.backend import ConnectionProvider
from portviewer.netmon.monitor import ConnectionMonitor

from .components import ConnectionFilterPanel, ConnectionControlPanel, ConnectionStatsPanel
from .connection_table import ConnectionTable


class ConnectionMonitorView(Vertical):
    """Live socket table with filtering, sorting and auto-refresh"""

    def __init__(self, context: AppContext, provider: Optional[ConnectionProvider] = None, **kwargs):
        super().__init__(**kwargs)
        self.context = context
        self.logger = context.get_logger('view')
        self.provider = provider
        self.monitor: Optional[ConnectionMonitor] = None
        self._notified_error: Optional[str] = None

    def compose(self) -> ComposeResult:
        """Compose the connection monitor view"""
        settings = self.context.settings

        with Horizontal(id="connection-controls"):
            yield ConnectionFilterPanel(id="connection-filter-panel")
            yield ConnectionControlPanel(
                refresh_interval=settings.refresh_interval,
                auto_refresh=settings.auto_refresh,
                id="connection-control-panel"
            )

        yield ConnectionStatsPanel(id="connection-stats-panel")

        with Vertical(classes="main-panel"):
            yield Label("[bold]Connections[/bold]", classes="section-title")
            yield ConnectionTable(id="connection-table")

    def on_mount(self) -> None:
        """Create the monitor, load the first snapshot and arm auto-refresh if enabled"""
        self.monitor = ConnectionMonitor(
            self.context,
            provider=self.provider,
            set_interval=self.set_interval,
            on_tick=self._auto_refresh_tick,
        )
        self.monitor.add_listener(self.update_connection_table)

        if self.monitor.auto_refresh:
            self.monitor.start_auto_refresh()

        self.refresh_connections()

    def _auto_refresh_tick(self) -> None:
        self.refresh_connections(manual=False)

    @work(group="connection-fetch")
    async def refresh_connections(self, manual: bool = True) -> None:
        """
        Fetch a snapshot; the listener redraws the table

        Args:
            manual: False for auto-refresh ticks, which only notify when the error changes
        """
        if self.monitor is None:
            return
        if not self.monitor.store.has_data:
            self.query_one("#connection-table", ConnectionTable).loading = True
        await self.monitor.fetch_now()
        self.query_one("#connection-table", ConnectionTable).loading = False

        error = self.monitor.error
        if error and (manual or error != self._notified_error):
            self.notify(error, severity="error")
        self._notified_error = error

    def update_connection_table(self) -> None:
        """Redraw table and statistics from the monitor's current state"""
        if self.monitor is None:
            return
        try:
            self._redraw_table()

            stats_panel = self.query_one("#connection-stats-panel", ConnectionStatsPanel)
            stats_panel.update_statistics(
                self.monitor.statistics,
                self.monitor.snapshot_source,
                self.monitor.error
            )
        except Exception as e:
            self.logger.error(f"Error updating connection table: {e}", exc_info=True)

    def _redraw_table(self) -> None:
        if self.monitor is None:
            return
        table = self.query_one("#connection-table", ConnectionTable)
        table.show_connections(self.monitor.filtered_connections)
        table.show_sort_indicator(self.monitor.sort)

    @on(Button.Pressed, "#refresh-btn")
    def handle_refresh(self) -> None:
        """Handle manual refresh"""
        self.refresh_connections()

    @on(Checkbox.Changed, "#auto-refresh-checkbox")
    def handle_auto_refresh_changed(self, event: Checkbox.Changed) -> None:
        if self.monitor is None or event.value == self.monitor.auto_refresh:
            return
        self.monitor.toggle_auto_refresh()

    def toggle_auto_refresh(self) -> None:
        """Flip auto-refresh and keep the checkbox in sync"""
        if self.monitor is None:
            return
        enabled = self.monitor.toggle_auto_refresh()
        checkbox = self.query_one("#auto-refresh-checkbox", Checkbox)
        with checkbox.prevent(Checkbox.Changed):
            checkbox.value = enabled
        self.notify(f"Auto-refresh {'enabled' if enabled else 'disabled'}", severity="information")

    @on(Input.Submitted, "#refresh-interval-input")
    def handle_refresh_interval_change(self) -> None:
        """Handle refresh interval change"""
        if self.monitor is None:
            return
        interval_input = self.query_one("#refresh-interval-input", Input)

        try:
            new_interval = int(interval_input.value)
            self.monitor.set_refresh_interval(new_interval)
            self.notify(f"Refresh interval set to {new_interval} seconds", severity="information")
        except ValueError as e:
            self.notify(f"Invalid refresh interval: {e}", severity="error")

    @on(Select.Changed, "#protocol-select")
    def handle_protocol_changed(self, event: Select.Changed) -> None:
        if self.monitor is None or event.value == Select.BLANK:
            return
        self.monitor.update_filter("protocol", event.value)
        self._redraw_table()

    @on(Input.Changed, "#port-filter-input")
    def handle_port_filter_changed(self, event: Input.Changed) -> None:
        if self.monitor is None:
            return
        self.monitor.update_filter("port", event.value)
        self._redraw_table()

    @on(Input.Changed, "#process-filter-input")
    def handle_process_filter_changed(self, event: Input.Changed) -> None:
        if self.monitor is None:
            return
        self.monitor.update_filter("process", event.value)
        self._redraw_table()

    @on(Button.Pressed, "#clear-filters-btn")
    def handle_clear_filters(self) -> None:
        """Reset every filter to its default"""
        self.query_one("#protocol-select", Select).value = "all"
        self.query_one("#port-filter-input", Input).value = ""
        self.query_one("#process-filter-input", Input).value = ""

    @on(DataTable.HeaderSelected, "#connection-table")
    def handle_header_selected(self, event: DataTable.HeaderSelected) -> None:
        """Handle column header click for sorting"""
        if self.monitor is None:
            return
        self.monitor.sort_by(event.column_key.value)
        self._redraw_table()

    def on_unmount(self) -> None:
        """Stop auto-refresh when the view goes away"""
        if self.monitor:
            self.monitor.teardown()
