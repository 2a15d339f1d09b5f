"""
PortViewer Main Application - Terminal UI using Textual
"""
from typing import Optional

from textual.app import App, ComposeResult
from textual.widgets import Header, Footer

from portviewer.config import Settings, load_settings
from portviewer.context import AppContext
from portviewer.netmon.backend import create_connection_provider, platform_info
from portviewer.netmon.filter_sort import use_system_collation
from portviewer.UI.views.connection_monitor import ConnectionMonitorView


THEMES = {
    'light': 'textual-light',
    'dark': 'textual-dark',
}


class PortViewerApp(App):
    """Live TCP/UDP socket table - Terminal UI Application"""

    TITLE = "PortViewer - Network Connections"
    CSS_PATH = "portviewer.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh_connections", "Refresh"),
        ("a", "toggle_auto_refresh", "Auto-refresh"),
        ("t", "cycle_theme", "Theme"),
    ]

    def __init__(self, context: AppContext, **kwargs):
        super().__init__(**kwargs)
        self.context = context
        self.provider = create_connection_provider(context.settings.backend)

    def compose(self) -> ComposeResult:
        """Compose the main UI layout"""
        yield Header(show_clock=True)
        yield ConnectionMonitorView(self.context, provider=self.provider, id="connection-monitor-view")
        yield Footer()

    def on_mount(self) -> None:
        info = platform_info(self.provider)
        self.sub_title = f"{info['os']}/{info['architecture']} via {info['platform']}"
        if not info['supported']:
            self.notify(f"Backend {info['platform']} is not available on this host", severity="warning")
        self._apply_theme()

    def _apply_theme(self) -> None:
        self.theme = THEMES[self.context.resolved_theme]

    def action_refresh_connections(self) -> None:
        """Fetch connections now"""
        view = self.query_one("#connection-monitor-view", ConnectionMonitorView)
        view.refresh_connections()

    def action_toggle_auto_refresh(self) -> None:
        view = self.query_one("#connection-monitor-view", ConnectionMonitorView)
        view.toggle_auto_refresh()

    def action_cycle_theme(self) -> None:
        mode = self.context.cycle_theme()
        self._apply_theme()
        self.notify(f"Theme: {mode}", severity="information")


def run_app(settings: Optional[Settings] = None) -> None:
    """Entry point to run the PortViewer application"""
    settings = settings or load_settings()
    use_system_collation()
    with AppContext(settings) as context:
        app = PortViewerApp(context)
        app.run()


if __name__ == "__main__":
    run_app()
