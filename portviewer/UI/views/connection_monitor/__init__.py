"""
Connection Monitor Package - Live socket table view

Package Structure:
- components: UI panels and controls (ConnectionFilterPanel, ConnectionControlPanel, ConnectionStatsPanel)
- connection_table: Socket table widget (ConnectionTable)
- view: Main view orchestration (ConnectionMonitorView)
"""

from .view import ConnectionMonitorView

from .components import ConnectionFilterPanel, ConnectionControlPanel, ConnectionStatsPanel
from .connection_table import ConnectionTable

__all__ = [
    # Main view
    'ConnectionMonitorView',

    # UI components
    'ConnectionFilterPanel',
    'ConnectionControlPanel',
    'ConnectionStatsPanel',
    'ConnectionTable',
]
