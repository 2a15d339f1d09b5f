"""
PortViewer UI Views Package
"""

from .connection_monitor import ConnectionMonitorView

__all__ = [
    'ConnectionMonitorView'
]
