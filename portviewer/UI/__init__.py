"""
PortViewer UI Package
"""

from .app import PortViewerApp, run_app

__all__ = [
    'PortViewerApp',
    'run_app',
]
