"""
PortViewer - live view of the host's TCP/UDP socket table
"""

__version__ = "0.3.0"
