"""
Fallback Provider - Fixed synthetic connection list

Used whenever the live data source is unreachable so the table is never
empty. Covers an established loopback connection, a wildcard-bound TCP
listener and a UDP listener.
"""
from typing import List

from .models import Connection


FALLBACK_CONNECTIONS = (
    Connection(
        protocol='TCP',
        local_address='127.0.0.1',
        local_port=8080,
        remote_address='192.168.1.100',
        remote_port=54321,
        state='ESTABLISHED',
        pid=1234,
        process_name='chrome.exe',
        id='fallback-1',
    ),
    Connection(
        protocol='TCP',
        local_address='0.0.0.0',
        local_port=80,
        remote_address='',
        remote_port=0,
        state='LISTENING',
        pid=4,
        process_name='System',
        id='fallback-2',
    ),
    Connection(
        protocol='UDP',
        local_address='127.0.0.1',
        local_port=53,
        remote_address='',
        remote_port=0,
        state='LISTENING',
        pid=2048,
        process_name='dns.exe',
        id='fallback-3',
    ),
)


def fallback_connections() -> List[Connection]:
    """Return a fresh list of the fallback dataset"""
    return list(FALLBACK_CONNECTIONS)
