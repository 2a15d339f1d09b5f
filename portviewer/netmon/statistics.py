"""
Statistics Aggregator - Protocol and state counts over a snapshot
"""
from typing import Iterable

from .models import Connection, Statistics


def compute_statistics(connections: Iterable[Connection]) -> Statistics:
    """Count connections by protocol and state; unknown values only add to total"""
    total = tcp = udp = listening = established = 0

    for conn in connections:
        total += 1

        protocol = conn.protocol.lower()
        if protocol == 'tcp':
            tcp += 1
        elif protocol == 'udp':
            udp += 1

        state = conn.state.lower()
        if state == 'listening':
            listening += 1
        elif state == 'established':
            established += 1

    return Statistics(
        total=total,
        tcp_count=tcp,
        udp_count=udp,
        listening_count=listening,
        established_count=established,
    )
