"""
lsof Parser Module - Parses ``lsof -i -n -P`` output into connections

Handles:
- Header skipping and column splitting
- TCP/UDP row detection via the NODE column
- IPv4, IPv6 and wildcard endpoint parsing
- State normalisation (LISTEN -> LISTENING)
"""
from typing import List, Optional, Tuple

from .models import Connection


PROTOCOLS = ('TCP', 'UDP')

STATE_ALIASES = {
    'LISTEN': 'LISTENING',
    'SYN_RECV': 'SYN_RCVD',
    'FIN_WAIT_1': 'FIN_WAIT1',
    'FIN_WAIT_2': 'FIN_WAIT2',
}


def normalize_state(state: str) -> str:
    """Map raw socket state names onto display names"""
    state = state.strip().upper()
    return STATE_ALIASES.get(state, state)


def parse_endpoint(endpoint: str) -> Optional[Tuple[str, int]]:
    """
    Parse an lsof endpoint into (address, port)

    Accepts ``host:port``, ``[v6addr]:port`` and ``*:port``. A ``*`` port
    maps to 0. Returns None when the endpoint is not recognisable.
    """
    if endpoint.startswith('['):
        bracket_end = endpoint.find(']:')
        if bracket_end == -1:
            return None
        address = endpoint[1:bracket_end]
        port_text = endpoint[bracket_end + 2:]
    else:
        address, sep, port_text = endpoint.rpartition(':')
        if not sep:
            return None

    if port_text == '*':
        port = 0
    else:
        try:
            port = int(port_text)
        except ValueError:
            return None

    if not 0 <= port <= 65535:
        return None
    return address, port


def parse_lsof_line(line: str) -> Optional[Connection]:
    """Parse a single lsof row; returns None for rows that are not TCP/UDP sockets"""
    fields = line.split()
    if len(fields) < 9:
        return None

    process_name = fields[0]
    try:
        pid = int(fields[1])
    except ValueError:
        return None

    # NODE is the protocol column; DEVICE and SIZE/OFF may be blank on some platforms
    node_index = None
    for index in range(4, len(fields) - 1):
        if fields[index] in PROTOCOLS:
            node_index = index
            break
    if node_index is None:
        return None

    protocol = fields[node_index]
    name = fields[node_index + 1]
    trailing = fields[node_index + 2] if len(fields) > node_index + 2 else ''
    state = ''
    if trailing.startswith('(') and trailing.endswith(')'):
        state = normalize_state(trailing[1:-1])

    if '->' in name:
        local_text, _, remote_text = name.partition('->')
        local = parse_endpoint(local_text)
        remote = parse_endpoint(remote_text)
        if local is None or remote is None:
            return None
        if not state:
            state = 'ESTABLISHED' if protocol == 'UDP' else 'UNKNOWN'
    else:
        local = parse_endpoint(name)
        if local is None:
            return None
        remote = ('*', 0)
        if not state:
            state = 'LISTENING' if protocol == 'UDP' else 'UNKNOWN'

    return Connection(
        protocol=protocol,
        local_address=local[0],
        local_port=local[1],
        remote_address=remote[0],
        remote_port=remote[1],
        state=state,
        pid=pid,
        process_name=process_name,
    )


def parse_lsof_output(output: str) -> List[Connection]:
    """
    Parse complete lsof output

    Args:
        output: stdout of ``lsof -i -n -P``

    Returns:
        Connections in output order; unparseable lines are skipped
    """
    connections = []
    for line in output.splitlines()[1:]:
        conn = parse_lsof_line(line)
        if conn is not None:
            connections.append(conn)
    return connections
