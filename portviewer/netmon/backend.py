"""
Connection Backend Module - Host socket enumeration

Handles:
- psutil-based enumeration of TCP/UDP sockets with owning process names
- lsof-based enumeration for hosts where psutil lacks permissions
- Provider selection and platform information
- The asynchronous fetch boundary used by the connection store
"""
import asyncio
import logging
import platform
import shutil
import socket
import subprocess
import uuid
from typing import Dict, List, Optional, Any

import psutil

from .errors import ConnectionFetchError, MissingDependencyError
from .lsof_parser import normalize_state, parse_lsof_output
from .models import Connection


logger = logging.getLogger(__name__)


class ConnectionProvider:
    """Base class for socket table providers"""

    name = 'base'

    def get_all_connections(self) -> List[Connection]:
        """Return every TCP and UDP socket on the host"""
        raise NotImplementedError

    def is_supported(self) -> bool:
        return True

    @staticmethod
    def _with_ids(connections: List[Connection]) -> List[Connection]:
        """Tag each connection with a fresh unique id"""
        return [conn.model_copy(update={'id': str(uuid.uuid4())}) for conn in connections]


class PsutilConnectionProvider(ConnectionProvider):
    """Enumerates sockets through ``psutil.net_connections``"""

    name = 'psutil'

    PROTOCOL_NAMES = {
        socket.SOCK_STREAM: 'TCP',
        socket.SOCK_DGRAM: 'UDP',
    }

    def _process_name(self, pid: Optional[int], names: Dict[int, str]) -> str:
        """Resolve a process name, caching per call; the process may already be gone"""
        if not pid:
            return 'unknown'
        if pid not in names:
            try:
                names[pid] = psutil.Process(pid).name()
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                names[pid] = 'unknown'
        return names[pid]

    def get_all_connections(self) -> List[Connection]:
        try:
            raw_connections = psutil.net_connections(kind='inet')
        except psutil.AccessDenied as e:
            raise ConnectionFetchError(f"Permission denied reading socket table: {e}") from e

        names: Dict[int, str] = {}
        connections = []
        for sconn in raw_connections:
            protocol = self.PROTOCOL_NAMES.get(sconn.type)
            if protocol is None:
                continue

            local_address, local_port = (sconn.laddr.ip, sconn.laddr.port) if sconn.laddr else ('', 0)
            remote_address, remote_port = (sconn.raddr.ip, sconn.raddr.port) if sconn.raddr else ('', 0)

            state = sconn.status or ''
            if state == psutil.CONN_NONE:
                state = ''
            state = normalize_state(state)

            connections.append(Connection(
                protocol=protocol,
                local_address=local_address,
                local_port=local_port,
                remote_address=remote_address,
                remote_port=remote_port,
                state=state,
                pid=sconn.pid or 0,
                process_name=self._process_name(sconn.pid, names),
            ))

        return self._with_ids(connections)


class LsofConnectionProvider(ConnectionProvider):
    """Enumerates sockets by running ``lsof -i -n -P``"""

    name = 'lsof'
    command = 'lsof'

    def is_supported(self) -> bool:
        return shutil.which(self.command) is not None

    def get_all_connections(self) -> List[Connection]:
        try:
            result = subprocess.run(
                [self.command, '-i', '-n', '-P'],
                capture_output=True,
                text=True,
                timeout=30,
            )
        except FileNotFoundError as e:
            raise MissingDependencyError(f"{self.command} command not found", command=self.command) from e
        except subprocess.TimeoutExpired as e:
            raise ConnectionFetchError(f"{self.command} timed out after {e.timeout} seconds") from e

        # lsof exits 1 with empty stderr when no sockets match
        if result.returncode != 0 and result.stderr.strip():
            raise ConnectionFetchError(f"{self.command} command failed: {result.stderr.strip()}")

        return self._with_ids(parse_lsof_output(result.stdout))


PROVIDERS = {
    'psutil': PsutilConnectionProvider,
    'lsof': LsofConnectionProvider,
}


def create_connection_provider(name: str = 'psutil') -> ConnectionProvider:
    """Create the provider registered under ``name``"""
    try:
        return PROVIDERS[name]()
    except KeyError:
        raise ValueError(f"Unknown connection backend: {name!r} (expected one of {', '.join(PROVIDERS)})")


def platform_info(provider: ConnectionProvider) -> Dict[str, Any]:
    """Describe the host platform and whether the provider can run on it"""
    return {
        'platform': provider.name,
        'supported': provider.is_supported(),
        'architecture': platform.machine(),
        'os': platform.system().lower(),
    }


async def fetch_connection_snapshot(provider: Optional[ConnectionProvider] = None) -> List[Connection]:
    """
    Fetch the full socket table without blocking the event loop

    Args:
        provider: Provider to query (default: psutil)

    Returns:
        All current connections

    Raises:
        ConnectionFetchError: If the backend cannot be queried
    """
    provider = provider or PsutilConnectionProvider()
    connections = await asyncio.to_thread(provider.get_all_connections)
    logger.debug(f"Backend {provider.name} returned {len(connections)} connections")
    return connections
