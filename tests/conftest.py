"""
Shared fixtures for PortViewer tests
"""
import pytest

from portviewer.config import Settings
from portviewer.context import AppContext
from portviewer.netmon.backend import ConnectionProvider
from portviewer.netmon.models import Connection


def make_connection(**overrides) -> Connection:
    """Build a Connection with sensible defaults"""
    values = {
        'protocol': 'TCP',
        'local_address': '127.0.0.1',
        'local_port': 8080,
        'remote_address': '',
        'remote_port': 0,
        'state': 'LISTENING',
        'pid': 100,
        'process_name': 'python',
    }
    values.update(overrides)
    return Connection(**values)


class FakeProvider(ConnectionProvider):
    """Provider returning canned rows or raising a canned error"""

    name = 'fake'

    def __init__(self, connections=None, error=None):
        self.connections = list(connections or [])
        self.error = error
        self.calls = 0

    def get_all_connections(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.connections)


class FakeTimer:
    """Stand-in for a Textual Timer"""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeIntervalFactory:
    """Records every timer the scheduler arms"""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, callback):
        timer = FakeTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [timer for timer in self.timers if not timer.stopped]


@pytest.fixture
def sample_connections():
    return [
        make_connection(protocol='TCP', local_port=443, remote_address='10.0.0.5', remote_port=51000,
                        state='ESTABLISHED', pid=300, process_name='nginx', id='c1'),
        make_connection(protocol='TCP', local_port=80, state='LISTENING', pid=4, process_name='System', id='c2'),
        make_connection(protocol='UDP', local_port=53, state='LISTENING', pid=2048, process_name='dnsmasq', id='c3'),
        make_connection(protocol='udp', local_port=5353, state='', pid=77, process_name='Avahi-Daemon', id='c4'),
        make_connection(protocol='tcp', local_port=22, remote_address='192.168.1.9', remote_port=4400,
                        state='established', pid=900, process_name='sshd', id='c5'),
    ]


@pytest.fixture
def context(tmp_path):
    return AppContext(Settings(log_dir=str(tmp_path / "logs")))


@pytest.fixture
def interval_factory():
    return FakeIntervalFactory()
