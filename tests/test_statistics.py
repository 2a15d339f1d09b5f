"""
Unit tests for the statistics aggregator
"""
from portviewer.netmon.models import Statistics
from portviewer.netmon.statistics import compute_statistics

from conftest import make_connection


class TestComputeStatistics:
    """Test protocol/state counting"""

    def test_empty_snapshot(self):
        assert compute_statistics([]) == Statistics()

    def test_scenario_counts(self):
        snapshot = [
            make_connection(protocol='TCP', state='LISTENING', local_port=80),
            make_connection(protocol='UDP', state='LISTENING', local_port=53),
        ]
        assert compute_statistics(snapshot) == Statistics(
            total=2, tcp_count=1, udp_count=1, listening_count=2, established_count=0
        )

    def test_mixed_case(self, sample_connections):
        stats = compute_statistics(sample_connections)
        assert stats.total == 5
        assert stats.tcp_count == 3
        assert stats.udp_count == 2
        assert stats.listening_count == 2
        assert stats.established_count == 2

    def test_unrecognized_values_only_count_in_total(self):
        snapshot = [
            make_connection(protocol='SCTP', state='TIME_WAIT'),
            make_connection(protocol='TCP', state='CLOSE_WAIT'),
        ]
        stats = compute_statistics(snapshot)
        assert stats.total == 2
        assert stats.tcp_count + stats.udp_count <= stats.total
        assert stats.tcp_count == 1
        assert stats.listening_count == 0
        assert stats.established_count == 0
