"""
Unit tests for ConnectionStore fetch/fallback discipline
"""
import asyncio
import logging
from unittest.mock import MagicMock, patch

from portviewer.netmon.errors import ConnectionFetchError, MissingDependencyError
from portviewer.netmon.fallback import FALLBACK_CONNECTIONS
from portviewer.netmon.store import ConnectionStore

from conftest import FakeProvider, make_connection


class TestConnectionStore:
    """Test ConnectionStore"""

    def test_initial_state(self):
        store = ConnectionStore(FakeProvider())
        assert store.snapshot is None
        assert not store.has_data
        assert store.is_loading is False
        assert store.error is None

    def test_successful_fetch(self, sample_connections):
        store = ConnectionStore(FakeProvider(sample_connections))

        applied = asyncio.run(store.refresh())

        assert applied is True
        assert store.snapshot.source == 'live'
        assert list(store.snapshot.connections) == sample_connections
        assert store.error is None
        assert store.error_kind is None
        assert store.is_loading is False

    def test_missing_dependency_falls_back(self):
        store = ConnectionStore(FakeProvider(error=RuntimeError("lsof command not found")))

        asyncio.run(store.refresh())

        assert store.snapshot.source == 'fallback'
        assert store.snapshot.connections == FALLBACK_CONNECTIONS
        assert store.error_kind == 'missing_dependency'
        assert 'lsof' in store.error
        assert store.is_loading is False

    def test_generic_failure_falls_back(self):
        store = ConnectionStore(FakeProvider(error=ConnectionFetchError("backend unreachable")))

        asyncio.run(store.refresh())

        assert store.snapshot.source == 'fallback'
        assert store.error_kind == 'transport'
        assert 'backend unreachable' in store.error

    def test_malformed_rows_fall_back(self):
        provider = FakeProvider()
        provider.get_all_connections = MagicMock(return_value=[make_connection(id='dup'), make_connection(id='dup')])
        store = ConnectionStore(provider)

        asyncio.run(store.refresh())

        assert store.snapshot.source == 'fallback'
        assert store.error_kind == 'transport'

    def test_success_clears_previous_error(self, sample_connections):
        provider = FakeProvider(error=ConnectionFetchError("down"))
        store = ConnectionStore(provider)
        asyncio.run(store.refresh())
        assert store.error is not None

        provider.error = None
        provider.connections = sample_connections
        asyncio.run(store.refresh())

        assert store.error is None
        assert store.snapshot.source == 'live'

    def test_loading_only_on_first_fetch(self, sample_connections):
        store = ConnectionStore(FakeProvider(sample_connections))
        seen = []

        async def scenario():
            async def fake_fetch(provider):
                seen.append(store.is_loading)
                return sample_connections

            with patch('portviewer.netmon.store.fetch_connection_snapshot', fake_fetch):
                await store.refresh()
                await store.refresh()

        asyncio.run(scenario())

        assert seen == [True, False]
        assert store.is_loading is False

    def test_listeners_notified(self, sample_connections):
        store = ConnectionStore(FakeProvider(sample_connections))
        listener = MagicMock()
        store.subscribe(listener)

        asyncio.run(store.refresh())

        listener.assert_called_once_with(store.snapshot)

        store.unsubscribe(listener)
        asyncio.run(store.refresh())
        listener.assert_called_once()

    def test_stale_response_discarded(self):
        older = [make_connection(id='old')]
        newer = [make_connection(id='new')]
        store = ConnectionStore(FakeProvider(), logger=logging.getLogger('test'))

        async def scenario():
            gates = [asyncio.Event(), asyncio.Event()]
            results = [older, newer]
            calls = iter(range(2))

            async def fake_fetch(provider):
                index = next(calls)
                await gates[index].wait()
                return results[index]

            with patch('portviewer.netmon.store.fetch_connection_snapshot', fake_fetch):
                first = asyncio.create_task(store.refresh())
                second = asyncio.create_task(store.refresh())
                await asyncio.sleep(0)

                gates[1].set()
                second_applied = await second
                gates[0].set()
                first_applied = await first

            return first_applied, second_applied

        first_applied, second_applied = asyncio.run(scenario())

        assert second_applied is True
        assert first_applied is False
        assert [conn.id for conn in store.snapshot.connections] == ['new']

    def test_in_order_completions_all_apply(self):
        store = ConnectionStore(FakeProvider([make_connection(id='a')]))

        assert asyncio.run(store.refresh()) is True
        assert asyncio.run(store.refresh()) is True

    def test_cancelled_first_fetch_clears_loading(self):
        store = ConnectionStore(FakeProvider())

        async def scenario():
            started = asyncio.Event()

            async def hanging_fetch(provider):
                started.set()
                await asyncio.Event().wait()

            with patch('portviewer.netmon.store.fetch_connection_snapshot', hanging_fetch):
                task = asyncio.create_task(store.refresh())
                await started.wait()
                loading_during = store.is_loading
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
            return loading_during

        loading_during = asyncio.run(scenario())

        assert loading_during is True
        assert store.is_loading is False
        assert store.snapshot is None

    def test_failing_listener_does_not_break_refresh(self, sample_connections):
        store = ConnectionStore(FakeProvider(sample_connections), logger=logging.getLogger('test'))
        broken = MagicMock(side_effect=RuntimeError("redraw failed"))
        healthy = MagicMock()
        store.subscribe(broken)
        store.subscribe(healthy)

        applied = asyncio.run(store.refresh())

        assert applied is True
        assert store.snapshot.source == 'live'
        broken.assert_called_once_with(store.snapshot)
        healthy.assert_called_once_with(store.snapshot)

    def test_failing_listener_is_logged(self, sample_connections, caplog):
        store = ConnectionStore(FakeProvider(sample_connections), logger=logging.getLogger('test.store'))
        store.subscribe(MagicMock(side_effect=RuntimeError("redraw failed")))

        with caplog.at_level(logging.ERROR, logger='test.store'):
            asyncio.run(store.refresh())

        assert any('redraw failed' in record.getMessage() for record in caplog.records)
