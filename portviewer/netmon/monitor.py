"""
Connection Monitor Module - Presentation-facing facade

Wires the store, the filter/sort engine, the statistics aggregator and the
refresh scheduler together and exposes read-only state plus the user
actions (fetch, sort, filter, auto-refresh control).
"""
from typing import Callable, List, Optional, Tuple

from portviewer.config import Settings
from portviewer.context import AppContext

from .backend import ConnectionProvider, create_connection_provider
from .filter_sort import derive, toggle_sort
from .models import Connection, FilterCriteria, Snapshot, SortCriteria, Statistics
from .scheduler import IntervalFactory, RefreshScheduler, TickCallback
from .statistics import compute_statistics
from .store import ConnectionStore


FILTER_KEYS = ('protocol', 'port', 'process')


class ConnectionMonitor:
    """Connection state pipeline consumed by the UI"""

    def __init__(self, context: AppContext, settings: Optional[Settings] = None,
                 provider: Optional[ConnectionProvider] = None,
                 set_interval: Optional[IntervalFactory] = None,
                 on_tick: Optional[TickCallback] = None):
        """
        Args:
            context: Application context supplying settings and loggers
            settings: Overrides ``context.settings``
            provider: Connection provider; built from ``settings.backend`` when omitted
            set_interval: Timer factory for the scheduler
            on_tick: What each auto-refresh tick runs; defaults to ``fetch_now``
        """
        self.context = context
        self.settings = settings or context.settings
        self.logger = context.get_logger('monitor')

        self.store = ConnectionStore(
            provider=provider or create_connection_provider(self.settings.backend),
            logger=context.get_logger('store'),
        )
        self.scheduler = RefreshScheduler(
            on_tick or self.fetch_now,
            interval=self.settings.refresh_interval,
            enabled=self.settings.auto_refresh,
            set_interval=set_interval,
            logger=context.get_logger('scheduler'),
        )

        self._filters = FilterCriteria()
        self._sort = SortCriteria()
        self._statistics = Statistics()
        self._view_cache: Optional[List[Connection]] = None
        self._listeners: List[Callable[[], None]] = []

        self.store.subscribe(self._on_snapshot)

    # Read-only state

    @property
    def connections(self) -> Tuple[Connection, ...]:
        snapshot = self.store.snapshot
        return snapshot.connections if snapshot is not None else ()

    @property
    def filtered_connections(self) -> List[Connection]:
        if self._view_cache is None:
            self._view_cache = derive(self.connections, self._filters, self._sort)
        return list(self._view_cache)

    @property
    def statistics(self) -> Statistics:
        return self._statistics

    @property
    def is_loading(self) -> bool:
        return self.store.is_loading

    @property
    def error(self) -> Optional[str]:
        return self.store.error

    @property
    def error_kind(self) -> Optional[str]:
        return self.store.error_kind

    @property
    def snapshot_source(self) -> Optional[str]:
        snapshot = self.store.snapshot
        return snapshot.source if snapshot is not None else None

    @property
    def filters(self) -> FilterCriteria:
        return self._filters

    @property
    def sort(self) -> SortCriteria:
        return self._sort

    @property
    def auto_refresh(self) -> bool:
        return self.scheduler.enabled

    @property
    def refresh_interval(self) -> int:
        return self.scheduler.interval

    # Listeners

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Call ``listener`` whenever the snapshot is replaced"""
        self._listeners.append(listener)

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self._statistics = compute_statistics(snapshot.connections)
        self._invalidate_view()
        stats = self._statistics
        self.logger.debug(
            f"Snapshot ({snapshot.source}): total={stats.total} tcp={stats.tcp_count} udp={stats.udp_count}"
        )
        for listener in list(self._listeners):
            listener()

    def _invalidate_view(self) -> None:
        self._view_cache = None

    # Actions

    async def fetch_now(self) -> bool:
        """Run one fetch cycle immediately"""
        return await self.store.refresh()

    def sort_by(self, column: str) -> SortCriteria:
        """Sort by ``column``; selecting the current column flips direction"""
        self._sort = toggle_sort(self._sort, column)
        self._invalidate_view()
        self.logger.debug(f"Sorting by {self._sort.column} ({self._sort.direction})")
        return self._sort

    def update_filter(self, key: str, value: str) -> FilterCriteria:
        """
        Set one filter field

        Args:
            key: One of 'protocol', 'port', 'process'
            value: New value for that field

        Raises:
            ValueError: For unknown keys or invalid protocol values
        """
        if key not in FILTER_KEYS:
            raise ValueError(f"Unknown filter key: {key!r}")

        values = self._filters.model_dump()
        values[key] = value
        self._filters = FilterCriteria(**values)
        self._invalidate_view()
        return self._filters

    def toggle_auto_refresh(self) -> bool:
        enabled = self.scheduler.toggle_enabled()
        self.logger.info(f"Auto-refresh {'enabled' if enabled else 'disabled'}")
        return enabled

    def set_refresh_interval(self, seconds: int) -> None:
        self.scheduler.set_interval(seconds)

    def start_auto_refresh(self) -> None:
        self.scheduler.start()

    def stop_auto_refresh(self) -> None:
        self.scheduler.stop()

    def teardown(self) -> None:
        """Stop the scheduler and drop listeners"""
        self.scheduler.teardown()
        self.store.unsubscribe(self._on_snapshot)
        self._listeners.clear()
