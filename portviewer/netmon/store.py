"""
Connection Store Module - Owner of the current snapshot

Handles:
- Fetch cycles against the backend with fallback on failure
- Error classification for the presentation layer
- Loading state for the very first fetch
- Discarding responses that complete after a newer one
"""
import logging
from typing import Callable, List, Optional

from .backend import ConnectionProvider, fetch_connection_snapshot
from .errors import ConnectionFetchError, classify_fetch_error
from .fallback import fallback_connections
from .models import Snapshot


SnapshotListener = Callable[[Snapshot], None]


class ConnectionStore:
    """Single source of truth for the connection list"""

    def __init__(self, provider: Optional[ConnectionProvider] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            provider: Backend provider passed to the fetch boundary
            logger: Logger for fetch diagnostics
        """
        self.provider = provider
        self.logger = logger or logging.getLogger(__name__)

        self.snapshot: Optional[Snapshot] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self.error_kind: Optional[str] = None

        self._request_counter = 0
        self._applied_request = 0
        self._listeners: List[SnapshotListener] = []

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None

    def subscribe(self, listener: SnapshotListener) -> None:
        """Call ``listener`` after every snapshot replacement"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def refresh(self) -> bool:
        """
        Run one fetch cycle and replace the snapshot

        Never raises for fetch failures: they become the fallback dataset
        plus a diagnostic in ``error``.

        Returns:
            True if this cycle's result was applied, False if a newer
            request had already completed
        """
        self._request_counter += 1
        request_id = self._request_counter

        if not self.has_data:
            self.is_loading = True

        error: Optional[ConnectionFetchError] = None
        try:
            try:
                connections = await fetch_connection_snapshot(self.provider)
                snapshot = Snapshot(connections=tuple(connections), source='live')
            except Exception as e:
                error = classify_fetch_error(e)
                snapshot = Snapshot(connections=tuple(fallback_connections()), source='fallback')
        finally:
            # A cancelled fetch must not leave the loading flag stuck
            if self._request_counter == request_id:
                self.is_loading = False

        if request_id < self._applied_request:
            self.logger.info(
                f"Discarding stale fetch #{request_id}; #{self._applied_request} already applied"
            )
            return False

        self._applied_request = request_id
        self._apply(snapshot, error)
        return True

    def _apply(self, snapshot: Snapshot, error: Optional[ConnectionFetchError]) -> None:
        self.snapshot = snapshot
        self.is_loading = False

        if error is None:
            self.error = None
            self.error_kind = None
            self.logger.info(f"Fetched {len(snapshot.connections)} connections (live)")
        else:
            self.error = error.diagnostic
            self.error_kind = error.kind
            self.logger.error(f"Error fetching connections ({error.kind}): {error}")
            self.logger.warning(f"Using {len(snapshot.connections)} fallback connections")

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(f"Snapshot listener {listener!r} failed: {e}", exc_info=True)
