"""Live status projection to an out-of-process display.

A :class:`LiveStatusProjector` is the boundary to the display surface.
:class:`LiveStatus` owns one projector, remembers which session it is
showing, and while that session runs keeps republishing re-stamped
snapshots so the display's data never goes stale.  Those refreshes only
extend freshness; every snapshot is already enough to compute elapsed time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx

from timekeeper._internal.clock import Clock, SystemClock
from timekeeper.exceptions import ProjectorError

if TYPE_CHECKING:
    from timekeeper.snapshot import TimerSnapshot

logger = logging.getLogger(__name__)


class LiveStatusProjector(ABC):
    """Publishes snapshots to a display surface."""

    @abstractmethod
    async def publish(self, snapshot: TimerSnapshot) -> None:
        """Show *snapshot*, replacing whatever is displayed."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove the live display."""
        ...

    async def close(self) -> None:
        """Release resources.  Default is a no-op."""


class InMemoryProjector(LiveStatusProjector):
    """Keeps every published snapshot.  For development and tests."""

    def __init__(self) -> None:
        self.published: list[TimerSnapshot] = []
        self.cleared = 0
        self.current: TimerSnapshot | None = None

    async def publish(self, snapshot: TimerSnapshot) -> None:
        self.published.append(snapshot)
        self.current = snapshot

    async def clear(self) -> None:
        self.cleared += 1
        self.current = None


class WebhookProjector(LiveStatusProjector):
    """Pushes snapshots to an HTTP display endpoint.

    ``publish`` sends ``PUT {url}`` with the snapshot JSON; ``clear`` sends
    ``DELETE {url}``.  Any non-2xx response or transport failure is raised
    as :class:`ProjectorError`.

    Parameters:
        url:     Display endpoint.
        timeout: Request timeout in seconds.
        client:  Pre-built client (tests pass one with a mock transport).
                 A client created here is closed by :meth:`close`.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def publish(self, snapshot: TimerSnapshot) -> None:
        await self._send("PUT", snapshot.to_dict())

    async def clear(self) -> None:
        await self._send("DELETE")

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, payload: dict[str, Any] | None = None) -> None:
        try:
            response = await self._client.request(method, self._url, json=payload)
        except httpx.TimeoutException as exc:
            raise ProjectorError(f"{method} {self._url} timed out") from exc
        except httpx.HTTPError as exc:
            raise ProjectorError(f"{method} {self._url} failed: {exc}") from exc
        if not response.is_success:
            raise ProjectorError(f"{method} {self._url} returned HTTP {response.status_code}")


class LiveStatus:
    """The single live display of the active session.

    Build one per process and hand it to :class:`~timekeeper.tracker.TimeTracker`.

    Parameters:
        projector:        Display boundary.
        clock:            Stamps refresh snapshots.
        refresh_interval: Seconds between refresh publishes while running;
                          ``None`` disables refreshing.
    """

    def __init__(
        self,
        projector: LiveStatusProjector,
        *,
        clock: Clock | None = None,
        refresh_interval: float | None = 30.0,
    ) -> None:
        self._projector = projector
        self._clock = clock or SystemClock()
        self._refresh_interval = refresh_interval
        self._current: TimerSnapshot | None = None
        self._refresh_task: asyncio.Task[None] | None = None

    @property
    def current(self) -> TimerSnapshot | None:
        return self._current

    @property
    def projector(self) -> LiveStatusProjector:
        return self._projector

    def is_showing(self, session_id: str) -> bool:
        return self._current is not None and self._current.session_id == session_id

    async def show(self, snapshot: TimerSnapshot) -> None:
        """Publish *snapshot* and (re)arm or disarm periodic refresh."""
        self._current = snapshot
        await self._publish(snapshot)
        if snapshot.is_running:
            self._start_refresh()
        else:
            await self._stop_refresh()

    async def end(self, session_id: str | None = None) -> None:
        """Clear the display.

        With *session_id*, nothing happens while a different session is
        showing.  A fresh ``LiveStatus`` does not know what the display
        holds, so it clears.
        """
        if session_id is not None and self._current is not None:
            if not self.is_showing(session_id):
                return
        await self._stop_refresh()
        self._current = None
        try:
            await self._projector.clear()
        except Exception as exc:
            logger.warning("Live status clear failed: %s", exc)

    async def aclose(self) -> None:
        await self._stop_refresh()
        await self._projector.close()

    # ── refresh ──────────────────────────────────────────────

    async def _publish(self, snapshot: TimerSnapshot) -> None:
        try:
            await self._projector.publish(snapshot)
        except Exception as exc:
            logger.warning(
                "Live status publish for session %s failed: %s", snapshot.session_id, exc
            )

    def _start_refresh(self) -> None:
        if self._refresh_interval is None:
            return
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        self._refresh_task = asyncio.create_task(self._refresh_loop(self._refresh_interval))

    async def _stop_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _refresh_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            current = self._current
            if current is None or not current.is_running:
                return
            self._current = current.refreshed(self._clock.now())
            logger.debug("Refreshing live status for session %s", current.session_id)
            await self._publish(self._current)
