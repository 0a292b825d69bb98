"""Keyed cache of loaded collections with invalidate-and-refetch semantics.

Each key maps to a loader coroutine. A cached collection is an immutable
tuple that is swapped in a single assignment, so readers always see either
the previous collection or the fully loaded new one. Every fetch takes a
generation number; a response that settles after a newer fetch started is
discarded.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Set

from ukt_console.app.core.errors import FetchError
from ukt_console.app.services.notifications import Notifier

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[tuple]]


@dataclass
class CacheEntry:
    loader: Loader
    data: tuple = ()
    loaded: bool = False
    stale: bool = True
    generation: int = 0
    in_flight: int = 0
    error: Optional[Exception] = None
    tasks: Set[asyncio.Task] = field(default_factory=set)


class QueryCache:
    def __init__(self, notifier: Optional[Notifier] = None):
        self.notifier = notifier
        self._entries: Dict[str, CacheEntry] = {}

    def register(self, key: str, loader: Loader) -> None:
        if key in self._entries:
            self._entries[key].loader = loader
        else:
            self._entries[key] = CacheEntry(loader=loader)

    def _entry(self, key: str) -> CacheEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise KeyError(f"No loader registered for {key!r}") from None

    def peek(self, key: str) -> tuple:
        entry = self._entries.get(key)
        return entry.data if entry is not None else ()

    def is_loaded(self, key: str) -> bool:
        entry = self._entries.get(key)
        return bool(entry and entry.loaded)

    def is_stale(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def last_error(self, key: str) -> Optional[Exception]:
        entry = self._entries.get(key)
        return entry.error if entry is not None else None

    async def fetch(self, key: str, *, force: bool = False) -> tuple:
        entry = self._entry(key)
        if entry.loaded and not entry.stale and not force:
            return entry.data

        entry.generation += 1
        generation = entry.generation
        entry.in_flight += 1
        try:
            data = tuple(await entry.loader())
        except FetchError as exc:
            if generation == entry.generation:
                entry.error = exc
            logger.warning("Loading %s failed: %s", key, exc)
            raise
        finally:
            entry.in_flight -= 1

        if generation != entry.generation:
            logger.debug("Discarding stale %s response (generation %d < %d)", key, generation, entry.generation)
            return data
        entry.data = data
        entry.loaded = True
        entry.stale = False
        entry.error = None
        return data

    def invalidate(self, *keys: str) -> None:
        """Mark collections stale and refetch the ones loaded or being loaded.

        Bumping the generation discards any response already in flight, so a
        load that started before the mutation never overwrites the refetch.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        for key in keys:
            entry = self._entries.get(key)
            if entry is None:
                continue
            entry.stale = True
            entry.generation += 1
            if loop is None or not (entry.loaded or entry.in_flight):
                continue
            task = loop.create_task(self._refetch(key))
            entry.tasks.add(task)
            task.add_done_callback(entry.tasks.discard)

    async def _refetch(self, key: str) -> None:
        try:
            await self.fetch(key)
        except FetchError as exc:
            if self.notifier is not None:
                self.notifier.error(str(exc))

    async def settle(self) -> None:
        """Wait for every pending background refetch."""
        pending = [task for entry in self._entries.values() for task in entry.tasks]
        if pending:
            await asyncio.gather(*pending)
