from __future__ import annotations

from asyncio import Lock
import logging
import time
from typing import Callable

from .actions import ActionsConfig
from .config import MATCH_TTL_SECONDS
from .services.match_state import MatchState

logger = logging.getLogger(__name__)


class MatchStore:
    """In-memory registry of live matches with async-safe access.

    Each read or write pushes the match's expiry back by ``ttl_seconds``;
    matches nobody touched for that long are dropped.
    """

    def __init__(
        self,
        ttl_seconds: float = 12 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = Lock()
        self._store: dict[str, tuple[MatchState, float]] = {}

    def _expired(self, expires_at: float) -> bool:
        return expires_at <= self._clock()

    async def get(self, match_id: str) -> MatchState | None:
        async with self._lock:
            entry = self._store.get(match_id)
            if not entry:
                return None
            match, expires_at = entry
            if self._expired(expires_at):
                self._store.pop(match_id, None)
                logger.info("match %s expired", match_id)
                return None
            self._store[match_id] = (match, self._clock() + self._ttl)
            return match

    async def put(self, match: MatchState) -> None:
        async with self._lock:
            self._store[match.id] = (match, self._clock() + self._ttl)

    async def delete(self, match_id: str) -> bool:
        async with self._lock:
            return self._store.pop(match_id, None) is not None

    async def purge_expired(self) -> int:
        async with self._lock:
            stale = [k for k, (_, exp) in self._store.items() if self._expired(exp)]
            for key in stale:
                self._store.pop(key, None)
        if stale:
            logger.info("purged %d idle match(es)", len(stale))
        return len(stale)

    async def tick_all(self, seconds: int = 1) -> int:
        """Advance the period clock of every live match; returns how many moved."""
        async with self._lock:
            return sum(1 for match, _ in self._store.values() if match.tick(seconds))

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


match_store = MatchStore(ttl_seconds=MATCH_TTL_SECONDS)
actions_config = ActionsConfig()


def get_store() -> MatchStore:
    return match_store


def get_actions_config() -> ActionsConfig:
    return actions_config
