"""Lazy, cached attribution of changes to upstream actors."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING

from poisync.domain.errors import ActorLookupError
from poisync.domain.model import UNKNOWN_ACTOR_ID, Actor, unknown_actor
from poisync.domain.ports import BatchActorLookup

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from poisync.domain.model import ActorId
    from poisync.domain.ports import ActorLookup, ActorProfile, ActorRepository

log = getLogger(__name__)

DEFAULT_LOOKUP_CONCURRENCY = 4

# Adapters wrap transport errors in ActorLookupError; timeouts may surface bare.
LOOKUP_FAILURES: tuple[type[Exception], ...] = (ActorLookupError, TimeoutError)


class ActorResolver:
    """Resolve actor ids to stored actors, fetching and caching on first sight.

    A missing profile never blocks reconciliation: every failure path yields the
    unknown-actor sentinel instead of raising.
    """

    def __init__(
        self,
        *,
        lookup: ActorLookup | None,
        max_concurrency: int = DEFAULT_LOOKUP_CONCURRENCY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._lookup = lookup
        self._max_concurrency = max(1, max_concurrency)
        self._clock = clock
        self._profiles: dict[ActorId, ActorProfile | None] = {}

    def prefetch(self, actor_ids: Iterable[ActorId], *, known_ids: set[ActorId]) -> None:
        """Fetch profiles for unseen actors ahead of the write transaction.

        Lookups that support batching run in one pass through the adapter; others run on
        a bounded thread pool. Nothing here touches the store.
        """

        pending = sorted(
            {
                actor_id
                for actor_id in actor_ids
                if actor_id != UNKNOWN_ACTOR_ID
                and actor_id not in known_ids
                and actor_id not in self._profiles
            }
        )
        if not pending or self._lookup is None:
            return
        if isinstance(self._lookup, BatchActorLookup):
            log.info("Prefetching %s actor profiles in one batch", len(pending))
            try:
                profiles = self._lookup.fetch_actors(pending)
            except LOOKUP_FAILURES as exc:
                log.warning("Batch actor lookup failed: %s", exc)
                profiles = {}
            for actor_id in pending:
                self._profiles[actor_id] = profiles.get(actor_id)
            return
        log.info(
            "Prefetching %s actor profiles (concurrency=%s)", len(pending), self._max_concurrency
        )
        with ThreadPoolExecutor(max_workers=self._max_concurrency) as executor:
            for actor_id, profile in zip(
                pending, executor.map(self._safe_lookup, pending), strict=True
            ):
                self._profiles[actor_id] = profile

    def resolve(self, actor_id: ActorId, actors: ActorRepository) -> Actor:
        if actor_id == UNKNOWN_ACTOR_ID:
            return unknown_actor()

        stored = actors.get(actor_id)
        if stored is not None:
            return stored

        if actor_id in self._profiles:
            profile = self._profiles[actor_id]
        else:
            profile = self._safe_lookup(actor_id)
            self._profiles[actor_id] = profile
        if profile is None:
            return unknown_actor()

        actor = Actor(id=actor_id, profile=dict(profile.profile))
        if self._clock is not None:
            now = self._clock()
            actor.created_at = now
            actor.updated_at = now
        return actors.add_if_absent(actor)

    def _safe_lookup(self, actor_id: ActorId) -> ActorProfile | None:
        if self._lookup is None:
            return None
        try:
            profile = self._lookup.fetch_actor(actor_id)
        except LOOKUP_FAILURES as exc:
            log.warning("Actor lookup failed for %s: %s", actor_id, exc)
            return None
        if profile is None:
            log.warning("Actor %s not found upstream", actor_id)
        return profile
