"""Reconcile a fresh upstream dataset against the stored element snapshot.

The work is split so that network access never happens inside the write
transaction:

1. ``prepare`` reads the snapshot in a short read-only unit of work, builds the
   plan, checks planned deletions against the secondary source and prefetches
   unseen actor profiles.
2. ``apply`` mutates elements and stages audit events on the repositories of an
   open unit of work. Deletions run before creations and updates.
3. ``reconcile`` chains both and commits.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from poisync.domain.errors import SyncError, TrustContradictionError
from poisync.domain.model import (
    UNKNOWN_ACTOR_ID,
    Element,
    ElementEvent,
    EventKind,
    ExternalKey,
    payload_actor,
    utcnow,
)

from .contracts import ReconciliationPlan, ReconciliationSummary
from .planning import build_plan

if TYPE_CHECKING:
    from poisync.domain.actors import ActorResolver
    from poisync.domain.model import Actor, ElementKey, Payload
    from poisync.domain.ports import Dataset, ElementVerifier, SyncRepositories, SyncUnitOfWork

log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], SyncUnitOfWork]


class Reconciler:
    def __init__(
        self,
        *,
        resolver: ActorResolver,
        verifier: ElementVerifier | None = None,
        verify_deletions: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._resolver = resolver
        self._verifier = verifier
        self._verify_deletions = verify_deletions
        self._clock = clock

    def reconcile(
        self, dataset: Dataset, unit_of_work_factory: UnitOfWorkFactory
    ) -> ReconciliationSummary:
        plan = self.prepare(dataset, unit_of_work_factory)
        with unit_of_work_factory() as uow:
            summary = self.apply(plan, uow.repositories)
            uow.commit()
        return summary

    def prepare(
        self, dataset: Dataset, unit_of_work_factory: UnitOfWorkFactory
    ) -> ReconciliationPlan:
        """Build and verify the plan. Raises ``TrustContradictionError``; writes nothing."""

        with unit_of_work_factory() as uow:
            snapshot = list(uow.repositories.elements.list_all())
            plan = build_plan(snapshot, dataset.items)
        self.verify_deletions(plan)

        actor_ids = {payload_actor(item.payload)[0] for item in plan.creations}
        actor_ids.update(payload_actor(item.payload)[0] for item in plan.updates)
        actor_ids.update(deletion.actor_id for deletion in plan.deletions)
        actor_ids.discard(UNKNOWN_ACTOR_ID)
        with unit_of_work_factory() as uow:
            known_ids = uow.repositories.actors.existing_ids(actor_ids)
        self._resolver.prefetch(actor_ids, known_ids=known_ids)
        return plan

    def verify_deletions(self, plan: ReconciliationPlan) -> None:
        if not plan.deletions:
            return
        if not self._verify_deletions or self._verifier is None:
            log.info("Skipping verification of %s deletions", len(plan.deletions))
            return
        log.info("Verifying %s deletions against the secondary source", len(plan.deletions))
        for deletion in plan.deletions:
            verified = self._verifier.fetch_element(ExternalKey.parse(deletion.element_id))
            if verified is None:
                log.info("Element %s no longer exists in the secondary source", deletion.element_id)
                continue
            if verified.accepts_bitcoin:
                raise TrustContradictionError(deletion.element_id)
            deletion.verified = verified
            deletion.actor_id = verified.actor_id

    def apply(
        self, plan: ReconciliationPlan, repositories: SyncRepositories
    ) -> ReconciliationSummary:
        now = self._clock()
        summary = ReconciliationSummary(unchanged=plan.unchanged)
        stored = {element.id: element for element in repositories.elements.list_all()}

        for deletion in plan.deletions:
            element = _require(stored, deletion.element_id)
            actor = self._resolver.resolve(deletion.actor_id, repositories.actors)
            self._record(repositories, summary, element, EventKind.DELETE, actor, None, now)
            element.mark_deleted(now=now)
            summary.deleted += 1
            log.info("Deleted %s (%s)", element.id, element.name)

        for creation in plan.creations:
            element = Element.from_payload(creation.payload, now=now)
            repositories.elements.add(element)
            actor = self._resolver.resolve(
                payload_actor(creation.payload)[0], repositories.actors
            )
            self._record(
                repositories, summary, element, EventKind.CREATE, actor, creation.payload, now
            )
            summary.created += 1
            log.info("Created %s (%s)", element.id, element.name)

        for update in plan.updates:
            element = _require(stored, update.element_id)
            if update.revive:
                element.revive(now=now)
                summary.revived += 1
                log.info("Revived %s (%s)", element.id, element.name)
            if not update.payload_changed:
                continue
            element.replace_payload(update.payload, now=now)
            actor = self._resolver.resolve(payload_actor(update.payload)[0], repositories.actors)
            self._record(
                repositories, summary, element, EventKind.UPDATE, actor, update.payload, now
            )
            summary.updated += 1
            log.info("Updated %s (%s)", element.id, element.name)

        log.info(
            "Reconciliation applied: created=%s, updated=%s, deleted=%s, revived=%s",
            summary.created,
            summary.updated,
            summary.deleted,
            summary.revived,
        )
        return summary

    @staticmethod
    def _record(
        repositories: SyncRepositories,
        summary: ReconciliationSummary,
        element: Element,
        kind: EventKind,
        actor: Actor,
        payload: Payload | None,
        now: datetime,
    ) -> None:
        actor_name = actor.display_name
        if actor_name is None and payload is not None:
            actor_name = payload_actor(payload)[1]
        event = ElementEvent(
            element_id=element.id,
            kind=kind,
            actor_id=actor.id,
            element_name=element.name,
            element_lat=element.lat,
            element_lon=element.lon,
            actor_name=actor_name,
            created_at=now,
        )
        repositories.events.add(event)
        summary.events.append(event)


def _require(stored: dict[ElementKey, Element], element_id: ElementKey) -> Element:
    element = stored.get(element_id)
    if element is None:
        raise SyncError(f"Element {element_id} vanished from the store during reconciliation")
    return element
