"""Pure diffing of a fresh dataset against the stored snapshot."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from poisync.domain.model import payload_key, serialize_payload

from .contracts import PlannedCreation, PlannedDeletion, PlannedUpdate, ReconciliationPlan

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from poisync.domain.model import Element, ElementKey, Payload

log = getLogger(__name__)


def index_dataset(items: Iterable[Payload]) -> tuple[dict[ElementKey, Payload], int, int]:
    """Key fresh records by external key.

    Returns the index, the number of records skipped for lacking a valid key, and
    the number of duplicate keys (the last occurrence wins).
    """

    fresh: dict[ElementKey, Payload] = {}
    skipped = 0
    duplicates = 0
    for item in items:
        try:
            key = payload_key(item)
        except ValueError as exc:
            log.warning("Skipping upstream record without a usable key: %s", exc)
            skipped += 1
            continue
        if key in fresh:
            duplicates += 1
        fresh[key] = item
    if duplicates:
        log.warning("Upstream dataset repeats %s element keys; keeping last occurrences", duplicates)
    return fresh, skipped, duplicates


def build_plan(snapshot: Sequence[Element], items: Iterable[Payload]) -> ReconciliationPlan:
    """Classify every stored and fresh element; no side effects."""

    fresh, skipped, _ = index_dataset(items)
    plan = ReconciliationPlan(skipped=skipped, stored_total=len(snapshot))
    stored: dict[ElementKey, Element] = {}

    for element in snapshot:
        stored[element.id] = element
        if not element.is_deleted:
            plan.live_total += 1
            if element.id not in fresh:
                plan.deletions.append(PlannedDeletion(element_id=element.id))

    for key, payload in fresh.items():
        element = stored.get(key)
        if element is None:
            plan.creations.append(PlannedCreation(element_id=key, payload=payload))
            continue
        payload_changed = element.serialized_payload() != serialize_payload(payload)
        if payload_changed or element.is_deleted:
            plan.updates.append(
                PlannedUpdate(
                    element_id=key,
                    payload=payload,
                    payload_changed=payload_changed,
                    revive=element.is_deleted,
                )
            )
        else:
            plan.unchanged += 1

    log.info(
        "Planned reconciliation: create=%s, update/revive=%s, delete=%s, unchanged=%s",
        len(plan.creations),
        len(plan.updates),
        len(plan.deletions),
        plan.unchanged,
    )
    return plan
