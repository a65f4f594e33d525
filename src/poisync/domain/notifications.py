"""Plain-text messages sent to operators through the notifier port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from poisync.domain.model import EventKind, ExternalKey

if TYPE_CHECKING:
    from collections.abc import Sequence

    from poisync.domain.errors import TrustContradictionError
    from poisync.domain.model import ElementEvent, ElementKey

OSM_BROWSE_URL: Final[str] = "https://www.openstreetmap.org"

_VERBS: Final[dict[EventKind, str]] = {
    EventKind.CREATE: "added",
    EventKind.UPDATE: "updated",
    EventKind.DELETE: "removed",
}


def element_url(element_id: ElementKey) -> str:
    key = ExternalKey.parse(element_id)
    return f"{OSM_BROWSE_URL}/{key.kind}/{key.source_id}"


def describe_event(event: ElementEvent) -> str:
    actor = event.actor_name or "Unknown actor"
    name = event.element_name or "an unnamed place"
    return f"{actor} {_VERBS[event.kind]} {name} {element_url(event.element_id)}"


def describe_rejection(reason: str) -> str:
    return f"Sync aborted, upstream dataset rejected: {reason}"


def describe_contradiction(error: TrustContradictionError) -> str:
    return (
        f"Sync aborted: {error.element_id} is missing from the dataset but still accepts "
        f"bitcoin according to {element_url(error.element_id)}"
    )


def describe_skipped_regions(region_ids: Sequence[int]) -> str:
    listed = ", ".join(str(region_id) for region_id in region_ids)
    return f"Reports skipped for regions with invalid boundaries: {listed}"
