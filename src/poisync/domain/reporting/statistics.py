"""Report tag computation over a set of live elements."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from poisync.domain.model import Coordinate, EventKind
from poisync.domain.model import tags as osm

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from datetime import date

    from poisync.domain.model import Element, ElementEvent

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%SZ"

COUNTER_TAGS: Final[tuple[str, ...]] = (
    "elements_created",
    "elements_updated",
    "elements_deleted",
)

_COUNTER_BY_KIND: Final[dict[EventKind, str]] = {
    EventKind.CREATE: "elements_created",
    EventKind.UPDATE: "elements_updated",
    EventKind.DELETE: "elements_deleted",
}


def compute_report_tags(
    elements: Sequence[Element],
    *,
    as_of: date,
    window_days: int = osm.DEFAULT_FRESHNESS_WINDOW_DAYS,
    include_categories: bool = False,
) -> dict[str, object]:
    """Statistics for one region on ``as_of``.

    Verification dates later than ``as_of`` count towards freshness but not
    towards the average verification date.
    """

    total = len(elements)
    up_to_date = sum(
        1 for element in elements if element.is_up_to_date(as_of=as_of, window_days=window_days)
    )
    tags: dict[str, object] = {
        "total_elements": total,
        "total_atms": sum(1 for element in elements if osm.is_atm(element.payload)),
    }
    for name, predicate in osm.PAYMENT_PREDICATES.items():
        tags[name] = sum(1 for element in elements if predicate(element.payload))
    tags["up_to_date_elements"] = up_to_date
    tags["outdated_elements"] = total - up_to_date
    tags["legacy_elements"] = sum(1 for element in elements if osm.is_legacy(element.payload))
    tags["up_to_date_percent"] = int(up_to_date / total * 100) if total else 0

    average = average_verification_date(elements, as_of=as_of)
    if average is not None:
        tags["avg_verification_date"] = average.strftime(TIMESTAMP_FORMAT)

    if include_categories:
        histogram = Counter(element.category for element in elements)
        tags["elements_by_category"] = dict(sorted(histogram.items()))
    return tags


def average_verification_date(elements: Sequence[Element], *, as_of: date) -> datetime | None:
    timestamps = [
        verified.timestamp()
        for verified in (element.verification_date for element in elements)
        if verified is not None and verified.date() <= as_of
    ]
    if not timestamps:
        return None
    return datetime.fromtimestamp(int(sum(timestamps) / len(timestamps)), tz=UTC)


def diff_tags(old: Mapping[str, object], new: Mapping[str, object]) -> dict[str, tuple[object, object]]:
    """Keys whose values differ, mapped to ``(old, new)``; missing values are None."""

    return {
        key: (old.get(key), new.get(key))
        for key in sorted(set(old) | set(new))
        if old.get(key) != new.get(key)
    }


def count_changes(
    events: Iterable[ElementEvent], matches: Callable[[Coordinate | None], bool]
) -> dict[str, int]:
    """Change counters for the events whose recorded location ``matches`` accepts."""

    counts = dict.fromkeys(COUNTER_TAGS, 0)
    for event in events:
        location = (
            Coordinate(lat=event.element_lat, lon=event.element_lon)
            if event.element_lat is not None and event.element_lon is not None
            else None
        )
        if matches(location):
            counts[_COUNTER_BY_KIND[event.kind]] += 1
    return counts
