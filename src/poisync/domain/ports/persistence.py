"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from poisync.domain.model import Actor, Element, ElementEvent, Region, Report

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

    from poisync.domain.model import ActorId, ElementKey


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ElementRepository(Repository[Element], Protocol):
    def get(self, element_id: ElementKey) -> Element | None: ...

    def list_all(self) -> Sequence[Element]: ...

    def list_live(self) -> Sequence[Element]: ...

    def count_live(self) -> int: ...


@runtime_checkable
class ActorRepository(Repository[Actor], Protocol):
    def get(self, actor_id: ActorId) -> Actor | None: ...

    def existing_ids(self, actor_ids: Iterable[ActorId]) -> set[ActorId]: ...

    def add_if_absent(self, actor: Actor) -> Actor:
        """Insert ``actor`` unless its id is taken; return the stored actor either way."""
        ...


@runtime_checkable
class ElementEventRepository(Repository[ElementEvent], Protocol):
    def list_for_element(self, element_id: ElementKey) -> Sequence[ElementEvent]: ...

    def count(self) -> int: ...


@runtime_checkable
class RegionRepository(Repository[Region], Protocol):
    def list_active(self) -> Sequence[Region]: ...


@runtime_checkable
class ReportRepository(Repository[Report], Protocol):
    def latest_for_region(self, region_id: int) -> Report | None: ...

    def latest_for_region_on(self, region_id: int, day: date) -> Report | None: ...

    def list_for_region(self, region_id: int) -> Sequence[Report]: ...
