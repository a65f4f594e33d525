"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import (
    ActorLookup,
    BatchActorLookup,
    ActorProfile,
    Dataset,
    DatasetFetcher,
    ElementVerifier,
    VerifiedElement,
)
from .notification import Notifier
from .persistence import (
    ActorRepository,
    ElementEventRepository,
    ElementRepository,
    RegionRepository,
    ReportRepository,
    Repository,
)
from .unit_of_work import (
    RepositoryCollection,
    SyncRepositories,
    SyncUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ActorLookup",
    "BatchActorLookup",
    "ActorProfile",
    "ActorRepository",
    "Dataset",
    "DatasetFetcher",
    "ElementEventRepository",
    "ElementRepository",
    "ElementVerifier",
    "Notifier",
    "RegionRepository",
    "ReportRepository",
    "Repository",
    "RepositoryCollection",
    "SyncRepositories",
    "SyncUnitOfWork",
    "UnitOfWork",
    "VerifiedElement",
]
