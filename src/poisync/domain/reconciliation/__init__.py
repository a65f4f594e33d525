"""Reconciliation of upstream snapshots into the element store."""

from __future__ import annotations

from .contracts import (
    PlannedCreation,
    PlannedDeletion,
    PlannedUpdate,
    ReconciliationPlan,
    ReconciliationSummary,
)
from .engine import Reconciler, UnitOfWorkFactory
from .planning import build_plan, index_dataset

__all__ = [
    "PlannedCreation",
    "PlannedDeletion",
    "PlannedUpdate",
    "ReconciliationPlan",
    "Reconciler",
    "ReconciliationSummary",
    "UnitOfWorkFactory",
    "build_plan",
    "index_dataset",
]
