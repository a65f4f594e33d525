"""Reconciliation and reporting settings.

Everything the sync cycle would otherwise read from the environment at call time
is collected here once and handed to the components at construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from poisync.domain.model import ReportVariant

from .env import env_bool, env_float, env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_MIN_DATASET_SIZE = 1000
DEFAULT_MIN_RETAINED_RATIO = 0.5
DEFAULT_ACTOR_LOOKUP_CONCURRENCY = 4
DEFAULT_FRESHNESS_WINDOW_DAYS = 365


@dataclass(frozen=True, slots=True)
class SyncConfig:
    min_dataset_size: int = DEFAULT_MIN_DATASET_SIZE
    min_retained_ratio: float | None = DEFAULT_MIN_RETAINED_RATIO
    verify_deletions: bool = True
    actor_lookup_concurrency: int = DEFAULT_ACTOR_LOOKUP_CONCURRENCY
    report_variant: ReportVariant = ReportVariant.SNAPSHOT
    freshness_window_days: int = DEFAULT_FRESHNESS_WINDOW_DAYS
    include_category_histogram: bool = False

    def __post_init__(self) -> None:
        if self.min_dataset_size < 0:
            raise ConfigurationError("min_dataset_size must be non-negative")
        if self.min_retained_ratio is not None and not 0 <= self.min_retained_ratio <= 1:
            raise ConfigurationError("min_retained_ratio must be within [0, 1]")
        if self.actor_lookup_concurrency < 1:
            raise ConfigurationError("actor_lookup_concurrency must be at least 1")
        if self.freshness_window_days < 1:
            raise ConfigurationError("freshness_window_days must be at least 1")


def get_sync_config() -> SyncConfig:
    variant = optional_env_var("POISYNC_REPORT_VARIANT")
    try:
        report_variant = ReportVariant(variant.lower()) if variant else ReportVariant.SNAPSHOT
    except ValueError as exc:
        raise ConfigurationError(f"Unknown report variant: {variant}") from exc

    ratio = env_float("POISYNC_MIN_RETAINED_RATIO", DEFAULT_MIN_RETAINED_RATIO)
    return SyncConfig(
        min_dataset_size=env_int("POISYNC_MIN_DATASET_SIZE", DEFAULT_MIN_DATASET_SIZE),
        min_retained_ratio=ratio if ratio > 0 else None,
        verify_deletions=env_bool("POISYNC_VERIFY_DELETIONS", default=True),
        actor_lookup_concurrency=env_int(
            "POISYNC_ACTOR_CONCURRENCY", DEFAULT_ACTOR_LOOKUP_CONCURRENCY
        ),
        report_variant=report_variant,
        freshness_window_days=env_int(
            "POISYNC_FRESHNESS_WINDOW_DAYS", DEFAULT_FRESHNESS_WINDOW_DAYS
        ),
        include_category_histogram=env_bool("POISYNC_REPORT_CATEGORIES", default=False),
    )
