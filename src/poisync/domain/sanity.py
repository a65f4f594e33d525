"""Plausibility checks on a freshly fetched dataset before anything is written."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from math import ceil
from typing import TYPE_CHECKING

from poisync.domain.errors import DatasetRejectedError

if TYPE_CHECKING:
    from poisync.domain.ports import Dataset

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SanityVerdict:
    ok: bool
    reason: str | None = None

    @classmethod
    def accept(cls) -> SanityVerdict:
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: str) -> SanityVerdict:
        return cls(ok=False, reason=reason)


class SanityGuard:
    """Reject datasets that look truncated rather than genuinely shrunk.

    ``min_dataset_size`` is an absolute floor. ``min_retained_ratio`` compares the
    fetched size against the number of live elements already stored, so a sudden
    collapse of the upstream dump cannot mass-delete the local snapshot.
    """

    def __init__(self, *, min_dataset_size: int, min_retained_ratio: float | None = None) -> None:
        self.min_dataset_size = min_dataset_size
        self.min_retained_ratio = min_retained_ratio

    def validate(self, dataset: Dataset, *, baseline: int | None = None) -> SanityVerdict:
        size = len(dataset)
        if size < self.min_dataset_size:
            return self._rejected(
                f"Dataset has {size} elements, below the minimum of {self.min_dataset_size}"
            )
        if baseline and self.min_retained_ratio is not None:
            required = ceil(baseline * self.min_retained_ratio)
            if size < required:
                return self._rejected(
                    f"Dataset has {size} elements but {baseline} are live locally "
                    f"(at least {required} expected)"
                )
        log.info("Dataset passed sanity checks: size=%s, baseline=%s", size, baseline)
        return SanityVerdict.accept()

    def ensure(self, dataset: Dataset, *, baseline: int | None = None) -> None:
        """Like ``validate`` but raises ``DatasetRejectedError`` on rejection."""

        verdict = self.validate(dataset, baseline=baseline)
        if not verdict.ok:
            raise DatasetRejectedError(verdict.reason or "Dataset rejected")

    @staticmethod
    def _rejected(reason: str) -> SanityVerdict:
        log.error("Dataset rejected: %s", reason)
        return SanityVerdict.reject(reason)
