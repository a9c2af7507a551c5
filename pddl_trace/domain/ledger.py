"""Cumulative per-resource pickup counts across an episode."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pddl_trace.domain.grid import CellGrid

if TYPE_CHECKING:
    from pddl_trace.config.types import DomainConfig

logger = logging.getLogger(__name__)


class ResourceLedger:
    """Running count of resources picked up, keyed by resource sprite key.

    Counts never decrease: a resource that appears between two snapshots
    (negative delta) leaves the ledger untouched.
    """

    def __init__(self, resource_keys: tuple[str, ...]) -> None:
        self.resource_keys = resource_keys
        self._picked: dict[str, int] = {key: 0 for key in resource_keys}

    @classmethod
    def for_config(cls, config: DomainConfig) -> ResourceLedger:
        return cls(tuple(config.picked_resources))

    def update(self, before: CellGrid, after: CellGrid) -> dict[str, int]:
        """Accumulate resources consumed between two snapshots.

        Returns the per-key delta applied by this call (zero for keys whose
        count held or grew).
        """
        before_counts = before.count(self.resource_keys)
        after_counts = after.count(self.resource_keys)
        deltas: dict[str, int] = {}
        for key in self.resource_keys:
            delta = before_counts[key] - after_counts[key]
            if delta < 0:
                logger.debug("Resource %s appeared mid-episode (%+d); ledger unchanged", key, delta)
                delta = 0
            self._picked[key] += delta
            deltas[key] = delta
        return deltas

    def picked(self, key: str) -> int:
        return self._picked[key]

    def snapshot(self) -> dict[str, int]:
        """Copy of the cumulative counts, in resource-key order."""
        return dict(self._picked)
