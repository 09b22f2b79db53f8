"""
Loot baselines and per-card spawn weights
"""
import logging
import math
import pathlib
from typing import Dict, List, Mapping, Optional

import polars as pl
from pydantic import ValidationError

from . import constants
from .errors import MissingContainerBaselineError
from .models import LootBaseline
from .rarity import Rarity
from .store import ContentStore
from .utils import load_json_file, normalize_number, write_json_file

LOGGER = logging.getLogger(__name__)

BaselineTable = Dict[str, Dict[str, LootBaseline]]


def rarity_pool(
    max_found: float, rarity_weight: float, user_multiplier: float = 1.0
) -> float:
    """
    Total spawn budget a rarity tier gets in one container
    :param max_found: Baseline max_found of the container
    :param rarity_weight: Configured loot weight of the tier
    :param user_multiplier: User facing find rate multiplier
    :return: Unrounded pool
    """
    global_multiplier = user_multiplier * constants.GLOBAL_LOOT_SCALE
    return max_found * global_multiplier * rarity_weight


def relative_probability(
    rarity: Rarity,
    baseline: LootBaseline,
    rarity_counts: Mapping[Rarity, int],
    rarity_weights: Mapping[Rarity, float],
    user_multiplier: float = 1.0,
) -> int:
    """
    Relative probability of one card in one container. The tier's pool is
    split evenly over every card sharing the tier, never dropping below 1.
    :param rarity: Card rarity
    :param baseline: Container baseline statistics
    :param rarity_counts: Cards per rarity in this run
    :param rarity_weights: Validated loot weight table
    :param user_multiplier: User facing find rate multiplier
    :return: Integer weight >= 1
    """
    pool = rarity_pool(baseline.max_found, rarity_weights[rarity], user_multiplier)
    share = rarity_counts.get(rarity) or 1
    return max(1, math.ceil(pool / share))


class ProbabilityEngine:
    """
    Owns the baseline table for one run. Baselines are settled before the
    first card is injected and are read-only afterwards.
    """

    baselines: BaselineTable

    def __init__(self, baselines: Optional[BaselineTable] = None):
        self.baselines = baselines or {}

    @classmethod
    def from_snapshot(cls, snapshot_path: pathlib.Path) -> "ProbabilityEngine":
        """
        Load a persisted snapshot, or start empty if there is none
        :param snapshot_path: probabilities.json
        :return: Engine
        """
        if not snapshot_path.is_file():
            LOGGER.info(f"No probability snapshot at {snapshot_path}")
            return cls()

        baselines: BaselineTable = {}
        for map_name, containers in load_json_file(snapshot_path).items():
            for container_id, raw_stats in (containers or {}).items():
                try:
                    stats = LootBaseline.model_validate(raw_stats)
                except ValidationError as error:
                    LOGGER.warning(
                        f"Ignoring bad snapshot entry {map_name}/{container_id}: {error}"
                    )
                    continue
                baselines.setdefault(map_name, {})[container_id] = stats

        LOGGER.info(f"Loaded probability snapshot from {snapshot_path}")
        return cls(baselines)

    @staticmethod
    def compute_baselines(store: ContentStore) -> BaselineTable:
        """
        Scan every static loot distribution once and derive its baseline.
        Containers whose weights sum to zero get no record.
        :param store: Content store, not modified
        :return: Map name -> container id -> baseline
        """
        map_names: List[str] = []
        container_ids: List[str] = []
        weights: List[Optional[float]] = []

        for map_name, container_id, distribution in store.iter_static_loot():
            if not isinstance(distribution, list):
                continue
            for entry in distribution:
                value = entry.get("relativeProbability") if isinstance(entry, dict) else None
                map_names.append(map_name)
                container_ids.append(container_id)
                weights.append(
                    float(value)
                    if isinstance(value, (int, float)) and not isinstance(value, bool)
                    else None
                )

        baselines: BaselineTable = {}
        if not weights:
            return baselines

        totals = (
            pl.DataFrame(
                {
                    "map_name": map_names,
                    "container_id": container_ids,
                    "relative_probability": weights,
                },
                schema={
                    "map_name": pl.String,
                    "container_id": pl.String,
                    "relative_probability": pl.Float64,
                },
            )
            .group_by(["map_name", "container_id"], maintain_order=True)
            .agg(pl.col("relative_probability").sum().alias("total"))
            .filter(pl.col("total") > 0)
        )

        for map_name, container_id, total in totals.iter_rows():
            baselines.setdefault(map_name, {})[container_id] = LootBaseline.from_total(
                normalize_number(total)
            )
        return baselines

    def merge(self, regenerated: BaselineTable) -> None:
        """
        Lay freshly computed baselines over the current table, new wins
        :param regenerated: Output of compute_baselines
        """
        for map_name, containers in regenerated.items():
            self.baselines.setdefault(map_name, {}).update(containers)

    def to_json(self) -> Dict[str, Dict[str, Dict[str, float]]]:
        """Snapshot form, using the persisted key names"""
        return {
            map_name: {
                container_id: stats.model_dump(by_alias=True)
                for container_id, stats in containers.items()
            }
            for map_name, containers in self.baselines.items()
        }

    def save(self, snapshot_path: pathlib.Path) -> None:
        """
        Persist the table
        :param snapshot_path: probabilities.json
        """
        write_json_file(snapshot_path, self.to_json())
        LOGGER.info(f"{snapshot_path.name} auto-updated")

    def prepare(
        self,
        store: ContentStore,
        regenerate: bool,
        snapshot_path: Optional[pathlib.Path] = None,
    ) -> None:
        """
        Settle the baselines for a run. With regenerate set, the pristine
        store is scanned, merged over the snapshot and written back. Without
        a snapshot the scan still runs, in memory only.
        :param store: Content store before any card is injected
        :param regenerate: Rescan and persist
        :param snapshot_path: Where the snapshot lives
        """
        if regenerate:
            self.merge(self.compute_baselines(store))
            if snapshot_path is not None:
                self.save(snapshot_path)
        elif not self.baselines:
            LOGGER.info("No baselines loaded, computing them for this run only")
            self.merge(self.compute_baselines(store))

    def baseline_for(self, map_name: str, container_id: str) -> LootBaseline:
        """
        Baseline of a container
        :param map_name: Map name
        :param container_id: Static container id
        :return: Baseline record
        :raises MissingContainerBaselineError: nothing known for the pair
        """
        stats = self.baselines.get(map_name, {}).get(container_id)
        if stats is None:
            raise MissingContainerBaselineError(map_name, container_id)
        return stats
