"""Loot density statistics for one (map, container) pair."""

import math
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive numbers, like the game's tooling."""
    return int(math.floor(value + 0.5))


class LootBaseline(BaseModel):
    """Baseline statistics, persisted under the snapshot's historic key names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    min_found: Number = 1
    max_found: Number
    average: Number
    p15: Number = Field(alias="15p")
    p65: Number = Field(alias="65p")

    @classmethod
    def from_total(cls, total: Number) -> "LootBaseline":
        """
        Derive the record from the summed relative probabilities of a container
        :param total: Sum of every relativeProbability in the distribution
        :return: Baseline record
        """
        return cls(
            min_found=1,
            max_found=total,
            average=round_half_up(total / 2),
            p15=round_half_up(total * 0.15),
            p65=round_half_up(total * 0.65),
        )
