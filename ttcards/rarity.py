"""
Rarity ladder and the loot weight table that rides on it
"""
import decimal
import enum
import logging
from collections import Counter
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


class Rarity(str, enum.Enum):
    """Closed rarity enumeration, declared lowest first"""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    SECRET = "Secret"

    @property
    def rank(self) -> int:
        """Position on the ladder, Common is 0"""
        return list(Rarity).index(self)

    def __str__(self) -> str:
        return self.value


class Rankable(Protocol):
    """Anything sortable by the rarity model"""

    rarity: Rarity
    item_name: str


def weight_of(rarity: Rarity) -> int:
    """
    Sort weight of a rarity tier
    :param rarity: Rarity tier
    :return: Ordinal weight, ascending with rarity
    """
    return Rarity(rarity).rank


def compare(a: Rankable, b: Rankable) -> int:
    """
    Order two cards by rarity, then by display name ignoring case
    :param a: First card
    :param b: Second card
    :return: -1, 0 or 1
    """
    diff = weight_of(a.rarity) - weight_of(b.rarity)
    if diff:
        return -1 if diff < 0 else 1

    a_name, b_name = a.item_name.casefold(), b.item_name.casefold()
    if a_name == b_name:
        a_name, b_name = a.item_name, b.item_name
    return (a_name > b_name) - (a_name < b_name)


def sort_key(card: Rankable) -> Any:
    """Key function equivalent of compare()"""
    return weight_of(card.rarity), card.item_name.casefold(), card.item_name


def validate_weights(weights: Optional[Mapping[str, Any]]) -> Dict[Rarity, float]:
    """
    Make sure every rarity has a numeric loot weight and the six weights
    sum to exactly 1.0. Summation is done on the decimal literals so that
    0.1 + 0.2 style float drift does not reject a correct table.
    :param weights: Raw rarity name to weight table
    :return: Validated weight table
    :raises ConfigurationError: on any violation
    """
    if not isinstance(weights, Mapping):
        LOGGER.error("RarityWeights section not found in config")
        raise ConfigurationError("rarity weights are missing or invalid")

    validated: Dict[Rarity, float] = {}
    total = decimal.Decimal(0)
    for rarity in Rarity:
        weight = weights.get(rarity.value)
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            LOGGER.error(f"RarityWeights.{rarity.value} is not a number")
            raise ConfigurationError(f"rarity weight {rarity.value} must be a number")
        validated[rarity] = float(weight)
        total += decimal.Decimal(repr(float(weight)))

    if total != decimal.Decimal(1):
        LOGGER.error(f"RarityWeights sum is {total} but must equal 1.0")
        raise ConfigurationError(f"rarity weights must sum to exactly 1.0, got {total}")

    LOGGER.info(f"Rarity weights validation passed (sum: {total})")
    return validated


def count_by_rarity(cards: Iterable[Rankable]) -> Counter:
    """
    How many cards share each rarity tier
    :param cards: Cards in this run
    :return: Rarity to count
    """
    return Counter(Rarity(card.rarity) for card in cards)
