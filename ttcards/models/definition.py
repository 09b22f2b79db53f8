"""Authored card and container definitions."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..rarity import Rarity


class ExternalSize(BaseModel):
    """Inventory footprint in cells."""

    model_config = ConfigDict(frozen=True)

    width: int = 1
    height: int = 1


class Definition(BaseModel):
    """
    One card or container to inject, as authored on disk.

    JSON keys are kept verbatim, the few that clash with Python naming
    (``_props``, ``Slots``, ``Grids``, ``ExternalSize``) go through aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    item_name: str
    item_short_name: str = ""
    item_description: str = ""
    clone_item: str
    item_parent: str = ""
    category_id: str = ""
    rarity: Rarity = Rarity.COMMON

    price: Optional[float] = None
    currency: str = "roubles"
    sold: bool = False
    trader: str = ""
    trader_loyalty_level: int = 1
    unlimited_stock: bool = True
    stock_amount: int = 999999

    stack_max_size: int = 1
    weight: float = 0.01
    external_size: ExternalSize = Field(default_factory=ExternalSize, alias="ExternalSize")
    item_sound: str = "generic"
    item_prefab_path: str = ""
    color: str = "default"
    examined_by_default: Optional[bool] = None

    lootable: bool = False
    loot_locations: Dict[str, List[str]] = Field(default_factory=dict)
    theme: Optional[str] = None

    props: Dict[str, Any] = Field(default_factory=dict, alias="_props")
    slots: Optional[List[Dict[str, Any]]] = Field(default=None, alias="Slots")
    grids: Optional[List[Dict[str, Any]]] = Field(default=None, alias="Grids")

    @property
    def label(self) -> str:
        """Short identifier used in log lines"""
        return self.item_short_name or self.id

    def has_explicit_price(self) -> bool:
        """Only a positive price counts, anything else derives from rarity"""
        return self.price is not None and self.price > 0
