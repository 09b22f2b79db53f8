"""
TTCards Constants that cannot be changed and are hardcoded intentionally
"""

import os
import pathlib
from typing import Dict, List, Set

TOP_LEVEL_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
RESOURCE_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath("ttcards").joinpath("resources")
CONFIG_PATH: pathlib.Path = RESOURCE_PATH.joinpath("ttcards.properties")
ENV_OUT_PATH: pathlib.Path = (
    pathlib.Path(os.environ.get("TTCARDS_OUTPUT_PATH", TOP_LEVEL_DIR))
    .expanduser()
    .resolve()
)
LOG_PATH: pathlib.Path = ENV_OUT_PATH.joinpath("ttcards_logs")

# Content directory layout
CARD_BASE_FILE: str = "card_base.json"
CARDS_DIR: str = "cards"
BINDER_BASE_FILE: str = "binder_base.json"
CONTAINER_BASE_FILE: str = "container_base.json"
CONTAINERS_DIR: str = "containers"
BINDER_OVERRIDE_TEMPLATE: str = "ttc_binder_{theme}.json"
COLLECTOR_ALBUM_FILE: str = "ttc_collector_album.json"
EMPTY_BOOSTER_FILE: str = "ttc_empty_booster_pack.json"
PROBABILITIES_FILE: str = "probabilities.json"

DEFAULT_TRADER_PRICE: int = 1000
GLOBAL_LOOT_SCALE: float = 0.2

CURRENCY_MAP: Dict[str, str] = {
    "roubles": "5449016a4bdc2d6f028b456f",
    "dollars": "5696686a4bdc2da3298b456a",
    "euros": "5ac3b934156ae10c4430e83c",
}

# Gear with grids that historically shipped without a filter list
COMPAT_PARENT_IDS: Set[str] = {
    "5448e53e4bdc2d60728b4567",  # Backpack
    "5448bf274bdc2dfc2f8b456a",  # Mob container
}
COMPAT_EXCLUDED_IDS: Set[str] = {"5c0a794586f77461c458f892"}  # Boss container
COMPAT_DEFAULT_FILTER: List[Dict[str, List[str]]] = [
    {"Filter": ["54009119af1c881c07000029"], "ExcludedFilter": [""]}
]

# General purpose storage cases that accept every card
CARD_STORAGE_CASE_IDS: List[str] = [
    "5d235bb686f77443f4331278",  # S I C C
    "590c60fc86f77412b13fddcf",  # Documents case
]

# Secure containers and pouches that accept the empty booster
SECURE_CONTAINER_IDS: List[str] = [
    "544a11ac4bdc2d470e8b456a",  # Alpha
    "5857a8b324597729ab0a0e7d",  # Beta
    "59db794186f77448bc595262",  # Epsilon
    "5857a8bc2459772bad15db29",  # Gamma
    "665ee77ccf2d642e98220bca",  # Gamma (TUE)
    "5c093ca986f7740a1867ab12",  # Kappa
    "676008db84e242067d0dc4c9",  # Kappa (Desecrated)
    "664a55d84a90fc2c8a6305c9",  # Theta
    "5732ee6a24597719ae0c0281",  # Waist pouch
]

EMPTY_BOOSTER_GRID_SIDE: int = 4
HANDBOOK_PRICE_KEY: str = "Price"
