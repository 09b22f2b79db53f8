"""Pytest configuration and fixtures for TTCards tests."""

import copy
import re
from types import SimpleNamespace
from typing import Any, Callable, Dict

import pytest

from ttcards.container_builder import ContainerAssets
from ttcards.models import Definition
from ttcards.store import ContentStore
from ttcards.ttcards_config import TtcConfig

CARD_CLONE_ID = "5c12613b86f7743bbe2c3f76"
CARD_PARENT_ID = "5448ecbe4bdc2d60728b4568"
BINDER_CLONE_ID = "binder_mount_tpl"
BOOSTER_CLONE_ID = "booster_shell_tpl"
SICC_ID = "5d235bb686f77443f4331278"
DOC_ID = "590c60fc86f77412b13fddcf"
ALPHA_ID = "544a11ac4bdc2d470e8b456a"
BACKPACK_ID = "backpack_without_filters"
MAIN_TRADER = "trader_main"
FALLBACK_TRADER = "trader_fallback"

CONFIG_TEXT = f"""
[TTC]
version=9.9.9
card_weight_multiplier=1
fallback_trader={FALLBACK_TRADER}
cards_tradeable_on_flea=false
cards_examined_by_default=false
auto_update_probabilities=false
enable_container_spawns=true
idempotent_writes=true

[RarityWeights]
Common=0.35
Uncommon=0.25
Rare=0.2
Epic=0.1
Legendary=0.07
Secret=0.03

[TraderSellPrices]
Common=1000
Rare=6000
"""

BASE_TABLES: Dict[str, Any] = {
    "templates": {
        "items": {
            CARD_CLONE_ID: {
                "_id": CARD_CLONE_ID,
                "_name": "item_barter_info",
                "_parent": CARD_PARENT_ID,
                "_type": "Item",
                "_props": {
                    "Name": "Diary",
                    "Width": 1,
                    "Height": 2,
                    "Weight": 0.1,
                    "QuestItem": True,
                    "ConflictingItems": ["someone"],
                    "CanSellOnRagfair": True,
                    "Rarity": "Rare",
                    "Tags": ["paper"],
                },
            },
            BINDER_CLONE_ID: {
                "_id": BINDER_CLONE_ID,
                "_name": "mount",
                "_parent": "binder_parent",
                "_props": {"Name": "Mount", "Slots": [{"_name": "old"}], "Durability": 100},
            },
            BOOSTER_CLONE_ID: {
                "_id": BOOSTER_CLONE_ID,
                "_name": "shell",
                "_parent": "booster_parent",
                "_props": {"Name": "Shell", "Grids": []},
            },
            SICC_ID: {
                "_id": SICC_ID,
                "_parent": "5795f317245977243854e041",
                "_props": {
                    "Grids": [
                        {"_props": {"filters": [{"Filter": ["doc_a"], "ExcludedFilter": []}]}}
                    ]
                },
            },
            DOC_ID: {
                "_id": DOC_ID,
                "_parent": "5795f317245977243854e041",
                "_props": {
                    "Grids": [
                        {"_props": {"filters": [{"Filter": [], "ExcludedFilter": []}]}},
                        {"_props": {"filters": [{"Filter": ["doc_b"], "ExcludedFilter": []}]}},
                    ]
                },
            },
            ALPHA_ID: {
                "_id": ALPHA_ID,
                "_parent": "5448bf274bdc2dfc2f8b456a",
                "_props": {
                    "Grids": [
                        {"_props": {"filters": [{"Filter": ["money"], "ExcludedFilter": []}]}}
                    ]
                },
            },
            BACKPACK_ID: {
                "_id": BACKPACK_ID,
                "_parent": "5448e53e4bdc2d60728b4567",
                "_props": {"Grids": [{"_props": {"cellsH": 4}}]},
            },
        },
        "handbook": {"Items": []},
    },
    "locales": {"global": {"en": {}, "fr": {}}},
    "traders": {
        MAIN_TRADER: {"assort": {"items": [], "barter_scheme": {}, "loyal_level_items": {}}},
        FALLBACK_TRADER: {
            "assort": {"items": [], "barter_scheme": {}, "loyal_level_items": {}}
        },
    },
    "locations": {
        "bigmap": {
            "staticLoot": {
                "jacket": {
                    "itemDistribution": [
                        {"tpl": "a", "relativeProbability": 60},
                        {"tpl": "b", "relativeProbability": 40},
                    ]
                },
                "drawer": {"itemDistribution": [{"tpl": "c", "relativeProbability": 5}]},
                "empty_box": {"itemDistribution": []},
                "zero_box": {"itemDistribution": [{"tpl": "d", "relativeProbability": 0}]},
            }
        },
        "woods": {
            "staticLoot": {
                "jacket": {"itemDistribution": [{"tpl": "a", "relativeProbability": 1000}]}
            }
        },
        "hideout": {"base": {}},
    },
    "ragfair": {
        "dynamic": {"blacklist": [], "condition": {CARD_PARENT_ID: False}},
        "static": {"blacklist": []},
    },
}


@pytest.fixture
def tables() -> Dict[str, Any]:
    """A fresh copy of the synthetic database."""
    return copy.deepcopy(BASE_TABLES)


@pytest.fixture
def store(tables: Dict[str, Any]) -> ContentStore:
    """Content store over a fresh synthetic database."""
    return ContentStore(tables)


@pytest.fixture
def make_config() -> Callable[..., TtcConfig]:
    """Build a config from the test properties, with [TTC] overrides."""

    def _make(**overrides: Any) -> TtcConfig:
        text = CONFIG_TEXT
        for key, value in overrides.items():
            line = f"{key}={str(value).lower()}"
            if re.search(rf"^{key}=", text, flags=re.MULTILINE):
                text = re.sub(rf"^{key}=.*$", line, text, flags=re.MULTILINE)
            else:
                text = text.replace("[TTC]\n", f"[TTC]\n{line}\n", 1)
        return TtcConfig(config_text=text)

    return _make


@pytest.fixture
def config(make_config: Callable[..., TtcConfig]) -> TtcConfig:
    """Config built from the test properties."""
    return make_config()


@pytest.fixture
def make_card() -> Callable[..., Definition]:
    """Build a card definition with sensible defaults."""

    def _make(card_id: str = "card_1", **overrides: Any) -> Definition:
        fields: Dict[str, Any] = {
            "id": card_id,
            "item_name": f"Card {card_id}",
            "item_short_name": card_id.upper(),
            "item_description": f"Description of {card_id}",
            "clone_item": CARD_CLONE_ID,
            "item_parent": CARD_PARENT_ID,
            "category_id": "hb_cards",
            "rarity": "Common",
            "price": -1,
            "currency": "roubles",
            "trader": MAIN_TRADER,
            "ExternalSize": {"width": 1, "height": 1},
        }
        fields.update(overrides)
        return Definition.model_validate(fields)

    return _make


@pytest.fixture
def assets() -> ContainerAssets:
    """Binder, album and booster shapes over the synthetic clone sources."""
    return ContainerAssets(
        binder_base={
            "id": "binder_base",
            "item_name": "Binder",
            "clone_item": BINDER_CLONE_ID,
            "category_id": "hb_binders",
            "price": 25000,
            "sold": True,
            "trader": MAIN_TRADER,
            "ExternalSize": {"width": 2, "height": 2},
        },
        container_base={
            "id": "container_base",
            "item_name": "Container",
            "clone_item": BOOSTER_CLONE_ID,
            "category_id": "hb_containers",
            "ExternalSize": {"width": 1, "height": 1},
        },
        binder_overrides={
            "fauna": {"id": "binder_fauna", "item_name": "Fauna Binder"},
            "weapons": {"id": "binder_weapons", "item_name": "Weapons Binder"},
        },
        album_override={"id": "collector_album", "item_name": "Collector Album"},
        empty_booster_override={
            "id": "68836790691c107f4fedc511",
            "item_name": "Empty Booster",
            "item_short_name": "Booster",
        },
    )


@pytest.fixture
def ids() -> SimpleNamespace:
    """Well known template and trader ids of the synthetic database."""
    return SimpleNamespace(
        card_clone=CARD_CLONE_ID,
        card_parent=CARD_PARENT_ID,
        binder_clone=BINDER_CLONE_ID,
        booster_clone=BOOSTER_CLONE_ID,
        sicc=SICC_ID,
        doc=DOC_ID,
        alpha=ALPHA_ID,
        backpack=BACKPACK_ID,
        main_trader=MAIN_TRADER,
        fallback_trader=FALLBACK_TRADER,
    )
