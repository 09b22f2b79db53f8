"""
Item template synthesis from a clone source and a definition
"""
import copy
import logging
from typing import Any, Dict

from .errors import MissingBaseTemplateError
from .models import Definition
from .store import ContentStore
from .ttcards_config import TtcConfig
from .utils import normalize_number

LOGGER = logging.getLogger(__name__)


def calculate_trader_price(definition: Definition, config: TtcConfig) -> Any:
    """
    Trader price of a definition. An explicit positive price wins,
    otherwise the configured price of the definition's rarity tier.
    :param definition: Card or container
    :param config: Run configuration
    :return: Price in the definition's currency
    """
    if definition.has_explicit_price():
        return normalize_number(definition.price)
    return normalize_number(config.trader_price_for(definition.rarity.value))


def synthesize(
    definition: Definition, clone_source: Dict[str, Any], config: TtcConfig
) -> Dict[str, Any]:
    """
    Build a new, fully independent template. Overlay precedence, later wins:
      1. deep copy of the clone source
      2. the definition's raw _props block, then its Slots and Grids
      3. identity fields (_id, _name, _parent)
      4. presentation, footprint and gameplay safety fields
    :param definition: Card or container to build
    :param clone_source: Template to copy from, left untouched
    :param config: Run configuration
    :return: New template
    """
    template = copy.deepcopy(clone_source)
    props = template.setdefault("_props", {})

    props.update(copy.deepcopy(definition.props))
    if definition.slots is not None:
        props["Slots"] = copy.deepcopy(definition.slots)
    if definition.grids is not None:
        props["Grids"] = copy.deepcopy(definition.grids)

    template.update(
        {
            "_id": definition.id,
            "_name": definition.item_name,
            "_parent": definition.item_parent or clone_source.get("_parent", ""),
        }
    )

    # One switch drives both directions of flea market trading
    can_trade_on_flea = config.cards_tradeable_on_flea
    if can_trade_on_flea:
        LOGGER.debug(f"Card {definition.label} configured for flea market trading")

    examined = definition.examined_by_default
    if examined is None:
        examined = config.cards_examined_by_default

    props.update(
        {
            "Prefab": {"path": definition.item_prefab_path},
            "Name": definition.item_name,
            "ShortName": definition.item_short_name,
            "Description": definition.item_description,
            "BackgroundColor": definition.color,
            "CanSellOnRagfair": can_trade_on_flea,
            "CanRequireOnRagfair": can_trade_on_flea,
            "ConflictingItems": [],
            "Unlootable": False,
            "UnlootableFromSlot": "FirstPrimaryWeapon",
            "UnlootableFromSide": [],
            "AnimationVariantsNumber": 0,
            "DiscardingBlock": False,
            "RagFairCommissionModifier": 1,
            "IsAlwaysAvailableForInsurance": False,
            "StackMaxSize": definition.stack_max_size,
            "Weight": definition.weight,
            "Width": definition.external_size.width,
            "Height": definition.external_size.height,
            "ItemSound": definition.item_sound,
            "QuestItem": False,
            "InsuranceDisabled": True,
            "ExaminedByDefault": examined,
        }
    )
    return template


def build_template(
    definition: Definition, store: ContentStore, config: TtcConfig
) -> Dict[str, Any]:
    """
    Look up the clone source of a definition and synthesize from it
    :param definition: Card or container to build
    :param store: Content store holding the clone source
    :param config: Run configuration
    :return: New template
    :raises MissingBaseTemplateError: clone source not in the store
    """
    clone_source = store.get_template(definition.clone_item)
    if clone_source is None:
        raise MissingBaseTemplateError(definition.id, definition.clone_item)
    return synthesize(definition, clone_source, config)
