"""
Composite containers (binders, album, empty booster) derived from the
injected card set, and the filter extension passes that let existing
containers hold cards
"""
import copy
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from . import constants
from .errors import InvalidAssetError, MissingBaseTemplateError
from .injector import CrossTableInjector
from .models import Definition
from .rarity import sort_key
from .store import ContentStore
from .utils import slot_keygen

LOGGER = logging.getLogger(__name__)


@dataclass
class ContainerAssets:
    """Base shapes and per-composite overrides, as authored JSON"""

    binder_base: Dict[str, Any]
    container_base: Dict[str, Any]
    binder_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    album_override: Optional[Dict[str, Any]] = None
    empty_booster_override: Optional[Dict[str, Any]] = None


def group_by_theme(definitions: Iterable[Definition]) -> Dict[str, List[Definition]]:
    """
    Bucket cards by theme tag, in order of first appearance.
    Cards without a theme are left out.
    """
    themes: Dict[str, List[Definition]] = OrderedDict()
    for definition in definitions:
        if definition.theme:
            themes.setdefault(definition.theme, []).append(definition)
    return themes


def extend_container_filters(
    store: ContentStore,
    container_ids: Sequence[str],
    template_ids: Sequence[str],
    description: str = "container",
) -> int:
    """
    Make every filter on every grid of the given containers accept the given
    templates. Ids already present are left alone, so repeated runs add nothing.
    :param store: Content store
    :param container_ids: Containers whose grids to extend
    :param template_ids: Templates to admit
    :param description: Container class, for log lines
    :return: Number of ids inserted
    """
    inserted = 0
    for container_id in container_ids:
        container = store.get_template(container_id)
        grids = (container or {}).get("_props", {}).get("Grids")
        if not grids:
            LOGGER.warning(
                f"{description.capitalize()} {container_id} not found or has no grids"
                " - cannot extend its filter"
            )
            continue

        for grid in grids:
            for item_filter in grid.get("_props", {}).get("filters") or []:
                allowed = item_filter.get("Filter")
                if not isinstance(allowed, list):
                    continue
                for template_id in template_ids:
                    if template_id not in allowed:
                        allowed.append(template_id)
                        inserted += 1

    if inserted:
        LOGGER.info(f"Cards injected into {description} filters ({inserted} insertions)")
    else:
        LOGGER.info(f"Cards already present in {description} filters")
    return inserted


class ContainerBuilder:
    """
    Builds composite containers from cards that made it into the store,
    then pushes them through the injector's container path
    """

    store: ContentStore
    injector: CrossTableInjector
    assets: ContainerAssets

    def __init__(
        self, store: ContentStore, injector: CrossTableInjector, assets: ContainerAssets
    ):
        self.store = store
        self.injector = injector
        self.assets = assets

    def eligible_cards(self, cards: Iterable[Definition]) -> List[Definition]:
        """
        Cards with a template in the store, by rarity then name
        :param cards: Candidate cards
        :return: Sorted eligible cards
        """
        return sorted(
            (card for card in cards if card.id in self.store.items), key=sort_key
        )

    def build_themed_binder(
        self, cards: Sequence[Definition], theme: str
    ) -> Optional[Definition]:
        """
        Binder holding one slot per card of a theme
        :param cards: Cards carrying the theme tag
        :param theme: Theme tag
        :return: Injected binder definition, or None if it has no override asset
        """
        override = self.assets.binder_overrides.get(theme)
        if override is None:
            LOGGER.error(f"No binder definition for theme '{theme}', skipping binder")
            return None

        binder = self._build_slotted(cards, self.assets.binder_base, override)
        if binder is not None:
            LOGGER.info(f"Card binder '{theme}' built with {len(binder.props['Slots'])} cards")
        return binder

    def build_collector_album(self, cards: Sequence[Definition]) -> Optional[Definition]:
        """
        Album holding one slot per card, regardless of theme
        :param cards: Every card of the run
        :return: Injected album definition, or None if it has no override asset
        """
        if self.assets.album_override is None:
            LOGGER.info("No collector album definition, skipping album")
            return None

        album = self._build_slotted(cards, self.assets.binder_base, self.assets.album_override)
        if album is not None:
            LOGGER.info(f"Collector album built with {len(album.props['Slots'])} cards")
        return album

    def build_empty_booster(self, cards: Sequence[Definition]) -> Optional[Definition]:
        """
        Booster with a single grid that accepts any one card
        :param cards: Every card of the run
        :return: Injected booster definition, or None if it has no override asset
        """
        if self.assets.empty_booster_override is None:
            LOGGER.info("No empty booster definition, skipping booster")
            return None

        shape = self._merge_shape(self.assets.container_base, self.assets.empty_booster_override)
        clone = self._clone_source(shape)
        booster_id = shape["id"]
        allowed_tpls = [card.id for card in self.eligible_cards(cards)]
        side = constants.EMPTY_BOOSTER_GRID_SIDE

        props = copy.deepcopy(clone.get("_props", {}))
        props.update(shape["_props"])
        props["Grids"] = [
            {
                "_id": slot_keygen(booster_id, "emptyBooster"),
                "_name": "emptyBooster",
                "_parent": booster_id,
                "_props": {
                    "cellsH": side,
                    "cellsV": side,
                    "minCount": 0,
                    "filters": [{"Filter": allowed_tpls, "ExcludedFilter": []}],
                },
            }
        ]

        booster = self._inject(shape, props, clone)
        if booster is not None:
            LOGGER.info(
                f"Empty Booster built successfully, accepting {len(allowed_tpls)} cards"
            )
        return booster

    def _build_slotted(
        self,
        cards: Sequence[Definition],
        base: Dict[str, Any],
        override: Dict[str, Any],
    ) -> Optional[Definition]:
        shape = self._merge_shape(base, override)
        clone = self._clone_source(shape)
        container_id = shape["id"]

        props = copy.deepcopy(clone.get("_props", {}))
        props.update(shape["_props"])
        props.update(
            {
                "Width": 1,
                "Height": 1,
                "Slots": [
                    {
                        "_id": slot_keygen(container_id, card.id),
                        "_name": f"mod_mount_{card.id}",
                        "_parent": container_id,
                        "_type": "Slot",
                        "_props": {
                            "filters": [{"Filter": [card.id], "ExcludedFilter": []}],
                            "required": False,
                            "max_count": 1,
                            "iconId": "mount",
                        },
                    }
                    for card in self.eligible_cards(cards)
                ],
            }
        )
        return self._inject(shape, props, clone)

    @staticmethod
    def _merge_shape(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(override, dict):
            raise InvalidAssetError("<composite>", "override must be a JSON object")

        shape = copy.deepcopy(base)
        shape.update(copy.deepcopy(override))
        # Structure is generated below, never taken from the assets
        shape.pop("Slots", None)
        shape.pop("Grids", None)

        props = shape.get("_props") or {}
        if not isinstance(props, dict):
            raise InvalidAssetError(
                shape.get("id", "<composite>"), "_props must be a JSON object"
            )
        shape["_props"] = props
        return shape

    def _clone_source(self, shape: Dict[str, Any]) -> Dict[str, Any]:
        clone = self.store.get_template(shape.get("clone_item", ""))
        if clone is None:
            raise MissingBaseTemplateError(
                shape.get("id", "<composite>"), shape.get("clone_item", "")
            )
        return clone

    def _inject(
        self, shape: Dict[str, Any], props: Dict[str, Any], clone: Dict[str, Any]
    ) -> Optional[Definition]:
        definition = Definition.model_validate(
            {**shape, "_props": props, "item_parent": clone.get("_parent", "")}
        )
        result = self.injector.inject_container(definition)
        if not result.injected:
            LOGGER.error(f"Composite {definition.label} was not injected: {result.error}")
            return None
        return definition
