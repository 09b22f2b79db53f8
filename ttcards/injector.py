"""
Writes one synthesized template and everything that points at it
into the content store
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from . import constants
from .errors import (
    MissingBaseTemplateError,
    MissingContainerBaselineError,
    MissingLocationError,
    MissingTraderError,
)
from .models import Definition
from .probability import ProbabilityEngine, rarity_pool, relative_probability
from .rarity import Rarity
from .store import ContentStore
from .template_builder import build_template, calculate_trader_price
from .ttcards_config import TtcConfig

LOGGER = logging.getLogger(__name__)


@dataclass
class InjectionResult:
    """Outcome of injecting one definition"""

    definition_id: str
    label: str
    rarity: Rarity
    kind: str
    injected: bool = False
    skipped: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def skip(self, reason: str) -> None:
        """Record a unit of work that was left out"""
        self.skipped.append(reason)


class CrossTableInjector:
    """
    Injects cards and containers into the store. One instance per run,
    holding the run's rarity counts and settled probability engine.
    """

    store: ContentStore
    config: TtcConfig
    engine: ProbabilityEngine
    rarity_counts: Mapping[Rarity, int]
    rarity_weights: Mapping[Rarity, float]

    def __init__(
        self,
        store: ContentStore,
        config: TtcConfig,
        engine: ProbabilityEngine,
        rarity_counts: Mapping[Rarity, int],
        rarity_weights: Mapping[Rarity, float],
    ):
        self.store = store
        self.config = config
        self.engine = engine
        self.rarity_counts = rarity_counts
        self.rarity_weights = rarity_weights

    def inject_card(self, definition: Definition) -> InjectionResult:
        """
        Inject a card: template, locales, handbook, trader, loot and market
        :param definition: Card to inject
        :return: Outcome, never raises
        """
        return self._inject(definition, "card")

    def inject_container(self, definition: Definition) -> InjectionResult:
        """
        Inject a container: like a card, minus loot and market visibility
        :param definition: Container to inject
        :return: Outcome, never raises
        """
        return self._inject(definition, "container")

    def _inject(self, definition: Definition, kind: str) -> InjectionResult:
        result = InjectionResult(
            definition_id=definition.id,
            label=definition.label,
            rarity=definition.rarity,
            kind=kind,
        )
        try:
            self.ensure_compat_filters()
            self.store.items[definition.id] = build_template(
                definition, self.store, self.config
            )
            self.add_locales(definition)
            self.add_handbook_entry(definition)
            self._add_to_trader_or_skip(definition, result)
            if kind == "card":
                self.add_to_loot(definition, result)
                self.add_to_ragfair(definition)
        except MissingBaseTemplateError as error:
            LOGGER.warning(f"Skipping {definition.label}: {error}")
            result.error = str(error)
        except Exception as error:
            LOGGER.error(f"Failed to inject {definition.label}: {error}")
            result.error = f"{type(error).__name__}: {error}"
        else:
            result.injected = True
        return result

    def ensure_compat_filters(self) -> int:
        """
        Give gear whose first grid has no filter list a minimal one, so
        later filter edits do not trip over it
        :return: Number of templates patched
        """
        patched = 0
        for template in self.store.items.values():
            if (
                template.get("_parent") not in constants.COMPAT_PARENT_IDS
                or template.get("_id") in constants.COMPAT_EXCLUDED_IDS
            ):
                continue

            grids = template.get("_props", {}).get("Grids")
            if not grids:
                continue

            grid_props = grids[0].setdefault("_props", {})
            if grid_props.get("filters") is None:
                grid_props["filters"] = copy.deepcopy(constants.COMPAT_DEFAULT_FILTER)
                patched += 1
        return patched

    def add_locales(self, definition: Definition) -> None:
        """
        Same text for every language
        :param definition: Card or container
        """
        for locale in self.store.locales.values():
            locale[f"{definition.id} Name"] = definition.item_name
            locale[f"{definition.id} ShortName"] = definition.item_short_name
            locale[f"{definition.id} Description"] = definition.item_description

    def add_handbook_entry(self, definition: Definition) -> None:
        """
        Price entry in the handbook
        :param definition: Card or container
        """
        entry = {
            "Id": definition.id,
            "ParentId": definition.category_id,
            constants.HANDBOOK_PRICE_KEY: calculate_trader_price(definition, self.config),
        }
        self._upsert(self.store.handbook_items, "Id", entry)

    def resolve_trader(self, definition: Definition) -> Dict[str, Any]:
        """
        The definition's trader, or the configured fallback
        :param definition: Card or container
        :return: Trader table
        :raises MissingTraderError: neither exists
        """
        traders = self.store.traders
        trader = traders.get(definition.trader) if definition.trader else None
        if trader is None:
            trader = traders.get(self.config.fallback_trader)
        if trader is None:
            raise MissingTraderError(definition.trader, self.config.fallback_trader)
        return trader

    def add_to_trader(self, definition: Definition) -> None:
        """
        Offer the item at a trader if it is marked as sold
        :param definition: Card or container
        :raises MissingTraderError: no trader to sell it
        """
        if not definition.sold:
            return

        trader = self.resolve_trader(definition)
        assort = trader.setdefault("assort", {})
        currency_tpl = constants.CURRENCY_MAP.get(definition.currency, definition.currency)
        price = calculate_trader_price(definition, self.config)

        self._upsert(
            assort.setdefault("items", []),
            "_id",
            {
                "_id": definition.id,
                "_tpl": definition.id,
                "parentId": "hideout",
                "slotId": "hideout",
                "upd": {
                    "UnlimitedCount": definition.unlimited_stock,
                    "StackObjectsCount": definition.stock_amount,
                },
            },
        )
        assort.setdefault("barter_scheme", {})[definition.id] = [
            [{"count": price, "_tpl": currency_tpl}]
        ]
        assort.setdefault("loyal_level_items", {})[
            definition.id
        ] = definition.trader_loyalty_level

    def _add_to_trader_or_skip(self, definition: Definition, result: InjectionResult) -> None:
        try:
            self.add_to_trader(definition)
        except MissingTraderError as error:
            LOGGER.warning(f"{definition.label}: {error}, not sold")
            result.skip(str(error))

    def add_to_loot(self, definition: Definition, result: InjectionResult) -> None:
        """
        Add the card to every configured static container it has a
        baseline for. Each location succeeds or fails on its own.
        :param definition: Card
        :param result: Collects skipped locations
        """
        if not definition.lootable or not self.config.enable_container_spawns:
            return

        for map_name, container_ids in definition.loot_locations.items():
            try:
                location = self._location(map_name)
            except MissingLocationError as error:
                LOGGER.debug(f"{error} when adding {definition.label}")
                result.skip(str(error))
                continue

            for container_id in container_ids:
                try:
                    self._add_to_container(definition, map_name, location, container_id)
                except MissingContainerBaselineError as error:
                    LOGGER.debug(f"{error} when adding {definition.label}")
                    result.skip(str(error))

    def _location(self, map_name: str) -> Dict[str, Any]:
        location = self.store.locations.get(map_name)
        if not isinstance(location, dict):
            raise MissingLocationError(map_name)
        return location

    def _add_to_container(
        self,
        definition: Definition,
        map_name: str,
        location: Dict[str, Any],
        container_id: str,
    ) -> None:
        baseline = self.engine.baseline_for(map_name, container_id)
        rel_prob = relative_probability(
            definition.rarity,
            baseline,
            self.rarity_counts,
            self.rarity_weights,
            self.config.card_weight_multiplier,
        )

        container = location.setdefault("staticLoot", {}).setdefault(container_id, {})
        self._upsert(
            container.setdefault("itemDistribution", []),
            "tpl",
            {"tpl": definition.id, "relativeProbability": rel_prob},
        )

        pool = rarity_pool(
            baseline.max_found,
            self.rarity_weights[definition.rarity],
            self.config.card_weight_multiplier,
        )
        LOGGER.debug(
            f"Add {definition.label} -> {map_name}/{container_id}"
            f" | rarityPool={pool} | relProb={rel_prob}"
        )

    def add_to_ragfair(self, definition: Definition) -> None:
        """
        Make the card visible on the flea market when trading is switched on
        :param definition: Card
        """
        if not self.config.cards_tradeable_on_flea:
            return

        ragfair = self.store.ragfair
        for section in ("dynamic", "static"):
            blacklist = (ragfair.get(section) or {}).get("blacklist")
            if isinstance(blacklist, list) and _remove_tpl(blacklist, definition.id):
                LOGGER.debug(f"Removed {definition.label} from ragfair {section} blacklist")

        parent_id = definition.item_parent or (
            self.store.get_template(definition.clone_item) or {}
        ).get("_parent")
        condition = (ragfair.get("dynamic") or {}).get("condition")
        if parent_id and isinstance(condition, dict) and parent_id in condition:
            condition[parent_id] = True
            LOGGER.debug(f"Enabled ragfair trading for parent category {parent_id}")

        LOGGER.debug(f"Configured {definition.label} for ragfair trading")

    def _upsert(self, table: List[Dict[str, Any]], key: str, entry: Dict[str, Any]) -> None:
        if self.config.idempotent_writes:
            for index, existing in enumerate(table):
                if isinstance(existing, dict) and existing.get(key) == entry[key]:
                    table[index] = entry
                    return
        table.append(entry)


def _remove_tpl(blacklist: List[Any], template_id: str) -> bool:
    """Drop every entry naming the template, bare id or {"tpl": id}"""
    keep = [
        entry
        for entry in blacklist
        if entry != template_id
        and not (isinstance(entry, dict) and entry.get("tpl") == template_id)
    ]
    removed = len(keep) != len(blacklist)
    blacklist[:] = keep
    return removed
