"""
Orders the injection phases of one run
"""
import logging
import pathlib
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from . import constants
from .container_builder import (
    ContainerAssets,
    ContainerBuilder,
    extend_container_filters,
    group_by_theme,
)
from .errors import TtcError
from .injector import CrossTableInjector, InjectionResult
from .models import Definition
from .probability import ProbabilityEngine
from .rarity import Rarity, count_by_rarity, validate_weights
from .store import ContentStore
from .ttcards_config import TtcConfig

LOGGER = logging.getLogger(__name__)


@dataclass
class PipelineReport:
    """What one run did"""

    results: List[InjectionResult] = field(default_factory=list)
    loaded_by_rarity: Counter = field(default_factory=Counter)
    composites: List[Definition] = field(default_factory=list)
    definitions: List[Definition] = field(default_factory=list)
    filter_insertions: Dict[str, int] = field(default_factory=dict)

    @property
    def injected(self) -> List[InjectionResult]:
        """Definitions that made it into the store"""
        return [result for result in self.results if result.injected]

    @property
    def failed(self) -> List[InjectionResult]:
        """Definitions that were skipped"""
        return [result for result in self.results if not result.injected]


def run_pipeline(
    store: ContentStore,
    definitions: Sequence[Definition],
    config: TtcConfig,
    assets: Optional[ContainerAssets] = None,
    snapshot_path: Optional[pathlib.Path] = None,
    engine: Optional[ProbabilityEngine] = None,
) -> PipelineReport:
    """
    Validate settings, inject every card, extend storage case filters,
    then build and inject the composite containers.
    :param store: Host content store, mutated in place
    :param definitions: Cards to inject, in order
    :param config: Run configuration
    :param assets: Composite container shapes; no composites without them
    :param snapshot_path: probabilities.json location
    :param engine: Pre-built probability engine, mostly for tests
    :return: Run report
    :raises ConfigurationError: invalid rarity weights, before any mutation
    """
    rarity_weights = validate_weights(config.rarity_weights)

    if engine is None:
        engine = (
            ProbabilityEngine.from_snapshot(snapshot_path)
            if snapshot_path is not None
            else ProbabilityEngine()
        )
    engine.prepare(store, config.auto_update_probabilities, snapshot_path)

    report = PipelineReport(definitions=list(definitions))
    injector = CrossTableInjector(
        store, config, engine, count_by_rarity(definitions), rarity_weights
    )

    LOGGER.info(f"Injecting {len(definitions)} cards")
    for definition in definitions:
        report.results.append(injector.inject_card(definition))

    report.loaded_by_rarity = Counter(result.rarity for result in report.injected)
    for rarity in Rarity:
        if report.loaded_by_rarity[rarity]:
            LOGGER.info(f"-> {rarity}: {report.loaded_by_rarity[rarity]} card(s) loaded.")
    for result in report.failed:
        LOGGER.warning(f"Skipped {result.label}: {result.error}")

    report.filter_insertions["storage_cases"] = extend_container_filters(
        store,
        constants.CARD_STORAGE_CASE_IDS,
        [result.definition_id for result in report.injected],
        "storage case",
    )

    if assets is None:
        LOGGER.info("No container assets, skipping composite containers")
        return report

    builder = ContainerBuilder(store, injector, assets)
    injected_ids = {result.definition_id for result in report.injected}
    cards = [definition for definition in definitions if definition.id in injected_ids]

    for theme, themed_cards in group_by_theme(cards).items():
        binder = _build_safely(
            f"binder '{theme}'", builder.build_themed_binder, themed_cards, theme
        )
        _keep(report, binder)
    _keep(report, _build_safely("collector album", builder.build_collector_album, cards))
    booster = _build_safely("empty booster", builder.build_empty_booster, cards)
    _keep(report, booster)

    if booster is not None:
        report.filter_insertions["secure_containers"] = extend_container_filters(
            store, constants.SECURE_CONTAINER_IDS, [booster.id], "secure container"
        )

    return report


def _build_safely(
    description: str, build: Callable[..., Optional[Definition]], *args: Any
) -> Optional[Definition]:
    try:
        return build(*args)
    except TtcError as error:
        LOGGER.error(f"Unable to build {description}: {error}")
    except Exception as error:
        LOGGER.error(
            f"Unable to build {description}: {type(error).__name__}: {error}"
        )
    return None


def _keep(report: PipelineReport, composite: Optional[Definition]) -> None:
    if composite is not None:
        report.composites.append(composite)
        report.definitions.append(composite)
