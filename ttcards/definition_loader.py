"""
Reads authored card and container JSON from a content directory
"""
import logging
import pathlib
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from . import constants
from .container_builder import ContainerAssets
from .models import Definition
from .utils import load_json_file

LOGGER = logging.getLogger(__name__)


def load_definitions(content_dir: pathlib.Path) -> List[Definition]:
    """
    Load every cards/*.json, each laid shallowly over card_base.json.
    Files are read in name order; a file that does not validate is
    skipped and the rest still load.
    :param content_dir: Content directory
    :return: Definitions in file name order
    """
    base_path = content_dir.joinpath(constants.CARD_BASE_FILE)
    base_config: Dict[str, Any] = load_json_file(base_path) if base_path.is_file() else {}

    definitions = []
    for card_file in sorted(content_dir.joinpath(constants.CARDS_DIR).glob("*.json")):
        try:
            definitions.append(
                Definition.model_validate({**base_config, **load_json_file(card_file)})
            )
        except (ValueError, ValidationError) as error:
            LOGGER.error(f"Unable to load card {card_file.name}: {error}")

    LOGGER.info(f"Loaded {len(definitions)} card definitions from {content_dir}")
    return definitions


def _optional_json(file_path: pathlib.Path) -> Optional[Dict[str, Any]]:
    if not file_path.is_file():
        return None
    return load_json_file(file_path)


def load_container_assets(content_dir: pathlib.Path, themes: List[str]) -> ContainerAssets:
    """
    Load the base shapes and the overrides of every composite container
    :param content_dir: Content directory
    :param themes: Themes that need a binder
    :return: Assets; missing overrides are left out
    """
    containers_dir = content_dir.joinpath(constants.CONTAINERS_DIR)

    binder_overrides = {}
    for theme in themes:
        override = _optional_json(
            containers_dir.joinpath(constants.BINDER_OVERRIDE_TEMPLATE.format(theme=theme))
        )
        if override is not None:
            binder_overrides[theme] = override

    return ContainerAssets(
        binder_base=_optional_json(content_dir.joinpath(constants.BINDER_BASE_FILE)) or {},
        container_base=_optional_json(content_dir.joinpath(constants.CONTAINER_BASE_FILE))
        or {},
        binder_overrides=binder_overrides,
        album_override=_optional_json(containers_dir.joinpath(constants.COLLECTOR_ALBUM_FILE)),
        empty_booster_override=_optional_json(
            containers_dir.joinpath(constants.EMPTY_BOOSTER_FILE)
        ),
    )
