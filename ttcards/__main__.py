"""
TTCards Main Executor
"""

import argparse
import logging
import traceback

from ttcards import constants
from ttcards.arg_parser import parse_args
from ttcards.definition_loader import load_container_assets, load_definitions
from ttcards.errors import ConfigurationError
from ttcards.pipeline import run_pipeline
from ttcards.store import ContentStore
from ttcards.ttcards_config import TtcConfig
from ttcards.utils import init_logger

LOGGER: logging.Logger = logging.getLogger(__name__)


def dispatcher(args: argparse.Namespace, config: TtcConfig) -> None:
    """
    TTCards Dispatcher
    """
    store = ContentStore.from_file(args.store)
    definitions = load_definitions(args.content)

    assets = None
    if not args.no_containers:
        themes = sorted({definition.theme for definition in definitions if definition.theme})
        assets = load_container_assets(args.content, themes)

    report = run_pipeline(
        store,
        definitions,
        config,
        assets=assets,
        snapshot_path=args.probabilities
        or args.content.joinpath(constants.PROBABILITIES_FILE),
    )
    LOGGER.info(
        f"{len(report.injected)} of {len(report.results)} cards injected, "
        f"{len(report.composites)} composite container(s) built"
    )

    store.write(args.output, args.pretty)


def main() -> None:
    """
    Main Method
    """
    args = parse_args()
    config = TtcConfig(args.config)
    init_logger(config.debug)

    LOGGER.info(f"Starting TTCards {config.version}")

    try:
        dispatcher(args, config)
    except ConfigurationError as error:
        LOGGER.fatal(f"Configuration Error: {error}")
        raise SystemExit(1) from error
    except Exception as error:
        LOGGER.fatal(f"Exception caught: {error} {traceback.format_exc()}")
        raise SystemExit(1) from error


if __name__ == "__main__":
    main()
