"""
TTCards Arg Parser to determine what actions to take
"""

import argparse
import logging
import pathlib

LOGGER = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """
    Parse command line arguments from user to determine how to run
    the injection and where to find its inputs.
    :return: Namespace of requests
    """
    parser = argparse.ArgumentParser("ttcards")

    parser.add_argument(
        "--store",
        "-s",
        type=pathlib.Path,
        required=True,
        help="JSON dump of the content database to inject into.",
    )
    parser.add_argument(
        "--content",
        "-c",
        type=pathlib.Path,
        required=True,
        help="Content directory holding card_base.json, cards/ and containers/.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=pathlib.Path,
        required=True,
        help="Where to write the mutated content database.",
    )
    parser.add_argument(
        "--config",
        type=pathlib.Path,
        default=None,
        help="Properties file to use instead of the bundled ttcards.properties.",
    )
    parser.add_argument(
        "--probabilities",
        "-P",
        type=pathlib.Path,
        default=None,
        help="Loot baseline snapshot. Defaults to probabilities.json in the content directory.",
    )
    parser.add_argument(
        "--no-containers",
        action="store_true",
        help="Skip building binders, the album and the empty booster.",
    )
    parser.add_argument(
        "--pretty",
        "-p",
        action="store_true",
        help="When dumping JSON files, prettify the contents instead of minifying them.",
    )

    return parser.parse_args()
