"""
TTCards simple utilities
"""

import hashlib
import json
import logging
import os
import pathlib
import time
from typing import Any, Dict, Union

from . import constants

LOGGER = logging.getLogger(__name__)


def init_logger(debug: bool = False) -> None:
    """
    Initialize the main system logger
    :param debug: Force DEBUG level regardless of environment
    """
    constants.LOG_PATH.mkdir(parents=True, exist_ok=True)

    start_time = time.strftime("%Y-%m-%d_%H.%M.%S")

    logging.basicConfig(
        level=(
            logging.DEBUG
            if debug or os.environ.get("TTCARDS_DEBUG", "").lower() in ["true", "1"]
            else logging.INFO
        ),
        format="[%(levelname)s] %(asctime)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(
                str(constants.LOG_PATH.joinpath(f"ttcards_{start_time}.log"))
            ),
        ],
    )


def slot_keygen(parent_id: str, child_id: str) -> str:
    """
    Content addressed 24 hex character id for a slot or grid
    :param parent_id: Owning template id
    :param child_id: Template id the slot admits, or a grid name
    :return: Stable id
    """
    return hashlib.sha256(f"{parent_id}:{child_id}".encode()).hexdigest()[:24]


def normalize_number(value: Union[int, float]) -> Union[int, float]:
    """
    Collapse integral floats to int so prices dump as 1000 rather than 1000.0
    :param value: Number
    :return: Same value, as int when lossless
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def load_json_file(file_path: pathlib.Path) -> Any:
    """
    Read a JSON document
    :param file_path: File to read
    :return: Parsed contents
    """
    with file_path.open(encoding="utf-8") as file:
        return json.load(file)


def write_json_file(file_path: pathlib.Path, contents: Dict[str, Any]) -> None:
    """
    Write a JSON document, pretty printed
    :param file_path: File to write
    :param contents: Data to dump
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as file:
        json.dump(contents, file, indent=2)
