"""
TTCards Configuration Service
"""

import configparser
import logging
import pathlib
from typing import Any, Dict, Optional

from . import constants


class TtcConfig:
    """
    Configuration Class that loads in the appropriate configuration file
    and provides the contents for the running program.
    Constructed once by the host and handed to the pipeline explicitly.
    """

    logger: logging.Logger
    config_parser: configparser.ConfigParser
    version: str
    debug: bool
    card_weight_multiplier: float
    fallback_trader: str
    cards_tradeable_on_flea: bool
    cards_examined_by_default: bool
    auto_update_probabilities: bool
    enable_container_spawns: bool
    idempotent_writes: bool

    def __init__(
        self,
        config_path: Optional[pathlib.Path] = None,
        config_text: Optional[str] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.config_parser = configparser.ConfigParser()
        # Rarity names are case sensitive keys
        self.config_parser.optionxform = str  # type: ignore[assignment,method-assign]

        if config_text is not None:
            self.logger.debug("Loading configuration from text")
            self.config_parser.read_string(config_text)
        else:
            self.__load_config_from_local_file(config_path or constants.CONFIG_PATH)

        self.version = self.get("TTC", "version", "0.0.0")
        self.debug = self.get_boolean("TTC", "debug", False)
        self.card_weight_multiplier = self.get_float("TTC", "card_weight_multiplier", 1.0)
        self.fallback_trader = self.get("TTC", "fallback_trader", "")
        self.cards_tradeable_on_flea = self.get_boolean(
            "TTC", "cards_tradeable_on_flea", False
        )
        self.cards_examined_by_default = self.get_boolean(
            "TTC", "cards_examined_by_default", False
        )
        self.auto_update_probabilities = self.get_boolean(
            "TTC", "auto_update_probabilities", False
        )
        self.enable_container_spawns = self.get_boolean(
            "TTC", "enable_container_spawns", True
        )
        self.idempotent_writes = self.get_boolean("TTC", "idempotent_writes", True)

    def __load_config_from_local_file(self, file_path: pathlib.Path) -> None:
        """
        Load local file from resources as TTCards configuration file
        :param file_path: Path to Configuration file
        """
        if not file_path.is_file():
            self.logger.warning(f"Config file {file_path} not found, using defaults")
            return
        self.logger.info(f"Loading configuration from {file_path}")
        self.config_parser.read(str(file_path))

    @property
    def rarity_weights(self) -> Optional[Dict[str, Any]]:
        """
        Raw rarity weight table. Values that parse as numbers become floats,
        everything else is handed back untouched for validation to reject.
        :return: Rarity to weight, or None if the section is absent
        """
        if not self.has_section("RarityWeights"):
            return None
        return {
            rarity: _maybe_float(value)
            for rarity, value in self.config_parser.items("RarityWeights")
        }

    @property
    def trader_sell_prices(self) -> Dict[str, float]:
        """
        Fallback trader price per rarity
        :return: Rarity to price
        """
        if not self.has_section("TraderSellPrices"):
            return {}
        prices = {}
        for rarity, value in self.config_parser.items("TraderSellPrices"):
            try:
                prices[rarity] = float(value)
            except ValueError:
                self.logger.warning(f"TraderSellPrices.{rarity} is not a number, ignoring")
        return prices

    def get(self, section: str, option: str, fallback: str = "") -> str:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use
        """
        if self.has_option(section, option):
            return self.config_parser.get(section, option, fallback=fallback)
        return fallback

    def get_boolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use (as a Boolean)
        """
        if self.has_option(section, option):
            return self.config_parser.getboolean(section, option, fallback=fallback)
        return fallback

    def get_float(self, section: str, option: str, fallback: float = 0.0) -> float:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use (as a float)
        """
        if self.has_option(section, option):
            return self.config_parser.getfloat(section, option, fallback=fallback)
        return fallback

    def has_section(self, section: str) -> bool:
        """
        Check if Configuration has a specific section
        :param section: Section header to find
        :return Does Section header exist
        """
        return self.config_parser.has_section(section)

    def has_option(self, section: str, option: str) -> bool:
        """
        Check if Configuration has a specific option in a specific section
        and has a defined value (ala not VAR=)
        :param section: Section header to find
        :param option: Option to find in section
        :return Does option exist in section
        """
        return (
            self.config_parser.has_option(section, option)
            and len(str(self.config_parser.get(section, option))) > 0
        )

    def trader_price_for(self, rarity: str) -> float:
        """
        Fallback price for a rarity tier
        :param rarity: Rarity name
        :return: Configured price, or the hardcoded default
        """
        return self.trader_sell_prices.get(rarity, constants.DEFAULT_TRADER_PRICE)


def _maybe_float(value: str) -> Any:
    try:
        return float(value)
    except ValueError:
        return value
