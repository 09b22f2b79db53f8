"""
TTCards error taxonomy
"""
from typing import Optional


class TtcError(Exception):
    """Base class for every error raised by the injection pipeline."""


class ConfigurationError(TtcError):
    """Invalid settings. Fatal, aborts the whole run."""


class MissingBaseTemplateError(TtcError):
    """The clone source of a definition is not in the store."""

    def __init__(self, definition_id: str, clone_id: str):
        self.definition_id = definition_id
        self.clone_id = clone_id
        super().__init__(
            f"Clone source {clone_id} for {definition_id} not found in templates"
        )


class MissingLocationError(TtcError):
    """A loot location names a map the store does not have."""

    def __init__(self, map_name: str):
        self.map_name = map_name
        super().__init__(f"Map '{map_name}' not found")


class MissingContainerBaselineError(TtcError):
    """No loot baseline exists for a (map, container) pair."""

    def __init__(self, map_name: str, container_id: str):
        self.map_name = map_name
        self.container_id = container_id
        super().__init__(f"No probability data for container {container_id} on {map_name}")


class MissingTraderError(TtcError):
    """Neither the requested trader nor the fallback trader exists."""

    def __init__(self, trader_id: str, fallback_id: Optional[str] = None):
        self.trader_id = trader_id
        self.fallback_id = fallback_id
        super().__init__(
            f"Trader {trader_id or '<unset>'} not found"
            + (f" (fallback {fallback_id} not found either)" if fallback_id else "")
        )


class InvalidAssetError(TtcError):
    """A composite container asset is not shaped like a template override."""

    def __init__(self, asset_id: str, reason: str):
        self.asset_id = asset_id
        super().__init__(f"Container asset {asset_id} is invalid: {reason}")
