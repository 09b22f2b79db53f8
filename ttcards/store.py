"""
Thin accessors over the host's in-memory content database
"""
import json
import logging
import pathlib
from typing import Any, Dict, Iterator, List, Optional

LOGGER = logging.getLogger(__name__)


class ContentStore:
    """
    Wraps the host's nested table dictionary. Every accessor hands back the
    live table so writes land directly in the host's data.
    """

    tables: Dict[str, Any]

    def __init__(self, tables: Dict[str, Any]):
        self.tables = tables

    @classmethod
    def from_file(cls, file_path: pathlib.Path) -> "ContentStore":
        """
        Load a JSON dump of the database
        :param file_path: Dump to read
        :return: Store over the loaded tables
        """
        LOGGER.info(f"Loading content store from {file_path}")
        with file_path.open(encoding="utf-8") as file:
            return cls(json.load(file))

    def write(self, file_path: pathlib.Path, pretty_print: bool = False) -> None:
        """
        Dump the (mutated) database back out
        :param file_path: Output file
        :param pretty_print: Indent the output
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as file:
            json.dump(
                self.tables,
                file,
                indent=(4 if pretty_print else None),
                ensure_ascii=False,
            )
        LOGGER.info(f"Wrote content store to {file_path}")

    @property
    def items(self) -> Dict[str, Dict[str, Any]]:
        """Item templates keyed by id"""
        return self.tables.setdefault("templates", {}).setdefault("items", {})

    @property
    def handbook_items(self) -> List[Dict[str, Any]]:
        """Handbook price entries"""
        handbook = self.tables.setdefault("templates", {}).setdefault("handbook", {})
        return handbook.setdefault("Items", [])

    @property
    def locales(self) -> Dict[str, Dict[str, str]]:
        """Global locale tables keyed by language code"""
        return self.tables.setdefault("locales", {}).setdefault("global", {})

    @property
    def traders(self) -> Dict[str, Dict[str, Any]]:
        """Trader tables keyed by trader id"""
        return self.tables.setdefault("traders", {})

    @property
    def locations(self) -> Dict[str, Dict[str, Any]]:
        """Map tables keyed by map name"""
        return self.tables.setdefault("locations", {})

    @property
    def ragfair(self) -> Dict[str, Any]:
        """Market visibility rules"""
        return self.tables.setdefault("ragfair", {})

    def get_template(self, template_id: str) -> Optional[Dict[str, Any]]:
        """Template by id, or None"""
        return self.items.get(template_id)

    def iter_static_loot(self) -> Iterator[Any]:
        """
        Walk every (map, container, distribution) triple present in the store
        :return: Generator of (map name, container id, item distribution list)
        """
        for map_name, location in self.locations.items():
            static_loot = location.get("staticLoot") if isinstance(location, dict) else None
            if not static_loot:
                continue
            for container_id, container in static_loot.items():
                yield map_name, container_id, (container or {}).get("itemDistribution")
