"""
TTCards data models
"""

from .baseline import LootBaseline
from .definition import Definition, ExternalSize

__all__ = [
    "Definition",
    "ExternalSize",
    "LootBaseline",
]
