"""
TTCards, trading card content injection
MIT License
"""

from .pipeline import PipelineReport, run_pipeline
from .ttcards_config import TtcConfig

__all__ = [
    "PipelineReport",
    "TtcConfig",
    "run_pipeline",
]
