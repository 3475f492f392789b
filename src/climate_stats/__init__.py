# ========================
# src/climate_stats/__init__.py
# ========================

"""
Climate Statistics Package

This package contains the core components of the climate aggregation pipeline:
- ingestion: Scoped streaming of TDV files
- parsing: Line to Observation conversion
- transformation: Per-state running statistics
- report: Plain-text summary rendering
- orchestrator: Multi-file run coordination
"""

from .ingestion import TDVReader
from .parsing import Observation, RecordParser
from .transformation import StateAccumulator, StateStats
from .report import ReportFormatter
from .orchestrator import ClimatePipeline, process

__all__ = [
    'TDVReader',
    'Observation',
    'RecordParser',
    'StateAccumulator',
    'StateStats',
    'ReportFormatter',
    'ClimatePipeline',
    'process'
]

__version__ = "1.0.0"
