# ========================
# src/climate_stats/report.py
# ========================

"""
Report Module

Renders the accumulated per-state statistics as the plain-text summary.
"""

import time
import logging
from typing import List

from .transformation import StateAccumulator, StateStats

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "_" * 42

def format_timestamp(timestamp: int) -> str:
    """Render epoch seconds as a local calendar date/time, e.g. 'Mon Aug  3 11:00:00 2015'."""
    try:
        return time.ctime(timestamp)
    except (OverflowError, OSError, ValueError):
        logger.warning(f"Timestamp out of range for local time: {timestamp}")
        return f"<epoch {timestamp}>"

class ReportFormatter:
    """
    Formats the contents of a StateAccumulator for display.
    """

    def render(self, accumulator: StateAccumulator) -> str:
        """
        Build the full report.

        Args:
            accumulator: StateAccumulator with the final statistics

        Returns:
            str: Report text, newline terminated
        """
        lines = [self.render_header(accumulator)]
        for stats in accumulator.states():
            lines.extend(self.render_state(stats))

        logger.debug(f"Rendered report for {len(accumulator)} states")
        return "\n".join(lines) + "\n"

    def render_header(self, accumulator: StateAccumulator) -> str:
        """The 'States found' line, codes in first-seen order."""
        return " ".join(["States found:", *accumulator.codes])

    def render_state(self, stats: StateStats) -> List[str]:
        """The detail block for one state."""
        return [
            f"-- State: {stats.code} --",
            f"Number of Records: {stats.record_count}",
            f"Average Humidity: {stats.average_humidity:.1f}%",
            f"Average Temperature: {stats.average_temperature:.1f}F",
            f"Max Temperature: {stats.max_temperature_f:.1f}F on {format_timestamp(stats.max_temperature_at)}",
            f"Min Temperature: {stats.min_temperature_f:.1f}F on {format_timestamp(stats.min_temperature_at)}",
            f"Lightning Strikes: {stats.lightning_count}",
            f"Records with Snow Cover: {stats.snow_count}",
            f"Average Cloud Cover: {stats.average_cloud_cover:.1f}%",
            SECTION_SEPARATOR,
        ]
