# ========================
# src/climate_stats/parsing.py
# ========================

"""
Record Parsing Module

Turns one raw TDV line into a typed observation, or rejects it.
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)

REPLACEMENT_CHARACTER = "\ufffd"

def kelvin_to_fahrenheit(kelvin: float) -> float:
    """Convert a temperature in Kelvin to degrees Fahrenheit."""
    return kelvin * 9 / 5 - 459.67

def millis_to_seconds(millis: int) -> int:
    """Convert epoch milliseconds to epoch seconds, truncating toward zero."""
    seconds = abs(millis) // 1000
    return seconds if millis >= 0 else -seconds

@dataclass(frozen=True)
class Observation:
    """One parsed climate record."""
    state_code: str
    timestamp: int
    humidity: float
    has_snow: bool
    cloud_cover: float
    has_lightning: bool
    temperature_f: float

class RecordParser:
    """
    Parses TDV lines into Observation objects.

    Field order: state code, timestamp (ms), geohash, humidity, snow flag,
    cloud cover, lightning flag, pressure (Pa), surface temperature (K).
    """

    FIELD_COUNT = 9

    def __init__(self, delimiter: str = '\t', log_malformed: bool = False):
        """
        Initialize the record parser.

        Args:
            delimiter (str): Field separator
            log_malformed (bool): Emit a DEBUG message for every rejected line
        """
        self.delimiter = delimiter
        self.log_malformed = log_malformed
        self.records_processed = 0
        self.records_dropped = 0
        logger.debug("RecordParser initialized")

    def parse_line(self, line: str) -> Optional[Observation]:
        """
        Parse a single raw line.

        Args:
            line (str): One line of input, with or without its terminator.

        Returns:
            Observation or None: The parsed observation, or None if the line
                                 is malformed and should be skipped.
        """
        self.records_processed += 1

        fields = line.rstrip('\r\n').split(self.delimiter)
        if len(fields) < self.FIELD_COUNT:
            return self._reject(line, f"expected {self.FIELD_COUNT} fields, found {len(fields)}")

        state_code = fields[0].strip()
        if not state_code:
            return self._reject(line, "empty state code")
        if REPLACEMENT_CHARACTER in state_code:
            return self._reject(line, "undecodable state code")

        try:
            timestamp_ms = self._parse_timestamp(fields[1])
            humidity = self._parse_float(fields[3])
            snow = self._parse_float(fields[4])
            cloud_cover = self._parse_float(fields[5])
            lightning = self._parse_float(fields[6])
            self._parse_float(fields[7])  # pressure, validated only
            temperature_k = self._parse_float(fields[8])
        except ValueError as e:
            return self._reject(line, str(e))

        return Observation(
            state_code=state_code,
            timestamp=millis_to_seconds(timestamp_ms),
            humidity=humidity,
            has_snow=snow != 0,
            cloud_cover=cloud_cover,
            has_lightning=lightning != 0,
            temperature_f=kelvin_to_fahrenheit(temperature_k),
        )

    def _reject(self, line: str, reason: str) -> None:
        self.records_dropped += 1
        if self.log_malformed:
            logger.debug(f"Skipping malformed line ({reason}): {line!r}")
        return None

    def _parse_float(self, value: str) -> float:
        """Parse a finite float, raising ValueError otherwise. Surrounding whitespace is allowed."""
        if "_" in value:
            raise ValueError(f"digit separators not allowed: {value!r}")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"non-finite number: {value!r}")
        return number

    def _parse_timestamp(self, value: str) -> int:
        """Parse epoch milliseconds, truncating any fractional part toward zero."""
        if "_" in value:
            raise ValueError(f"digit separators not allowed: {value!r}")
        try:
            return int(value)
        except ValueError:
            return int(self._parse_float(value))

    def get_statistics(self) -> Dict[str, Any]:
        """Get parsing statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_parsed': self.records_processed - self.records_dropped,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }
