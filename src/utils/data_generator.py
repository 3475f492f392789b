# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Synthetic NOAA-style TDV observation files with realistic per-state climate
patterns and controlled error injection.
"""

import csv
import math
import random
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Any, Optional, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

GEOHASH_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"

def fahrenheit_to_kelvin(fahrenheit: float) -> float:
    """Convert degrees Fahrenheit to Kelvin."""
    return (fahrenheit + 459.67) * 5 / 9

class DataGenerator:
    """
    Data generator for creating realistic TDV test datasets.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)

        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize per-state climate profiles."""
        # Annual mean temperature (F), seasonal swing (F), mean humidity (%),
        # geohash prefix and how often snow / lightning are reported
        self.state_profiles = {
            "CA": {"mean_temp": 60.0, "swing": 12.0, "humidity": 60.0, "geohash": "9q", "snow": 0.01, "lightning": 0.01},
            "TX": {"mean_temp": 66.0, "swing": 18.0, "humidity": 65.0, "geohash": "9v", "snow": 0.005, "lightning": 0.06},
            "TN": {"mean_temp": 58.0, "swing": 20.0, "humidity": 50.0, "geohash": "dn", "snow": 0.01, "lightning": 0.05},
            "WA": {"mean_temp": 52.0, "swing": 15.0, "humidity": 62.0, "geohash": "c2", "snow": 0.03, "lightning": 0.02},
            "NY": {"mean_temp": 48.0, "swing": 22.0, "humidity": 63.0, "geohash": "dr", "snow": 0.08, "lightning": 0.03},
            "FL": {"mean_temp": 72.0, "swing": 9.0, "humidity": 74.0, "geohash": "dh", "snow": 0.0, "lightning": 0.09},
            "CO": {"mean_temp": 46.0, "swing": 24.0, "humidity": 45.0, "geohash": "9x", "snow": 0.12, "lightning": 0.04},
            "AK": {"mean_temp": 28.0, "swing": 30.0, "humidity": 70.0, "geohash": "bd", "snow": 0.35, "lightning": 0.005},
        }

        self.error_types = ['short_line', 'non_numeric_field', 'bad_timestamp', 'blank_line']

    def generate_dataset(self,
                        file_path: str,
                        num_rows: int,
                        states: Optional[Sequence[str]] = None,
                        error_rate: float = 0.0,
                        start_date: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Generate a TDV dataset with controlled error injection.

        Args:
            file_path (str): Output TDV file path
            num_rows (int): Number of lines to generate
            states (list): State codes to draw from (default: every known profile)
            error_rate (float): Fraction of lines that are deliberately malformed
            start_date (datetime): Start of the one-year observation window (UTC)

        Returns:
            dict: Generation statistics, including the valid record count per state
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        states = list(states or self.state_profiles)
        unknown = [code for code in states if code not in self.state_profiles]
        if unknown:
            raise ValueError(f"No climate profile for state codes: {unknown}")

        if start_date is None:
            start_date = datetime(2015, 1, 1, tzinfo=timezone.utc)

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'start_date': start_date,
            'records_with_errors': 0,
            'valid_records': 0,
            'state_counts': {},
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f, delimiter='\t', lineterminator='\n')

            for i in range(num_rows):
                code = self.random.choice(states)
                record = self._generate_single_record(code, start_date)

                if self.random.random() < error_rate:
                    stats['records_with_errors'] += 1
                    record = self._inject_error(record, stats)
                else:
                    stats['valid_records'] += 1
                    stats['state_counts'][code] = stats['state_counts'].get(code, 0) + 1

                writer.writerow(record)

                if (i + 1) % 100000 == 0:
                    logger.debug(f"Generated {i + 1:,} records")

        # Finalize stats
        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0.0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Actual error rate: {stats['error_rate_actual']:.1%}")
        logger.info(f"Error breakdown: {stats['error_types']}")

        return stats

    def _generate_single_record(self, code: str, start_date: datetime) -> List[str]:
        """Generate the nine fields of one well-formed observation."""
        profile = self.state_profiles[code]

        observed_at = start_date + timedelta(
            days=self.random.randint(0, 364),
            hours=self.random.randint(0, 23)
        )
        timestamp_ms = int(observed_at.timestamp()) * 1000

        # Coldest mid-January, warmest mid-July
        day_of_year = observed_at.timetuple().tm_yday
        seasonal = -profile["swing"] * math.cos(2 * math.pi * (day_of_year - 15) / 365)
        temperature_f = profile["mean_temp"] + seasonal + self.random.gauss(0, 6)

        humidity = min(100.0, max(0.0, round(self.random.gauss(profile["humidity"], 15))))
        snow = 1.0 if temperature_f < 36 and self.random.random() < profile["snow"] * 4 else 0.0
        cloud_cover = self.random.choice([0.0, 0.0, 22.0, 50.0, 78.0, 100.0, 100.0])
        lightning = 1.0 if self.random.random() < profile["lightning"] else 0.0
        pressure = float(round(self.random.gauss(101325, 900)))

        geohash = profile["geohash"] + "".join(self.random.choice(GEOHASH_ALPHABET) for _ in range(10))

        return [
            code, str(timestamp_ms), geohash, str(humidity), str(snow), str(cloud_cover),
            str(lightning), str(pressure), f"{fahrenheit_to_kelvin(temperature_f):.5f}"
        ]

    def _inject_error(self, record: List[str], stats: Dict[str, Any]) -> List[str]:
        """Turn a well-formed record into one the parser must reject."""
        error_type = self.random.choice(self.error_types)
        self._track_error_type(stats, error_type)

        if error_type == 'short_line':
            return record[:self.random.randint(1, 8)]
        if error_type == 'non_numeric_field':
            corrupted = list(record)
            corrupted[self.random.choice([3, 4, 5, 6, 7, 8])] = "N/A"
            return corrupted
        if error_type == 'bad_timestamp':
            corrupted = list(record)
            corrupted[1] = corrupted[1][:6] + "x" + corrupted[1][7:]
            return corrupted
        return []

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
