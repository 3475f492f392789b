# ========================
# src/climate_stats/transformation.py
# ========================

"""
Data Transformation Module

Keeps running per-state statistics as observations stream in. Only summary
values are stored, never the observations themselves.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterator, Optional, Tuple, Any

from .parsing import Observation

logger = logging.getLogger(__name__)

@dataclass
class StateStats:
    """Running statistics for a single state code."""
    code: str
    record_count: int
    temperature_sum: float
    humidity_sum: float
    cloud_sum: float
    lightning_count: int
    snow_count: int
    max_temperature_f: float
    max_temperature_at: int
    min_temperature_f: float
    min_temperature_at: int

    @classmethod
    def from_observation(cls, observation: Observation) -> 'StateStats':
        """Seed a new entry directly from the first observation for its code."""
        return cls(
            code=observation.state_code,
            record_count=1,
            temperature_sum=observation.temperature_f,
            humidity_sum=observation.humidity,
            cloud_sum=observation.cloud_cover,
            lightning_count=1 if observation.has_lightning else 0,
            snow_count=1 if observation.has_snow else 0,
            max_temperature_f=observation.temperature_f,
            max_temperature_at=observation.timestamp,
            min_temperature_f=observation.temperature_f,
            min_temperature_at=observation.timestamp,
        )

    def merge(self, observation: Observation) -> None:
        """Fold one more observation for this code into the running values."""
        self.record_count += 1
        self.temperature_sum += observation.temperature_f
        self.humidity_sum += observation.humidity
        self.cloud_sum += observation.cloud_cover

        if observation.has_lightning:
            self.lightning_count += 1
        if observation.has_snow:
            self.snow_count += 1

        # Strict comparisons: the first observation to reach an extreme keeps it
        if observation.temperature_f > self.max_temperature_f:
            self.max_temperature_f = observation.temperature_f
            self.max_temperature_at = observation.timestamp
        if observation.temperature_f < self.min_temperature_f:
            self.min_temperature_f = observation.temperature_f
            self.min_temperature_at = observation.timestamp

    def combine(self, other: 'StateStats') -> None:
        """Fold statistics gathered later for the same code into this entry."""
        if other.code != self.code:
            raise ValueError(f"Cannot combine statistics for '{other.code}' into '{self.code}'")

        self.record_count += other.record_count
        self.temperature_sum += other.temperature_sum
        self.humidity_sum += other.humidity_sum
        self.cloud_sum += other.cloud_sum
        self.lightning_count += other.lightning_count
        self.snow_count += other.snow_count

        if other.max_temperature_f > self.max_temperature_f:
            self.max_temperature_f = other.max_temperature_f
            self.max_temperature_at = other.max_temperature_at
        if other.min_temperature_f < self.min_temperature_f:
            self.min_temperature_f = other.min_temperature_f
            self.min_temperature_at = other.min_temperature_at

    @property
    def average_temperature(self) -> float:
        return self.temperature_sum / self.record_count

    @property
    def average_humidity(self) -> float:
        return self.humidity_sum / self.record_count

    @property
    def average_cloud_cover(self) -> float:
        return self.cloud_sum / self.record_count

class StateAccumulator:
    """
    Keyed collection of running statistics, one entry per state code.
    Entries keep the order in which their codes were first seen.
    """

    def __init__(self):
        """Initialize an empty accumulator."""
        self._states: Dict[str, StateStats] = {}
        self.records_processed = 0
        logger.debug("StateAccumulator initialized")

    def merge(self, observation: Observation) -> StateStats:
        """
        Merge one observation into the statistics for its state code.

        Args:
            observation (Observation): A parsed record.

        Returns:
            StateStats: The entry that was created or updated.
        """
        stats = self._states.get(observation.state_code)
        if stats is None:
            stats = StateStats.from_observation(observation)
            self._states[observation.state_code] = stats
            logger.debug(f"New state code found: {observation.state_code}")
        else:
            stats.merge(observation)

        self.records_processed += 1
        return stats

    def combine(self, other: 'StateAccumulator') -> None:
        """
        Fold another accumulator, built from input read after this one's, into this one.

        Codes unseen here are appended in the other accumulator's order; on
        extremum ties the values already held here win.
        """
        for other_stats in other.states():
            stats = self._states.get(other_stats.code)
            if stats is None:
                self._states[other_stats.code] = replace(other_stats)
            else:
                stats.combine(other_stats)

        self.records_processed += other.records_processed

    def get(self, code: str) -> Optional[StateStats]:
        """Look up the statistics for a code, or None if it was never seen."""
        return self._states.get(code)

    def states(self) -> Tuple[StateStats, ...]:
        """All entries in first-seen order."""
        return tuple(self._states.values())

    @property
    def codes(self) -> Tuple[str, ...]:
        """All state codes in first-seen order."""
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, code: object) -> bool:
        return code in self._states

    def __iter__(self) -> Iterator[StateStats]:
        return iter(self.states())

    def log_summary(self) -> None:
        """Log summary statistics of the aggregation."""
        logger.info(f"Aggregation complete. Processed {self.records_processed} records")
        logger.info(f"States found: {len(self._states)}")
        for stats in self._states.values():
            logger.debug(
                f"  {stats.code}: {stats.record_count} records, "
                f"avg {stats.average_temperature:.1f}F, "
                f"max {stats.max_temperature_f:.1f}F, min {stats.min_temperature_f:.1f}F"
            )

    def get_aggregation_summary(self) -> Dict[str, Any]:
        """Get a summary of the aggregation."""
        return {
            'records_processed': self.records_processed,
            'states': len(self._states),
            'state_codes': list(self._states),
        }
