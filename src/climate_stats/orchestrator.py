# ========================
# src/climate_stats/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Drives the run: streams each input file through the parser into one shared
accumulator, recovering from unreadable files and malformed lines.
"""

import logging
from typing import Any, Dict, Iterable, Optional, TextIO

from .ingestion import TDVReader
from .parsing import RecordParser
from .transformation import StateAccumulator
from ..utils.performance_monitor import PerformanceMonitor, monitor_performance
from ..utils.config import Config

logger = logging.getLogger(__name__)

def process(stream: TextIO,
            accumulator: StateAccumulator,
            parser: Optional[RecordParser] = None,
            monitor: Optional[PerformanceMonitor] = None) -> int:
    """
    Stream lines from a text stream into an accumulator.

    Malformed lines are skipped; reading continues until the stream is exhausted.

    Args:
        stream: Readable text stream of TDV lines
        accumulator (StateAccumulator): Receives every parsed observation
        parser (RecordParser): Parser to use; a default tab parser if omitted
        monitor (PerformanceMonitor): Optional progress tracker

    Returns:
        int: Number of observations merged
    """
    parser = parser or RecordParser()
    merged = 0

    for line in stream:
        observation = parser.parse_line(line)
        if observation is not None:
            accumulator.merge(observation)
            merged += 1
        if monitor is not None:
            monitor.update_progress(1)

    return merged

class ClimatePipeline:
    """
    Orchestrates a batch run over one or more TDV files.
    All files feed the same accumulator, in the order given.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 accumulator: Optional[StateAccumulator] = None):
        """
        Initialize the climate pipeline.

        Args:
            config (Config): Configuration object
            accumulator (StateAccumulator): Accumulator to fill; a new one if omitted
        """
        self.config = config or Config()

        # Initialize pipeline components
        self.parser = RecordParser(
            delimiter=self.config.FIELD_DELIMITER,
            log_malformed=self.config.LOG_MALFORMED_LINES
        )
        self.accumulator = accumulator if accumulator is not None else StateAccumulator()

        self.processed_files = []
        self.failed_files = []
        self.file_results = {}

        logger.debug("ClimatePipeline initialized")

    def run(self, files: Iterable[str]) -> Dict[str, Any]:
        """
        Process every file in order.

        Args:
            files: Paths of the TDV files to aggregate

        Returns:
            dict: The accumulator plus per-file and overall processing statistics
        """
        files = [str(f) for f in files]
        logger.info(f"Starting climate pipeline for {len(files)} file(s)...")

        with monitor_performance("ClimatePipeline", self.config.PROGRESS_LOG_INTERVAL) as monitor:
            for file_path in files:
                self.process_file(file_path, monitor)

        self.accumulator.log_summary()

        results = {
            'accumulator': self.accumulator,
            'processed_files': list(self.processed_files),
            'failed_files': list(self.failed_files),
            'files': dict(self.file_results),
            'parsing_stats': self.parser.get_statistics(),
            'aggregation_stats': self.accumulator.get_aggregation_summary(),
            'performance': monitor.summary
        }

        self._log_final_summary(results)
        return results

    def process_file(self, file_path: str, monitor: Optional[PerformanceMonitor] = None) -> bool:
        """
        Stream a single file into the shared accumulator.

        A file that cannot be opened is logged and recorded as
        failed; it never aborts the run.

        Returns:
            bool: True if the file was read to the end
        """
        reader = TDVReader(file_path, encoding=self.config.FILE_ENCODING)
        dropped_before = self.parser.records_dropped
        processed_before = self.parser.records_processed

        try:
            with reader.open() as stream:
                merged = process(stream, self.accumulator, self.parser, monitor)
        except OSError as e:
            logger.error(f"Failed to open file: {file_path} ({e})")
            self.failed_files.append(file_path)
            self.file_results[file_path] = {'status': 'failed', 'error': str(e)}
            return False

        self.processed_files.append(file_path)
        self.file_results[file_path] = {
            'status': 'processed',
            'lines': self.parser.records_processed - processed_before,
            'records_merged': merged,
            'lines_skipped': self.parser.records_dropped - dropped_before
        }
        if monitor is not None:
            monitor.file_completed(file_path)

        logger.info(f"File {file_path}: {merged} records merged, "
                    f"{self.file_results[file_path]['lines_skipped']} lines skipped")
        return True

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        """Log final pipeline summary."""
        parsing_stats = results['parsing_stats']

        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info(f"Files processed: {len(results['processed_files'])}")
        logger.info(f"Files failed: {len(results['failed_files'])}")
        logger.info(f"Lines read: {parsing_stats['records_processed']:,}")
        logger.info(f"Lines skipped: {parsing_stats['records_dropped']:,}")
        logger.info(f"States found: {results['aggregation_stats']['states']}")
