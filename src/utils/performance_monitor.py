# ========================
# src/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks throughput and memory for a pipeline run. Everything is reported
through logging so the report on stdout is never interleaved with it.
"""

import time
import os
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional

import psutil

logger = logging.getLogger(__name__)

class PerformanceMonitor:
    """
    Performance monitoring utility for the climate pipeline.
    Tracks memory usage, processing time, and throughput.
    """

    def __init__(self, name: str = "Pipeline", progress_interval: int = 100000):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
            progress_interval (int): Log progress every this many lines
        """
        self.name = name
        self.progress_interval = max(int(progress_interval), 1)
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.lines_processed = 0
        self.files_processed = 0
        self.checkpoints = []
        self.summary = None
        self._next_progress_mark = self.progress_interval
        self._process = psutil.Process(os.getpid())

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.time()
        self.peak_memory_mb = self._get_memory_usage_mb()

        logger.info(f"{self.name} - Performance monitoring started")
        logger.debug(f"Initial memory usage: {self.peak_memory_mb:.2f} MB")

    def update_progress(self, lines: int = 1) -> None:
        """
        Update progress tracking.

        Args:
            lines (int): Number of input lines consumed since the last update
        """
        self.lines_processed += lines

        if self.lines_processed >= self._next_progress_mark:
            current_memory = self._get_memory_usage_mb()
            self.peak_memory_mb = max(self.peak_memory_mb, current_memory)
            self._log_progress(current_memory)
            while self._next_progress_mark <= self.lines_processed:
                self._next_progress_mark += self.progress_interval

    def file_completed(self, file_path: str) -> None:
        """Record that a file has been fully streamed."""
        self.files_processed += 1
        self.add_checkpoint(f"file:{file_path}")

    def add_checkpoint(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Add a performance checkpoint.

        Args:
            name (str): Checkpoint name
            metadata (dict): Optional metadata to store
        """
        memory_mb = self._get_memory_usage_mb()
        self.peak_memory_mb = max(self.peak_memory_mb, memory_mb)
        checkpoint = {
            'name': name,
            'timestamp': time.time(),
            'memory_mb': memory_mb,
            'lines_processed': self.lines_processed,
            'files_processed': self.files_processed,
            'metadata': metadata or {}
        }
        self.checkpoints.append(checkpoint)
        logger.debug(f"Checkpoint '{name}': {checkpoint}")

    def _log_progress(self, current_memory: float) -> None:
        """Log current progress."""
        if self.start_time:
            elapsed = time.time() - self.start_time
            throughput = self.lines_processed / elapsed if elapsed > 0 else 0

            logger.info(
                f"{self.name} - Progress: {self.files_processed} files, "
                f"{self.lines_processed:,} lines, "
                f"{throughput:.0f} lines/sec, "
                f"Memory: {current_memory:.2f} MB"
            )

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.time()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.lines_processed / total_time if total_time > 0 else 0
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'lines_processed': self.lines_processed,
            'files_processed': self.files_processed,
            'average_throughput_lines_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'checkpoints': self.checkpoints
        }

        self.summary = summary
        self._log_summary(summary)
        return summary

    def _log_summary(self, summary: Dict[str, Any]) -> None:
        """Log formatted performance summary."""
        logger.info(f"PERFORMANCE SUMMARY - {summary['name']}")
        logger.info(f"Total processing time: {summary['total_processing_time_seconds']:.2f} seconds")
        logger.info(f"Lines processed: {summary['lines_processed']:,}")
        logger.info(f"Files processed: {summary['files_processed']:,}")
        logger.info(f"Average throughput: {summary['average_throughput_lines_per_second']:.0f} lines/second")
        logger.info(f"Peak memory usage: {summary['peak_memory_usage_mb']:.2f} MB")

    def _get_memory_usage_mb(self) -> float:
        """Get current resident memory in MB."""
        try:
            return self._process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return self.peak_memory_mb

    def get_current_stats(self) -> Dict[str, Any]:
        """Get current performance statistics."""
        elapsed = time.time() - self.start_time if self.start_time else 0

        return {
            'elapsed_seconds': elapsed,
            'lines_processed': self.lines_processed,
            'files_processed': self.files_processed,
            'current_memory_mb': self._get_memory_usage_mb(),
            'peak_memory_mb': self.peak_memory_mb,
            'current_throughput': self.lines_processed / elapsed if elapsed > 0 else 0
        }

@contextmanager
def monitor_performance(name: str = "Pipeline", progress_interval: int = 100000):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session
        progress_interval (int): Log progress every this many lines

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name, progress_interval)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
