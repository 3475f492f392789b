#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Climate Statistics Pipeline

Aggregates one or more NOAA tab-delimited observation files and prints a
per-state climate summary.

Usage:
    python main.py tdv_file1 [tdv_file2 ... tdv_fileN]
"""

import sys
import os
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from src.climate_stats import ClimatePipeline, ReportFormatter
from src.utils import Config, setup_logging, get_logger

USAGE = "Usage: {prog} tdv_file1 tdv_file2 ... tdv_fileN"

def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    argv = list(sys.argv if argv is None else argv)
    prog = os.path.basename(argv[0]) if argv else "climate-stats"
    files = argv[1:]

    if not files:
        print(USAGE.format(prog=prog), file=sys.stderr)
        return 1

    if files[0] in ('-h', '--help'):
        print(USAGE.format(prog=prog))
        return 0

    # Initialize configuration
    try:
        config = Config()
        if config.CONFIG_FILE:
            config = Config.load_from_file(config.CONFIG_FILE)
    except (OSError, ValueError) as e:
        setup_logging()
        get_logger(__name__).error(f"Could not load configuration: {e}")
        return 1

    # Setup logging
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file=config.LOG_FILE,
        log_dir=config.LOG_DIR
    )

    logger = get_logger(__name__)
    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration values: {', '.join(invalid)}")
        return 1

    try:
        pipeline = ClimatePipeline(config=config)
        results = pipeline.run(files)

        sys.stdout.write(ReportFormatter().render(results['accumulator']))
        sys.stdout.flush()

        if results['failed_files']:
            logger.warning(f"{len(results['failed_files'])} of {len(files)} file(s) could not be processed")
            return 1
        return 0

    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1

if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
