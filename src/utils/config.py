# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the climate statistics pipeline with environment support.
"""

import os
import json
from typing import Dict, Any, Optional

def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')

def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

class Config:
    """
    Configuration class for the climate pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Input Format
        self.FIELD_DELIMITER = os.getenv('CLIMATE_FIELD_DELIMITER', '\t')
        self.FILE_ENCODING = os.getenv('CLIMATE_FILE_ENCODING', 'utf-8')

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('CLIMATE_LOG_LEVEL', 'WARNING')
        self.LOG_FILE = os.getenv('CLIMATE_LOG_FILE') or None
        self.LOG_DIR = os.getenv('CLIMATE_LOG_DIR', 'logs')
        # Rejected lines are logged at DEBUG, so this also needs LOG_LEVEL=DEBUG
        # (or a LOG_FILE, which records everything) to be visible.
        self.LOG_MALFORMED_LINES = _env_flag('CLIMATE_LOG_MALFORMED_LINES', 'false')
        self.PROGRESS_LOG_INTERVAL = _env_int('CLIMATE_PROGRESS_LOG_INTERVAL', '100000')

        # Optional JSON file with overrides, loaded by the entry point
        self.CONFIG_FILE = os.getenv('CLIMATE_CONFIG_FILE') or None

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['field_delimiter'] = isinstance(self.FIELD_DELIMITER, str) and len(self.FIELD_DELIMITER) > 0
        try:
            validations['progress_interval'] = int(self.PROGRESS_LOG_INTERVAL) > 0
        except (TypeError, ValueError):
            validations['progress_interval'] = False

        try:
            ''.encode(self.FILE_ENCODING)
            validations['file_encoding'] = True
        except LookupError:
            validations['file_encoding'] = False

        # Validate log level
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = str(self.LOG_LEVEL).upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if not attr.startswith('_') and not callable(getattr(self, attr))
        }

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must hold a JSON object: {file_path}")
        return cls(config_dict)

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        config_dict = self.to_dict()
        for key, value in sorted(config_dict.items()):
            lines.append(f"  {key}: {value!r}")
        return "\n".join(lines)
