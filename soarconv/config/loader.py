"""
Configuration loader for the SOAR playbook converter.

This module handles loading and parsing of soarconv_config.json files,
providing structured configuration objects with validation.
"""

import json
import os
from typing import Optional

from .models import ConverterConfig
from ..utils.exceptions import ConfigurationError
from ..utils.constants import DEFAULT_CONFIG_PATH


class ConfigLoader:
    """
    Configuration loader class for handling soarconv_config.json files.

    This class is responsible for loading, parsing, and validating
    configuration files, converting them to ConverterConfig objects.
    """

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> ConverterConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            ConverterConfig object with validated configuration

        Raises:
            ConfigurationError: If config file doesn't exist, is invalid JSON,
                               or contains invalid sections
        """
        print(f"📋 Loading configuration from {config_path}...")

        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")
        except (IOError, OSError) as e:
            raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}")

        try:
            config = ConverterConfig.from_dict(config_dict)
        except ConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Error parsing configuration: {e}")

        extra_types = (
            len(config.step_types.trigger_start)
            + len(config.step_types.unsupported)
            + len(config.step_types.supported)
        )
        print(f"   📊 Configuration loaded successfully:")
        print(f"      Version: {config.version}")
        print(f"      Extra step types: {extra_types}")
        print(f"      Canvas minimums: top={config.canvas.min_top}, left={config.canvas.min_left}")

        return config

    @classmethod
    def load_or_default(cls, config_path: Optional[str] = None) -> ConverterConfig:
        """
        Load an explicitly requested config, else the default file if present.

        An explicit path that does not exist is an error; a missing default
        file silently yields the built-in defaults.

        Args:
            config_path: Optional path to the configuration file

        Returns:
            ConverterConfig object
        """
        if config_path:
            return cls.load(config_path)
        if os.path.exists(DEFAULT_CONFIG_PATH):
            return cls.load(DEFAULT_CONFIG_PATH)
        return ConverterConfig()
