"""
Configuration Manager for RelayChat Server
Handles loading and saving server settings
"""

import copy
import json
import logging
import os
from typing import Dict, Any


logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages server configuration"""

    DEFAULT_CONFIG = {
        "server": {
            "host": "0.0.0.0",
            "port": 6667,
            "name": "RelayChat"
        },
        "limits": {
            "max_line_length": 4096,
            "read_timeout": 300  # seconds, 0 disables the timeout
        },
        "logging": {
            "level": "INFO",
            "color": True
        }
    }

    def __init__(self, config_path: str = "relaychat_config.json"):
        self.config_path = config_path
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file"""
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    loaded = json.load(f)
                # Merge with defaults to ensure all keys exist
                config = self._merge_configs(defaults, loaded)
                logger.info(f"Loaded server config from {self.config_path}")
                return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading config: {e}")
                return defaults
        logger.info("No server config found, using defaults")
        return defaults

    def save_config(self):
        """Save configuration to file"""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    def _merge_configs(self, default: dict, loaded: dict) -> dict:
        """Recursively merge loaded config with defaults"""
        for key, value in loaded.items():
            if key in default and isinstance(default[key], dict) and isinstance(value, dict):
                default[key] = self._merge_configs(default[key], value)
            else:
                default[key] = value
        return default

    def get(self, *keys, default=None):
        """Get a config value by path"""
        value = self.config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys, value):
        """Set a config value by path"""
        config = self.config
        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]
        config[keys[-1]] = value
        self.save_config()
