# File: src/chaindesk/config/client_config.py

import copy
import os
from typing import Dict, Any

import yaml

from ..utils.config import Config

DEFAULT_CONFIG: Dict[str, Any] = {
    "api": {
        "base_url": Config.DEFAULT_API_BASE_URL,
        "timeout": Config.REQUEST_TIMEOUT
    },
    "chain": {
        "debounce_seconds": Config.BLOCK_UPDATE_DEBOUNCE
    },
    "logging": {
        "level": "INFO",
        "log_dir": None
    }
}

class ClientConfig:
    def __init__(self, config_path: str = "config/client.yaml"):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = self._create_default_config()
        if os.path.exists(self.config_path):
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f)
            self._merge(config, loaded if isinstance(loaded, dict) else {})

        env_url = os.environ.get(Config.API_BASE_URL_ENV)
        if env_url:
            config["api"]["base_url"] = env_url
        return config

    def _create_default_config(self) -> Dict[str, Any]:
        return copy.deepcopy(DEFAULT_CONFIG)

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]):
        for key, value in override.items():
            if isinstance(base.get(key), dict):
                # sections stay mappings; empty or scalar overrides are ignored
                if isinstance(value, dict):
                    self._merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        try:
            keys = key.split('.')
            value = self.config
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def update(self, key: str, value: Any):
        """Update configuration value."""
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

        directory = os.path.dirname(self.config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.safe_dump(self.config, f)

    @property
    def base_url(self) -> str:
        return self.get("api.base_url", Config.DEFAULT_API_BASE_URL)

    @property
    def timeout(self) -> float:
        return float(self.get("api.timeout", Config.REQUEST_TIMEOUT))

    @property
    def debounce_seconds(self) -> float:
        return float(self.get("chain.debounce_seconds", Config.BLOCK_UPDATE_DEBOUNCE))
