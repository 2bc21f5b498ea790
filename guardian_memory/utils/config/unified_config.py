"""Configuration with one precedence order for every setting.

Precedence (highest first):
1. Environment variables (a `.env` file is loaded first and never overrides
   variables that are already set)
2. `guardian_config.json`
3. Code defaults
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

# Set on first use; the logging package reads its own settings from the environment
logger = None


def _get_logger():
    global logger
    if logger is None:
        from ..logging import get_smart_logger
        logger = get_smart_logger("config")
    return logger


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


DEFAULTS: Dict[str, Any] = {
    "memory": {
        "path": None,
        "candidate_paths": [
            "us-complete.txt",
            "public/us-complete.txt",
            "/tmp/us-complete.txt",
        ],
        "association_window": 50,
        "association_min_strength": 0.1,
        "match_threshold": 0.3,
        "default_query_limit": 5,
        "fallback_pool_size": 100,
        "dedup_prefix_length": 50,
    },
    "logging": {
        "level": "INFO",
        "external_logs_dir": "logs",
    },
}

# Applied in order, so MEMORY_PATH wins over RENDER_MEMORY_PATH
ENV_OVERRIDES = [
    ("RENDER_MEMORY_PATH", "memory.path", False),
    ("MEMORY_PATH", "memory.path", False),
    ("MEMORY_ASSOCIATION_WINDOW", "memory.association_window", True),
    ("MEMORY_MATCH_THRESHOLD", "memory.match_threshold", True),
    ("MEMORY_QUERY_LIMIT", "memory.default_query_limit", True),
    ("LOG_LEVEL", "logging.level", False),
    ("LOG_DIR", "logging.external_logs_dir", False),
]


def parse_env_value(value: str) -> Union[str, int, float, bool]:
    """Read "true"/"false", integers and floats; anything else stays text."""
    lowered = value.strip().lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def merge_sections(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay `override` on a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_sections(merged[key], value)
        else:
            merged[key] = value
    return merged


class UnifiedConfig:
    """Settings for the memory engine, its corpus file and logging."""

    def __init__(self, config_file: str = "guardian_config.json", load_env_file: bool = True):
        self._config_file = config_file

        if load_env_file:
            load_dotenv()

        self._config = merge_sections(DEFAULTS, self._read_config_file())
        self._apply_env_overrides()

        _get_logger().info("unified_config_loaded",
                           config_file=config_file,
                           memory_path=self.memory_path)

    def _read_config_file(self) -> Dict[str, Any]:
        path = Path(self._config_file)
        if not path.exists():
            _get_logger().debug("config_file_not_found", path=str(path), using_defaults=True)
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            _get_logger().error("config_file_load_error",
                                path=str(path),
                                error=str(e),
                                error_type=type(e).__name__,
                                using_defaults=True)
            return {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        _get_logger().info("config_file_loaded", path=str(path), sections=list(data))
        return data

    def _apply_env_overrides(self):
        for env_var, config_path, parse in ENV_OVERRIDES:
            raw = os.getenv(env_var)
            if not raw:
                continue
            value = parse_env_value(raw) if parse else raw
            self._set(config_path, value)
            _get_logger().debug("env_override_applied", env_var=env_var, config_path=config_path)

    def _set(self, path: str, value: Any):
        *sections, key = path.split('.')
        target = self._config
        for section in sections:
            target = target.setdefault(section, {})
        target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Value at a dotted path such as 'memory.match_threshold'."""
        value: Any = self._config
        for key in path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    def to_memory_config(self):
        """Engine configuration built from the `memory` section.

        Raises:
            ConfigError: If the window, threshold or query limit is invalid
        """
        from ...memory.config.memory_config import MemoryConfig

        window = self.get('memory.association_window')
        threshold = self.get('memory.match_threshold')
        limit = self.get('memory.default_query_limit')

        if not _is_int(window) or window < 1:
            raise ConfigError(f"memory.association_window must be a positive integer, got {window!r}")
        if not _is_number(threshold) or not 0 <= threshold < 1:
            raise ConfigError(f"memory.match_threshold must be in [0, 1), got {threshold!r}")
        if not _is_int(limit) or limit < 1:
            raise ConfigError(f"memory.default_query_limit must be a positive integer, got {limit!r}")

        return MemoryConfig(
            ASSOCIATION_WINDOW=window,
            ASSOCIATION_MIN_STRENGTH=float(self.get('memory.association_min_strength')),
            MATCH_THRESHOLD=float(threshold),
            DEFAULT_QUERY_LIMIT=limit,
            FALLBACK_POOL_SIZE=int(self.get('memory.fallback_pool_size')),
            DEDUP_PREFIX_LENGTH=int(self.get('memory.dedup_prefix_length')),
        )

    @property
    def memory_path(self) -> Optional[str]:
        return self.get('memory.path')

    @property
    def candidate_paths(self) -> List[str]:
        """Configured corpus path first, then the usual locations."""
        paths = list(self.get('memory.candidate_paths', []))
        if self.memory_path:
            paths.insert(0, self.memory_path)
        return paths

    @property
    def log_level(self) -> str:
        return self.get('logging.level', 'INFO')

    @property
    def log_dir(self) -> str:
        return self.get('logging.external_logs_dir', 'logs')


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
