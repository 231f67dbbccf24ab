"""
Configuration handling with dictionary path access and YAML loading.
Path: command_env/config.py
"""
import collections.abc
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger()

CONFIG_ENV_VAR = "COMMAND_ENV_CONFIG"
CONFIG_SECTION = "command_env"
DEFAULT_DRAIN_CHUNK_SIZE = 32 * 1024


class EnvironmentSettings(BaseModel):
    """Settings consumed by the environment constructors."""
    base_dir: Optional[str] = Field(default=None, description="Root for relative paths of the process filesystem")
    drain_chunk_size: int = Field(default=DEFAULT_DRAIN_CHUNK_SIZE, gt=0, description="Bytes requested per read while draining")
    log_level: str = Field(default="INFO", description="Level applied by configure_logging_from_settings")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class ConfigNode:
    """
    Node-based configuration access with hierarchical path support.
    """
    def __init__(self, data: Dict[str, Any], base_path: str = ""):
        self.data = data
        self.base_path = base_path

    def get_value(self, path: str) -> Any:
        """
        Get value at specified path relative to this node.

        Args:
            path: Dot-delimited path string

        Returns:
            Value at the path, or None if not found
        """
        if not path:
            return self.data
        return get_by_path(self.data, path.split('.'))

    def get_node(self, path: str) -> 'ConfigNode':
        """Get configuration node at specified path, or an empty node"""
        if not path:
            return self

        value = self.get_value(path)
        full_path = f"{self.base_path}.{path}" if self.base_path else path
        if isinstance(value, dict):
            return ConfigNode(value, full_path)
        if value is not None:
            logger.warning("config.node_path_not_dict",
                          path=full_path,
                          value_type=type(value).__name__)
        return ConfigNode({}, full_path)

    def __getitem__(self, key: str) -> Any:
        return self.get_value(key)

    def __contains__(self, key: str) -> bool:
        return self.get_value(key) is not None


def get_by_path(data: Dict[str, Any], path: List[str]) -> Any:
    """
    Access dictionary data using a path list.

    Returns:
        Value at path or None if not found
    """
    current = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def get_value(data: Dict[str, Any], path_str: str) -> Any:
    """
    Access dictionary data using a hierarchical path string (e.g. "command_env.base_dir").
    Supports both dots (.) and slashes (/) as path separators.
    """
    if '/' in path_str:
        path_list = path_str.split('/')
    else:
        path_list = path_str.split('.')
    return get_by_path(data, path_list)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], _path: str = "") -> Dict[str, Any]:
    """
    Deep merge dictionaries preserving hierarchical structure.
    Rules:
    1. Override values take precedence.
    2. Dictionaries merged recursively.
    3. Lists from override replace lists from base.
    4. None values in override delete keys from base.
    5. Path values are stored as strings.
    """
    result = deepcopy(base)
    current_path_prefix = f"{_path}." if _path else ""

    for key, value in override.items():
        current_key_path = f"{current_path_prefix}{key}"
        if value is None:
            if key in result:
                logger.debug("config.deep_merge.delete", key_path=current_key_path)
                result.pop(key, None)
            continue

        if key in result and isinstance(result.get(key), collections.abc.Mapping) and isinstance(value, collections.abc.Mapping):
            result[key] = deep_merge(result[key], value, _path=current_key_path)
        elif isinstance(value, Path):
            result[key] = str(value)
        else:
            if key in result and result.get(key) != value:
                logger.debug("config.deep_merge.override", key_path=current_key_path,
                            old_value=result.get(key), new_value=value)
            result[key] = deepcopy(value)

    return result


def load_config(path: Path) -> Dict[str, Any]:
    """Load configuration from YAML file, returning {} when it cannot be read"""
    try:
        logger.info("config.load.starting", path=str(path))
        if not path.exists():
            logger.error("config.load.file_not_found", path=str(path))
            return {}
        with open(path) as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            logger.error("config.load.not_a_mapping", path=str(path), found_type=type(config).__name__)
            return {}
        logger.info("config.load.success", path=str(path), keys=list(config.keys()))
        return config
    except yaml.YAMLError as e:
        logger.error("config.load.yaml_error", path=str(path), error=str(e))
        return {}
    except OSError as e:
        logger.error("config.load.failed", path=str(path), error=str(e), error_type=type(e).__name__)
        return {}


def load_settings(path: Optional[Union[str, Path]] = None,
                  overrides: Optional[Dict[str, Any]] = None) -> EnvironmentSettings:
    """
    Build EnvironmentSettings from YAML and explicit overrides.

    The file is taken from path, else from the COMMAND_ENV_CONFIG variable.
    Values are read from the command_env section when the file has one,
    otherwise from the top level.

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    config: Dict[str, Any] = {}
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if source:
        config = load_config(Path(source))

    section = ConfigNode(config).get_value(CONFIG_SECTION)
    values = section if isinstance(section, dict) else config
    if overrides:
        values = deep_merge(values, overrides)

    known = {key: value for key, value in values.items() if key in EnvironmentSettings.model_fields}
    return EnvironmentSettings(**known)
