"""
Configuration management for MarkTrack.

Settings resolve in three layers: built-in defaults, then an optional JSON
config file, then environment variables (a ``.env`` file is loaded first).
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .core.exceptions import ConfigurationError
from .core.identifiers import DEFAULT_ID_LENGTH


# Environment variable -> settings field
ENV_VARS = {
    "LOCAL_DB": "database_path",
    "MARKTRACK_DATABASE_TYPE": "database_type",
    "MARKTRACK_HOST": "host",
    "MARKTRACK_PORT": "port",
    "MARKTRACK_LOG_LEVEL": "log_level",
    "MARKTRACK_SEED": "random_seed",
    "MARKTRACK_ID_LENGTH": "id_length",
    "MARKTRACK_INITIAL_COURSES": "initial_courses",
}


@dataclass
class Settings:
    """Application settings."""
    database_type: str = "sqlite"
    database_path: str = "marktrack.db"
    host: str = "0.0.0.0"
    port: int = 7878
    log_level: str = "INFO"
    random_seed: Optional[int] = None
    id_length: int = DEFAULT_ID_LENGTH
    initial_courses: int = 0

    def __post_init__(self):
        self.port = _to_int(self.port, "port")
        self.id_length = _to_int(self.id_length, "id_length")
        self.initial_courses = _to_int(self.initial_courses, "initial_courses")
        if self.random_seed is not None:
            self.random_seed = _to_int(self.random_seed, "random_seed")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"port must be between 1 and 65535, got {self.port}")
        if self.id_length < 1:
            raise ConfigurationError(f"id_length must be positive, got {self.id_length}")
        if self.initial_courses < 0:
            raise ConfigurationError(f"initial_courses must be non-negative, got {self.initial_courses}")
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'Settings':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**dict(data))


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a JSON configuration file."""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def load_settings(config_path: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None,
                  use_dotenv: bool = True) -> Settings:
    """Build Settings from defaults, an optional JSON file and the environment."""
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    values: Dict[str, Any] = {}
    if config_path:
        values.update(load_config_file(config_path))
    for env_name, field_name in ENV_VARS.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]
    return Settings.from_mapping(values)
