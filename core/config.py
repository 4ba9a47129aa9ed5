"""
Configuration Management - YAML-based configuration with environment overrides
=============================================================================

This module handles all configuration aspects including:
- Loading from YAML files
- Environment variable overrides
- Default values
- Configuration validation
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


@dataclass
class RulesConfig:
    """
    Rule table configuration.

    Points at the YAML rules file and optionally overrides the order in
    which its categories are concatenated. Category order decides
    precedence, so changing it changes which group answers.
    """
    rules_file: str = ""  # Empty = packaged default rules
    category_order: List[str] = field(default_factory=list)  # Empty = file order

    def validate(self) -> None:
        """Validate rules configuration."""
        if not isinstance(self.rules_file, str):
            raise ConfigError(f"rules_file must be a string, got {self.rules_file!r}")

        if not _is_string_list(self.category_order):
            raise ConfigError(
                "category_order must be a list of category names",
                {"category_order": self.category_order}
            )

        if len(set(self.category_order)) != len(self.category_order):
            raise ConfigError(
                "category_order contains duplicates",
                {"category_order": self.category_order}
            )

        if self.rules_file and not Path(self.rules_file).expanduser().is_file():
            raise ConfigError(
                f"Rules file not found: {self.rules_file}",
                {"path": self.rules_file}
            )


@dataclass
class SessionConfig:
    """
    Conversation session configuration.

    Controls the interactive loop and the random stream used to pick
    responses. A fixed seed makes replies reproducible.
    """
    seed: Optional[int] = None
    greeting: str = "Hello. How are you feeling today?"
    farewell: str = "Goodbye. It was nice talking to you."
    prompt: str = "> "
    quit_words: List[str] = field(default_factory=lambda: ["quit", "exit", "bye"])

    def validate(self) -> None:
        """Validate session configuration."""
        if self.seed is not None and (not isinstance(self.seed, int) or self.seed < 0):
            raise ConfigError(f"seed must be a non-negative integer, got {self.seed!r}")

        if not _is_string_list(self.quit_words):
            raise ConfigError(
                "quit_words must be a list of strings",
                {"quit_words": self.quit_words}
            )

        if any(not word.strip() for word in self.quit_words):
            raise ConfigError("quit_words must not contain empty entries")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    json_format: bool = False
    log_dir: str = ""

    def validate(self) -> None:
        """Validate logging configuration."""
        if not isinstance(self.level, str) or self.level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.level}")


@dataclass
class Config:
    """
    Main configuration container.

    Aggregates all configuration sections into a single object
    and provides methods for loading, saving, and validating.
    """
    app_name: str = "Eliza Responder"
    version: str = "1.0.0"
    debug: bool = False

    rules: RulesConfig = field(default_factory=RulesConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Set at runtime
    config_dir: str = ""

    def validate(self) -> None:
        """
        Validate all configuration sections.

        Raises:
            ConfigError: If any configuration section is invalid
        """
        self.rules.validate()
        self.session.validate()
        self.logging.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app_name": self.app_name,
            "version": self.version,
            "debug": self.debug,
            "rules": asdict(self.rules),
            "session": asdict(self.session),
            "logging": asdict(self.logging),
        }


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory path.

    Returns:
        Path to the configuration directory
    """
    if "ELIZA_CONFIG_DIR" in os.environ:
        return Path(os.environ["ELIZA_CONFIG_DIR"])

    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "eliza-responder"

    return Path.home() / ".config" / "eliza-responder"


def load_config(config_path: Optional[str] = None, load_env: bool = True) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    This function loads configuration in the following order:
    1. Default values from dataclass
    2. Values from YAML file
    3. Environment variable overrides

    Args:
        config_path: Path to configuration file (optional)
        load_env: Whether to load environment variable overrides

    Returns:
        Config object with loaded values

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    config = Config()
    config.config_dir = str(get_default_config_dir())

    if config_path:
        yaml_path = Path(config_path)
        if not yaml_path.exists():
            raise ConfigError(f"Config file not found: {yaml_path}", {"path": str(yaml_path)})
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(yaml_path)})
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}", {"path": str(yaml_path)})

        if not isinstance(yaml_config, dict):
            raise ConfigError("Config file must contain a mapping", {"path": str(yaml_path)})

        _apply_yaml_config(config, yaml_config)

    if load_env:
        _apply_env_overrides(config)

    config.validate()

    return config


def _apply_yaml_config(config: Config, yaml_config: Dict[str, Any]) -> None:
    """
    Apply YAML configuration values to Config object.

    Unknown keys are ignored.

    Args:
        config: Config object to update
        yaml_config: Dictionary of configuration values from YAML
    """
    for key in ("app_name", "version", "debug"):
        if key in yaml_config:
            setattr(config, key, yaml_config[key])

    for section in ("rules", "session", "logging"):
        section_cfg = yaml_config.get(section) or {}
        if not isinstance(section_cfg, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")

        section_obj = getattr(config, section)
        for key, value in section_cfg.items():
            if hasattr(section_obj, key):
                setattr(section_obj, key, value)


def _to_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def _to_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _apply_env_overrides(config: Config) -> None:
    """
    Apply environment variable overrides to Config object.

    Environment variables follow the pattern: ELIZA_<KEY>
    For example: ELIZA_SEED, ELIZA_LOG_LEVEL

    Args:
        config: Config object to update
    """
    env_mappings = {
        "ELIZA_RULES_FILE": ("rules", "rules_file"),
        "ELIZA_CATEGORY_ORDER": ("rules", "category_order", _to_list),
        "ELIZA_SEED": ("session", "seed", int),
        "ELIZA_LOG_LEVEL": ("logging", "level"),
        "ELIZA_LOG_JSON": ("logging", "json_format", _to_bool),
        "ELIZA_LOG_DIR": ("logging", "log_dir"),
    }

    for env_var, mapping in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section, key = mapping[0], mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str

        try:
            converted = converter(value)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_var}: {value!r}", {"error": str(e)})

        setattr(getattr(config, section), key, converted)

    if "ELIZA_DEBUG" in os.environ:
        config.debug = _to_bool(os.environ["ELIZA_DEBUG"])


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Config object to save
        config_path: Path to save configuration (optional)

    Raises:
        ConfigError: If configuration cannot be saved
    """
    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir or get_default_config_dir()) / "config.yaml"

    try:
        yaml_path.parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config file: {e}", {"path": str(yaml_path)})
