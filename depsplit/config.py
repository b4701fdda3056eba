"""
Configuration system for depsplit

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from enum import Enum
import logging

from .errors import ErrorCategory, SplitterError

logger = logging.getLogger(__name__)


class GroupNaming(Enum):
    """How non-general groups are keyed."""

    USAGE = "usage"
    SEQUENTIAL = "sequential"


class CollisionPolicy(Enum):
    """What to do when two group keys sanitize to the same identifier."""

    SUFFIX = "suffix"
    ERROR = "error"


class ConfigurationError(SplitterError):
    """Raised when configuration validation fails."""

    category = ErrorCategory.CONFIGURATION


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "depsplit.json",
        "depsplit.yaml",
        "depsplit.yml",
        ".depsplit.json",
        ".depsplit.yaml",
        ".depsplit.yml",
        os.path.expanduser("~/.depsplit.json"),
        os.path.expanduser("~/.depsplit.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        classification = {}
        if os.getenv("DEPSPLIT_ENTRY_FUNCTION"):
            classification["entry_function_name"] = os.getenv("DEPSPLIT_ENTRY_FUNCTION")

        if os.getenv("DEPSPLIT_GENERAL_GROUP"):
            classification["general_group_key"] = os.getenv("DEPSPLIT_GENERAL_GROUP")

        if os.getenv("DEPSPLIT_GROUP_NAMING"):
            naming = os.getenv("DEPSPLIT_GROUP_NAMING").lower()
            if naming in [n.value for n in GroupNaming]:
                classification["group_naming"] = naming
            else:
                logger.warning("Invalid DEPSPLIT_GROUP_NAMING value, using default")

        if classification:
            config["classification"] = classification

        output = {}
        if os.getenv("DEPSPLIT_ENTRY_FILE"):
            output["entry_file_name"] = os.getenv("DEPSPLIT_ENTRY_FILE")

        if os.getenv("DEPSPLIT_MODULE_SUFFIX"):
            output["module_suffix"] = os.getenv("DEPSPLIT_MODULE_SUFFIX")

        if os.getenv("DEPSPLIT_ON_COLLISION"):
            policy = os.getenv("DEPSPLIT_ON_COLLISION").lower()
            if policy in [p.value for p in CollisionPolicy]:
                output["on_name_collision"] = policy
            else:
                logger.warning("Invalid DEPSPLIT_ON_COLLISION value, using default")

        if output:
            config["output"] = output

        formatter = {}
        if os.getenv("DEPSPLIT_FORMAT"):
            formatter["enabled"] = os.getenv("DEPSPLIT_FORMAT").lower() == "true"

        if os.getenv("DEPSPLIT_FORMATTER_COMMAND"):
            formatter["command"] = os.getenv("DEPSPLIT_FORMATTER_COMMAND").split()

        if os.getenv("DEPSPLIT_FORMATTER_TIMEOUT"):
            try:
                formatter["timeout"] = float(os.getenv("DEPSPLIT_FORMATTER_TIMEOUT"))
            except ValueError:
                logger.warning("Invalid DEPSPLIT_FORMATTER_TIMEOUT value, using default")

        if formatter:
            config["formatter"] = formatter

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "classification" in config_data:
            classification = config_data["classification"]

            for key in ("entry_function_name", "general_group_key"):
                if key in classification:
                    value = classification[key]
                    if not isinstance(value, str) or not value.isidentifier():
                        raise ConfigurationError(f"{key} must be a valid Python identifier")

            if "group_naming" in classification:
                valid = [n.value for n in GroupNaming]
                if classification["group_naming"] not in valid:
                    raise ConfigurationError(f"group_naming must be one of: {valid}")

        if "output" in config_data:
            output = config_data["output"]

            if "entry_file_name" in output:
                name = output["entry_file_name"]
                if not isinstance(name, str) or not name.endswith(".py"):
                    raise ConfigurationError("entry_file_name must be a .py file name")
                if not name[:-3].isidentifier():
                    raise ConfigurationError("entry_file_name must be an importable module name")
                if os.sep in name or "/" in name:
                    raise ConfigurationError("entry_file_name must not contain a directory")

            if "module_suffix" in output:
                suffix = output["module_suffix"]
                if not isinstance(suffix, str) or (suffix and not ("x" + suffix).isidentifier()):
                    raise ConfigurationError("module_suffix may only contain identifier characters")

            if "on_name_collision" in output:
                valid = [p.value for p in CollisionPolicy]
                if output["on_name_collision"] not in valid:
                    raise ConfigurationError(f"on_name_collision must be one of: {valid}")

        if "formatter" in config_data:
            formatter = config_data["formatter"]

            if "command" in formatter:
                command = formatter["command"]
                if not isinstance(command, list) or not command:
                    raise ConfigurationError("formatter command must be a non-empty list")
                if not all(isinstance(part, str) for part in command):
                    raise ConfigurationError("formatter command entries must be strings")

            if "timeout" in formatter and formatter["timeout"] is not None:
                timeout = formatter["timeout"]
                if not isinstance(timeout, (int, float)) or timeout <= 0:
                    raise ConfigurationError("formatter timeout must be positive")


@dataclass
class ClassificationConfig:
    """Configuration for usage classification and grouping."""

    entry_function_name: str = "main"
    general_group_key: str = "general"
    group_naming: GroupNaming = GroupNaming.USAGE


@dataclass
class OutputConfig:
    """Configuration for generated files."""

    entry_file_name: str = "tmp_main.py"
    module_suffix: str = "_mod"
    on_name_collision: CollisionPolicy = CollisionPolicy.SUFFIX
    encoding: str = "utf-8"


@dataclass
class FormatterConfig:
    """Configuration for the external pretty-printer."""

    enabled: bool = True
    command: List[str] = field(default_factory=lambda: ["black", "-q", "-"])
    timeout: Optional[float] = None


@dataclass
class DepSplitConfig:
    """Main configuration class for depsplit."""

    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    @classmethod
    def default(cls) -> "DepSplitConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "DepSplitConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)
        4. Explicit overrides (command-line options)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
            overrides: Nested dictionary applied last
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        if overrides:
            configs_to_merge.append(overrides)

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        return cls.from_dict(merged_config)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DepSplitConfig":
        """Build a configuration from a (merged) nested dictionary."""
        classification = ClassificationConfig()
        for key, value in data.get("classification", {}).items():
            if hasattr(classification, key):
                if key == "group_naming" and isinstance(value, str):
                    value = GroupNaming(value)
                setattr(classification, key, value)

        output = OutputConfig()
        for key, value in data.get("output", {}).items():
            if hasattr(output, key):
                if key == "on_name_collision" and isinstance(value, str):
                    value = CollisionPolicy(value)
                setattr(output, key, value)

        formatter = FormatterConfig()
        for key, value in data.get("formatter", {}).items():
            if hasattr(formatter, key):
                setattr(formatter, key, list(value) if key == "command" else value)

        return cls(classification=classification, output=output, formatter=formatter)

    @classmethod
    def from_file(cls, config_path: str) -> "DepSplitConfig":
        """Load configuration from a JSON or YAML file only."""
        return cls.load(config_path=config_path, use_env=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "classification": {
                **asdict(self.classification),
                "group_naming": self.classification.group_naming.value,
            },
            "output": {
                **asdict(self.output),
                "on_name_collision": self.output.on_name_collision.value,
            },
            "formatter": asdict(self.formatter),
        }

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())


def load_config(
    config_path: Optional[str] = None,
    use_env: bool = True,
    overrides: Optional[Dict[str, Any]] = None,
) -> DepSplitConfig:
    """
    Load configuration from file, environment variables and overrides.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables
        overrides: Nested dictionary taking precedence over everything else

    Returns:
        DepSplitConfig: Loaded configuration
    """
    return DepSplitConfig.load(config_path=config_path, use_env=use_env, overrides=overrides)
