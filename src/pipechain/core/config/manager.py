"""
Configuration Manager

Handles hierarchical configuration loading and validation with support for
explicit overrides → environment variables → config files → defaults.
"""

import os
import json
import importlib
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from pydantic import ValidationError

from pipechain.core.config.models import AppConfig
from pipechain.core.exceptions import ConfigurationError, ErrorCode
from pipechain.core.factory import ClassFactory, get_default_factory, split_dotted_name


_TRUE_FLAGS = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_FLAGS = frozenset({'0', 'false', 'no', 'off', ''})


def parse_flag(value: str) -> bool:
    """Parse an on/off environment value, rejecting anything unrecognized."""
    flag = value.strip().lower()
    if flag in _TRUE_FLAGS:
        return True
    if flag in _FALSE_FLAGS:
        return False
    raise ValueError(f"expected one of {', '.join(sorted((_TRUE_FLAGS | _FALSE_FLAGS) - {''}))}")


def merge_settings(base: Dict[str, Any], layer: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``layer`` on ``base``; sections (nested dicts) are merged key by key."""
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_settings(current, value)
        merged[key] = value
    return merged


class ConfigManager:
    """
    Manages configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. Explicit overrides (highest priority)
    2. Environment variables
    3. Configuration files
    4. Default values (lowest priority)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default configuration file search paths."""
        search_paths = [
            Path.cwd() / "pipechain.yaml",
            Path.cwd() / "pipechain.yml",
            Path.cwd() / ".pipechain.yaml",
            Path.cwd() / "pipechain.json",
            Path.home() / ".config" / "pipechain" / "config.yaml",
        ]

        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            search_paths.append(Path(xdg_config) / "pipechain" / "config.yaml")

        return search_paths

    def load_config(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        env_prefix: str = "PIPECHAIN_"
    ) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            overrides: Nested dictionary of explicit settings
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data: Dict[str, Any] = {}
        for layer in (self._load_config_file(), self._load_env_config(env_prefix), overrides):
            if layer:
                config_data = merge_settings(config_data, layer)

        try:
            self._config = AppConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e
            ) from e

        if self._config.debug:
            logging.getLogger("pipechain").setLevel(logging.DEBUG)

        return self._config

    def _find_config_file(self) -> Optional[Path]:
        """Get the explicit config file, or the first default path that exists."""
        if self.config_file is None:
            return next((path for path in self._config_paths if path.is_file()), None)

        if not self.config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_file}",
                error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                config_key="config_file",
                config_value=str(self.config_file)
            )
        return self.config_file

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load the settings mapping from the config file, if there is one."""
        config_file = self._find_config_file()
        if config_file is None:
            return None

        # YAML parses JSON documents too; unknown suffixes go through YAML
        parse = json.loads if config_file.suffix.lower() == '.json' else yaml.safe_load
        try:
            data = parse(config_file.read_text(encoding='utf-8'))
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_file}: {e}",
                cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping, got {type(data).__name__}"
            )
        return data

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        env_mappings = {
            f"{prefix}MIDDLEWARE_INTERFACE": ("bridge", "middleware_interface", str),
            f"{prefix}MIDDLEWARE_ADAPTER": ("bridge", "middleware_adapter", str),
            f"{prefix}DEFAULT_MIDDLEWARE_INTERFACE": ("bridge", "default_middleware_interface", str),
            f"{prefix}RESPONSE_ATTRIBUTE": ("bridge", "response_attribute", str),
            f"{prefix}CONTAINER": ("bridge", "container", str),

            f"{prefix}REPORT_SEALED": ("pipeline", "report_sealed", parse_flag),
            f"{prefix}SEAL_LOG_LEVEL": ("pipeline", "seal_log_level", str),

            f"{prefix}DEBUG": ("debug", None, parse_flag),
        }

        for env_var, (section, key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    parsed_value = parser(value)
                    if key is None:
                        env_config[section] = parsed_value
                    else:
                        env_config.setdefault(section, {})[key] = parsed_value
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {value} ({e})",
                        error_code=ErrorCode.CONFIG_INVALID_VALUE,
                        config_key=env_var,
                        config_value=value
                    ) from e

        return env_config


    def validate_config(self, config: Optional[AppConfig] = None,
                        factory: Optional[ClassFactory] = None) -> List[str]:
        """
        Validate configuration and return list of warnings.

        Dotted names are only checked here, never at load time, since the host
        framework may import them later.

        Args:
            config: Configuration to validate (uses loaded config if None)
            factory: Factory used to locate dotted names

        Returns:
            List of validation warnings
        """
        if config is None:
            config = self._config

        if config is None:
            return ["No configuration loaded"]

        factory = factory or get_default_factory()
        warnings = []
        bridge = config.bridge

        names = [
            ("Middleware interface", bridge.middleware_interface),
            ("Middleware adapter", bridge.middleware_adapter),
            ("Default middleware interface", bridge.default_middleware_interface),
        ]
        for label, name in names:
            if not name:
                continue
            try:
                found = factory.locate(name) is not None
            except ImportError as e:
                warnings.append(f"{label} cannot be imported: {name} ({e})")
                continue
            if not found:
                warnings.append(f"{label} cannot be imported: {name}")

        if bool(bridge.middleware_interface) != bool(bridge.middleware_adapter):
            warnings.append("middleware_interface and middleware_adapter should be set together")

        return warnings

    def build_bridge(self, config: Optional[AppConfig] = None):
        """
        Build a PipelineBridge from the bridge settings.

        Args:
            config: Configuration to use (loads configuration if None)

        Returns:
            Configured PipelineBridge
        """
        from pipechain.bridge.bridge import PipelineBridge

        if config is None:
            config = self._config or self.load_config()

        container = None
        if config.bridge.container:
            container = self._load_container(config.bridge.container)

        return PipelineBridge.from_settings(config.bridge, container=container)

    @staticmethod
    def _load_container(name: str) -> Any:
        """Import a container object or call a zero-argument container factory."""
        parts = split_dotted_name(name)
        if parts is None:
            raise ConfigurationError(f"Invalid container name: {name}",
                                     error_code=ErrorCode.CONFIG_INVALID_VALUE,
                                     config_key="bridge.container", config_value=name)
        module_name, attr_path = parts
        try:
            target: Any = importlib.import_module(module_name)
            for attr in attr_path.split('.'):
                target = getattr(target, attr)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                f"Cannot import container {name}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_VALUE,
                config_key="bridge.container",
                config_value=name,
                cause=e
            ) from e

        if isinstance(target, type) or (callable(target) and not hasattr(target, 'has')):
            target = target()
        return target

    def generate_schema(self, output_file: Optional[Path] = None) -> Dict[str, Any]:
        """
        Generate JSON schema for configuration.

        Args:
            output_file: Optional file to write schema to

        Returns:
            JSON schema dictionary
        """
        schema = AppConfig.model_json_schema()

        if output_file:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(schema, f, indent=2)

        return schema

    def create_example_config(self, output_file: Path) -> None:
        """
        Create example configuration file with the default values.

        Args:
            output_file: Path to write configuration file
        """
        config_dict = AppConfig().model_dump(mode='json')

        with open(output_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @property
    def config(self) -> Optional[AppConfig]:
        """Get the loaded configuration."""
        return self._config
