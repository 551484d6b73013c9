"""
Configuration loader module.

Responsible for loading and merging configuration from multiple domain-specific YAML files.
"""

import yaml
from typing import Dict, Any, Optional
from pathlib import Path

from tqkit.config.core.exceptions import ConfigError


DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / 'defaults'


class ConfigLoader:
    """
    Loads and merges configuration from multiple domain-specific files.

    Supports profile-based configuration overrides.
    """

    # Domain-specific config files to load
    DOMAIN_FILES = [
        'data.yaml',
        'charts.yaml',
        'logging.yaml',
    ]

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files
                        (defaults to the files shipped with the package)
        """
        self.config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR

    def load_all(self, profile_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Load all configuration files and merge them into a single dictionary.

        Args:
            profile_name: Optional profile name for configuration overrides
                         (e.g., 'verbose' loads <config_dir>/profiles/verbose.yaml)

        Returns:
            Dictionary containing all merged configuration

        Raises:
            ConfigError: If required config files cannot be loaded
        """
        config = {}

        for domain_file in self.DOMAIN_FILES:
            file_path = self.config_dir / domain_file
            if file_path.exists():
                domain_config = self._load_yaml(file_path)
                config = self.merge_configs(config, domain_config)
            else:
                raise ConfigError(f"Required configuration file not found: {file_path}")

        if profile_name:
            profile_config = self.load_profile(profile_name)
            config = self.merge_configs(config, profile_config)

        return config

    def load_profile(self, profile_name: str) -> Dict[str, Any]:
        """
        Load profile-specific configuration overrides.

        Args:
            profile_name: Name of the profile (e.g., 'verbose')

        Returns:
            Dictionary containing profile configuration overrides

        Raises:
            ConfigError: If profile file not found
        """
        profile_path = self.config_dir / 'profiles' / f'{profile_name}.yaml'

        if not profile_path.exists():
            raise ConfigError(f"Profile configuration file not found: {profile_path}")

        return self._load_yaml(profile_path)

    def merge_configs(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two configuration dictionaries.

        Overrides are applied recursively, so nested dictionaries are merged
        rather than replaced entirely.

        Args:
            base: Base configuration dictionary
            overrides: Configuration overrides to apply

        Returns:
            Merged configuration dictionary
        """
        result = base.copy()

        for key, value in overrides.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _load_yaml(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML file.

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed YAML content as dictionary

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        try:
            with open(file_path, 'r') as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Error reading configuration file {file_path}: {e}")

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Configuration file {file_path} must contain a mapping")
        return content
