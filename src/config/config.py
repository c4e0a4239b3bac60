"""
Minimal Configuration Reader for Quake Log Tools

A lightweight configuration system that provides:
- Profile-based configuration management
- JSON-based configuration storage with read-only access
- Secrets management for sensitive information
- Hierarchical configuration with dot-notation access
- Automatic path resolution for file paths

Usage:
    from config import Config
    config = Config(profile='ctf_server')
    value = config.get('parser.extraction_strategy')

The configuration system loads settings in this order (later overrides earlier):
1. Built-in defaults (DEFAULT_CONFIG)
2. Default or specified profile (profiles/<profile>.json)
3. Profile-specific secrets (secrets/<profile>_secrets.json)
"""

import copy
from typing import Dict, Any, List, Optional
from pathlib import Path

from quake_log_tools.base import JSONTool, logger


# Values used when a profile does not set them
DEFAULT_CONFIG: Dict[str, Any] = {
    "general": {
        "log_level": "INFO",
        "output_path": "output",
    },
    "paths": {
        "log_file": "qgames.log",
    },
    "parser": {
        "strict": True,
        "extraction_strategy": "positional",
        "max_malformed_samples": 10,
    },
    "report": {
        "formats": ["json"],
        "chart_top": None,
    },
}


class Config(JSONTool):
    """
    A minimal JSON-based configuration reader for Quake log tools.

    Attributes:
        config_dir (str): Directory containing profile JSON files
        secrets_dir (str): Directory containing secrets JSON files
        profile (str): Currently active profile name
        data (dict): Loaded configuration data
    """

    DEFAULT_CONFIG_DIR = str(Path(__file__).parent / 'profiles')
    DEFAULT_SECRETS_DIR = str(Path(__file__).parent / 'secrets')
    DEFAULT_PROFILE = "default"

    def __init__(self, config_dir: str = None, secrets_dir: str = None, profile: str = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Config instance.

        Args:
            config_dir (str, optional): Directory for config profiles.
                Defaults to 'profiles' subdirectory relative to this file.
            secrets_dir (str, optional): Directory for secrets files.
                Defaults to 'secrets' subdirectory relative to this file.
            profile (str, optional): Profile name to use. Defaults to 'default'.
            config (dict, optional): Base configuration dictionary for JSONTool compatibility.
        """
        super().__init__(config)

        self.config_dir = config_dir or self.DEFAULT_CONFIG_DIR
        self.secrets_dir = secrets_dir or self.DEFAULT_SECRETS_DIR
        self.profile = profile or self.DEFAULT_PROFILE
        self.data = {}

        Path(self.config_dir).mkdir(parents=True, exist_ok=True)

        self._load()

    def run(self) -> Dict[str, Any]:
        """
        Run the config tool (implementation of abstract method from QuakeTool).

        Returns:
            The full configuration dictionary.
        """
        return self.get_full_config()

    def _load(self):
        """
        Load built-in defaults, then merge the profile JSON file and its secrets.

        A missing default profile is created on disk; a missing named
        profile falls back to the built-in defaults.
        """
        self.data = copy.deepcopy(DEFAULT_CONFIG)
        profile_path = Path(self.config_dir) / f"{self.profile}.json"

        if not profile_path.exists():
            if self.profile == self.DEFAULT_PROFILE:
                self._create_default_profile(str(profile_path))
            else:
                logger.warning(f"Profile '{self.profile}' not found. Using built-in defaults.")
            self._load_secrets()
            return

        try:
            profile_data = self.read_json(str(profile_path))
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration: {e}")
            return

        if isinstance(profile_data, dict):
            self._deep_merge(self.data, profile_data)
        logger.info(f"Loaded configuration from '{self.profile}'")

        self._load_secrets()

    def _create_default_profile(self, profile_path: str):
        """
        Write the built-in defaults as the default profile.

        Args:
            profile_path (str): Path where the default profile will be created
        """
        try:
            self.write_json(DEFAULT_CONFIG, profile_path)
            logger.info(f"Created default profile at '{profile_path}'")
        except OSError as e:
            logger.error(f"Error creating default configuration: {e}")

    def _load_secrets(self):
        """
        Load and merge secrets from the secrets directory.

        Looks for a profile-specific file named '<profile>_secrets.json'
        and deep-merges it over the existing configuration data.
        """
        profile_secrets_path = Path(self.secrets_dir) / f"{self.profile}_secrets.json"
        if not profile_secrets_path.exists():
            logger.debug(f"No secrets file found for profile '{self.profile}'")
            return

        try:
            profile_secrets = self.read_json(str(profile_secrets_path))
        except (OSError, ValueError) as e:
            logger.error(f"Error loading profile-specific secrets: {e}")
            return

        if isinstance(profile_secrets, dict):
            self._deep_merge(self.data, profile_secrets)
            logger.info(f"Loaded and merged secrets from '{profile_secrets_path}'")

    def _deep_merge(self, target: Dict[str, Any], source: Dict[str, Any]):
        """
        Deep merge two dictionaries.

        Args:
            target (dict): The target dictionary to merge into
            source (dict): The source dictionary to merge from

        Note:
            Recursively merges nested dictionaries. Non-dict values in source
            will completely replace values in target.
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_merge(target[key], value)
            else:
                target[key] = value

    def get(self, path: str = None, default: Any = None) -> Any:
        """
        Get a configuration value by path using dot notation.

        Args:
            path (str, optional): Dot notation path to the value
                (e.g., "parser.strict"). If None, returns the entire
                configuration dictionary.
            default (Any, optional): Value to return if path not found.

        Examples:
            >>> config.get('parser.extraction_strategy')
            'positional'
            >>> config.get()  # Returns entire config
            {'general': {...}, 'paths': {...}, ...}
        """
        if path is None:
            return self.data

        current = self.data
        if path:
            for key in path.split('.'):
                if isinstance(current, dict) and key in current:
                    current = current[key]
                else:
                    return default

        return current

    def list_profiles(self) -> List[str]:
        """List all available profile names (without .json extension)."""
        config_path = Path(self.config_dir)
        return sorted(f.stem for f in config_path.glob("*.json"))

    def switch_profile(self, profile: str) -> bool:
        """
        Switch to a different profile.

        Args:
            profile (str): Name of profile to switch to (without .json extension).

        Returns:
            bool: True if successful, False if profile not found.
        """
        profile_path = Path(self.config_dir) / f"{profile}.json"
        if profile_path.exists():
            self.profile = profile
            self._load()
            return True

        logger.warning(f"Profile '{profile}' not found.")
        return False

    def get_full_config(self) -> Dict[str, Any]:
        """Return the full configuration dictionary including merged secrets."""
        return self.data

    def get_path(self, path_key: str, fallback: str = None) -> str:
        """
        Get a resolved filesystem path from configuration.

        Args:
            path_key (str): Path key in dot notation (e.g., "paths.log_file")
            fallback (str, optional): Default path if not found

        Returns:
            str: Resolved absolute path. Returns empty string if path is None/empty.
                 Relative paths are resolved relative to the config directory.
        """
        path = self.get(path_key, fallback)
        if not path:
            return ""

        path_obj = Path(path)
        if path_obj.is_absolute():
            return str(path_obj)

        return str(Path(self.config_dir).parent / path)
