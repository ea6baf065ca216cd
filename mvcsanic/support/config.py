"""
Config Manager - dot notation configuration access
Access python config modules or registered mappings using dot notation
"""

import importlib
import threading
from typing import Any, Optional, Dict


_MISSING = object()


class Config:
    """
    Configuration manager with dot notation access

    Usage:
        # Get config value
        behaviour = Config.get('routing.trailing_slash')

        # With default
        debug = Config.get('app.debug', False)

        # Set runtime value
        Config.set('routing.route_to_default_if_not_match', True)

        # Register a mapping instead of a module (tests, embedding)
        Config.load('routes', {'ROUTES': {...}})

    Config modules live in the ``config`` package of the application:
        config/
        ├── app.py
        ├── routing.py
        └── routes.py
    """

    package = 'config'

    _lock = threading.Lock()
    _loaded: Dict[str, Any] = {}
    _runtime_overrides: Dict[str, Any] = {}

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation (case-insensitive)

        Args:
            key: Config key in dot notation (e.g., 'routing.trailing_slash')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        key_lower = key.lower()

        if key_lower in cls._runtime_overrides:
            return cls._runtime_overrides[key_lower]

        parts = key_lower.split('.')
        file_name = parts[0]

        if file_name not in cls._loaded:
            cls._load_config_file(file_name)

        value = cls._loaded.get(file_name)
        if value is None:
            return default

        for part in parts[1:]:
            value = cls._lookup(value, part)
            if value is _MISSING:
                return default

        return value

    @staticmethod
    def _lookup(value: Any, part: str) -> Any:
        """Case-insensitive lookup of one key segment in a dict or module"""
        if isinstance(value, dict):
            for dict_key in value.keys():
                if str(dict_key).lower() == part:
                    return value[dict_key]
            return _MISSING

        if hasattr(value, '__dict__'):
            for attr_name in dir(value):
                if attr_name.lower() == part:
                    return getattr(value, attr_name)

        return _MISSING

    @classmethod
    def _load_config_file(cls, file_name: str):
        """
        Load a config module from the config package

        Args:
            file_name: Config module name (without .py extension)
        """
        with cls._lock:
            if file_name in cls._loaded:
                return

            try:
                module = importlib.import_module(f'{cls.package}.{file_name}')
                cls._loaded[file_name] = module
            except ImportError:
                cls._loaded[file_name] = None

    @classmethod
    def load(cls, file_name: str, data: Dict[str, Any]):
        """
        Register a mapping as the content of a config file

        Args:
            file_name: Config file name the mapping stands for
            data: Configuration values
        """
        with cls._lock:
            cls._loaded[file_name.lower()] = data

    @classmethod
    def set(cls, key: str, value: Any):
        """
        Set configuration value at runtime (does not persist to file)

        Example:
            Config.set('routing.trailing_slash', 0)
        """
        cls._runtime_overrides[key.lower()] = value

    @classmethod
    def has(cls, key: str) -> bool:
        """Check if configuration key exists"""
        return cls.get(key) is not None

    @classmethod
    def all(cls, file_name: str) -> Optional[Any]:
        """
        Get the whole config module (or mapping) of a file

        Example:
            routes_config = Config.all('routes')
        """
        file_name = file_name.lower()
        if file_name not in cls._loaded:
            cls._load_config_file(file_name)

        return cls._loaded.get(file_name)

    @classmethod
    def reload(cls, file_name: Optional[str] = None):
        """
        Reload configuration file(s)

        Args:
            file_name: Specific file to reload, or None to reload all
        """
        with cls._lock:
            if file_name:
                cls._loaded.pop(file_name.lower(), None)
            else:
                cls._loaded.clear()

    @classmethod
    def clear_runtime_overrides(cls):
        """Clear all runtime configuration overrides"""
        cls._runtime_overrides.clear()
