"""
EnvHelper - Read .env files into the process environment
"""

import os
import threading
from pathlib import Path
from typing import Optional, Any, Union
from dotenv import load_dotenv


class EnvHelper:
    """
    Environment variable reader with .env file support

    Usage:
        # Read
        value = EnvHelper.get('APP_NAME', 'Default App')

        # Typed reads
        debug = EnvHelper.get_bool('APP_DEBUG', False)

        # Load a specific file
        EnvHelper.load('/path/to/.env')
    """

    _lock = threading.Lock()
    _env_path: Optional[Path] = None
    _loaded: bool = False

    @classmethod
    def initialize(cls, env_path: Union[str, Path, None] = None):
        """
        Initialize EnvHelper

        Args:
            env_path: Path to .env file (defaults to .env in the working directory)
        """
        cls._env_path = Path(env_path) if env_path else Path.cwd() / '.env'

    @classmethod
    def load(cls, env_path: Union[str, Path, None] = None, override: bool = False) -> bool:
        """
        Load .env file into environment

        Args:
            env_path: Path to .env file (defaults to initialized path)
            override: Whether to override existing environment variables

        Returns:
            bool: True if a file was loaded
        """
        with cls._lock:
            if env_path:
                cls._env_path = Path(env_path)

            if cls._env_path is None:
                cls.initialize()

            cls._loaded = True
            if not cls._env_path.exists():
                return False

            return load_dotenv(cls._env_path, override=override)

    @classmethod
    def get(cls, key: str, default: Any = None) -> Optional[str]:
        """
        Get environment variable value

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Variable value or default
        """
        if not cls._loaded:
            cls.load()

        return os.getenv(key, default)

    @classmethod
    def get_bool(cls, key: str, default: Optional[bool] = False) -> Optional[bool]:
        """
        Get boolean environment variable

        Example:
            debug = EnvHelper.get_bool('APP_DEBUG', False)
        """
        value = cls.get(key)
        if value is None or value == '':
            return default

        return value.lower() in ('true', '1', 'yes', 'on')

    @classmethod
    def get_int(cls, key: str, default: int = 0) -> int:
        """
        Get integer environment variable

        Args:
            key: Environment variable name
            default: Default value

        Returns:
            Integer value
        """
        value = cls.get(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            return default

    @classmethod
    def has(cls, key: str) -> bool:
        """Check if an environment variable is set"""
        return cls.get(key) is not None
