"""
Logging Configuration
Provides structured logging for the router and the dispatcher
"""
import logging
import logging.handlers
import json
import sys
from pathlib import Path
from typing import Optional, Union
from datetime import datetime


# Attributes every LogRecord carries, everything else came in through `extra`
_RECORD_ATTRIBUTES = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'getMessage', 'message', 'asctime', 'taskName',
])


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record

    Fields passed through ``extra`` (route, path, status_code, ...) are
    written next to the standard ones.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }
        log_data.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        )

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Centralized logging configuration
    """

    @staticmethod
    def setup_logger(
        name: str,
        format_type: Optional[str] = None,
        level: Optional[int] = None,
        file_name: Union[str, Path, None] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
        stream=None,
    ) -> logging.Logger:
        """
        Setup a logger writing to a stream and optionally to a rotating file

        Args:
            name: Logger name
            format_type: Format type ('json' or 'text'), defaults to config
            level: Logging level, defaults to the level of APP_ENV
            file_name: Log file path, no file handler when omitted
            max_bytes: Max bytes before rotation
            backup_count: Number of backup files to keep
            stream: Stream for the console handler (stderr by default)

        Returns:
            Configured logger

        Example:
            logger = LoggerConfig.setup_logger('mvcsanic.routing', format_type='json')
        """
        from mvcsanic.defaults import (
            DEFAULT_APP_ENV,
            DEFAULT_LOG_BACKUP_COUNT,
            DEFAULT_LOG_FORMAT,
            DEFAULT_LOG_MAX_BYTES,
        )
        from mvcsanic.support import Config, EnvHelper

        if format_type is None:
            format_type = Config.get('app.LOG_FORMAT', EnvHelper.get('LOG_FORMAT', DEFAULT_LOG_FORMAT))
        if level is None:
            app_env = Config.get('app.APP_ENV', EnvHelper.get('APP_ENV', DEFAULT_APP_ENV))
            level = LoggerConfig.get_level_by_environment(app_env)
        if max_bytes is None:
            max_bytes = DEFAULT_LOG_MAX_BYTES
        if backup_count is None:
            backup_count = DEFAULT_LOG_BACKUP_COUNT

        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Clear existing handlers
        logger.handlers.clear()

        if format_type == 'json':
            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if file_name:
            log_file = Path(file_name)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

        return logger

    @staticmethod
    def get_level_by_environment(environment: str) -> int:
        """
        Get logging level based on environment

        Args:
            environment: Environment name ('production', 'development', 'testing')

        Returns:
            Logging level
        """
        levels = {
            'production': logging.WARNING,
            'staging': logging.INFO,
            'development': logging.DEBUG,
            'local': logging.DEBUG,
            'testing': logging.ERROR,
        }
        return levels.get(str(environment).lower(), logging.INFO)
