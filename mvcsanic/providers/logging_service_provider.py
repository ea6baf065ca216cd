"""
Logging Service Provider
Initializes application-wide structured logging
"""
import logging
from mvcsanic.service_provider import ServiceProvider
from mvcsanic.logging.logger_config import LoggerConfig
from mvcsanic.support import Config


class LoggingServiceProvider(ServiceProvider):
    """Logging service provider - sets up structured logging"""

    def register(self):
        """Register logging services"""
        self.setup_application_logger()

    def setup_application_logger(self):
        """
        Setup configured loggers

        Example:
            # config/app.py
            LOGGING_HANDLERS = {
                'framework': {'name': 'mvcsanic', 'format': 'json', 'file_name': 'logs/app.log'},
            }
        """
        handlers = Config.get('app.LOGGING_HANDLERS', {}) or {}

        for handler_config in handlers.values():
            LoggerConfig.setup_logger(
                name=handler_config.get('name'),
                format_type=handler_config.get('format'),
                file_name=handler_config.get('file_name'),
            )

        # Keep Sanic's own console output out of configured handlers
        if handlers:
            sanic_loggers = ['sanic.root', 'sanic.error', 'sanic.access', 'sanic.server']
            for logger_name in sanic_loggers:
                logging.getLogger(logger_name).propagate = False
