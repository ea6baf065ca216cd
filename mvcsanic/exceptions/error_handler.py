"""
Centralized Error Handler
"""
from mvcsanic.logging import getLogger
from mvcsanic.http.response_helper import ResponseHelper
from typing import Optional
from sanic.exceptions import SanicException


class ErrorHandler:
    """
    Maps exceptions to status codes and messages, and reports them
    """
    def __init__(self, debug: bool = False):
        """
        Initialize error handler
        Args:
            debug: Expose messages of unexpected exceptions
        """
        self.debug = debug
        self.logger = getLogger('application')

    def get_status_code(self, error: Exception) -> int:
        """
        Determine HTTP status code from error
        """
        # Sanic exceptions have status_code
        if isinstance(error, SanicException):
            return error.status_code

        # Framework exceptions with status_code attribute
        if isinstance(getattr(error, 'status_code', None), int):
            return error.status_code

        return 500

    def get_error_message(self, error: Exception) -> str:
        """
        Get user-friendly error message
        """
        if isinstance(error, SanicException):
            return str(error)

        if isinstance(getattr(error, 'message', None), str):
            return error.message

        # Don't expose internals in production
        if not self.debug:
            return "An error occurred while processing your request"

        return str(error)

    def log_error(self, error: Exception, request=None, status_code: Optional[int] = None):
        """
        Log error with context

        Args:
            error: Raised exception
            request: RequestContext of the failed request
            status_code: Status code, derived from the error when omitted
        """
        if status_code is None:
            status_code = self.get_status_code(error)

        log_data = {
            'error_type': error.__class__.__name__,
            'error_message': str(error),
            'status_code': status_code,
        }
        if request is not None:
            log_data['method'] = request.method
            log_data['path'] = request.path

        # Log at appropriate level
        if status_code >= 500:
            self.logger.error(
                f"{status_code} Error: {error.__class__.__name__}",
                extra=log_data,
                exc_info=error
            )
        elif status_code >= 400:
            self.logger.warning(
                f"{status_code} Error: {error.__class__.__name__}",
                extra=log_data
            )
        else:
            self.logger.info(
                f"{status_code} Response",
                extra=log_data
            )

    def render_fallback(self, error: Exception):
        """
        Plain text response used when no error page can be rendered
        """
        return ResponseHelper.text(self.get_error_message(error), status=self.get_status_code(error))
