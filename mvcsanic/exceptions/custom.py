"""
Custom Exception Classes
Framework-specific exceptions with HTTP status codes
"""
from typing import Optional


class FrameworkException(Exception):
    """Base exception for all framework exceptions"""
    status_code = 500
    message = "An error occurred"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.__class__.message
        self.status_code = status_code or self.__class__.status_code
        super().__init__(self.message)


class NotFoundException(FrameworkException):
    """
    Resource not found exception

    Raised when a requested resource doesn't exist

    Example:
        raise NotFoundException("Controller `Products` doesn't exist")
    """
    status_code = 404
    message = "Page not found."


class NoRouteMatched(NotFoundException):
    """
    No route matched the requested path

    Routing itself never raises it, the dispatcher does when the
    router reports NOT_FOUND.
    """
    message = "No route for request"

    def __init__(self, path: str = '', message: Optional[str] = None):
        self.path = path
        super().__init__(message or (f"No route for request: `{path}`" if path else None))


# ============================================================================
# Routing
# ============================================================================

class RoutingException(FrameworkException):
    """Base exception for router errors"""
    message = "Routing error"


class UrlBuildException(RoutingException):
    """
    A route could not render a URL from the given params

    Caught by the URL builder, which falls back to the query string form.
    """
    message = "Not possible to build URL"

    def __init__(self, route_name: str, param_name: str, message: Optional[str] = None):
        self.route_name = route_name
        self.param_name = param_name
        super().__init__(message)


class MissingRequiredParam(UrlBuildException):
    """A required placeholder has neither a value nor a default"""

    def __init__(self, route_name: str, param_name: str):
        super().__init__(
            route_name,
            param_name,
            f"Route `{route_name}` requires param `{param_name}`"
        )


class ConstraintMismatch(UrlBuildException):
    """A param value doesn't satisfy the route constraint"""

    def __init__(self, route_name: str, param_name: str, value: str, constraint: str):
        self.value = value
        self.constraint = constraint
        super().__init__(
            route_name,
            param_name,
            f"Route `{route_name}` param `{param_name}` value `{value}` "
            f"doesn't match constraint `{constraint}`"
        )


class RoutingConfigurationException(RoutingException):
    """Invalid route table configuration, fatal at startup"""
    message = "Invalid routing configuration"


class DuplicateRouteRegistration(RoutingConfigurationException):
    """Route name or `Controller:Action` pair registered twice"""

    def __init__(self, key: str, kind: str = 'name'):
        self.key = key
        self.kind = kind
        if kind == 'name':
            message = f"Route with name `{key}` has already been defined between router routes."
        else:
            message = (
                f"Route with `Controller:Action` combination `{key}` "
                "has already been defined between router routes."
            )
        super().__init__(message)


class InvalidPatternSyntax(RoutingConfigurationException):
    """Malformed route pattern or reverse template"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern `{pattern}`: {reason}")


class RouteDefinitionException(RoutingConfigurationException):
    """Route without a resolvable controller and action"""
