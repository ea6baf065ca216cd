"""
Exceptions Package
"""
from mvcsanic.exceptions.custom import (
    ConstraintMismatch,
    DuplicateRouteRegistration,
    FrameworkException,
    InvalidPatternSyntax,
    MissingRequiredParam,
    NoRouteMatched,
    NotFoundException,
    RouteDefinitionException,
    RoutingConfigurationException,
    RoutingException,
    UrlBuildException,
)

__all__ = [
    'ConstraintMismatch',
    'DuplicateRouteRegistration',
    'FrameworkException',
    'InvalidPatternSyntax',
    'MissingRequiredParam',
    'NoRouteMatched',
    'NotFoundException',
    'RouteDefinitionException',
    'RoutingConfigurationException',
    'RoutingException',
    'UrlBuildException',
]
