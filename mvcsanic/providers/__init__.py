"""
Framework Service Providers
"""
from mvcsanic.providers.logging_service_provider import LoggingServiceProvider
from mvcsanic.providers.routing_service_provider import RoutingServiceProvider

__all__ = [
    'LoggingServiceProvider',
    'RoutingServiceProvider',
]
