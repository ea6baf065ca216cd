"""
Framework Package
Export commonly used classes for easy import
"""
from mvcsanic.routing import (
    Route,
    RouteCollection,
    RouteLoader,
    Router,
    RouterSettings,
    RoutingResult,
    RoutingStatus,
    TrailingSlash,
)
from mvcsanic.http import RequestContext, ResponseHelper, UrlGenerator
from mvcsanic.controller import Controller
from mvcsanic.application import Application

__all__ = [
    'Application',
    'Controller',
    'RequestContext',
    'ResponseHelper',
    'Route',
    'RouteCollection',
    'RouteLoader',
    'Router',
    'RouterSettings',
    'RoutingResult',
    'RoutingStatus',
    'TrailingSlash',
    'UrlGenerator',
]
