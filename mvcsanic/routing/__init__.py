"""
Routing Package
Route table, request-scoped router and route loading
"""
from mvcsanic.routing.constants import RoutingStatus, TrailingSlash
from mvcsanic.routing.route import Route
from mvcsanic.routing.route_collection import RouteCollection
from mvcsanic.routing.router import Router, RouterSettings, RoutingResult
from mvcsanic.routing.route_loader import RouteLoader

__all__ = [
    'Route',
    'RouteCollection',
    'RouteLoader',
    'Router',
    'RouterSettings',
    'RoutingResult',
    'RoutingStatus',
    'TrailingSlash',
]
