"""
Route Collection
Ordered route table shared by all requests, with name and
Controller:Action lookups
"""
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mvcsanic.exceptions.custom import DuplicateRouteRegistration
from mvcsanic.logging import getLogger
from mvcsanic.routing.route import Route

logger = getLogger('routing')


class RouteCollection:
    """
    Collection of routes with name-based and Controller:Action lookup

    Registration publishes a new snapshot under a lock. Readers (matching
    and URL building) iterate whatever snapshot they picked up, so a
    request never sees a half written table.
    """

    def __init__(self, routes: Optional[Iterable[Route]] = None):
        """Initialize a route collection, optionally with routes"""
        self._lock = RLock()
        self._routes: Tuple[Route, ...] = ()
        self._routes_by_name: Dict[str, Route] = {}
        self._routes_by_action: Dict[str, Route] = {}

        if routes:
            self.add_many(routes)

    def add(self, route: Route, prepend: bool = False, throw_on_duplicate: bool = True) -> Route:
        """
        Add a route to the collection

        Args:
            route: Route instance
            prepend: Insert before existing routes instead of after
            throw_on_duplicate: Raise for a repeated name or Controller:Action,
                otherwise the new route replaces the old one

        Returns:
            The added route

        Raises:
            DuplicateRouteRegistration: Duplicate with throw_on_duplicate
        """
        return self.add_many([route], prepend, throw_on_duplicate)[0]

    def add_many(self, routes: Iterable[Route], prepend: bool = False,
                 throw_on_duplicate: bool = True) -> List[Route]:
        """
        Add routes keeping their order

        Prepended batches end up before existing routes, in batch order.
        A failing route leaves the collection untouched.
        """
        routes = list(routes)
        with self._lock:
            ordered = list(self._routes)
            by_name = dict(self._routes_by_name)
            by_action = dict(self._routes_by_action)
            batch: List[Route] = []

            for route in routes:
                name = route.get_name()
                controller_action = route.get_controller_action()

                existing = by_name.get(name)
                if existing is not None:
                    if throw_on_duplicate:
                        raise DuplicateRouteRegistration(name, 'name')
                    logger.debug("Route replaced", extra={'route': name})
                    self._discard(existing, ordered, batch, by_name, by_action)

                existing = by_action.get(controller_action)
                if existing is not None and throw_on_duplicate:
                    raise DuplicateRouteRegistration(controller_action, 'controller_action')

                route.validate()
                batch.append(route)
                by_name[name] = route
                by_action[controller_action] = route

            for route in batch:
                route.freeze()

            ordered = batch + ordered if prepend else ordered + batch
            self._routes = tuple(ordered)
            self._routes_by_name = by_name
            self._routes_by_action = by_action

        return routes

    @staticmethod
    def _discard(route: Route, ordered: List[Route], batch: List[Route],
                 by_name: Dict[str, Route], by_action: Dict[str, Route]):
        """Drop a route and re-point its Controller:Action lookup"""
        for routes in (ordered, batch):
            if route in routes:
                routes.remove(route)
        by_name.pop(route.get_name(), None)

        controller_action = route.get_controller_action()
        if by_action.get(controller_action) is route:
            del by_action[controller_action]
            for candidate in batch + ordered:
                if candidate.get_controller_action() == controller_action:
                    by_action[controller_action] = candidate
                    break

    def set(self, routes: Iterable[Route], throw_on_duplicate: bool = True) -> List[Route]:
        """Replace all routes"""
        with self._lock:
            snapshot = (self._routes, self._routes_by_name, self._routes_by_action)
            self.clear()
            try:
                return self.add_many(routes, throw_on_duplicate=throw_on_duplicate)
            except Exception:
                self._routes, self._routes_by_name, self._routes_by_action = snapshot
                raise

    def remove(self, name: str) -> Optional[Route]:
        """
        Remove a route by name

        Returns:
            The removed route or None
        """
        with self._lock:
            route = self._routes_by_name.get(name)
            if route is None:
                return None

            ordered = list(self._routes)
            by_name = dict(self._routes_by_name)
            by_action = dict(self._routes_by_action)
            self._discard(route, ordered, [], by_name, by_action)

            self._routes = tuple(ordered)
            self._routes_by_name = by_name
            self._routes_by_action = by_action

        return route

    def get_by_name(self, name: str) -> Optional[Route]:
        """
        Get route by name

        Args:
            name: Route name

        Returns:
            Route instance or None
        """
        return self._routes_by_name.get(name)

    def get_by_action(self, controller_action: str) -> Optional[Route]:
        """
        Get route by target

        Args:
            controller_action: Target string (e.g., 'Products:Detail')

        Returns:
            Route instance or None
        """
        return self._routes_by_action.get(controller_action)

    def get(self, name_or_action: str) -> Optional[Route]:
        """Get route by name, then by Controller:Action"""
        return self.get_by_name(name_or_action) or self.get_by_action(name_or_action)

    def get_routes(self) -> Tuple[Route, ...]:
        """Get the current snapshot of all routes in match order"""
        return self._routes

    def has_named_route(self, name: str) -> bool:
        """Check if a named route exists"""
        return name in self._routes_by_name

    def count(self) -> int:
        """Get total number of routes"""
        return len(self._routes)

    def clear(self):
        """Clear all routes from the collection"""
        with self._lock:
            self._routes = ()
            self._routes_by_name = {}
            self._routes_by_action = {}

    def __iter__(self):
        """Iterate over a snapshot"""
        return iter(self._routes)

    def __len__(self):
        """Get number of routes"""
        return len(self._routes)

    def __contains__(self, name: str) -> bool:
        return name in self._routes_by_name

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert route collection to a dictionary representation

        Returns:
            Dict with route information in match order
        """
        routes = self._routes
        return {
            'total': len(routes),
            'routes': [route.to_dict() for route in routes],
            'named_routes': len(self._routes_by_name),
        }

    def __repr__(self):
        """String representation"""
        return f"<RouteCollection ({len(self._routes)} routes)>"
