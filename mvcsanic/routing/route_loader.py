"""
Route Loader
Loads route definitions from the routes config module, route files or mappings
"""
import importlib.util
import os
from typing import Any, Iterable, List, Mapping, Optional, Union

from mvcsanic.exceptions.custom import RoutingConfigurationException
from mvcsanic.logging import getLogger
from mvcsanic.routing.route import Route
from mvcsanic.routing.router import Router
from mvcsanic.support import Config

logger = getLogger('routing')

RouteDefinitions = Union[Mapping[str, Any], Iterable[Any]]


class RouteLoader:
    """
    Registers route definitions into the router's route table

    Route files are plain python modules with a ``ROUTES`` attribute:

        # config/routes.py
        ROUTES = {
            'Index:Index': '/',
            'Products:List': '/products[/<page>]',
        }
    """

    def __init__(self, router: Router):
        self.router = router

    def load(self, routes: Optional[RouteDefinitions] = None, prepend: bool = False,
             throw_on_duplicate: bool = True) -> List[Route]:
        """
        Register routes

        Args:
            routes: Definitions, `routes.ROUTES` from config when omitted

        Returns:
            Registered routes
        """
        if routes is None:
            routes = Config.get('routes.ROUTES')
        if not routes:
            logger.debug("No routes configured")
            return []

        added = self.router.add_routes(routes, prepend, throw_on_duplicate)
        logger.info("Routes loaded", extra={'count': len(added), 'total': len(self.router.routes)})
        return added

    def load_route_file(self, file_path: str, throw_on_duplicate: bool = True) -> List[Route]:
        """
        Load a route file and register its ``ROUTES``

        Returns:
            Registered routes

        Raises:
            RoutingConfigurationException: If the file is missing or has no ROUTES
        """
        if not os.path.exists(file_path):
            raise RoutingConfigurationException(f"Route file `{file_path}` doesn't exist.")

        module_name = f"routes.{os.path.splitext(os.path.basename(file_path))[0]}"
        spec = importlib.util.spec_from_file_location(module_name, file_path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        routes = getattr(module, 'ROUTES', None)
        if routes is None:
            raise RoutingConfigurationException(f"Route file `{file_path}` has no ROUTES definition.")

        return self.load(routes, throw_on_duplicate=throw_on_duplicate)
