"""
Framework Application Class
"""
from sanic import Sanic
from typing import Any, Callable, Dict, List, Optional, Type
import inspect
import os
import sys

from mvcsanic.controller import Controller
from mvcsanic.defaults import (
    DEFAULT_APP_NAME,
    DEFAULT_CANONICAL_REDIRECT_STATUS,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from mvcsanic.exceptions.custom import NoRouteMatched, NotFoundException
from mvcsanic.exceptions.error_handler import ErrorHandler
from mvcsanic.http.request import RequestContext
from mvcsanic.http.response_helper import ResponseHelper
from mvcsanic.logging import getLogger
from mvcsanic.providers import LoggingServiceProvider, RoutingServiceProvider
from mvcsanic.routing import Route, RouteCollection, Router, RouterSettings
from mvcsanic.routing.constants import DEFAULT_ROUTE_NAME_ERROR, DEFAULT_ROUTE_NAME_NOT_FOUND
from mvcsanic.support import Config, EnvHelper, Str

logger = getLogger('application')

HTTP_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS', 'HEAD']


class Application:
    """
    Main application class - owns the route table, the controllers and the server

    Usage:
        app = Application(routes={
            'Index:Index': '/',
            'Products:Detail': {'pattern': '/products/<id>', 'constraints': {'id': r'\\d+'}},
        })

        @app.controller('Products')
        class ProductsController(Controller):
            def detail_action(self):
                return f"Product {self.get_param('id')}"

        app.run()
    """

    def __init__(self, base_path: Optional[str] = None, routes=None,
                 settings: Optional[RouterSettings] = None):
        self.base_path = base_path or os.getcwd()
        self.providers: List[Any] = []
        self.booted = False
        self.bindings: Dict[str, Any] = {}
        self.controllers: Dict[str, Type[Controller]] = {}
        self._sanic_app: Optional[Sanic] = None

        # Config modules of the application are importable as `config.*`
        if self.base_path not in sys.path:
            sys.path.insert(0, self.base_path)

        debug = Config.get('app.APP_DEBUG', EnvHelper.get_bool('APP_DEBUG', False))
        self.error_handler = ErrorHandler(debug=bool(debug))

        self.register_provider(LoggingServiceProvider)
        self.register_provider(RoutingServiceProvider)

        if settings is not None:
            self.singleton('router_settings', settings)
        if routes:
            self.add_routes(routes)

    # =========================================================================
    # Container
    # =========================================================================

    def singleton(self, key: str, factory_or_instance):
        """
        Register a singleton binding
        If factory: Will be called once and cached
        If instance: Will be stored directly
        """
        if inspect.isfunction(factory_or_instance) or inspect.ismethod(factory_or_instance):
            self.bindings[key] = {'type': 'singleton', 'factory': factory_or_instance, 'instance': None}
        else:
            self.bindings[key] = {'type': 'singleton', 'factory': None, 'instance': factory_or_instance}

    def bind(self, key: str, factory: Callable):
        """Register a factory binding (called every time)"""
        self.bindings[key] = {'type': 'factory', 'factory': factory}

    def make(self, key: str) -> Any:
        """Resolve a binding from the container"""
        if key not in self.bindings:
            raise KeyError(f"Binding '{key}' not found in container")

        binding = self.bindings[key]
        if binding['type'] == 'singleton':
            if binding['instance'] is None:
                binding['instance'] = binding['factory'](self)
            return binding['instance']

        return binding['factory'](self)

    def has(self, key: str) -> bool:
        """
        Check if a binding exists in the container
        """
        return key in self.bindings

    def register_provider(self, provider_class):
        """Register a service provider"""
        provider = provider_class(self)
        register = provider.register()
        if register is not False:
            self.providers.append(provider)
        return provider

    def boot(self):
        """Boot all service providers"""
        if self.booted:
            return

        for provider in self.providers:
            provider.boot()

        self.booted = True

    # =========================================================================
    # Routes and controllers
    # =========================================================================

    @property
    def routes(self) -> RouteCollection:
        """Route table shared by all requests"""
        return self.make('routes')

    @property
    def settings(self) -> RouterSettings:
        return self.make('router_settings')

    def create_router(self, request: Optional[RequestContext] = None) -> Router:
        """Router for one request"""
        return Router(self.routes, self.settings, request)

    def add_routes(self, routes, prepend: bool = False, throw_on_duplicate: bool = True) -> List[Route]:
        """Register routes in the shared route table"""
        return self.create_router().add_routes(routes, prepend, throw_on_duplicate)

    def register_controller(self, name: str, controller_class: Type[Controller]):
        """
        Register a controller class under its route controller name

        Args:
            name: Controller name used in routes ('Products' for 'Products:Detail')
            controller_class: Controller subclass
        """
        self.controllers[name] = controller_class
        return controller_class

    def controller(self, name: Optional[str] = None):
        """
        Decorator registering a controller class

        Without a name, the class name without its `Controller` suffix is used.
        """
        def decorator(controller_class: Type[Controller]):
            controller_name = name
            if controller_name is None:
                controller_name = controller_class.__name__
                if controller_name.endswith('Controller') and controller_name != 'Controller':
                    controller_name = controller_name[:-len('Controller')]
            return self.register_controller(controller_name, controller_class)
        return decorator

    # =========================================================================
    # Dispatching
    # =========================================================================

    async def handle_request(self, request: RequestContext):
        """
        Route and dispatch one request

        Returns:
            Sanic HTTPResponse
        """
        self.boot()
        router = self.create_router(request)

        try:
            result = router.route()
            if result.is_redirect:
                return ResponseHelper.redirect(result.redirect_to, status=DEFAULT_CANONICAL_REDIRECT_STATUS)
            if not result.matched:
                raise NoRouteMatched(request.path)
            return await self.dispatch(router, result.route, result.params)
        except NotFoundException as e:
            self.error_handler.log_error(e, request)
            return await self.render_not_found(router, e)
        except Exception as e:
            self.error_handler.log_error(e, request)
            return await self.render_error(router, e)

    async def dispatch(self, router: Router, route: Route, params: Dict[str, Any]):
        """
        Call the controller action targeted by the route

        Raises:
            NotFoundException: If the controller or the action doesn't exist
        """
        controller_name = route.get_controller()
        controller_class = self.controllers.get(controller_name)
        if controller_class is None:
            raise NotFoundException(f"Controller `{controller_name}` doesn't exist.")

        method_name = f"{Str.snake(route.get_action())}_action"
        controller = controller_class(self, router.request, router, params)
        action = getattr(controller, method_name, None)
        if action is None:
            raise NotFoundException(
                f"Controller `{controller_name}` has no action `{route.get_action()}`."
            )

        logger.debug("Dispatching", extra={'route': route.get_name(), 'target': route.get_controller_action()})
        result = action()
        if inspect.isawaitable(result):
            result = await result
        return ResponseHelper.to_response(result)

    async def render_not_found(self, router: Router, error: Exception):
        """Render the not found action of the default controller, plain text 404 otherwise"""
        return await self._render_fallback_page(
            router, DEFAULT_ROUTE_NAME_NOT_FOUND, self.settings.not_found_action, error, 404
        )

    async def render_error(self, router: Router, error: Exception):
        """Render the error action of the default controller, plain text 500 otherwise"""
        status = self.error_handler.get_status_code(error)
        return await self._render_fallback_page(
            router, DEFAULT_ROUTE_NAME_ERROR, self.settings.error_action, error, status
        )

    async def _render_fallback_page(self, router: Router, route_name: str, action: str,
                                    error: Exception, status: int):
        controller_name = self.settings.default_controller
        controller_class = self.controllers.get(controller_name)
        if controller_class is None or not hasattr(controller_class, f"{Str.snake(action)}_action"):
            return self.error_handler.render_fallback(error)

        route = router.set_or_create_default_route_as_current(
            route_name, controller_name, action, fallback_call=True
        )
        params = {
            **router.get_default_params(),
            'code': status,
            'message': self.error_handler.get_error_message(error),
        }

        try:
            response = await self.dispatch(router, route, params)
        except Exception as e:
            self.error_handler.log_error(e, router.request)
            return self.error_handler.render_fallback(error)

        response.status = status
        return response

    # =========================================================================
    # Server
    # =========================================================================

    @property
    def sanic_app(self) -> Sanic:
        """Sanic app forwarding every path to handle_request(), created on first use"""
        if self._sanic_app is None:
            app = Sanic(Str.snake(Config.get('app.APP_NAME', DEFAULT_APP_NAME)))
            app.config.AUTO_EXTEND = False

            async def dispatch_handler(request, path: str = ''):
                context = RequestContext.from_sanic(
                    request, self.settings.base_path, self.settings.script_name
                )
                return await self.handle_request(context)

            app.add_route(dispatch_handler, '/', methods=HTTP_METHODS, name='dispatch_root')
            app.add_route(dispatch_handler, '/<path:path>', methods=HTTP_METHODS, name='dispatch_path')
            self._sanic_app = app

        return self._sanic_app

    def run(self, host=None, port=None, **kwargs):
        """Run the Sanic server"""
        self.boot()
        host = host or Config.get('app.HOST', EnvHelper.get('APP_HOST', DEFAULT_HOST))
        port = int(port or Config.get('app.PORT', EnvHelper.get_int('APP_PORT', DEFAULT_PORT)))
        self.sanic_app.run(host=host, port=port, **kwargs)
