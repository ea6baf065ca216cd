"""
Router
Request-scoped routing: matches the request against the shared route table,
keeps the current route and builds URLs
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple, Union
import re

from mvcsanic.defaults import (
    DEFAULT_ACTION_NAME,
    DEFAULT_AUTO_CANONIZE_REQUESTS,
    DEFAULT_BASE_PATH,
    DEFAULT_CONTROLLER_NAME,
    DEFAULT_ERROR_ACTION_NAME,
    DEFAULT_NOT_FOUND_ACTION_NAME,
    DEFAULT_ROUTE_BY_QUERY_STRING,
    DEFAULT_ROUTE_TO_DEFAULT_IF_NOT_MATCH,
    DEFAULT_SCRIPT_NAME,
    DEFAULT_TRAILING_SLASH,
)
from mvcsanic.exceptions.custom import RoutingException, UrlBuildException
from mvcsanic.http.request import RequestContext
from mvcsanic.http.url import UrlGenerator, build_query
from mvcsanic.logging import getLogger
from mvcsanic.routing.constants import (
    CONTROLLER_ACTION_SEPARATOR,
    DEFAULT_ROUTE_NAME,
    RoutingStatus,
    SELF_ROUTE_NAME,
    TrailingSlash,
    URL_PARAM_ACTION,
    URL_PARAM_CONTROLLER,
    URL_PARAM_PATH,
)
from mvcsanic.routing.route import Route
from mvcsanic.routing.route_collection import RouteCollection
from mvcsanic.support import Config, EnvHelper, Str

logger = getLogger('routing')

RouteDefinition = Union[Route, Dict[str, Any], str, Pattern]
PreRouteMatchingHandler = Callable[['Router', RequestContext], Any]
PreRouteUrlBuildingHandler = Callable[['Router', Route, Dict[str, Any]], Optional[Dict[str, Any]]]


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _to_tri_state(value: Any) -> Optional[bool]:
    """None/'auto' -> None, anything else -> bool"""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ('', 'auto', 'none', 'null'):
        return None
    return _to_bool(value)


def _to_trailing_slash(value: Any) -> TrailingSlash:
    """Accept enum members, -1/0/1 and member names"""
    if isinstance(value, str):
        name = value.strip().upper()
        if name in TrailingSlash.__members__:
            return TrailingSlash[name]
        value = int(name)
    return TrailingSlash(int(value))


@dataclass
class RouterSettings:
    """
    Router behaviour

    Built from the `routing` config file with ROUTER_* environment
    variables as fallback:

        # config/routing.py
        TRAILING_SLASH = 'remove'          # 'always' | 'benevolent' | 'remove'
        ROUTE_BY_QUERY_STRING = None       # None = auto, True = force, False = off
        ROUTE_TO_DEFAULT_IF_NOT_MATCH = False
        AUTO_CANONIZE_REQUESTS = True      # False = never redirect for the trailing slash

    Pre-route handlers are not configurable from files, set them in code
    on the settings shared by all routers of an application.
    """
    trailing_slash: TrailingSlash = TrailingSlash(DEFAULT_TRAILING_SLASH)
    route_by_query_string: Optional[bool] = DEFAULT_ROUTE_BY_QUERY_STRING
    route_to_default_if_not_match: bool = DEFAULT_ROUTE_TO_DEFAULT_IF_NOT_MATCH
    auto_canonize_requests: bool = DEFAULT_AUTO_CANONIZE_REQUESTS
    default_controller: str = DEFAULT_CONTROLLER_NAME
    default_action: str = DEFAULT_ACTION_NAME
    error_action: str = DEFAULT_ERROR_ACTION_NAME
    not_found_action: str = DEFAULT_NOT_FOUND_ACTION_NAME
    script_name: str = DEFAULT_SCRIPT_NAME
    base_path: str = DEFAULT_BASE_PATH
    pre_route_matching_handler: Optional[PreRouteMatchingHandler] = None
    pre_route_url_building_handler: Optional[PreRouteUrlBuildingHandler] = None

    @classmethod
    def from_config(cls) -> 'RouterSettings':
        """Read settings from Config, then ROUTER_* env vars, then defaults"""

        def setting(key: str, default: Any) -> Any:
            return Config.get(f'routing.{key}', EnvHelper.get(f'ROUTER_{key}', default))

        return cls(
            trailing_slash=_to_trailing_slash(setting('TRAILING_SLASH', DEFAULT_TRAILING_SLASH)),
            route_by_query_string=_to_tri_state(setting('ROUTE_BY_QUERY_STRING', DEFAULT_ROUTE_BY_QUERY_STRING)),
            route_to_default_if_not_match=_to_bool(
                setting('ROUTE_TO_DEFAULT_IF_NOT_MATCH', DEFAULT_ROUTE_TO_DEFAULT_IF_NOT_MATCH)
            ),
            auto_canonize_requests=_to_bool(
                setting('AUTO_CANONIZE_REQUESTS', DEFAULT_AUTO_CANONIZE_REQUESTS)
            ),
            default_controller=setting('DEFAULT_CONTROLLER', DEFAULT_CONTROLLER_NAME),
            default_action=setting('DEFAULT_ACTION', DEFAULT_ACTION_NAME),
            error_action=setting('ERROR_ACTION', DEFAULT_ERROR_ACTION_NAME),
            not_found_action=setting('NOT_FOUND_ACTION', DEFAULT_NOT_FOUND_ACTION_NAME),
            script_name=setting('SCRIPT_NAME', DEFAULT_SCRIPT_NAME),
            base_path=(setting('BASE_PATH', DEFAULT_BASE_PATH) or '').rstrip('/'),
        )


@dataclass
class RoutingResult:
    """Outcome of one Router.route() call"""
    status: RoutingStatus
    route: Optional[Route] = None
    params: Dict[str, Any] = field(default_factory=dict)
    redirect_to: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.status is RoutingStatus.MATCHED

    @property
    def is_redirect(self) -> bool:
        return self.status is RoutingStatus.REDIRECT


class Router:
    """
    Router for one request

    The route table is shared between requests and only read here while
    routing. Everything about the request being served (current route,
    params, synthesized or redefined reserved routes) lives on the
    router instance.

    Usage:
        routes = RouteCollection()
        router = Router(routes, settings, request)
        router.add_routes({
            'Products:List': '/products',
            'product': {'pattern': '/products/<id>', 'controllerAction': 'Products:Detail'},
        })

        result = router.route('/products/5')
        router.get_current_route()                  # <Route product ...>
        router.url('product', {'id': 6})            # /products/6
        router.url('self', {'color': 'red'})        # /products/5?color=red
    """

    def __init__(
        self,
        routes: Union[RouteCollection, Mapping[str, Any], Iterable[Any], None] = None,
        settings: Optional[RouterSettings] = None,
        request: Optional[RequestContext] = None,
    ):
        """
        Initialize the Router

        Args:
            routes: Shared route collection, or route definitions for a new one
            settings: Router behaviour, defaults when omitted
            request: Current request, a root request when omitted
        """
        self.settings = settings or RouterSettings()
        self.request = request or RequestContext(
            base_path=self.settings.base_path,
            script_name=self.settings.script_name,
        )

        self._pending_routes: Optional[Tuple[Any, bool]] = None
        self._transient: Dict[str, Route] = {}
        self._current_route: Optional[Route] = None
        self._default_params: Dict[str, Any] = {}
        self._requested_params: Dict[str, Any] = {}
        self._status: Optional[RoutingStatus] = None
        self._pre_route_matching_handler = self.settings.pre_route_matching_handler
        self._pre_route_url_building_handler = self.settings.pre_route_url_building_handler

        if isinstance(routes, RouteCollection):
            self.routes = routes
        else:
            self.routes = RouteCollection()
            if routes:
                self.add_routes(routes)

    # =========================================================================
    # Route Registration Methods
    # =========================================================================

    def set_routes(self, routes: Union[Mapping[str, Any], Iterable[Any]],
                   auto_initialize: bool = True) -> 'Router':
        """
        Replace all routes

        Args:
            routes: Mapping (key = name or "Controller:Action") or sequence
            auto_initialize: Create Route instances now; otherwise on first use
        """
        self._transient.clear()
        if auto_initialize:
            self._pending_routes = None
            self.routes.set(self._normalize_routes(routes))
        else:
            self.routes.clear()
            self._pending_routes = (routes, True)
        return self

    def add_route(self, route: RouteDefinition, prepend: bool = False,
                  throw_on_duplicate: bool = True, name: Optional[str] = None) -> Route:
        """
        Add a route

        Args:
            route: Route instance, config dict or pattern (with name)
            prepend: Match it before existing routes
            throw_on_duplicate: Raise for a repeated name or Controller:Action
            name: Name or "Controller:Action" for pattern definitions
        """
        self._initialize_pending_routes()
        return self.routes.add(self._normalize_route(name, route), prepend, throw_on_duplicate)

    def add_routes(self, routes: Union[Mapping[str, Any], Iterable[Any]], prepend: bool = False,
                   throw_on_duplicate: bool = True) -> List[Route]:
        """
        Add routes keeping their order

        Usage:
            router.add_routes({
                'Index:Index': '/',
                'blog_post': {
                    'pattern': '/blog/<year>/<slug>',
                    'controllerAction': 'Blog:Post',
                    'defaults': {'year': '2024'},
                    'constraints': {'year': r'\\d{4}'},
                },
            })
        """
        self._initialize_pending_routes()
        added = self.routes.add_many(self._normalize_routes(routes), prepend, throw_on_duplicate)
        logger.info("Routes registered", extra={'count': len(added)})
        return added

    def _normalize_routes(self, routes: Union[Mapping[str, Any], Iterable[Any]]) -> List[Route]:
        if isinstance(routes, Mapping):
            return [self._normalize_route(key, value) for key, value in routes.items()]
        return [self._normalize_route(None, value) for value in routes]

    @staticmethod
    def _normalize_route(key: Optional[str], value: RouteDefinition) -> Route:
        if isinstance(value, Route):
            return value
        if isinstance(value, dict):
            return Route.from_config(value, name=key)
        return Route(value, name=key)

    def _initialize_pending_routes(self):
        if self._pending_routes is not None:
            routes, throw_on_duplicate = self._pending_routes
            self._pending_routes = None
            self.routes.set(self._normalize_routes(routes), throw_on_duplicate)

    def has_route(self, route: Union[str, Route]) -> bool:
        """Check if a route name (or a route's name) is known"""
        self._initialize_pending_routes()
        name = route.get_name() if isinstance(route, Route) else route
        return name in self._transient or self.routes.has_named_route(name)

    def get_route(self, name: str) -> Optional[Route]:
        """Get a route by name, then by "Controller:Action" """
        self._initialize_pending_routes()
        return self._find_route(name)

    def get_routes(self) -> Tuple[Route, ...]:
        """Get the registered routes in match order"""
        self._initialize_pending_routes()
        return self.routes.get_routes()

    def remove_route(self, name: str) -> Optional[Route]:
        """
        Remove a route by name

        Returns:
            The removed route or None
        """
        self._initialize_pending_routes()
        removed = self.routes.remove(name)
        transient = self._transient.pop(name, None)
        return removed or transient

    def _find_route(self, name: str) -> Optional[Route]:
        """Transient overlay first, then the shared table, by name then by target"""
        route = self._transient.get(name) or self.routes.get_by_name(name)
        if route is not None or CONTROLLER_ACTION_SEPARATOR not in name:
            return route

        for transient in self._transient.values():
            if transient.get_controller_action() == name:
                return transient
        return self.routes.get_by_action(name)

    # =========================================================================
    # Routing
    # =========================================================================

    def route(self, path: Optional[str] = None, query: Optional[Dict[str, Any]] = None) -> RoutingResult:
        """
        Route the request

        Args:
            path: Requested path relative to the base path (request path by default)
            query: Query params (request query by default)

        Returns:
            RoutingResult with status MATCHED, REDIRECT or NOT_FOUND
        """
        self._initialize_pending_routes()
        if self._pre_route_matching_handler is not None:
            self._pre_route_matching_handler(self, self.request)

        path = self.request.path if path is None else path
        query = dict(self.request.query if query is None else query)
        if not path.startswith('/'):
            path = '/' + path

        self._current_route = None
        self._default_params = {}
        self._requested_params = {}

        if self._is_query_string_routing(path, query):
            return self._route_by_query_string(query)

        trailing_slash = self.settings.trailing_slash
        is_root = path.rstrip('/') == ''
        match_path = '/' if is_root else path
        if trailing_slash == TrailingSlash.REMOVE and not is_root:
            match_path = path.rstrip('/')

        route, captured = self._match(match_path, trailing_slash)

        if route is None and (self.settings.route_to_default_if_not_match or is_root):
            route = self.set_or_create_default_route_as_current(
                DEFAULT_ROUTE_NAME,
                self.settings.default_controller,
                self.settings.default_action,
            )
            captured = route.captures(match_path, trailing_slash) or {}

        if route is None:
            self._status = RoutingStatus.NOT_FOUND
            logger.debug("No route matched", extra={'path': path})
            return RoutingResult(RoutingStatus.NOT_FOUND)

        self._set_current(route, query, captured)

        redirect_to = None
        if self.settings.auto_canonize_requests and not is_root:
            redirect_to = self._canonical_redirect(path, query)
        if redirect_to is not None:
            self._status = RoutingStatus.REDIRECT
            logger.debug("Canonical redirect", extra={'path': path, 'redirect_to': redirect_to})
            return RoutingResult(RoutingStatus.REDIRECT, route, dict(self._default_params), redirect_to)

        self._status = RoutingStatus.MATCHED
        logger.debug("Route matched", extra={'path': path, 'route': route.get_name()})
        return RoutingResult(RoutingStatus.MATCHED, route, dict(self._default_params))

    def _match(self, path: str, trailing_slash: TrailingSlash) -> Tuple[Optional[Route], Dict[str, Any]]:
        """First registered route matching the path wins"""
        for route in self.routes.get_routes():
            captured = route.captures(path, trailing_slash)
            if captured is not None:
                return route, captured
        return None, {}

    def _set_current(self, route: Route, query: Dict[str, Any], captured: Dict[str, Any]):
        self._current_route = route
        self._requested_params = {**query, **captured}
        self._default_params = {**route.get_defaults(), **query, **captured}

    def _is_query_string_routing(self, path: str, query: Dict[str, Any]) -> bool:
        flag = self.settings.route_by_query_string
        has_controller = URL_PARAM_CONTROLLER in query
        has_action = URL_PARAM_ACTION in query

        if flag is True:
            return has_controller or has_action
        if flag is None:
            root_paths = ('', '/', f'/{self.request.script_name}')
            return has_controller and has_action and path in root_paths
        return False

    def _route_by_query_string(self, query: Dict[str, Any]) -> RoutingResult:
        """Target the controller and action named in the query string"""
        controller = Str.studly(str(query.get(URL_PARAM_CONTROLLER) or self.settings.default_controller))
        action = Str.studly(str(query.get(URL_PARAM_ACTION) or self.settings.default_action))
        controller_action = f"{controller}{CONTROLLER_ACTION_SEPARATOR}{action}"

        route = self.routes.get_by_action(controller_action)
        if route is not None:
            # Registered target, its URLs don't need the query string form
            query = {
                key: value for key, value in query.items()
                if key not in (URL_PARAM_CONTROLLER, URL_PARAM_ACTION)
            }
        else:
            route = self.set_or_create_default_route_as_current(DEFAULT_ROUTE_NAME, controller, action)

        self._set_current(route, query, {})
        self._status = RoutingStatus.MATCHED
        logger.debug("Routed by query string", extra={'route': route.get_name(), 'target': controller_action})
        return RoutingResult(RoutingStatus.MATCHED, route, dict(self._default_params))

    def _canonical_redirect(self, path: str, query: Dict[str, Any]) -> Optional[str]:
        """Redirect target fixing the trailing slash, None when the path is canonical"""
        trailing_slash = self.settings.trailing_slash
        if trailing_slash == TrailingSlash.REMOVE and path.endswith('/'):
            target = path.rstrip('/')
        elif trailing_slash == TrailingSlash.ALWAYS and not path.endswith('/'):
            target = path + '/'
        else:
            return None

        target = f"{self.request.base_path}{target}"
        query_string = build_query(query)
        return f"{target}?{query_string}" if query_string else target

    def set_or_create_default_route_as_current(self, name: str, controller: str, action: str,
                                               fallback_call: bool = False) -> Route:
        """
        Make a reserved route the current route

        The route is looked up by name, then by "Controller:Action". When
        missing, a catch-all route is created for this request. When it
        targets another action, a redefined copy becomes current, and also
        replaces the route for url() calls unless this is a fallback call
        (error and not-found rendering).

        Args:
            name: Reserved route name ('default', 'error', 'not_found')
            controller: Target controller
            action: Target action
            fallback_call: Keep URLs of the route untouched

        Returns:
            The current route
        """
        controller_action = f"{controller}{CONTROLLER_ACTION_SEPARATOR}{action}"
        route = self._transient.get(name) or self.routes.get_by_name(name) or self._find_route(controller_action)

        if route is None:
            route = Route(
                re.compile(r'^/(?P<path>.*)$'),
                name=name,
                controller=controller,
                action=action,
                reverse=f'/<{URL_PARAM_PATH}>',
                defaults={URL_PARAM_PATH: ''},
            )
            self._transient[name] = route
            logger.debug("Reserved route created", extra={'route': name, 'target': controller_action})
        elif route.get_controller_action() != controller_action:
            route = route.redefined(controller, action)
            if not fallback_call:
                self._transient[name] = route

        self._current_route = route
        return route

    def redefine_routed_target(self, controller: Optional[str] = None, action: Optional[str] = None,
                               change_self_route: bool = False) -> Route:
        """
        Retarget the current request after routing

        Args:
            controller: New controller, unchanged when omitted
            action: New action, unchanged when omitted
            change_self_route: Also use the redefined route for url() by name

        Raises:
            RoutingException: If nothing has been routed
        """
        if self._current_route is None:
            raise RoutingException("There is no current route to redefine.")

        route = self._current_route.redefined(controller, action)
        if change_self_route:
            self._transient[route.get_name()] = route
        self._current_route = route
        return route

    # =========================================================================
    # Pre-route handlers
    # =========================================================================

    def set_pre_route_matching_handler(self, handler: Optional[PreRouteMatchingHandler]) -> 'Router':
        """
        Callable run by route() before any matching

        Called with the router and the request. Its return value is
        ignored, it may register routes lazily or inspect the request.
        """
        self._pre_route_matching_handler = handler
        return self

    def get_pre_route_matching_handler(self) -> Optional[PreRouteMatchingHandler]:
        return self._pre_route_matching_handler

    def set_pre_route_url_building_handler(self, handler: Optional[PreRouteUrlBuildingHandler]) -> 'Router':
        """
        Callable run before a route renders a URL

        Called with the router, the route and a copy of the params. A
        returned dict replaces the params, None keeps them.

        Usage:
            router.set_pre_route_url_building_handler(
                lambda router, route, params: {'lang': 'en', **params}
            )
        """
        self._pre_route_url_building_handler = handler
        return self

    def get_pre_route_url_building_handler(self) -> Optional[PreRouteUrlBuildingHandler]:
        return self._pre_route_url_building_handler

    # =========================================================================
    # Current request state
    # =========================================================================

    def get_current_route(self) -> Optional[Route]:
        """Get the route of the current request"""
        return self._current_route

    def set_current_route(self, route: Route) -> 'Router':
        """Set the route of the current request"""
        self._current_route = route
        return self

    def get_default_params(self) -> Dict[str, Any]:
        """Route defaults, query params and matched params of the current request"""
        return dict(self._default_params)

    def get_requested_params(self) -> Dict[str, Any]:
        """Query params and matched params of the current request"""
        return dict(self._requested_params)

    def get_status(self) -> Optional[RoutingStatus]:
        """Routing outcome, None before route() was called"""
        return self._status

    # =========================================================================
    # URL building
    # =========================================================================

    def get_url_generator(self) -> UrlGenerator:
        """URL generator for the current request"""
        return UrlGenerator(self.request, self.settings.trailing_slash)

    def url(self, name: str = 'Index:Index', params: Optional[Dict[str, Any]] = None) -> str:
        """
        Build a URL

        Args:
            name: Route name, "Controller:Action" or 'self' for the current route
            params: Param values, extra ones go to the query string

        Returns:
            URL string, the query string form when no route can render it

        Usage:
            router.url('blog_post', {'slug': 'hello-world'})   # /blog/2024/hello-world
            router.url('Products:Detail', {})                  # index.php?controller=Products&action=Detail
            router.url('self', {'page': 2})
        """
        self._initialize_pending_routes()
        params = dict(params or {})

        if name == SELF_ROUTE_NAME:
            route = self._current_route
            if route is not None:
                params = {**self._default_params, **params}
        else:
            route = self._find_route(name)

        if route is not None:
            return self.url_by_route(route, params)

        if name == SELF_ROUTE_NAME:
            controller, action = self.settings.default_controller, self.settings.default_action
        else:
            controller, _, action = name.partition(CONTROLLER_ACTION_SEPARATOR)
            action = action or self.settings.default_action
        return self.url_by_query_string(controller, action, params)

    def url_by_route(self, route: Route, params: Optional[Dict[str, Any]] = None) -> str:
        """Render a route, the query string form when it can't render the params"""
        if self._pre_route_url_building_handler is not None:
            replaced = self._pre_route_url_building_handler(self, route, dict(params or {}))
            if replaced is not None:
                params = replaced
        generator = self.get_url_generator()
        try:
            return generator.to_route(route, params)
        except UrlBuildException as e:
            logger.debug(
                "URL built from query string",
                extra={'route': route.get_name(), 'param': e.param_name, 'reason': e.message},
            )
            return generator.to_query_string(route.get_controller(), route.get_action(), params)

    def url_by_query_string(self, controller: str, action: str,
                            params: Optional[Dict[str, Any]] = None) -> str:
        """Front controller URL: index.php?controller=...&action=..."""
        return self.get_url_generator().to_query_string(controller, action, params)

    def __repr__(self):
        """String representation"""
        current = self._current_route.get_name() if self._current_route else None
        return f"<Router ({len(self.routes)} routes, current={current})>"
