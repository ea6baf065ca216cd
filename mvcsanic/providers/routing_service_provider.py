"""
Routing Service Provider
"""
from mvcsanic.service_provider import ServiceProvider
from mvcsanic.routing import RouteCollection, RouteLoader, Router, RouterSettings


class RoutingServiceProvider(ServiceProvider):
    def register(self):
        """Register routing services"""
        # One route table shared by all requests
        self.app.singleton('routes', RouteCollection())
        self.app.singleton('router_settings', lambda app: RouterSettings.from_config())
        # Routers are request-scoped, a new one each time
        self.app.bind('router', lambda app: Router(app.make('routes'), app.make('router_settings')))

    def boot(self):
        """Load routes from the routes config file"""
        RouteLoader(self.app.make('router')).load()
