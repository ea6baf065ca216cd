"""
Route Match Command
Show which route a path resolves to
"""
from mvcsanic.console.command import Command
from mvcsanic.http.request import RequestContext
from mvcsanic.routing.constants import RoutingStatus


class RouteMatchCommand(Command):
    """Route a path like an incoming request would be"""

    name = "route:match"
    description = "Show the route matching a path"
    signature = "route:match <path> [--param=value ...]"

    async def handle(self, path: str = '/', *args, **query):
        """
        Route the path, options become query params

        Example:
            mvcsanic route:match /products/5 --color=red
        """
        settings = self.app.settings
        request = RequestContext.from_url(
            path,
            base_path=settings.base_path,
            script_name=settings.script_name,
        )
        request.query.update(query)

        router = self.app.create_router(request)
        result = router.route()

        if result.status is RoutingStatus.NOT_FOUND:
            self.error(f"No route matches `{path}`")
            return 1

        if result.status is RoutingStatus.REDIRECT:
            self.warning(f"Redirect to `{result.redirect_to}`")

        route = result.route
        self.line(f"Route:   {route.get_name()}")
        self.line(f"Target:  {route.get_controller_action()}")
        self.line(f"Pattern: {route.to_dict()['pattern']}")
        if result.params:
            self.table(['Param', 'Value'], [[key, value] for key, value in result.params.items()])
        return 0
