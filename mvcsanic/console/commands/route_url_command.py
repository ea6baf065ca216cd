"""
Route URL Command
Build a URL from a route name or Controller:Action
"""
from mvcsanic.console.command import Command


class RouteUrlCommand(Command):
    """Build a URL"""

    name = "route:url"
    description = "Build the URL of a route"
    signature = "route:url <name> [--param=value ...]"

    async def handle(self, name: str = None, *args, **params):
        """
        Example:
            mvcsanic route:url blog_post --slug=hello-world
            mvcsanic route:url Products:Detail --id=5 --absolute
        """
        if not name:
            self.error("Route name or Controller:Action is required")
            return 1

        router = self.app.create_router()
        self.line(router.url(name, params))
        return 0
