"""
Route List Command
Display all registered routes in match order
"""
from mvcsanic.console.command import Command
from mvcsanic.support import Str


class RouteListCommand(Command):
    """List all registered routes"""

    name = "route:list"
    description = "List all registered routes in match order"

    async def handle(self, **kwargs):
        """List all routes"""
        routes = self.app.routes.to_dict()

        if not routes['total']:
            self.error("No routes registered")
            return 1

        rows = []
        for index, route in enumerate(routes['routes'], 1):
            constraints = ', '.join(f"{key}={value}" for key, value in route.get('constraints', {}).items())
            rows.append([
                index,
                route['name'],
                route['controller_action'],
                Str.limit(str(route['pattern']), 50),
                Str.limit(route['reverse'], 50),
                constraints or '-',
            ])

        self.table(['#', 'Name', 'Target', 'Pattern', 'Reverse', 'Constraints'], rows)
        self.line()
        self.success(f"Showing {routes['total']} routes")
        return 0
