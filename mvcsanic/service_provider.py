"""
Service Provider Base Class
Service providers register services into the application container and bootstrap them
"""
from abc import ABC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mvcsanic.application import Application


class ServiceProvider(ABC):
    """
    Base Service Provider class

    Service providers are the central place for application bootstrapping.
    They handle:
    - Registering services in the container
    - Loading routes
    """

    def __init__(self, app: 'Application'):
        self.app = app

    def register(self):
        """
        Register services in the container
        Called when the provider is registered (before booting)

        Example:
            self.app.singleton('routes', RouteCollection())
            self.app.bind('router', lambda app: Router(app.make('routes')))
        """
        pass

    def boot(self):
        """
        Bootstrap services (after all providers are registered)

        Example:
            self.register_routes()
        """
        pass
