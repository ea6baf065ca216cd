"""
Controller Base Class
"""
from typing import Any, Dict, Optional, TYPE_CHECKING

from mvcsanic.http.request import RequestContext
from mvcsanic.http.response_helper import ResponseHelper
from mvcsanic.routing.router import Router

if TYPE_CHECKING:
    from mvcsanic.application import Application


class Controller:
    """
    Base controller

    Actions are methods named after the route action in snake case with
    an ``_action`` suffix, sync or async:

        @app.controller('Products')
        class ProductsController(Controller):
            async def detail_action(self):
                product_id = self.get_param('id')
                return ResponseHelper.html(f'<a href="{self.url("self")}">{product_id}</a>')
    """

    def __init__(self, app: 'Application', request: RequestContext, router: Router,
                 params: Optional[Dict[str, Any]] = None):
        self.app = app
        self.request = request
        self.router = router
        self.params: Dict[str, Any] = dict(params or {})

    def get_param(self, name: str, default: Any = None) -> Any:
        """Get a routed or query param"""
        return self.params.get(name, default)

    def url(self, name: str = 'Index:Index', params: Optional[Dict[str, Any]] = None) -> str:
        """Build a URL with the request router"""
        return self.router.url(name, params)

    def redirect(self, url: str, status: int = 302):
        """Redirect response"""
        return ResponseHelper.redirect(url, status=status)
