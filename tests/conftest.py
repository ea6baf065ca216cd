"""Shared fixtures: isolated config, a sample route table and routers over it."""

import pytest

from mvcsanic.http.request import RequestContext
from mvcsanic.routing import RouteCollection, Router, RouterSettings
from mvcsanic.support import Config, EnvHelper

ROUTES = {
    "Index:Index": "/",
    "product": {
        "pattern": "/products/<id>",
        "controllerAction": "Products:Detail",
        "constraints": {"id": r"\d+"},
    },
    "Products:List": {
        "pattern": "/products[/<page>]",
        "defaults": {"page": 1},
    },
    "blog_post": {
        "pattern": "/blog/<year>/<slug>",
        "controllerAction": "Blog:Post",
        "defaults": {"year": "2024"},
    },
    "Search:Results": "/search/<q>",
}


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """No config modules or .env files of the working directory leak into tests."""
    monkeypatch.setattr(Config, "package", "mvcsanic_tests_missing_config")
    monkeypatch.setattr(EnvHelper, "_loaded", True)
    for key in (
        "TRAILING_SLASH",
        "ROUTE_BY_QUERY_STRING",
        "ROUTE_TO_DEFAULT_IF_NOT_MATCH",
        "AUTO_CANONIZE_REQUESTS",
        "BASE_PATH",
    ):
        monkeypatch.delenv(f"ROUTER_{key}", raising=False)
    Config.reload()
    Config.clear_runtime_overrides()
    yield
    Config.reload()
    Config.clear_runtime_overrides()


@pytest.fixture
def routes() -> RouteCollection:
    collection = RouteCollection()
    Router(collection).add_routes(ROUTES)
    return collection


@pytest.fixture
def make_router(routes):
    """Request-scoped router over the shared sample table."""

    def factory(request: RequestContext | None = None, **settings) -> Router:
        return Router(routes, RouterSettings(**settings), request)

    return factory


@pytest.fixture
def router(make_router) -> Router:
    return make_router()
