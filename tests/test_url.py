"""Tests for URL building: Router.url(), UrlGenerator and the request context."""

import pytest

from mvcsanic.http.request import RequestContext, parse_query
from mvcsanic.http.url import UrlGenerator, build_query
from mvcsanic.routing import Route, Router, TrailingSlash


class TestRouterUrl:
    def test_by_name(self, router: Router) -> None:
        assert router.url("product", {"id": 6}) == "/products/6"

    def test_by_controller_action(self, router: Router) -> None:
        assert router.url("Products:Detail", {"id": 6}) == "/products/6"

    def test_homepage_by_default(self, router: Router) -> None:
        assert router.url() == "/"

    def test_extra_params_go_to_query(self, router: Router) -> None:
        assert router.url("Products:List", {"page": 2, "sort": "asc"}) == "/products/2?sort=asc"

    def test_optional_segment_omitted(self, router: Router) -> None:
        assert router.url("Products:List") == "/products"
        assert router.url("Products:List", {"page": 1}) == "/products"
        assert router.url("Products:List", {"page": "1"}) == "/products"

    def test_default_fills_placeholder(self, router: Router) -> None:
        assert router.url("blog_post", {"slug": "hello-world"}) == "/blog/2024/hello-world"

    def test_param_equal_to_default_is_not_repeated(self) -> None:
        router = Router({"Search:Results": {"pattern": "/search/<q>", "defaults": {"q": "all", "page": 1}}})
        assert router.url("Search:Results", {"q": "shoes", "page": 1}) == "/search/shoes"
        assert router.url("Search:Results", {"q": "shoes", "page": 2}) == "/search/shoes?page=2"

    def test_list_params(self, router: Router) -> None:
        url = router.url("Search:Results", {"q": "shoes", "tags": ["red", "blue"]})
        assert url == "/search/shoes?tags[]=red&tags[]=blue"

    def test_values_are_encoded(self, router: Router) -> None:
        assert router.url("Search:Results", {"q": "a b", "x": "1&2"}) == "/search/a%20b?x=1%262"

    def test_missing_param_falls_back_to_query_string(self, router: Router) -> None:
        assert router.url("product", {}) == "index.php?controller=Products&action=Detail"

    def test_constraint_mismatch_falls_back_to_query_string(self, router: Router) -> None:
        assert router.url("product", {"id": "abc"}) == "index.php?controller=Products&action=Detail&id=abc"

    def test_unknown_target(self, router: Router) -> None:
        assert router.url("Reports:Daily", {"day": 3}) == "index.php?controller=Reports&action=Daily&day=3"

    def test_unknown_controller_only(self, router: Router) -> None:
        assert router.url("Reports") == "index.php?controller=Reports&action=Index"

    def test_absolute(self, make_router) -> None:
        router = make_router(RequestContext(host="example.com", scheme="https"))
        assert router.url("product", {"id": 6, "absolute": True}) == "https://example.com/products/6"

    def test_absolute_query_string_form(self, make_router) -> None:
        router = make_router(RequestContext(host="example.com"))
        url = router.url("product", {"absolute": True})
        assert url == "http://example.com/index.php?controller=Products&action=Detail"

    def test_base_path(self, make_router) -> None:
        router = make_router(RequestContext(base_path="/app"))
        assert router.url("product", {"id": 6}) == "/app/products/6"
        assert router.url("product") == "/app/index.php?controller=Products&action=Detail"

    def test_always_trailing_slash(self, make_router) -> None:
        router = make_router(trailing_slash=TrailingSlash.ALWAYS)
        assert router.url("product", {"id": 6}) == "/products/6/"
        assert router.url("Index:Index") == "/"

    def test_url_by_route(self, router: Router) -> None:
        route = router.get_route("blog_post")
        assert router.url_by_route(route, {"slug": "x", "year": "2020"}) == "/blog/2020/x"
        assert router.url_by_route(route, {}) == "index.php?controller=Blog&action=Post"

    def test_url_by_query_string(self, router: Router) -> None:
        url = router.url_by_query_string("Blog", "Post", {"tags": ["a", "b"]})
        assert url == "index.php?controller=Blog&action=Post&tags[]=a&tags[]=b"

    def test_host_tokens(self) -> None:
        router = Router(
            [Route("/docs/<page>", "Docs:Page", reverse="//docs.%domain%/<page>")],
            request=RequestContext(host="www.example.com"),
        )
        assert router.url("Docs:Page", {"page": "intro"}) == "//docs.example.com/intro"
        assert router.url("Docs:Page", {"page": "intro", "domain": "example.org"}) == "//docs.example.org/intro"


class TestSelfUrl:
    def test_self_keeps_current_params(self, router: Router) -> None:
        router.route("/products/5", {"color": "red"})
        assert router.url("self") == "/products/5?color=red"

    def test_self_overrides_params(self, router: Router) -> None:
        router.route("/products/5", {"color": "red"})
        assert router.url("self", {"color": "blue", "id": 7}) == "/products/7?color=blue"

    def test_self_drops_defaults(self, router: Router) -> None:
        router.route("/products")
        assert router.url("self") == "/products"

    def test_self_before_routing(self, router: Router) -> None:
        assert router.url("self") == "index.php?controller=Index&action=Index"

    def test_url_building_does_not_change_state(self, router: Router) -> None:
        result = router.route("/products/5", {"color": "red"})
        router.url("blog_post", {"slug": "x"})
        router.url("self", {"color": "blue"})
        router.url("product", {})
        assert router.get_current_route() is result.route
        assert router.get_default_params() == {"id": "5", "color": "red"}


class TestUrlGenerator:
    def test_to_path(self) -> None:
        generator = UrlGenerator(RequestContext(base_path="/app"))
        assert generator.to("assets/site.css", {"v": 3}) == "/app/assets/site.css?v=3"

    def test_to_absolute_url_untouched(self) -> None:
        generator = UrlGenerator(RequestContext(base_path="/app"))
        assert generator.to("https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"

    def test_forced_root_url(self) -> None:
        generator = UrlGenerator()
        generator.force_root_url("https://example.com/")
        assert generator.to("/about", {"absolute": True}) == "https://example.com/about"

    def test_forced_scheme(self) -> None:
        generator = UrlGenerator(RequestContext(host="example.com"))
        generator.force_scheme("https")
        assert generator.to("/about", {"absolute": True}) == "https://example.com/about"

    def test_to_query_string_replaces_target_params(self) -> None:
        url = UrlGenerator().to_query_string("Products", "Detail", {"controller": "x", "id": 5})
        assert url == "index.php?controller=Products&action=Detail&id=5"

    @pytest.mark.parametrize(
        "url, expected",
        [("https://example.com", True), ("//cdn.example.com", True), ("/about", False), ("about", False)],
    )
    def test_is_valid_url(self, url: str, expected: bool) -> None:
        assert UrlGenerator.is_valid_url(url) is expected


class TestQueryStrings:
    def test_build_query(self) -> None:
        assert build_query({"a": 1, "b": None, "c": ["x", "y"]}) == "a=1&c[]=x&c[]=y"

    def test_build_query_escapes(self) -> None:
        assert build_query({"q": "a b&c"}) == "q=a%20b%26c"

    def test_parse_query(self) -> None:
        assert parse_query("page=2&tags[]=a&tags[]=b&x=1&x=2&empty=") == {
            "page": "2",
            "tags": ["a", "b"],
            "x": ["1", "2"],
            "empty": "",
        }

    def test_parse_empty(self) -> None:
        assert parse_query("") == {}


class TestRequestContext:
    def test_from_url(self) -> None:
        request = RequestContext.from_url("products/5?color=red", base_path="/app/")
        assert request.path == "/products/5"
        assert request.query == {"color": "red"}
        assert request.base_path == "/app"
        assert request.query_string == "color=red"

    def test_host_parts(self) -> None:
        request = RequestContext(host="www.example.com:8000", scheme="https")
        assert request.hostname == "www.example.com"
        assert request.domain == "example.com"
        assert request.sld == "example"
        assert request.tld == "com"
        assert request.root_url == "https://www.example.com:8000"

    def test_single_label_host(self) -> None:
        request = RequestContext(host="localhost")
        assert request.tld == ""
        assert request.sld == "localhost"
        assert request.domain == "localhost"

    @pytest.mark.parametrize("path, expected", [("/", True), ("/index.php", True), ("/about", False)])
    def test_is_root(self, path: str, expected: bool) -> None:
        assert RequestContext(path=path).is_root is expected
