"""Tests for mvcsanic.routing.route: template compiling, matching and building."""

import re

import pytest

from mvcsanic.exceptions import (
    ConstraintMismatch,
    InvalidPatternSyntax,
    MissingRequiredParam,
    RouteDefinitionException,
)
from mvcsanic.routing.constants import TrailingSlash
from mvcsanic.routing.route import Route, parse_template


class TestParseTemplate:
    def test_placeholders_in_order(self) -> None:
        _, names = parse_template("/blog/<year>/<slug>")
        assert names == ["year", "slug"]

    def test_nested_optional_segments(self) -> None:
        _, names = parse_template("/list[/<page>[/<size>]]")
        assert names == ["page", "size"]

    @pytest.mark.parametrize(
        "template",
        [
            "/a/<x>/<x>",
            "/a]",
            "/a[/<x>",
            "/a/<x",
            "/a/<>",
            "/a/<1x>",
            "/a/x>",
        ],
    )
    def test_malformed_templates(self, template: str) -> None:
        with pytest.raises(InvalidPatternSyntax):
            parse_template(template)

    def test_repeated_placeholder_message(self) -> None:
        with pytest.raises(InvalidPatternSyntax, match="more than once"):
            Route("/a/<x>/<x>", "A:B")


class TestRouteDefinition:
    def test_name_from_controller_action(self) -> None:
        route = Route("/products", "Products:List")
        assert route.get_name() == "Products:List"
        assert route.get_controller() == "Products"
        assert route.get_action() == "List"

    def test_controller_action_from_name(self) -> None:
        route = Route("/about", name="Pages:About")
        assert route.get_controller_action() == "Pages:About"

    def test_explicit_name_and_target(self) -> None:
        route = Route("/about", controller="Pages", action="About", name="about")
        assert route.get_name() == "about"
        assert route.get_controller_action() == "Pages:About"

    def test_missing_target(self) -> None:
        with pytest.raises(RouteDefinitionException):
            Route("/about", name="about")

    def test_from_config(self) -> None:
        route = Route.from_config(
            {
                "name": "blog_post",
                "pattern": "/blog/<year>/<slug>",
                "controllerAction": "Blog:Post",
                "defaults": {"year": "2024"},
                "constraints": {"year": r"\d{4}"},
            }
        )
        assert route.get_name() == "blog_post"
        assert route.get_controller_action() == "Blog:Post"
        assert route.get_defaults() == {"year": "2024"}
        assert route.get_constraints() == {"year": r"\d{4}"}
        assert route.get_reverse() == "/blog/<year>/<slug>"

    def test_from_config_uses_key_as_name(self) -> None:
        route = Route.from_config({"pattern": "/products"}, name="Products:List")
        assert route.get_controller_action() == "Products:List"

    def test_fluent_configuration_before_registration(self) -> None:
        route = Route("/products[/<page>]", "Products:List").where("page", r"\d+").defaults("page", 1)
        assert route.get_constraints() == {"page": r"\d+"}
        assert route.get_defaults() == {"page": 1}

    def test_registered_route_is_frozen(self) -> None:
        route = Route("/products", "Products:List").freeze()
        assert route.is_registered()
        with pytest.raises(RuntimeError):
            route.where("page", r"\d+")
        with pytest.raises(RuntimeError):
            route.defaults("page", 1)

    def test_redefined_copy(self) -> None:
        route = Route("/products/<id>", "Products:Detail", {"id": 1}, name="product").freeze()
        copy = route.redefined(action="Preview")
        assert copy.get_name() == "product"
        assert copy.get_controller_action() == "Products:Preview"
        assert copy.get_defaults() == {"id": 1}
        assert not copy.is_registered()
        assert route.get_action() == "Detail"

    def test_to_dict(self) -> None:
        route = Route("/products/<id>", "Products:Detail", constraints={"id": r"\d+"})
        info = route.to_dict()
        assert info["name"] == "Products:Detail"
        assert info["pattern"] == "/products/<id>"
        assert info["parameters"] == ["id"]
        assert info["constraints"] == {"id": r"\d+"}
        assert "defaults" not in info


class TestCompile:
    def test_strict_expression(self) -> None:
        regex, names, reverse = Route("/products/<id>", "Products:Detail").compile(TrailingSlash.REMOVE)
        assert regex.pattern == r"^/products/(?P<id>[^/]+)$"
        assert names == ["id"]
        assert reverse == "/products/<id>"

    def test_benevolent_expression_accepts_trailing_slash(self) -> None:
        regex, _, _ = Route("/products/<id>", "Products:Detail").compile(TrailingSlash.BENEVOLENT)
        assert regex.pattern == r"^/products/(?P<id>[^/]+)/?$"

    def test_template_trailing_slash_is_dropped(self) -> None:
        regex, _, _ = Route("/products/", "Products:List").compile(TrailingSlash.REMOVE)
        assert regex.pattern == r"^/products$"

    def test_root(self) -> None:
        regex, _, _ = Route("/", "Index:Index").compile(TrailingSlash.BENEVOLENT)
        assert regex.pattern == r"^/$"

    def test_optional_segment(self) -> None:
        regex, _, _ = Route("/list[/<page>]", "Products:List").compile(TrailingSlash.REMOVE)
        assert regex.pattern == r"^/list(?:/(?P<page>[^/]+))?$"

    def test_constraint_anchors_are_stripped(self) -> None:
        route = Route("/products/<id>", "Products:Detail", constraints={"id": r"^\d+$"})
        regex, _, _ = route.compile(TrailingSlash.REMOVE)
        assert regex.pattern == r"^/products/(?P<id>\d+)$"

    def test_compiled_once_per_behaviour(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        first, _, _ = route.compile(TrailingSlash.REMOVE)
        second, _, _ = route.compile(TrailingSlash.REMOVE)
        always, _, _ = route.compile(TrailingSlash.ALWAYS)
        assert first is second
        assert always is not first

    def test_invalid_constraint(self) -> None:
        route = Route("/products/<id>", "Products:Detail", constraints={"id": "(["})
        with pytest.raises(InvalidPatternSyntax):
            route.freeze()


class TestRegexRoutes:
    def test_php_style_named_groups(self) -> None:
        route = Route(r"#^/products/(?<id>\d+)$#", "Products:Detail", reverse="/products/<id>")
        assert route.is_regex()
        assert route.matches("/products/12") == (True, {"id": "12"})
        assert route.build({"id": 12}) == ("/products/12", {"id"})

    def test_compiled_pattern(self) -> None:
        route = Route(re.compile(r"^/about$"), "Pages:About")
        assert route.get_reverse() == "/about"
        assert route.matches("/about")[0]

    def test_search_semantics(self) -> None:
        route = Route(re.compile(r"^/docs/(?P<page>[a-z]+)"), "Docs:Page", reverse="/docs/<page>")
        assert route.matches("/docs/intro/more") == (True, {"page": "intro"})

    def test_case_insensitive_flag(self) -> None:
        route = Route("#^/about$#i", "Pages:About")
        assert route.matches("/ABOUT")[0]

    def test_reverse_required_for_expressions(self) -> None:
        with pytest.raises(InvalidPatternSyntax, match="reverse"):
            Route(r"#^/products/(?<id>\d+)$#", "Products:Detail")

    def test_invalid_expression(self) -> None:
        with pytest.raises(InvalidPatternSyntax):
            Route("#^/products/(unclosed#", "Products:Detail", reverse="/products")


class TestMatches:
    def test_match(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        assert route.matches("/products/5") == (True, {"id": "5"})

    def test_no_match(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        assert route.matches("/products") == (False, {})
        assert route.matches("/products/5/reviews") == (False, {})

    def test_trailing_slash_by_behaviour(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        assert route.matches("/products/5/", TrailingSlash.BENEVOLENT)[0]
        assert not route.matches("/products/5/", TrailingSlash.REMOVE)[0]

    def test_constraint(self) -> None:
        route = Route("/products/<id>", "Products:Detail", constraints={"id": r"\d+"})
        assert route.matches("/products/5")[0]
        assert not route.matches("/products/abc")[0]

    def test_values_are_url_decoded(self) -> None:
        route = Route("/search/<q>", "Search:Results")
        assert route.matches("/search/hello%20world") == (True, {"q": "hello world"})

    def test_defaults_overlaid_by_captures(self) -> None:
        route = Route("/blog/<year>/<slug>", "Blog:Post", {"year": "2024"})
        matched, params = route.matches("/blog/2023/hello-world")
        assert matched
        assert params == {"year": "2023", "slug": "hello-world"}

    def test_omitted_optional_segment_uses_default(self) -> None:
        route = Route("/list[/<page>]", "Products:List", {"page": 1})
        assert route.matches("/list") == (True, {"page": 1})
        assert route.matches("/list/3") == (True, {"page": "3"})

    def test_captures_exclude_defaults(self) -> None:
        route = Route("/list[/<page>]", "Products:List", {"page": 1, "size": 10})
        assert route.captures("/list") == {}
        assert route.captures("/list/3") == {"page": "3"}
        assert route.captures("/other") is None


class TestBuild:
    def test_build(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        assert route.build({"id": 5}) == ("/products/5", {"id"})

    def test_default_fills_placeholder(self) -> None:
        route = Route("/blog/<year>/<slug>", "Blog:Post", {"year": "2024"})
        path, used = route.build({"slug": "hello-world"})
        assert path == "/blog/2024/hello-world"
        assert used == {"year", "slug"}

    def test_missing_required_param(self) -> None:
        route = Route("/products/<id>", "Products:Detail")
        with pytest.raises(MissingRequiredParam) as exc_info:
            route.build({})
        assert exc_info.value.param_name == "id"
        assert exc_info.value.route_name == "Products:Detail"

    def test_constraint_mismatch(self) -> None:
        route = Route("/products/<id>", "Products:Detail", constraints={"id": r"\d+"})
        with pytest.raises(ConstraintMismatch) as exc_info:
            route.build({"id": "abc"})
        assert exc_info.value.value == "abc"

    def test_optional_segment_omitted_unless_supplied(self) -> None:
        route = Route("/list[/<page>]", "Products:List", {"page": 1})
        assert route.build({}) == ("/list", set())
        assert route.build({"page": 2}) == ("/list/2", {"page"})

    def test_nested_optional_segment_without_value_is_omitted(self) -> None:
        route = Route("/list[/<page>[/<size>]]", "Products:List")
        assert route.build({"page": 2}) == ("/list/2", {"page"})
        assert route.build({"page": 2, "size": 20}) == ("/list/2/20", {"page", "size"})

    def test_values_are_url_encoded(self) -> None:
        route = Route("/search/<q>", "Search:Results")
        path, _ = route.build({"q": "a b/c"})
        assert path == "/search/a%20b%2Fc"

    def test_slash_kept_when_constraint_admits_it(self) -> None:
        route = Route("/files/<path>", "Files:Show", constraints={"path": ".+"})
        path, _ = route.build({"path": "docs/readme.txt"})
        assert path == "/files/docs/readme.txt"

    @pytest.mark.parametrize("value", ["plain", "hello world", "a/b", "50%", "ünïcode"])
    def test_build_then_match_recovers_params(self, value: str) -> None:
        route = Route("/search/<q>", "Search:Results")
        path, _ = route.build({"q": value})
        assert route.matches(path) == (True, {"q": value})
