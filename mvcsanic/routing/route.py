"""
Route Class
Represents a single routable endpoint: match pattern, reverse template,
defaults and constraints, compiled once and reused across requests
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Set, Tuple, Union
from urllib.parse import quote, unquote
import re

from mvcsanic.exceptions.custom import (
    ConstraintMismatch,
    InvalidPatternSyntax,
    MissingRequiredParam,
    RouteDefinitionException,
)
from mvcsanic.routing.constants import (
    CONTROLLER_ACTION_SEPARATOR,
    DEFAULT_PARAM_PATTERN,
    TrailingSlash,
)


_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*\Z')

# PHP style named group `(?<name>` (lookbehinds `(?<=` and `(?<!` excluded)
_PHP_NAMED_GROUP = re.compile(r'\(\?<(?=[A-Za-z_])')

# Characters left unescaped in placeholder values
_SAFE_CHARS = "-_.~!$'()*,;=:@"

# Regex syntax that can't be turned into a reverse template
_REGEX_SYNTAX = re.compile(r'[()\\*+?{}|^$]')


@dataclass(frozen=True)
class _Text:
    """Literal part of a template"""
    value: str


@dataclass(frozen=True)
class _Param:
    """``<name>`` placeholder"""
    name: str


@dataclass(frozen=True)
class _Optional:
    """``[...]`` optional segment"""
    children: Tuple[Any, ...]


def parse_template(template: str) -> Tuple[List[Any], List[str]]:
    """
    Parse a route template into literal, placeholder and optional nodes

    Examples::

        "/blog/<year>"        -> [_Text("/blog/"), _Param("year")]
        "/list[/<page>]"      -> [_Text("/list"), _Optional((_Text("/"), _Param("page")))]

    Returns:
        (nodes, placeholder names in order of appearance)

    Raises:
        InvalidPatternSyntax: For unclosed/empty placeholders, invalid or
            repeated names and unbalanced brackets
    """
    root: List[Any] = []
    stack: List[List[Any]] = [root]
    names: List[str] = []
    buffer: List[str] = []

    def flush():
        if buffer:
            stack[-1].append(_Text(''.join(buffer)))
            buffer.clear()

    i = 0
    length = len(template)
    while i < length:
        char = template[i]
        if char == '<':
            end = template.find('>', i + 1)
            if end == -1:
                raise InvalidPatternSyntax(template, f"unclosed placeholder at position {i}")
            name = template[i + 1:end]
            if not name:
                raise InvalidPatternSyntax(template, f"empty placeholder at position {i}")
            if not _IDENTIFIER.match(name):
                raise InvalidPatternSyntax(template, f"invalid placeholder name `<{name}>`")
            if name in names:
                raise InvalidPatternSyntax(template, f"placeholder `<{name}>` used more than once")
            names.append(name)
            flush()
            stack[-1].append(_Param(name))
            i = end + 1
            continue

        if char == '>':
            raise InvalidPatternSyntax(template, f"unexpected `>` at position {i}")

        if char == '[':
            flush()
            stack.append([])
        elif char == ']':
            if len(stack) == 1:
                raise InvalidPatternSyntax(template, f"unmatched `]` at position {i}")
            flush()
            children = stack.pop()
            stack[-1].append(_Optional(tuple(children)))
        else:
            buffer.append(char)
        i += 1

    if len(stack) > 1:
        raise InvalidPatternSyntax(template, "unclosed optional segment `[`")
    flush()

    return root, names


def _placeholder_names(nodes) -> List[str]:
    """All placeholder names below the given nodes"""
    names = []
    for node in nodes:
        if isinstance(node, _Param):
            names.append(node.name)
        elif isinstance(node, _Optional):
            names.extend(_placeholder_names(node.children))
    return names


def _constraint_body(constraint: str) -> str:
    """Strip anchors, the capture spans one placeholder only"""
    if constraint.startswith('^'):
        constraint = constraint[1:]
    if constraint.endswith('$') and not constraint.endswith('\\$'):
        constraint = constraint[:-1]
    return constraint


class Route:
    """
    Route with match pattern and reverse template

    Usage:
        route = Route('/products/<id>', 'Products:Detail', constraints={'id': r'\\d+'})
        route = Route.from_config({
            'name': 'blog_post',
            'pattern': '/blog/<year>/<slug>',
            'controllerAction': 'Blog:Post',
            'defaults': {'year': '2024'},
        })

        matched, params = route.matches('/products/5')
        path, used = route.build({'id': 5})
    """

    def __init__(
        self,
        pattern: Union[str, Pattern, None] = None,
        controller_action: Optional[str] = None,
        defaults: Optional[Dict[str, Any]] = None,
        constraints: Optional[Dict[str, str]] = None,
        *,
        name: Optional[str] = None,
        controller: Optional[str] = None,
        action: Optional[str] = None,
        reverse: Optional[str] = None,
    ):
        """
        Initialize a Route instance

        Args:
            pattern: Template with `<param>` placeholders and `[...]` optional
                segments, or a regular expression (compiled, or a string
                delimited as `#...#`) with named groups
            controller_action: Target as "Controller:Action"
            defaults: Param default values
            constraints: Param regular expressions replacing `[^/]+`
            name: Route name, "Controller:Action" when omitted
            controller: Target controller in pascal case
            action: Target action in pascal case
            reverse: Template to build URLs, derived from pattern when omitted

        Raises:
            RouteDefinitionException: If no controller and action can be resolved
            InvalidPatternSyntax: If pattern or reverse is malformed
        """
        if controller_action and CONTROLLER_ACTION_SEPARATOR in controller_action:
            ca_controller, ca_action = controller_action.split(CONTROLLER_ACTION_SEPARATOR, 1)
            controller = controller or ca_controller
            action = action or ca_action

        if not name:
            if controller_action:
                name = controller_action
            elif controller and action:
                name = f"{controller}{CONTROLLER_ACTION_SEPARATOR}{action}"

        if (not controller or not action) and name and CONTROLLER_ACTION_SEPARATOR in name:
            name_controller, name_action = name.split(CONTROLLER_ACTION_SEPARATOR, 1)
            controller = controller or name_controller
            action = action or name_action

        if not name or not controller or not action:
            raise RouteDefinitionException(
                f"Route `{name or pattern}` has no controller and action, "
                "name it `Controller:Action` or set `controllerAction`."
            )

        if pattern is None:
            if reverse is None:
                raise InvalidPatternSyntax('', f"route `{name}` has no pattern")
            pattern = reverse

        self._name = name
        self._controller = controller
        self._action = action
        self._pattern = pattern
        self._defaults: Dict[str, Any] = dict(defaults or {})
        self._wheres: Dict[str, str] = dict(constraints or {})
        self._registered = False
        self._compiled: Dict[bool, Pattern] = {}

        self._regex_form = isinstance(pattern, re.Pattern) or (
            isinstance(pattern, str) and len(pattern) > 1 and pattern.startswith('#')
        )
        if self._regex_form:
            self._regex = self._compile_regex_pattern(pattern)
            self._parameter_names = list(self._regex.groupindex)
            self._reverse = reverse if reverse is not None else self._derive_reverse(pattern)
        else:
            self._regex = None
            self._pattern_nodes, self._parameter_names = parse_template(self._template_body(pattern))
            self._reverse = reverse if reverse is not None else pattern

        self._reverse_nodes, self._reverse_names = parse_template(self._reverse)

    @classmethod
    def from_config(cls, config: Union[Dict[str, Any], 'Route'], name: Optional[str] = None) -> 'Route':
        """
        Create a route from a config mapping

        Accepted keys: name, pattern, reverse, controllerAction
        (or controller_action), controller, action, defaults, constraints.

        Args:
            config: Route configuration (a Route is returned unchanged)
            name: Name used when the config has none (usually the mapping key)
        """
        if isinstance(config, Route):
            return config

        return cls(
            config.get('pattern'),
            config.get('controllerAction', config.get('controller_action')),
            config.get('defaults'),
            config.get('constraints'),
            name=config.get('name') or name,
            controller=config.get('controller'),
            action=config.get('action'),
            reverse=config.get('reverse'),
        )

    # =========================================================================
    # Fluent configuration (before registration)
    # =========================================================================

    def where(self, parameter: Union[str, Dict[str, str]], pattern: Optional[str] = None) -> 'Route':
        """
        Add parameter constraints

        Usage:
            route.where('id', '[0-9]+')
            route.where({'id': '[0-9]+', 'slug': '[a-z-]+'})
        """
        self._ensure_mutable()
        if isinstance(parameter, dict):
            self._wheres.update(parameter)
        elif pattern is not None:
            self._wheres[parameter] = pattern
        self._compiled.clear()
        return self

    def defaults(self, key: Union[str, Dict[str, Any]], value: Any = None) -> 'Route':
        """
        Set default values for parameters

        Usage:
            route.defaults('page', 1)
            route.defaults({'page': 1, 'color': 'red'})
        """
        self._ensure_mutable()
        if isinstance(key, dict):
            self._defaults.update(key)
        else:
            self._defaults[key] = value
        return self

    def _ensure_mutable(self):
        if self._registered:
            raise RuntimeError(f"Route `{self._name}` is registered and can't be changed.")

    def validate(self) -> 'Route':
        """
        Compile the route for every behaviour

        Raises:
            InvalidPatternSyntax: If a constraint is not a valid expression
        """
        self.compile(TrailingSlash.REMOVE)
        self.compile(TrailingSlash.BENEVOLENT)
        return self

    def freeze(self) -> 'Route':
        """
        Mark the route as registered

        Called by RouteCollection once the whole batch is accepted.
        """
        self.validate()
        self._registered = True
        return self

    # =========================================================================
    # Compilation
    # =========================================================================

    @staticmethod
    def _template_body(template: str) -> str:
        """Template with a leading slash and without trailing ones (root excepted)"""
        if not template.startswith('/'):
            template = '/' + template
        stripped = template.rstrip('/')
        return stripped or '/'

    def _compile_regex_pattern(self, pattern: Union[str, Pattern]) -> Pattern:
        if isinstance(pattern, re.Pattern):
            return pattern

        end = pattern.rfind('#')
        if end == 0:
            raise InvalidPatternSyntax(pattern, "missing closing `#` delimiter")
        body = _PHP_NAMED_GROUP.sub('(?P<', pattern[1:end])
        flags = re.IGNORECASE if 'i' in pattern[end + 1:] else 0
        try:
            return re.compile(body, flags)
        except re.error as e:
            raise InvalidPatternSyntax(pattern, str(e)) from e

    def _derive_reverse(self, pattern: Union[str, Pattern]) -> str:
        if isinstance(pattern, re.Pattern):
            source = pattern.pattern
        else:
            source = pattern[1:pattern.rfind('#')]
        reverse = source.strip('^$')
        if _REGEX_SYNTAX.search(reverse):
            raise InvalidPatternSyntax(
                source, "regular expression patterns need an explicit `reverse` template"
            )
        return reverse

    def compile(self, trailing_slash: TrailingSlash = TrailingSlash.BENEVOLENT) -> Tuple[Pattern, List[str], str]:
        """
        Compile the match expression for a trailing slash behaviour

        The expression spans the whole path. An optional trailing slash
        is accepted unless the behaviour is REMOVE, where the router
        strips it before matching and redirects.

        Returns:
            (compiled expression, param names, reverse template)

        Raises:
            InvalidPatternSyntax: If a constraint is not a valid expression
        """
        if self._regex_form:
            return self._regex, self._parameter_names, self._reverse

        strict = trailing_slash == TrailingSlash.REMOVE
        compiled = self._compiled.get(strict)
        if compiled is None:
            body = self._nodes_to_regex(self._pattern_nodes)
            if body == '/':
                expression = '^/$'
            elif strict:
                expression = f'^{body}$'
            else:
                expression = f'^{body}/?$'
            try:
                compiled = re.compile(expression)
            except re.error as e:
                raise InvalidPatternSyntax(self._pattern, f"invalid constraint: {e}") from e
            self._compiled[strict] = compiled

        return compiled, self._parameter_names, self._reverse

    def _nodes_to_regex(self, nodes) -> str:
        parts = []
        for node in nodes:
            if isinstance(node, _Text):
                parts.append(re.escape(node.value))
            elif isinstance(node, _Param):
                constraint = self._wheres.get(node.name)
                body = _constraint_body(constraint) if constraint else DEFAULT_PARAM_PATTERN
                parts.append(f'(?P<{node.name}>{body})')
            else:
                parts.append(f'(?:{self._nodes_to_regex(node.children)})?')
        return ''.join(parts)

    # =========================================================================
    # Matching
    # =========================================================================

    def matches(self, path: str, trailing_slash: TrailingSlash = TrailingSlash.BENEVOLENT) -> Tuple[bool, Dict[str, Any]]:
        """
        Match a request path

        Args:
            path: Request path relative to the application base path
            trailing_slash: Router trailing slash behaviour

        Returns:
            (matched, params) where params are the defaults overlaid
            with the URL-decoded captured values
        """
        captures = self.captures(path, trailing_slash)
        if captures is None:
            return False, {}
        return True, {**self._defaults, **captures}

    def captures(self, path: str, trailing_slash: TrailingSlash = TrailingSlash.BENEVOLENT) -> Optional[Dict[str, str]]:
        """
        URL-decoded values captured from the path, without defaults

        Returns:
            Captured values or None when the path doesn't match
        """
        regex, _, _ = self.compile(trailing_slash)
        if self._regex_form:
            match = regex.search(path)
            # Expressions are written without the trailing slash, the
            # router only strips it itself under REMOVE
            if match is None and trailing_slash != TrailingSlash.REMOVE and len(path) > 1 and path.endswith('/'):
                match = regex.search(path.rstrip('/'))
        else:
            match = regex.match(path)
        if match is None:
            return None

        return {
            name: unquote(value)
            for name, value in match.groupdict().items()
            if value is not None
        }

    # =========================================================================
    # Building
    # =========================================================================

    def build(self, params: Optional[Dict[str, Any]] = None) -> Tuple[str, Set[str]]:
        """
        Build a path from the reverse template

        Optional segments are rendered only if one of their placeholders
        was given in params with a value other than its default.

        Args:
            params: Param values, missing ones fall back to defaults

        Returns:
            (path, names of placeholders rendered into the path)

        Raises:
            MissingRequiredParam: A required placeholder has no value nor default
            ConstraintMismatch: A value doesn't match its constraint
        """
        params = params or {}
        used: Set[str] = set()
        path = self._render(self._reverse_nodes, params, used)
        return path, used

    def _render(self, nodes, params: Dict[str, Any], used: Set[str]) -> str:
        parts = []
        for node in nodes:
            if isinstance(node, _Text):
                parts.append(node.value)
            elif isinstance(node, _Param):
                parts.append(self._render_param(node.name, params))
                used.add(node.name)
            else:
                names = _placeholder_names(node.children)
                if not any(self._is_supplied(name, params) for name in names):
                    continue
                segment_used: Set[str] = set()
                try:
                    parts.append(self._render(node.children, params, segment_used))
                except MissingRequiredParam:
                    continue
                used.update(segment_used)
        return ''.join(parts)

    def _is_supplied(self, name: str, params: Dict[str, Any]) -> bool:
        value = params.get(name)
        if value is None:
            return False
        return name not in self._defaults or str(self._defaults[name]) != str(value)

    def _render_param(self, name: str, params: Dict[str, Any]) -> str:
        value = params.get(name)
        if value is None:
            value = self._defaults.get(name)
        if value is None:
            raise MissingRequiredParam(self._name, name)

        value = str(value)
        constraint = self._wheres.get(name)
        if constraint is not None and re.fullmatch(_constraint_body(constraint), value) is None:
            raise ConstraintMismatch(self._name, name, value, constraint)

        # A validated constraint (or a raw expression) decides about slashes
        safe = _SAFE_CHARS + '/' if constraint is not None or self._regex_form else _SAFE_CHARS
        return quote(value, safe=safe)

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_name(self) -> str:
        """Get the route name"""
        return self._name

    def get_controller(self) -> str:
        """Get the target controller in pascal case"""
        return self._controller

    def get_action(self) -> str:
        """Get the target action in pascal case"""
        return self._action

    def get_controller_action(self) -> str:
        """Get the "Controller:Action" lookup key"""
        return f"{self._controller}{CONTROLLER_ACTION_SEPARATOR}{self._action}"

    def get_pattern(self) -> Union[str, Pattern]:
        """Get the match pattern as configured"""
        return self._pattern

    def get_reverse(self) -> str:
        """Get the reverse template"""
        return self._reverse

    def get_defaults(self) -> Dict[str, Any]:
        """Get default parameter values"""
        return dict(self._defaults)

    def get_constraints(self) -> Dict[str, str]:
        """Get parameter constraints"""
        return dict(self._wheres)

    def get_parameter_names(self) -> List[str]:
        """Get parameter names captured by the pattern"""
        return list(self._parameter_names)

    def get_reverse_parameter_names(self) -> List[str]:
        """Get placeholder names of the reverse template"""
        return list(self._reverse_names)

    def is_registered(self) -> bool:
        """Check if the route belongs to a route collection"""
        return self._registered

    def is_regex(self) -> bool:
        """Check if the pattern is a regular expression"""
        return self._regex_form

    def redefined(self, controller: Optional[str] = None, action: Optional[str] = None) -> 'Route':
        """
        Copy of this route targeting another controller and/or action

        The copy keeps the name, pattern, reverse, defaults and constraints
        and is not registered.
        """
        return Route(
            self._pattern,
            None,
            self._defaults,
            self._wheres,
            name=self._name,
            controller=controller or self._controller,
            action=action or self._action,
            reverse=self._reverse,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Route information for listings"""
        pattern = self._pattern.pattern if isinstance(self._pattern, re.Pattern) else self._pattern
        route_dict = {
            'name': self._name,
            'controller_action': self.get_controller_action(),
            'pattern': pattern,
            'reverse': self._reverse,
            'parameters': self.get_parameter_names(),
        }

        if self._defaults:
            route_dict['defaults'] = self.get_defaults()

        if self._wheres:
            route_dict['constraints'] = self.get_constraints()

        return route_dict

    def __repr__(self) -> str:
        """String representation of route"""
        return f"<Route {self._name} [{self.get_controller_action()}] {self._reverse}>"
