"""
URL Generator
Renders route reverse templates and query string URLs for the current request
"""
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from mvcsanic.http.request import RequestContext
from mvcsanic.routing.constants import (
    TrailingSlash,
    URL_PARAM_ABSOLUTE,
    URL_PARAM_ACTION,
    URL_PARAM_BASEPATH,
    URL_PARAM_CONTROLLER,
    URL_PARAM_DOMAIN,
    URL_PARAM_HOST,
    URL_PARAM_SLD,
    URL_PARAM_TLD,
    URL_PSEUDO_PARAMS,
)


def build_query(params: Dict[str, Any]) -> str:
    """
    Build a query string (without '?')

    None values are dropped, lists are written as ``key[]=a&key[]=b``.
    """
    parts = []
    for key, value in params.items():
        if value is None:
            continue
        name = quote(str(key), safe='')
        if isinstance(value, (list, tuple)):
            for item in value:
                if item is not None:
                    parts.append(f"{name}[]={quote(str(item), safe='')}")
        else:
            parts.append(f"{name}={quote(str(value), safe='')}")
    return '&'.join(parts)


class UrlGenerator:
    """
    Usage:
        generator = UrlGenerator(request, TrailingSlash.REMOVE)
        url = generator.to_route(route, {'id': 5})                          # /products/5
        url = generator.to_route(route, {'id': 5, 'absolute': True})        # http://host/products/5
        url = generator.to_query_string('Products', 'Detail', {'id': 5})    # index.php?controller=...
    """

    def __init__(self, request: Optional[RequestContext] = None,
                 trailing_slash: TrailingSlash = TrailingSlash.REMOVE):
        """
        Initialize URL generator

        Args:
            request: Current request, a root request on localhost when omitted
            trailing_slash: Router behaviour, generated paths never redirect
        """
        self.request = request or RequestContext()
        self.trailing_slash = TrailingSlash(trailing_slash)
        self._forced_scheme: Optional[str] = None
        self._forced_root: Optional[str] = None

    def to_route(self, route, parameters: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate URL for a route instance

        Params without a placeholder in the reverse template go to the
        query string.

        Raises:
            UrlBuildException: If the route can't render the params
        """
        parameters, pseudo = self._split_pseudo_params(parameters)
        path, used = route.build(parameters)

        # Params equal to route defaults are implied by the route
        defaults = route.get_defaults()
        query = {
            key: value for key, value in parameters.items()
            if key not in used and not (key in defaults and str(defaults[key]) == str(value))
        }
        path = self._apply_trailing_slash(path)
        has_base_path = '%basePath%' in route.get_reverse()
        path = self._replace_host_tokens(path, pseudo)

        return self._finalize(path, query, pseudo, prefix_base_path=not has_base_path)

    def to_query_string(self, controller: str, action: str,
                        parameters: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a front controller URL targeting controller and action

        Example:
            to_query_string('Products', 'Detail', {'id': 5})
            -> index.php?controller=Products&action=Detail&id=5
        """
        parameters, pseudo = self._split_pseudo_params(parameters)
        parameters.pop(URL_PARAM_CONTROLLER, None)
        parameters.pop(URL_PARAM_ACTION, None)
        query = {URL_PARAM_CONTROLLER: controller, URL_PARAM_ACTION: action, **parameters}

        base_path = pseudo.get(URL_PARAM_BASEPATH, self.request.base_path)
        url = f"{self.request.script_name}?{build_query(query)}"
        if base_path or pseudo.get(URL_PARAM_ABSOLUTE):
            url = f"{base_path}/{url}"

        return self._absolute(url, pseudo)

    def to(self, path: str, parameters: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a URL for the given application path

        Args:
            path: URI path relative to the base path
            parameters: Query params, pseudo params included
        """
        if not self.is_valid_url(path) and not path.startswith('/'):
            path = '/' + path

        parameters, pseudo = self._split_pseudo_params(parameters)
        return self._finalize(path, parameters, pseudo, prefix_base_path=True)

    def _split_pseudo_params(self, parameters: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Separate URL-shaping pseudo params from route params"""
        parameters = dict(parameters or {})
        pseudo = {}
        for name in URL_PSEUDO_PARAMS:
            if name in parameters:
                pseudo[name] = parameters.pop(name)
        return parameters, pseudo

    def _apply_trailing_slash(self, path: str) -> str:
        if not path.startswith('/') or path == '/':
            return path
        if self.trailing_slash == TrailingSlash.REMOVE:
            return path.rstrip('/') or '/'
        if self.trailing_slash == TrailingSlash.ALWAYS and not path.endswith('/'):
            return path + '/'
        return path

    def _replace_host_tokens(self, path: str, pseudo: Dict[str, Any]) -> str:
        """Replace ``%host%`` style tokens of reverse templates"""
        if '%' not in path:
            return path

        request = self.request
        tokens = {
            '%host%': pseudo.get(URL_PARAM_HOST, request.host),
            '%domain%': pseudo.get(URL_PARAM_DOMAIN, request.domain),
            '%tld%': pseudo.get(URL_PARAM_TLD, request.tld),
            '%sld%': pseudo.get(URL_PARAM_SLD, request.sld),
            '%basePath%': pseudo.get(URL_PARAM_BASEPATH, request.base_path),
        }
        for token, value in tokens.items():
            path = path.replace(token, str(value))
        return path

    def _finalize(self, path: str, query: Dict[str, Any], pseudo: Dict[str, Any],
                  prefix_base_path: bool) -> str:
        if self.is_valid_url(path):
            url = path
        else:
            if prefix_base_path and self.request.base_path:
                path = f"{self.request.base_path}{path}"
            url = self._absolute(path, pseudo)

        query_string = build_query(query)
        if query_string:
            url = f"{url}?{query_string}"
        return url

    def _absolute(self, url: str, pseudo: Dict[str, Any]) -> str:
        """Prefix scheme and host when the `absolute` pseudo param is set"""
        if not pseudo.get(URL_PARAM_ABSOLUTE) or self.is_valid_url(url):
            return url
        return f"{self._get_root_url(pseudo.get(URL_PARAM_HOST))}{url}"

    def _get_scheme(self) -> str:
        """
        Get URL scheme (http/https)

        Returns:
            Scheme string
        """
        return self._forced_scheme or self.request.scheme or 'http'

    def _get_root_url(self, host: Optional[str] = None) -> str:
        """
        Get root URL (scheme + host)

        Returns:
            Root URL
        """
        if self._forced_root:
            return self._forced_root
        return f"{self._get_scheme()}://{host or self.request.host}"

    def force_scheme(self, scheme: str):
        """
        Force URL scheme for generated URLs

        Args:
            scheme: URL scheme (http or https)
        """
        self._forced_scheme = scheme

    def force_root_url(self, root: str):
        """
        Force root URL for generated URLs

        Args:
            root: Root URL (e.g., 'https://example.com')
        """
        self._forced_root = root.rstrip('/')

    @staticmethod
    def is_valid_url(path: str) -> bool:
        """
        Check if a path is an absolute URL

        Args:
            path: Path to check

        Returns:
            True if absolute URL
        """
        return path.startswith(('http://', 'https://', '//'))
