"""
Request Context
The parts of an HTTP request the router and the URL builder depend on
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
from urllib.parse import parse_qsl

from mvcsanic.defaults import DEFAULT_SCRIPT_NAME


def parse_query(query_string: str) -> Dict[str, Any]:
    """
    Parse a query string into a flat mapping

    Repeated keys and keys ending with ``[]`` become lists, like
    the query strings the URL builder writes.

    Example:
        parse_query('page=2&tags[]=a&tags[]=b') -> {'page': '2', 'tags': ['a', 'b']}
    """
    query: Dict[str, Any] = {}
    for key, value in parse_qsl(query_string or '', keep_blank_values=True):
        if key.endswith('[]'):
            query.setdefault(key[:-2], []).append(value)
        elif key in query:
            existing = query[key]
            query[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            query[key] = value
    return query


@dataclass
class RequestContext:
    """
    Request data for one routing and dispatching pass

    Attributes:
        path: Requested path relative to base_path, always starting with '/'
        query: Parsed query string params
        host: Host header value, may contain a port
        scheme: 'http' or 'https'
        base_path: Path where the application is mounted, '' for the root
        script_name: Front controller file name used by query string URLs
        method: HTTP method
    """
    path: str = '/'
    query: Dict[str, Any] = field(default_factory=dict)
    host: str = 'localhost'
    scheme: str = 'http'
    base_path: str = ''
    script_name: str = DEFAULT_SCRIPT_NAME
    method: str = 'GET'

    def __post_init__(self):
        if not self.path.startswith('/'):
            self.path = '/' + self.path
        self.base_path = self.base_path.rstrip('/')

    @classmethod
    def from_sanic(cls, request, base_path: str = '', script_name: str = DEFAULT_SCRIPT_NAME) -> 'RequestContext':
        """
        Build a context from a Sanic request

        Args:
            request: Sanic request
            base_path: Mount path stripped from the request path
            script_name: Front controller file name
        """
        base_path = (base_path or '').rstrip('/')
        path = request.path or '/'
        if base_path and (path == base_path or path.startswith(base_path + '/')):
            path = path[len(base_path):] or '/'

        return cls(
            path=path,
            query=parse_query(request.query_string),
            host=request.host or 'localhost',
            scheme=request.scheme or 'http',
            base_path=base_path,
            script_name=script_name,
            method=request.method,
        )

    @classmethod
    def from_url(cls, url: str, **kwargs) -> 'RequestContext':
        """
        Build a context from a path with optional query string

        Example:
            RequestContext.from_url('/products/5?color=red')
        """
        path, _, query_string = url.partition('?')
        return cls(path=path or '/', query=parse_query(query_string), **kwargs)

    @property
    def query_string(self) -> str:
        """Query string without the leading '?'"""
        from mvcsanic.http.url import build_query
        return build_query(self.query)

    @property
    def is_root(self) -> bool:
        """Check if the homepage or the front controller itself was requested"""
        return self.path in ('', '/', f'/{self.script_name}')

    @property
    def hostname(self) -> str:
        """Host without port"""
        return self.host.split(':', 1)[0]

    def _host_parts(self) -> Tuple[List[str], str]:
        hostname = self.hostname
        parts = hostname.split('.')
        return parts, hostname

    @property
    def tld(self) -> str:
        """Top level domain ('com' for 'www.example.com')"""
        parts, _ = self._host_parts()
        return parts[-1] if len(parts) > 1 else ''

    @property
    def sld(self) -> str:
        """Second level domain ('example' for 'www.example.com')"""
        parts, hostname = self._host_parts()
        return parts[-2] if len(parts) > 1 else hostname

    @property
    def domain(self) -> str:
        """Second and top level domain ('example.com' for 'www.example.com')"""
        parts, hostname = self._host_parts()
        return '.'.join(parts[-2:]) if len(parts) > 1 else hostname

    @property
    def root_url(self) -> str:
        """Scheme and host"""
        return f"{self.scheme}://{self.host}"
