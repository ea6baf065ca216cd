"""
Routing Constants
Reserved route names, URL param names and trailing slash behaviours
"""
from enum import Enum, IntEnum


class TrailingSlash(IntEnum):
    """What to do with a trailing slash in requested paths (homepage excluded)"""

    # Always keep it, redirect to add it when missing
    ALWAYS = 1

    # Accept paths with and without it
    BENEVOLENT = 0

    # Always remove it, redirect when present
    REMOVE = -1


class RoutingStatus(Enum):
    """Outcome of Router.route()"""

    MATCHED = 'matched'
    REDIRECT = 'redirect'
    NOT_FOUND = 'not_found'


# Reserved system route names
DEFAULT_ROUTE_NAME = 'default'
DEFAULT_ROUTE_NAME_ERROR = 'error'
DEFAULT_ROUTE_NAME_NOT_FOUND = 'not_found'

# Name resolving to the current route in Router.url()
SELF_ROUTE_NAME = 'self'

# Separator between controller and action in route names and url() keys
CONTROLLER_ACTION_SEPARATOR = ':'

# Query string params targeting controller and action
URL_PARAM_CONTROLLER = 'controller'
URL_PARAM_ACTION = 'action'

# Pseudo params understood by the URL builder, never sent in query strings
URL_PARAM_ABSOLUTE = 'absolute'
URL_PARAM_HOST = 'host'
URL_PARAM_DOMAIN = 'domain'
URL_PARAM_TLD = 'tld'
URL_PARAM_SLD = 'sld'
URL_PARAM_BASEPATH = 'basePath'

URL_PSEUDO_PARAMS = (
    URL_PARAM_ABSOLUTE,
    URL_PARAM_HOST,
    URL_PARAM_DOMAIN,
    URL_PARAM_TLD,
    URL_PARAM_SLD,
    URL_PARAM_BASEPATH,
)

# Param captured by synthetic catch-all routes
URL_PARAM_PATH = 'path'

# Capture used for placeholders without a constraint
DEFAULT_PARAM_PATTERN = r'[^/]+'
