"""
Framework Default Values
All hardcoded values should be defined here and accessed via Config.get()
This file contains sensible defaults that can be overridden in .env or config/ modules
"""

# ============================================================================
# NETWORK DEFAULTS
# ============================================================================

# Application Server
DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8000

# ============================================================================
# APPLICATION DEFAULTS
# ============================================================================

DEFAULT_APP_NAME = 'mvcsanic'
DEFAULT_APP_ENV = 'production'

# ============================================================================
# ROUTING DEFAULTS
# ============================================================================

# Target of the homepage and of the query string fallback
DEFAULT_CONTROLLER_NAME = 'Index'
DEFAULT_ACTION_NAME = 'Index'

# Actions of the default controller rendering fallback pages
DEFAULT_ERROR_ACTION_NAME = 'Error'
DEFAULT_NOT_FOUND_ACTION_NAME = 'NotFound'

# -1 = remove, 0 = benevolent, 1 = always
DEFAULT_TRAILING_SLASH = -1

# None = auto-detect, True = force, False = disable
DEFAULT_ROUTE_BY_QUERY_STRING = None
DEFAULT_ROUTE_TO_DEFAULT_IF_NOT_MATCH = False
DEFAULT_AUTO_CANONIZE_REQUESTS = True

# Script name used by query string URLs (index.php?controller=...)
DEFAULT_SCRIPT_NAME = 'index.php'
DEFAULT_BASE_PATH = ''

# Status code used for trailing slash canonicalization redirects
DEFAULT_CANONICAL_REDIRECT_STATUS = 301

# ============================================================================
# LOGGING DEFAULTS
# ============================================================================

DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5
DEFAULT_LOG_FORMAT = 'text'
