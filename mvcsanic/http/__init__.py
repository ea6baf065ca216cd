"""
HTTP Module
Request context, URL generation and response helpers
"""
from mvcsanic.http.request import RequestContext, parse_query
from mvcsanic.http.url import UrlGenerator, build_query
from mvcsanic.http.response_helper import ResponseHelper

__all__ = [
    'RequestContext',
    'ResponseHelper',
    'UrlGenerator',
    'build_query',
    'parse_query',
]
