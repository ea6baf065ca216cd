"""
Response Helpers
Sanic responses for controller actions and the dispatcher
"""
from sanic.response import (
    HTTPResponse,
    empty as sanic_empty,
    html as sanic_html,
    json as sanic_json,
    redirect as sanic_redirect,
    text as sanic_text,
)
from typing import Any, Dict, Optional


class ResponseHelper:
    """
    Response helper for the values controller actions return

    Example:
        return ResponseHelper.html('<h1>Hello</h1>')
        return ResponseHelper.redirect(self.url('Products:List'))
        return ResponseHelper.json({'id': 5}, status=201)
    """

    @staticmethod
    def json(data: Any, status: int = 200, headers: Optional[Dict[str, str]] = None) -> HTTPResponse:
        """Return JSON response"""
        return sanic_json(data, status=status, headers=headers)

    @staticmethod
    def redirect(url: str, status: int = 302) -> HTTPResponse:
        """Return redirect response"""
        return sanic_redirect(url, status=status)

    @staticmethod
    def html(
        body: str,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None
    ) -> HTTPResponse:
        """
        Return HTML response

        Example:
            return ResponseHelper.html('<h1>Hello World</h1>', headers={'X-Custom': 'value'})
        """
        return sanic_html(body, status=status, headers=headers)

    @staticmethod
    def text(
        body: str,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None
    ) -> HTTPResponse:
        """Return plain text response"""
        return sanic_text(body, status=status, headers=headers)

    @staticmethod
    def empty(status: int = 204, headers: Optional[Dict[str, str]] = None) -> HTTPResponse:
        """Return empty response (no content)"""
        return sanic_empty(status=status, headers=headers)

    @staticmethod
    def to_response(value: Any, status: int = 200) -> HTTPResponse:
        """
        Convert an action return value to a response

        Responses pass through, strings become HTML, dicts and lists
        JSON and None an empty response.
        """
        if isinstance(value, HTTPResponse):
            return value
        if value is None:
            return ResponseHelper.empty()
        if isinstance(value, (dict, list)):
            return ResponseHelper.json(value, status=status)
        return ResponseHelper.html(str(value), status=status)
