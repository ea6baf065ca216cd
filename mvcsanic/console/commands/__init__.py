"""
Built-in Console Commands
"""
from mvcsanic.console.commands.route_list_command import RouteListCommand
from mvcsanic.console.commands.route_match_command import RouteMatchCommand
from mvcsanic.console.commands.route_url_command import RouteUrlCommand

__all__ = [
    'RouteListCommand',
    'RouteMatchCommand',
    'RouteUrlCommand',
]
