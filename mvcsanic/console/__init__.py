"""
Console Package
"""
from mvcsanic.console.command import Command
from mvcsanic.console.cli import Console, main

__all__ = [
    'Command',
    'Console',
    'main',
]
