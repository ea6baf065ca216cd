"""
Framework Support Classes
"""

from mvcsanic.support.env_helper import EnvHelper
from mvcsanic.support.config import Config
from mvcsanic.support.str import Str

__all__ = [
    'EnvHelper',
    'Config',
    'Str',
]
