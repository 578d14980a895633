"""
WebSocket server and event handling for Safe As Houses.
"""

from .events import *
from .server import app, create_app

__all__ = ["app", "create_app"]
