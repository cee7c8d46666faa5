"""Tic-tac-toe browser client exposing the session client and sync controller.

The web app is built on demand by :func:`tictac_frontend.ui.create_app`.
"""

from .client import SessionClient
from .controller import SyncController

__all__ = ["SessionClient", "SyncController"]
