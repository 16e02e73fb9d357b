"""Notation host package: serves a hand-notation session over WebSockets."""

from .server import NotationServer

__all__ = ["NotationServer"]
