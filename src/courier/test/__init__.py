"""Helpers for testing code that uses courier against a local HTTP server."""

from .server import Handler, Request, Response, Server

__all__ = ["Handler", "Request", "Response", "Server"]
