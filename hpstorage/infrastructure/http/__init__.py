"""
HTTP transport for storage requests.

Built on httpx. `TransportError` is httpx's own base error, re-exported so
callers can catch pass-through failures without importing httpx.
"""

from httpx import HTTPError as TransportError

from .dispatcher import RequestDispatcher

__all__ = ["RequestDispatcher", "TransportError"]
