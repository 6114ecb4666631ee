from .base import Transport
from .httpx_async import HttpxAsyncTransport
from .response import ErrorBody, Response

__all__ = ["Transport", "HttpxAsyncTransport", "Response", "ErrorBody"]
