"""Network transports for artifact downloads."""

from .base import Transport, TransportResponse
from .factory import SchemeTransport, make_transport
from .fs import FileTransport
from .http import HttpTransport

__all__ = [
    "FileTransport",
    "HttpTransport",
    "SchemeTransport",
    "Transport",
    "TransportResponse",
    "make_transport",
]
