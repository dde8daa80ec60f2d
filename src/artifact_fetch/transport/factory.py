"""Factory for creating transports."""

import urllib.parse
from typing import BinaryIO, Dict, Optional

from ..config import FetchConfig, load_config
from ..errors import TransportError
from .base import Transport, TransportResponse
from .fs import FileTransport
from .http import HttpTransport


class SchemeTransport:
    """Dispatches each request to the transport registered for its URL scheme."""

    def __init__(self, transports: Dict[str, Transport]):
        self.transports = {scheme.lower(): t for scheme, t in transports.items()}

    def get(self, url: str, sink: BinaryIO) -> TransportResponse:
        scheme = urllib.parse.urlparse(url).scheme.lower()
        transport = self.transports.get(scheme)
        if transport is None:
            raise TransportError(url, message=f"Unsupported URL scheme {scheme!r}: {url}")
        return transport.get(url, sink)


def make_transport(config: Optional[FetchConfig] = None) -> SchemeTransport:
    """
    Create the default transport (http, https and file).

    Args:
        config: Fetch configuration; loaded from file/environment if omitted

    Returns:
        SchemeTransport routing by URL scheme
    """
    if config is None:
        config = load_config()

    http = HttpTransport(
        timeout=config.timeout,
        chunk_size=config.chunk_size,
        verify_tls=config.verify_tls,
        user_agent=config.user_agent,
    )
    return SchemeTransport({
        "http": http,
        "https": http,
        "file": FileTransport(chunk_size=config.chunk_size),
    })
