"""HTTP(S) transport built on requests."""

import logging
from typing import BinaryIO, Optional

import requests

from ..constants import CHUNK_SIZE, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..errors import TransportError
from .base import TransportResponse

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Streams HTTP responses to a file object.

    Redirects are followed by requests; only the final status is reported.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        chunk_size: int = CHUNK_SIZE,
        verify_tls: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize HTTP transport.

        Args:
            session: Session to reuse (a new one is created if omitted)
            timeout: Connect/read timeout in seconds
            chunk_size: Size of body chunks written to the sink
            verify_tls: Verify server certificates
            user_agent: User-Agent header for sessions created here
        """
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = user_agent
        self.session = session
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.verify_tls = verify_tls

    def get(self, url: str, sink: BinaryIO) -> TransportResponse:
        """
        Fetch ``url`` and stream a successful body into ``sink``.

        Args:
            url: http:// or https:// URL
            sink: Binary file object opened for writing

        Returns:
            TransportResponse with the final status code
        """
        logger.debug("GET %s", url)
        try:
            with self.session.get(
                url, stream=True, timeout=self.timeout, verify=self.verify_tls
            ) as resp:
                result = TransportResponse(url=url, status=resp.status_code, reason=resp.reason or "")
                if result.ok:
                    for chunk in resp.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            sink.write(chunk)
                return result
        except requests.exceptions.RequestException as e:
            raise TransportError(url, message=f"Download {url} failed: {e}") from e
