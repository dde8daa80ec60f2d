"""Base protocol for download transports."""

from typing import BinaryIO, Protocol

from pydantic import BaseModel


class TransportResponse(BaseModel):
    """Outcome of a single request, as far as the fetcher cares."""
    url: str
    status: int
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 200


class Transport(Protocol):
    """
    Protocol for transport implementations.

    A transport performs exactly one request per call and streams the
    response body into ``sink`` when the request succeeds. Status handling,
    cleanup and digest verification are the caller's responsibility.
    """

    def get(self, url: str, sink: BinaryIO) -> TransportResponse:
        """
        Fetch ``url`` and write the body to ``sink``.

        Args:
            url: Resource to fetch
            sink: Binary file object opened for writing

        Returns:
            TransportResponse with the final status

        Raises:
            TransportError: On transport-level failure (connection, protocol)
            OSError: If writing to ``sink`` fails
        """
        ...
