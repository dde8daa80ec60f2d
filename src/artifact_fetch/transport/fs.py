"""file:// transport for local mirrors and tests."""

import shutil
import urllib.parse
import urllib.request
from pathlib import Path
from typing import BinaryIO

from ..constants import CHUNK_SIZE
from ..errors import TransportError
from .base import TransportResponse


class FileTransport:
    """
    Serves ``file://`` URLs from the local filesystem.

    Missing files answer 404 so that they take the same error path as a
    missing remote resource.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size

    def get(self, url: str, sink: BinaryIO) -> TransportResponse:
        """
        Copy the file named by ``url`` into ``sink``.

        Args:
            url: file:// URL
            sink: Binary file object opened for writing

        Returns:
            TransportResponse with status 200, or 404 if the file is missing
        """
        src = self._parse_uri(url)
        if not src.is_file():
            return TransportResponse(url=url, status=404, reason="Not Found")

        try:
            f = src.open("rb")
        except PermissionError:
            return TransportResponse(url=url, status=403, reason="Forbidden")
        except OSError as e:
            raise TransportError(url, message=f"Download {url} failed: {e}") from e

        with f:
            shutil.copyfileobj(f, sink, self.chunk_size)
        return TransportResponse(url=url, status=200, reason="OK")

    def _parse_uri(self, url: str) -> Path:
        """
        Parse file:// URL to get file path.

        Raises:
            TransportError: If not a file:// URL
        """
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme != "file":
            raise TransportError(url, message=f"Expected file:// URL, got {url}")
        return Path(urllib.request.url2pathname(parsed.path))
