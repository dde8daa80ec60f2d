"""Shared test fixtures and utilities."""

import io
import tarfile
from pathlib import Path
from typing import Dict, List, Tuple, Union
import pytest

from artifact_fetch.config import FetchConfig
from artifact_fetch.fetcher import Fetcher
from artifact_fetch.transport import TransportResponse


class FakeTransport:
    """In-memory transport: serves registered URLs, 404 for everything else."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, bytes]] = {}
        self.calls: List[str] = []

    def serve(self, url: str, body: bytes = b"", status: int = 200) -> str:
        self.routes[url] = (status, body)
        return url

    def get(self, url, sink):
        self.calls.append(url)
        status, body = self.routes.get(url, (404, b""))
        if status == 200:
            sink.write(body)
        return TransportResponse(url=url, status=status)


class SequentialAllocator:
    """Deterministic path allocator: <root>/tmp-1, <root>/tmp-2, ..."""

    def __init__(self, root: Path):
        self.root = root
        self.count = 0

    def allocate(self) -> Path:
        self.count += 1
        return self.root / f"tmp-{self.count}"


def make_tarball(members: Dict[str, Union[bytes, Tuple[bytes, int]]]) -> bytes:
    """Return raw bytes of a tar.gz archive.

    Values are either file content or a (content, mode) pair.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, value in members.items():
            data, mode = value if isinstance(value, tuple) else (value, 0o644)
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = mode
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def write_tree(root: Path, members: Dict[str, Union[bytes, Tuple[bytes, int]]]) -> Path:
    """Create files under root the same way make_tarball lays them out."""
    for name, value in members.items():
        data, mode = value if isinstance(value, tuple) else (value, 0o644)
        file_path = root / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
        file_path.chmod(mode)
    return root


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def allocator(tmp_path):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return SequentialAllocator(scratch)


@pytest.fixture
def fetcher(transport, allocator):
    return Fetcher(transport=transport, allocator=allocator, config=FetchConfig())


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config and environment out of every test."""
    monkeypatch.setenv("ARTIFACT_FETCH_CONFIG", str(tmp_path / "no-config.yaml"))
    for var in ("ARTIFACT_FETCH_TIMEOUT", "ARTIFACT_FETCH_INSECURE", "ARTIFACT_FETCH_TEMP_DIR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def tarball():
    """Factory fixture building tar.gz bytes from {name: content} members."""
    return make_tarball


@pytest.fixture
def tree():
    """Factory fixture writing {name: content} members under a directory."""
    return write_tree
