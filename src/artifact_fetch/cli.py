"""CLI for artifact-fetch."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .api import FetchResult, fetch_archive, fetch_file
from .config import load_config
from .errors import ErrorKind
from .fetcher import Fetcher
from .hashing import hash_file, hash_tree
from .locking import path_lock


app = typer.Typer(help="""\
Download artifacts and verify them against SHA2-256 file digests or git
tree hashes. Targets that already match the expected digest are reused
without touching the network.""")

console = Console()


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _make_fetcher() -> Fetcher:
    return Fetcher(config=load_config())


def _report(result: FetchResult) -> None:
    """Print the outcome of a fetch and exit non-zero on failure."""
    if result.ok:
        if result.cache_hit:
            console.print(f"[green]✓[/green] Already up to date: {result.path}")
        else:
            console.print(f"[green]✓[/green] {result.path}")
        return

    label = {
        ErrorKind.VALIDATION: "invalid hash",
        ErrorKind.TRANSPORT: "download failed",
        ErrorKind.INTEGRITY: "verification failed",
        ErrorKind.IO: "I/O error",
    }[result.kind]
    console.print(f"[red]✗[/red] {label}:")
    console.print(result.message, markup=False)
    raise typer.Exit(1)


@app.command()
def download(
    url: str = typer.Argument(..., help="URL to download (http, https or file)"),
    path: Optional[Path] = typer.Argument(None, help="Target file (temporary path if omitted)"),
    sha256: Optional[str] = typer.Option(None, "--sha256", help="Expected SHA2-256 of the file"),
    no_lock: bool = typer.Option(False, "--no-lock", help="Do not lock the target path"),
):
    """Download a single file.

    Examples:
        artifact-fetch download https://example.org/data.csv data.csv --sha256 <hex>
    """
    fetcher = _make_fetcher()
    if path is None or no_lock:
        result = fetch_file(url, path, file_hash=sha256, fetcher=fetcher)
    else:
        with path_lock(path):
            result = fetch_file(url, path, file_hash=sha256, fetcher=fetcher)
    _report(result)


@app.command()
def unpack(
    url: str = typer.Argument(..., help="URL of a .tar.gz archive"),
    path: Optional[Path] = typer.Argument(None, help="Target directory (temporary path if omitted)"),
    sha256: Optional[str] = typer.Option(None, "--sha256", help="Expected SHA2-256 of the tarball"),
    tree_sha1: Optional[str] = typer.Option(None, "--tree-sha1", help="Expected git tree SHA1 of the unpacked directory"),
    no_lock: bool = typer.Option(False, "--no-lock", help="Do not lock the target path"),
):
    """Download a gzip tarball and unpack it into a directory.

    Examples:
        artifact-fetch unpack https://example.org/model.tar.gz ./model --tree-sha1 <hex>
    """
    fetcher = _make_fetcher()
    if path is None or no_lock:
        result = fetch_archive(url, path, file_hash=sha256, tree_hash=tree_sha1, fetcher=fetcher)
    else:
        with path_lock(path):
            result = fetch_archive(url, path, file_hash=sha256, tree_hash=tree_sha1, fetcher=fetcher)
    _report(result)


@app.command("hash-file")
def hash_file_cmd(
    path: Path = typer.Argument(..., help="File to hash"),
):
    """Print the SHA2-256 of a file."""
    try:
        console.print(hash_file(path))
    except OSError as e:
        console.print(f"[red]✗[/red] Cannot read {path}: {e}")
        raise typer.Exit(1)


@app.command("hash-tree")
def hash_tree_cmd(
    path: Path = typer.Argument(..., help="Directory to hash"),
):
    """Print the git tree SHA1 of a directory."""
    try:
        console.print(hash_tree(path))
    except OSError as e:
        console.print(f"[red]✗[/red] Cannot hash {path}: {e}")
        raise typer.Exit(1)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
