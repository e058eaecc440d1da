"""``spfiles upload``: upload a local file or stdin to a document library."""

from __future__ import annotations

import contextlib
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

import typer

from spfiles.api.files import Web
from spfiles.core.config import load_site_config, parse_bytes
from spfiles.core.exceptions import (
    ConfigError,
    SharePointError,
    UploadCancelledError,
    UploadError,
)
from spfiles.core.http_client import SharePointClient
from spfiles.core.utils.log_config import configure_logging
from spfiles.upload.chunked_uploader import ChunkedUploadOptions, upload_chunked
from spfiles.upload.progress import TqdmProgressGate

logger = logging.getLogger(__name__)

EXIT_CANCELLED = 130


def _fail(message: str, code: int = 1) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code)


@contextlib.contextmanager
def _open_source(path: str) -> Iterator[BinaryIO]:
    if path == "-":
        yield sys.stdin.buffer
        return
    with open(path, "rb") as stream:
        yield stream


@contextlib.contextmanager
def _cancel_on_interrupt(stop_event: threading.Event) -> Iterator[None]:
    """Turn Ctrl-C into a cancellation request for the next checkpoint."""

    def _handler(signum: int, frame: object) -> None:
        typer.secho(
            "\nCancelling upload after the current chunk...",
            fg=typer.colors.YELLOW,
            err=True,
        )
        stop_event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def run(
    path: str = typer.Argument(..., help="File to upload, or '-' to read stdin."),
    folder: str = typer.Option(
        ...,
        "--folder",
        "-f",
        help="Server-relative URL of the destination folder.",
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="File name on the server (required for stdin)."
    ),
    chunk_size: Optional[str] = typer.Option(
        None, "--chunk-size", help="Chunk size, e.g. 10mb. Defaults to the profile."
    ),
    overwrite: bool = typer.Option(
        True, "--overwrite/--no-overwrite", help="Replace an existing file."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Site profile to use."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the progress bar."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Upload a file, in chunks when it is larger than one chunk."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = load_site_config(profile)
        size = parse_bytes(chunk_size) if chunk_size else config.chunk_size
    except (ConfigError, ValueError) as exc:
        raise _fail(str(exc))

    total: Optional[int] = None
    if path == "-":
        if not name:
            raise _fail("--name is required when reading from stdin.")
    else:
        source = Path(path)
        if not source.is_file():
            raise _fail(f"File not found: {path}")
        total = source.stat().st_size
        name = name or source.name

    stop_event = threading.Event()
    gate = TqdmProgressGate(total, desc=name, stop_event=stop_event, disable=quiet)
    options = ChunkedUploadOptions(overwrite=overwrite, chunk_size=size, progress=gate)

    try:
        with (
            _cancel_on_interrupt(stop_event),
            SharePointClient(config) as client,
            _open_source(path) as stream,
        ):
            target = Web(client).get_folder(folder)
            info = upload_chunked(target, name, stream, options)
        gate.complete(info.length)
    except UploadCancelledError as exc:
        raise _fail(str(exc), EXIT_CANCELLED)
    except (UploadError, SharePointError, OSError) as exc:
        logger.debug("Upload failed", exc_info=True)
        raise _fail(f"Upload failed: {exc}")
    finally:
        gate.close()

    typer.echo(info.server_relative_url)
