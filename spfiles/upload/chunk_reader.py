"""Fixed-size chunk reads from arbitrary byte streams.

Pipes, sockets and HTTP response bodies may return fewer bytes than asked
for long before they are exhausted. ``ChunkReader`` keeps reading until a
chunk is full or the stream reports end of data, so a short chunk always
means the stream has ended.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Chunk:
    """A slice of the source stream.

    Attributes:
        data: Chunk bytes; at most the reader's chunk size.
        is_last: True when the stream ended while filling this chunk. The
            last chunk may be empty when the stream length is an exact
            multiple of the chunk size.
    """

    data: bytes
    is_last: bool

    def __len__(self) -> int:
        return len(self.data)


class ChunkReader:
    """Read a stream as a sequence of ``chunk_size`` chunks."""

    def __init__(self, stream: BinaryIO, chunk_size: int):
        """Initialize the reader.

        Args:
            stream: Blocking binary stream with a ``read(n)`` method. An empty
                result marks the end of the stream. Non-blocking streams are
                not supported.
            chunk_size: Size of every chunk except the last, in bytes.

        Raises:
            ValueError: If ``chunk_size`` is not positive.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self.chunk_size = chunk_size
        self._exhausted = False

    def read_chunk(self) -> Chunk:
        """Read the next chunk, looping over short reads until it is full.

        Raises:
            BlockingIOError: If the stream returns None (no data available).
        """
        if self._exhausted:
            return Chunk(b"", is_last=True)

        buffer = bytearray()
        while len(buffer) < self.chunk_size:
            data = self._stream.read(self.chunk_size - len(buffer))
            if data is None:
                raise BlockingIOError(
                    "stream has no data available; non-blocking streams are "
                    "not supported"
                )
            if not data:
                self._exhausted = True
                break
            buffer += data

        logger.debug(f"Read chunk of {len(buffer)} bytes (last={self._exhausted})")
        return Chunk(bytes(buffer), is_last=self._exhausted)

    def __iter__(self) -> Iterator[Chunk]:
        """Yield chunks up to and including the last one."""
        while True:
            chunk = self.read_chunk()
            yield chunk
            if chunk.is_last:
                return
