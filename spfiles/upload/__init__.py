from .chunk_reader import Chunk, ChunkReader
from .chunked_uploader import (
    ChunkedUploader,
    ChunkedUploadOptions,
    UploadPhase,
    upload_chunked,
)
from .progress import (
    AlwaysContinueGate,
    CallbackProgressGate,
    LoggingProgressGate,
    ProgressGate,
    TqdmProgressGate,
    UploadProgress,
)

__all__ = [
    "AlwaysContinueGate",
    "CallbackProgressGate",
    "Chunk",
    "ChunkReader",
    "ChunkedUploadOptions",
    "ChunkedUploader",
    "LoggingProgressGate",
    "ProgressGate",
    "TqdmProgressGate",
    "UploadPhase",
    "UploadProgress",
    "upload_chunked",
]
