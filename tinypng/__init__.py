"""Asynchronous client for the TinyPNG image compression API."""

from .client import API_ENDPOINT, TinyPngClient, create_client
from .exceptions import InvalidOperationError, TinyPngApiError, TinyPngError
from .operations import (
    PendingResult,
    convert,
    download,
    get_image_bytes,
    get_image_stream,
    preserve_metadata,
    resize,
    save_image_to_disk,
)
from .responses import (
    CompressResponse,
    ConvertResponse,
    ImageResponse,
    ResizeResponse,
    TinyPngResponse,
)
from .schemas import (
    AmazonS3Configuration,
    ConvertImageFormat,
    CoverResizeOperation,
    FitResizeOperation,
    PreserveMetadata,
    ResizeOperation,
    ResizeType,
    ScaleHeightResizeOperation,
    ScaleWidthResizeOperation,
)

__version__ = "0.1.0"

__all__ = [
    "API_ENDPOINT",
    "TinyPngClient",
    "create_client",
    "TinyPngError",
    "TinyPngApiError",
    "InvalidOperationError",
    "PendingResult",
    "resize",
    "convert",
    "preserve_metadata",
    "download",
    "get_image_bytes",
    "get_image_stream",
    "save_image_to_disk",
    "TinyPngResponse",
    "CompressResponse",
    "ImageResponse",
    "ResizeResponse",
    "ConvertResponse",
    "AmazonS3Configuration",
    "ConvertImageFormat",
    "PreserveMetadata",
    "ResizeOperation",
    "ResizeType",
    "ScaleWidthResizeOperation",
    "ScaleHeightResizeOperation",
    "FitResizeOperation",
    "CoverResizeOperation",
]
