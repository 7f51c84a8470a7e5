"""Operations chained on a compressed image.

Each operation takes the result of a previous call, either already awaited
or still pending, and returns a ``PendingResult``. Arguments are checked
when the operation is called, before anything is awaited or sent, so a
pipeline such as::

    data = await client.compress("cat.jpg").resize(150, 150).get_image_bytes()

fails fast on bad input and otherwise makes one request per step.
"""
import asyncio
import inspect
import logging
import re
import time
from pathlib import Path
from typing import Any, Awaitable, Dict, Generator, Generic, Optional, Type, TypeVar, Union

import httpx

from tinypng.exceptions import raise_for_api_error
from tinypng.responses import (
    CompressResponse,
    ConvertResponse,
    ImageResponse,
    ResizeResponse,
    TinyPngResponse,
)
from tinypng.schemas import (
    ConvertImageFormat,
    ConvertRequest,
    ConvertType,
    PreserveMetadata,
    PreserveRequest,
    ResizeOperation,
    ResizeRequest,
    ResizeType,
    Transform,
    dump_body,
)
from tinypng.schemas.convert import BACKGROUND_PATTERN

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=TinyPngResponse)

CompressInput = Union[CompressResponse, Awaitable[CompressResponse]]
ImageInput = Union[ImageResponse, Awaitable[ImageResponse]]


class PendingResult(Generic[T]):
    """An awaitable API result that further operations can be chained on.

    The wrapped operation starts on the first await and runs once. Later
    awaits, and every chain started from this result, share its outcome.
    """

    def __init__(self, awaitable: Awaitable[T]):
        self._awaitable = awaitable
        self._future: Optional["asyncio.Future[T]"] = None

    def __await__(self) -> Generator[Any, None, T]:
        if self._future is None:
            self._future = asyncio.ensure_future(self._awaitable)
        return self._future.__await__()

    def close(self) -> None:
        """Discard the operation, cancelling it if it is still running.

        Results this one was chained from are left alone.
        """
        if self._future is None:
            if inspect.iscoroutine(self._awaitable):
                self._awaitable.close()
        elif not self._future.done():
            self._future.cancel()

    def resize(
        self,
        operation: Union[ResizeOperation, int],
        height: Optional[int] = None,
        method: ResizeType = ResizeType.FIT,
    ) -> "PendingResult[ResizeResponse]":
        return resize(self, operation, height, method)

    def convert(
        self,
        image_format: Union[ConvertImageFormat, str],
        background: Optional[str] = None,
    ) -> "PendingResult[ConvertResponse]":
        return convert(self, image_format, background)

    def preserve_metadata(
        self, *metadata: Union[PreserveMetadata, str]
    ) -> "PendingResult[ImageResponse]":
        return preserve_metadata(self, *metadata)

    def download(self) -> "PendingResult[ImageResponse]":
        return download(self)

    async def get_image_bytes(self) -> bytes:
        return await get_image_bytes(self)

    async def get_image_stream(self):
        return await get_image_stream(self)

    async def save_image_to_disk(self, file_path: Union[str, Path]) -> Path:
        return await save_image_to_disk(self, file_path)


async def _resolve(result: Any, expected: Type[R]) -> R:
    """Await ``result`` if it is pending and check what it produced."""
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        raise ValueError("The previous operation did not produce a result")
    if not isinstance(result, expected):
        raise TypeError(
            f"Expected {expected.__name__}, got {type(result).__name__}"
        )
    return result


async def send_to_output(
    compressed: CompressResponse,
    method: str,
    operation: str,
    body: Optional[Dict[str, Any]] = None,
) -> httpx.Response:
    """Send a request to the hosted compressed image.

    Uses the transport that produced ``compressed`` so its credentials are
    reused.

    Args:
        compressed: Result of a compression.
        method: HTTP method, GET or POST.
        operation: Name of the operation, for logging.
        body: JSON body, if any.

    Returns:
        httpx.Response: A successful response.

    Raises:
        TinyPngApiError: If the API answers with a non-success status.
        httpx.HTTPError: If the request fails at the transport level.
    """
    url = compressed.output.url
    logger.debug(f"Starting {operation} for: {url}")
    start_time = time.time()

    try:
        response = await compressed.http_client.request(method, url, json=body)
    except httpx.HTTPError as e:
        logger.error(f"HTTP error during {operation}: {e}")
        raise

    await raise_for_api_error(response)

    elapsed_time = time.time() - start_time
    logger.info(f"{operation.capitalize()} completed in {elapsed_time:.2f}s")
    return response


def _build_resize_operation(
    operation: Union[ResizeOperation, int, None],
    height: Optional[int],
    method: ResizeType,
) -> ResizeOperation:
    if operation is None:
        raise ValueError("Resize operation cannot be None")
    if isinstance(operation, ResizeOperation):
        return operation

    width = operation
    if width == 0:
        raise ValueError("Width cannot be 0")
    if not height:
        raise ValueError("Height is required and cannot be 0")
    return ResizeOperation(method=method, width=width, height=height)


async def _resize(result: CompressInput, operation: ResizeOperation) -> ResizeResponse:
    compressed = await _resolve(result, CompressResponse)
    body = dump_body(ResizeRequest(resize=operation))
    response = await send_to_output(compressed, "POST", "resize", body)
    return ResizeResponse(response)


def resize(
    result: CompressInput,
    operation: Union[ResizeOperation, int],
    height: Optional[int] = None,
    method: ResizeType = ResizeType.FIT,
) -> PendingResult[ResizeResponse]:
    """Create a resized version of a compressed image.

    Pass either a ``ResizeOperation`` or a width, a height and optionally a
    ``ResizeType`` (fit by default).

    Args:
        result: A compression result, or a pending one.
        operation: Resize operation, or the target width.
        height: Target height when ``operation`` is a width.
        method: Resize method when ``operation`` is a width.

    Raises:
        ValueError: If ``result`` or ``operation`` is None, or a dimension is 0.
    """
    if result is None:
        raise ValueError("Compress result cannot be None")
    resize_operation = _build_resize_operation(operation, height, method)
    return PendingResult(_resize(result, resize_operation))


async def _convert(result: CompressInput, request: ConvertRequest) -> ConvertResponse:
    compressed = await _resolve(result, CompressResponse)
    response = await send_to_output(compressed, "POST", "convert", dump_body(request))
    return ConvertResponse(response)


def convert(
    result: CompressInput,
    image_format: Union[ConvertImageFormat, str],
    background: Optional[str] = None,
) -> PendingResult[ConvertResponse]:
    """Convert a compressed image to another format.

    Args:
        result: A compression result, or a pending one.
        image_format: Target format. ``ConvertImageFormat.WILDCARD`` lets the
            API choose the smallest one.
        background: Optional ``#RRGGBB`` colour used when converting a
            transparent image to a format without transparency.

    Raises:
        ValueError: If ``result`` is None, the format is unknown or the
            background is not a ``#RRGGBB`` value.
    """
    if result is None:
        raise ValueError("Compress result cannot be None")
    if image_format is None:
        raise ValueError("Image format cannot be None")
    try:
        target = ConvertImageFormat(image_format)
    except ValueError:
        raise ValueError(f"Unsupported image format: {image_format!r}") from None
    if background and not re.fullmatch(BACKGROUND_PATTERN, background):
        raise ValueError(
            "If background is supplied, it should be a 6 character hex value, "
            "and include the hash"
        )

    request = ConvertRequest(
        convert=ConvertType(type=target),
        transform=Transform(background=background) if background else None,
    )
    return PendingResult(_convert(result, request))


async def _preserve(result: CompressInput, request: PreserveRequest) -> ImageResponse:
    compressed = await _resolve(result, CompressResponse)
    response = await send_to_output(compressed, "POST", "preserve", dump_body(request))
    return ImageResponse(response)


def preserve_metadata(
    result: CompressInput, *metadata: Union[PreserveMetadata, str]
) -> PendingResult[ImageResponse]:
    """Download the compressed image with some of the original metadata kept.

    Raises:
        ValueError: If ``result`` is None, no metadata is given or a value
            is not a ``PreserveMetadata`` member.
    """
    if result is None:
        raise ValueError("Compress result cannot be None")
    if not metadata:
        raise ValueError("At least one metadata field must be preserved")
    fields = [PreserveMetadata(item) for item in metadata]
    return PendingResult(_preserve(result, PreserveRequest(preserve=fields)))


async def _download(result: CompressInput) -> ImageResponse:
    compressed = await _resolve(result, CompressResponse)
    response = await send_to_output(compressed, "GET", "download")
    return ImageResponse(response)


def download(result: CompressInput) -> PendingResult[ImageResponse]:
    """Download the compressed image.

    Raises:
        ValueError: If ``result`` is None.
    """
    if result is None:
        raise ValueError("Compress result cannot be None")
    return PendingResult(_download(result))


async def get_image_bytes(result: ImageInput) -> bytes:
    """Return the image data of an image response."""
    if result is None:
        raise ValueError("Image result cannot be None")
    image = await _resolve(result, ImageResponse)
    return image.get_image_bytes()


async def get_image_stream(result: ImageInput):
    """Return the image data of an image response as a binary stream."""
    if result is None:
        raise ValueError("Image result cannot be None")
    image = await _resolve(result, ImageResponse)
    return image.get_image_stream()


async def save_image_to_disk(result: ImageInput, file_path: Union[str, Path]) -> Path:
    """Write the image data of an image response to ``file_path``."""
    if result is None:
        raise ValueError("Image result cannot be None")
    if not file_path:
        raise ValueError("File path cannot be empty")
    image = await _resolve(result, ImageResponse)
    return image.save_image_to_disk(file_path)
