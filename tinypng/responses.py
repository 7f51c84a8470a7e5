"""Typed results of TinyPNG API calls."""
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

import httpx

from tinypng.schemas import (
    ApiInput,
    ApiOutput,
    ApiResult,
    ConvertImageFormat,
    PreserveMetadata,
    ResizeOperation,
    ResizeType,
)

if TYPE_CHECKING:
    from tinypng.operations import PendingResult

logger = logging.getLogger(__name__)

COMPRESSION_COUNT_HEADER = "Compression-Count"


def _int_header(response: httpx.Response, name: str) -> Optional[int]:
    value = response.headers.get(name)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.debug(f"Ignoring non-integer {name} header: {value!r}")
        return None


class TinyPngResponse:
    """Base class for every successful API response.

    Attributes:
        response: The underlying ``httpx.Response``.
        compression_count: Compressions made with this API key this month,
            taken from the ``Compression-Count`` header. 0 when absent.
    """

    def __init__(self, response: httpx.Response):
        self.response = response
        self.compression_count = _int_header(response, COMPRESSION_COUNT_HEADER) or 0

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers


class CompressResponse(TinyPngResponse):
    """Result of a compression: metadata about the compressed image.

    The compressed image itself stays on the API server at ``output.url``
    until it expires. Chained operations (resize, convert, preserve,
    download) are sent there with the same ``http_client`` so they reuse
    its credentials.
    """

    def __init__(self, response: httpx.Response, http_client: httpx.AsyncClient, result: ApiResult):
        super().__init__(response)
        self.http_client = http_client
        self.api_result = result
        self.input: ApiInput = result.input
        self.output: ApiOutput = result.output

    @classmethod
    async def from_response(
        cls, response: httpx.Response, http_client: httpx.AsyncClient
    ) -> "CompressResponse":
        """Read and parse a successful compression response.

        Raises:
            pydantic.ValidationError: If the body is not a valid compression result.
        """
        body = await response.aread()
        result = ApiResult.model_validate_json(body)
        return cls(response, http_client, result)

    def resize(
        self,
        operation: Union[ResizeOperation, int],
        height: Optional[int] = None,
        method: ResizeType = ResizeType.FIT,
    ) -> "PendingResult":
        from tinypng.operations import resize
        return resize(self, operation, height, method)

    def convert(
        self,
        image_format: Union[ConvertImageFormat, str],
        background: Optional[str] = None,
    ) -> "PendingResult":
        from tinypng.operations import convert
        return convert(self, image_format, background)

    def preserve_metadata(self, *metadata: Union[PreserveMetadata, str]) -> "PendingResult":
        from tinypng.operations import preserve_metadata
        return preserve_metadata(self, *metadata)

    def download(self) -> "PendingResult":
        from tinypng.operations import download
        return download(self)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(input={self.input!r}, output={self.output!r}, "
            f"compression_count={self.compression_count})"
        )


class ImageResponse(TinyPngResponse):
    """Response whose body is image data."""

    @property
    def content_type(self) -> Optional[str]:
        """Media type of the image, without parameters."""
        value = self.response.headers.get("Content-Type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip()

    @property
    def image_width(self) -> Optional[int]:
        return _int_header(self.response, "Image-Width")

    @property
    def image_height(self) -> Optional[int]:
        return _int_header(self.response, "Image-Height")

    def get_image_bytes(self) -> bytes:
        """Return the image data."""
        return self.response.content

    def get_image_stream(self) -> io.BytesIO:
        """Return the image data as a new binary stream positioned at 0."""
        return io.BytesIO(self.response.content)

    def save_image_to_disk(self, file_path: Union[str, Path]) -> Path:
        """Write the image data to ``file_path``.

        Filesystem errors propagate unchanged.

        Returns:
            Path: The path written to.
        """
        path = Path(file_path)
        path.write_bytes(self.response.content)
        logger.debug(f"Saved {len(self.response.content)} bytes to: {path}")
        return path


class ResizeResponse(ImageResponse):
    """Image returned by a resize operation."""
    pass


class ConvertResponse(ImageResponse):
    """Image returned by a convert operation.

    ``content_type`` reports the format the API chose, which matters when
    converting with ``ConvertImageFormat.WILDCARD``.
    """
    pass
