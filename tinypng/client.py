"""Client for the TinyPNG image compression API."""
import io
import logging
import os
import time
from pathlib import Path
from typing import BinaryIO, Optional, Union
from urllib.parse import urlparse

import httpx

from tinypng.config import Settings, get_settings
from tinypng.exceptions import InvalidOperationError, raise_for_api_error
from tinypng.operations import CompressInput, PendingResult, _resolve, send_to_output
from tinypng.responses import CompressResponse
from tinypng.schemas import AmazonS3Configuration, CompressFromUrlRequest, UrlSource, dump_body

logger = logging.getLogger(__name__)

API_ENDPOINT = "https://api.tinify.com/shrink"

ImageSource = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO, httpx.URL]


def _is_remote_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


class TinyPngClient:
    """Asynchronous client for the tinypng.com API.

    The API key is installed as basic auth on the transport once, at
    construction, and every request made through this client or through
    results it returns reuses that transport.

    Usage::

        async with TinyPngClient(api_key) as client:
            compressed = await client.compress("cat.jpg")
            await compressed.resize(150, 150).save_image_to_disk("small.jpg")
    """

    def __init__(
        self,
        api_key: str,
        amazon_s3_configuration: Optional[AmazonS3Configuration] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        api_endpoint: str = API_ENDPOINT,
        timeout: Optional[float] = 30.0,
    ):
        """Initialize the client.

        Args:
            api_key: Your tinypng.com API key, sign up at
                https://tinypng.com/developers
            amazon_s3_configuration: Default settings for storing images in S3.
            http_client: Transport to use. The caller keeps ownership of it
                and must close it. When omitted the client creates and owns one.
            api_endpoint: Compression endpoint.
            timeout: Request timeout for a transport created by the client.

        Raises:
            ValueError: If ``api_key`` is empty.
        """
        if not api_key:
            raise ValueError("api_key cannot be empty")

        self.amazon_s3_configuration = amazon_s3_configuration
        self.api_endpoint = api_endpoint

        self._owns_http_client = http_client is None
        self._http_client = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._http_client.auth = httpx.BasicAuth("api", api_key)

        logger.debug(
            f"Initialized TinyPngClient for {self.api_endpoint} "
            f"(owns transport: {self._owns_http_client})"
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()
            logger.debug("Closed owned HTTP transport")

    async def __aenter__(self) -> "TinyPngClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    def compress(self, source: ImageSource) -> PendingResult[CompressResponse]:
        """Compress an image.

        Args:
            source: A file path, the image bytes, a binary stream, or the URL
                of an image the API should fetch (``httpx.URL`` or an
                http/https string).

        Returns:
            PendingResult[CompressResponse]: Await it for the compression
            result, or chain further operations on it.

        Raises:
            ValueError: If ``source`` is None or empty.
            TypeError: If ``source`` is of an unsupported type.
            TinyPngApiError: When awaited, if the API rejects the request.
        """
        if source is None:
            raise ValueError("Image source cannot be None")

        if isinstance(source, httpx.URL):
            return PendingResult(self._compress_url(str(source)))
        if isinstance(source, str):
            if not source:
                raise ValueError("Image source cannot be empty")
            if _is_remote_url(source):
                return PendingResult(self._compress_url(source))
            return PendingResult(self._compress_file(Path(source)))
        if isinstance(source, os.PathLike):
            return PendingResult(self._compress_file(Path(source)))
        if isinstance(source, (bytes, bytearray, memoryview)):
            if len(source) == 0:
                raise ValueError("Image data cannot be empty")
            return PendingResult(self._send_compress(content=bytes(source)))
        if isinstance(source, io.IOBase) or hasattr(source, "read"):
            return PendingResult(self._compress_stream(source))

        raise TypeError(f"Unsupported image source type: {type(source).__name__}")

    async def _compress_file(self, path: Path) -> CompressResponse:
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        # Read fully so the file is closed before the request is sent.
        content = path.read_bytes()
        if not content:
            raise ValueError(f"Image file is empty: {path}")
        return await self._send_compress(content=content)

    async def _compress_stream(self, stream: BinaryIO) -> CompressResponse:
        content = stream.read()
        if not content:
            raise ValueError("Image stream is empty")
        return await self._send_compress(content=content)

    async def _compress_url(self, url: str) -> CompressResponse:
        body = dump_body(CompressFromUrlRequest(source=UrlSource(url=url)))
        return await self._send_compress(json=body)

    async def _send_compress(self, **request_kwargs) -> CompressResponse:
        logger.debug(f"Starting compression request to: {self.api_endpoint}")
        start_time = time.time()

        try:
            response = await self._http_client.post(self.api_endpoint, **request_kwargs)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during compression: {e}")
            raise

        await raise_for_api_error(response)
        result = await CompressResponse.from_response(response, self._http_client)

        elapsed_time = time.time() - start_time
        logger.info(
            f"Compression completed in {elapsed_time:.2f}s, "
            f"{result.input.size} -> {result.output.size} bytes "
            f"(compression count: {result.compression_count})"
        )
        return result

    def store_to_s3(
        self,
        result: CompressInput,
        path: str,
        amazon_settings: Optional[AmazonS3Configuration] = None,
        *,
        bucket_override: Optional[str] = None,
        region_override: Optional[str] = None,
    ) -> PendingResult[Optional[str]]:
        """Store a compressed image directly in Amazon S3.

        Without ``amazon_settings`` the client's default
        ``amazon_s3_configuration`` is used; ``bucket_override`` and
        ``region_override`` then apply to a copy of it. Explicit settings
        are copied too, the caller's object is never modified.

        Args:
            result: A compression result, or a pending one.
            path: Object path inside the bucket, e.g. ``images/cat.jpg``.
            amazon_settings: Settings to use instead of the defaults.
            bucket_override: Bucket to use instead of the default one.
            region_override: Region to use instead of the default one.

        Returns:
            PendingResult[Optional[str]]: Await it for the URL of the stored
            object, from the ``Location`` header.

        Raises:
            ValueError: If ``result`` or ``path`` is empty.
            InvalidOperationError: If no settings are given and the client has
                no default ``amazon_s3_configuration``.
        """
        if result is None:
            raise ValueError("Compress result cannot be None")

        if amazon_settings is None:
            if self.amazon_s3_configuration is None:
                raise InvalidOperationError("AmazonS3Configuration has not been configured")
            if not path:
                raise ValueError("path cannot be empty")
            settings = self.amazon_s3_configuration.clone()
            if region_override:
                settings.region = region_override
            if bucket_override:
                settings.bucket = bucket_override
        else:
            if not path:
                raise ValueError("path cannot be empty")
            settings = amazon_settings.clone()

        settings.path = path
        return PendingResult(self._store(result, settings))

    async def _store(self, result: CompressInput, settings: AmazonS3Configuration) -> Optional[str]:
        compressed = await _resolve(result, CompressResponse)
        body = {"store": settings.to_store_payload()}
        response = await send_to_output(compressed, "POST", "store", body)

        location = response.headers.get("Location")
        logger.info(f"Stored compressed image at: {location}")
        return location


def create_client(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> TinyPngClient:
    """Factory function to create a client from application settings.

    Args:
        settings: Settings to use. Defaults to ``get_settings()``.
        http_client: Optional transport, owned by the caller.

    Returns:
        TinyPngClient: Configured client.
    """
    if settings is None:
        settings = get_settings()
    logger.info("Creating TinyPngClient from settings")
    return TinyPngClient(
        settings.api_key,
        amazon_s3_configuration=settings.amazon_s3_configuration,
        http_client=http_client,
        api_endpoint=settings.api_endpoint,
        timeout=settings.timeout,
    )
