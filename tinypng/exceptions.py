"""Exceptions raised by the TinyPNG client."""
import logging

import httpx

from tinypng.schemas.error import ApiErrorResponse

logger = logging.getLogger(__name__)


class TinyPngError(Exception):
    """Base exception for TinyPNG client errors."""
    pass


class InvalidOperationError(TinyPngError, RuntimeError):
    """Raised when an operation needs configuration the client does not have."""
    pass


class TinyPngApiError(TinyPngError):
    """The TinyPNG API answered with a non-success status code.

    Attributes:
        status_code: HTTP status code of the response.
        reason_phrase: HTTP reason phrase of the response.
        error_title: The ``error`` field of the API error body.
        error_message: The ``message`` field of the API error body.
    """

    def __init__(
        self,
        status_code: int,
        reason_phrase: str,
        error_title: str,
        error_message: str,
    ):
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.error_title = error_title
        self.error_message = error_message
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            "Api Service returned a non-success status code when attempting "
            f"an operation on an image: {self.status_code} - {self.reason_phrase}. "
            f"{self.error_title}, {self.error_message}"
        )

    def __reduce__(self):
        return (
            self.__class__,
            (self.status_code, self.reason_phrase, self.error_title, self.error_message),
        )


async def raise_for_api_error(response: httpx.Response) -> None:
    """Raise ``TinyPngApiError`` if the response is not a 2xx.

    The error body is parsed as the API's ``{"error", "message"}`` envelope.
    A body that is not valid JSON lets pydantic's ``ValidationError`` escape.

    Args:
        response: Response returned by the transport.

    Raises:
        TinyPngApiError: If the response status is not 2xx.
    """
    if response.is_success:
        return

    body = await response.aread()
    envelope = ApiErrorResponse.model_validate_json(body)

    logger.error(
        f"TinyPNG API returned error: {response.status_code} - "
        f"{envelope.error}: {envelope.message}"
    )
    raise TinyPngApiError(
        response.status_code,
        response.reason_phrase,
        envelope.error,
        envelope.message,
    )
