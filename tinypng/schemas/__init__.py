"""Pydantic schemas for TinyPNG API requests and responses."""

from .base import API_MODEL_CONFIG, dump_body
from .compress import ApiInput, ApiOutput, ApiResult, CompressFromUrlRequest, UrlSource
from .convert import ConvertImageFormat, ConvertRequest, ConvertType, Transform
from .error import ApiErrorResponse
from .preserve import PreserveMetadata, PreserveRequest
from .resize import (
    CoverResizeOperation,
    FitResizeOperation,
    ResizeOperation,
    ResizeRequest,
    ResizeType,
    ScaleHeightResizeOperation,
    ScaleWidthResizeOperation,
)
from .storage import AmazonS3Configuration

__all__ = [
    "API_MODEL_CONFIG",
    "dump_body",
    "ApiInput",
    "ApiOutput",
    "ApiResult",
    "CompressFromUrlRequest",
    "UrlSource",
    "ConvertImageFormat",
    "ConvertRequest",
    "ConvertType",
    "Transform",
    "ApiErrorResponse",
    "PreserveMetadata",
    "PreserveRequest",
    "ResizeOperation",
    "ResizeRequest",
    "ResizeType",
    "ScaleWidthResizeOperation",
    "ScaleHeightResizeOperation",
    "FitResizeOperation",
    "CoverResizeOperation",
    "AmazonS3Configuration",
]
