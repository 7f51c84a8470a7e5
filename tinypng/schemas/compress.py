"""Pydantic schemas for the compression endpoint."""

from pydantic import BaseModel, ConfigDict, Field

from .base import API_MODEL_CONFIG


class ApiInput(BaseModel):
    """Description of the image that was uploaded."""

    model_config = API_MODEL_CONFIG

    size: int = Field(..., ge=0, description="Size of the uploaded image in bytes")
    type: str = Field(..., description="Detected MIME type of the uploaded image")


class ApiOutput(BaseModel):
    """Description of the compressed image hosted by the API."""

    model_config = API_MODEL_CONFIG

    size: int = Field(..., ge=0, description="Size of the compressed image in bytes")
    type: str = Field(..., description="MIME type of the compressed image")
    width: int = Field(..., ge=0, description="Width in pixels")
    height: int = Field(..., ge=0, description="Height in pixels")
    ratio: float = Field(..., description="Compressed size divided by input size")
    url: str = Field(
        ...,
        description="Temporary URL of the compressed image. "
                    "Target of every chained operation."
    )


class ApiResult(BaseModel):
    """JSON body of a successful compression request."""

    model_config = ConfigDict(
        **API_MODEL_CONFIG,
        json_schema_extra={
            "examples": [
                {
                    "input": {"size": 18031, "type": "image/jpeg"},
                    "output": {
                        "size": 16646,
                        "type": "image/jpeg",
                        "width": 400,
                        "height": 400,
                        "ratio": 0.9232,
                        "url": "https://api.tinify.com/output/abc123"
                    }
                }
            ]
        }
    )

    input: ApiInput
    output: ApiOutput


class UrlSource(BaseModel):
    """Remote image location for URL based compression."""

    model_config = API_MODEL_CONFIG

    url: str = Field(..., min_length=1, description="Publicly reachable image URL")


class CompressFromUrlRequest(BaseModel):
    """Request body asking the API to fetch and compress a remote image."""

    model_config = API_MODEL_CONFIG

    source: UrlSource
