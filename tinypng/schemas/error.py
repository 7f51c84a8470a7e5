"""Pydantic schema for the API error envelope."""

from pydantic import BaseModel, ConfigDict, Field


class ApiErrorResponse(BaseModel):
    """Body returned by the TinyPNG API with any non-success status code."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "Unauthorized",
                    "message": "Credentials are invalid."
                }
            ]
        }
    )

    error: str = Field(
        ...,
        description="Short error title, e.g. 'Unauthorized' or 'InputMissing'"
    )

    message: str = Field(
        "",
        description="Human readable description of the error"
    )
