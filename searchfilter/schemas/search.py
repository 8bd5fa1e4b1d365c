"""User directory search wire schemas.

Field names and order are part of the external contract: records encode as
avatar_url, display_name, user_id and optional fields that are absent, null
or empty are omitted from the output.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatrixUser(BaseModel):
    """Single user directory entry."""

    model_config = ConfigDict(strict=True)

    avatar_url: str | None = None
    display_name: str | None = None
    user_id: str

    @field_validator("avatar_url", "display_name")
    @classmethod
    def empty_as_absent(cls, value: str | None) -> str | None:
        return value or None


class MatrixSearchResult(BaseModel):
    """Response body of POST /_matrix/client/v3/user_directory/search."""

    model_config = ConfigDict(strict=True)

    limited: bool = False
    results: list[MatrixUser] = Field(default_factory=list)
