"""Catalog lyrics response envelope and error body.

The catalog wraps the lyrics markup in a JSON:API style document:

    {"data": [{"id": ..., "type": "syllable-lyrics",
               "attributes": {"ttml": "<tt ...>", "playParams": {...}}}]}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from timed_lyrics.errors import DecodingError, EmptyResponseError


class PlayParams(BaseModel):
    """Playback parameters attached to a lyrics item."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: str
    catalog_id: str | None = Field(default=None, alias="catalogId")
    # 2 = line-timed, 3 = word/syllable-timed
    display_type: int | None = Field(default=None, alias="displayType")


class LyricsAttributes(BaseModel):
    """Attributes of a lyrics item."""

    model_config = ConfigDict(populate_by_name=True)

    ttml: str
    play_params: PlayParams | None = Field(default=None, alias="playParams")


class LyricsData(BaseModel):
    """A single lyrics item."""

    id: str
    type: str
    attributes: LyricsAttributes


class LyricsResponse(BaseModel):
    """Top-level lyrics response."""

    data: list[LyricsData] = Field(default_factory=list)

    @property
    def ttml(self) -> str:
        """Get the markup of the first lyrics item.

        Raises:
            EmptyResponseError: If the response holds no lyrics
        """
        if not self.data or not self.data[0].attributes.ttml:
            raise EmptyResponseError()
        return self.data[0].attributes.ttml


def decode_lyrics_response(payload: str | bytes) -> LyricsResponse:
    """Decode a lyrics response body.

    Args:
        payload: Raw JSON response body

    Returns:
        Decoded LyricsResponse

    Raises:
        DecodingError: If the body is not JSON or does not match the envelope
    """
    try:
        return LyricsResponse.model_validate_json(payload)
    except ValidationError as e:
        raise DecodingError(
            f"{e.error_count()} problem(s) in lyrics response",
            context={"first_error": e.errors()[0]["msg"]},
        ) from e


class CatalogError(BaseModel):
    """One entry of a catalog error response."""

    code: str | None = None
    status: str | None = None
    title: str | None = None
    detail: str | None = None


class ErrorResponse(BaseModel):
    """Body the catalog sends alongside an error status."""

    errors: list[CatalogError] = Field(default_factory=list)


def decode_error_code(payload: str | bytes) -> str | None:
    """Get the first error code from a catalog error body.

    Returns:
        The error code, or None if the body is not a catalog error response
    """
    try:
        response = ErrorResponse.model_validate_json(payload)
    except ValidationError:
        return None

    for error in response.errors:
        if error.code:
            return error.code
    return None
