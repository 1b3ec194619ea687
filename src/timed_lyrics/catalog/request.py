"""Catalog lyrics request.

Fetches the lyrics markup for a song from the catalog API. The caller
supplies the developer token; obtaining one is outside this package.
"""

from __future__ import annotations

import http.client
import urllib.error
import urllib.parse
import urllib.request

from timed_lyrics.config import CatalogSettings, ParserSettings
from timed_lyrics.errors import (
    InvalidURLError,
    MissingDeveloperTokenError,
    RetryConfig,
    retry_with_backoff,
    wrap_external_error,
)
from timed_lyrics.catalog.response import (
    LyricsResponse,
    decode_error_code,
    decode_lyrics_response,
)
from timed_lyrics.logging import get_logger
from timed_lyrics.lyrics.parser import LyricsParser
from timed_lyrics.models.lyrics import LyricParagraph

logger = get_logger(__name__)

SERVICE_NAME = "catalog"


def _error_code(error: urllib.error.HTTPError) -> str | None:
    # Error statuses may come without a readable body
    if getattr(error, "fp", None) is None:
        return None
    try:
        body = error.read()
    except (OSError, http.client.HTTPException):
        return None
    return decode_error_code(body)


class LyricsRequest:
    """Request for the lyrics of a catalog song.

    Example usage:
        request = LyricsRequest("926187677", developer_token=token)
        markup = request.response().ttml
    """

    def __init__(
        self,
        song_id: str,
        developer_token: str | None,
        settings: CatalogSettings | None = None,
    ):
        """Initialize the request.

        Args:
            song_id: Catalog identifier of the song
            developer_token: Privileged developer token for the catalog
            settings: Catalog settings (defaults if omitted)
        """
        self.song_id = song_id
        self.developer_token = developer_token
        self.settings = settings or CatalogSettings()

    def endpoint_url(self, storefront: str | None = None) -> str:
        """Build the lyrics endpoint URL.

        Args:
            storefront: Country code, defaults to the configured storefront

        Returns:
            Absolute URL of the lyrics resource

        Raises:
            InvalidURLError: If the song id or storefront is empty
        """
        storefront = (storefront or self.settings.storefront).strip().lower()
        song_id = str(self.song_id).strip()

        if not song_id:
            raise InvalidURLError("song id is empty")
        if not storefront:
            raise InvalidURLError("storefront is empty")

        resource = "syllable-lyrics" if self.settings.syllable_lyrics else "lyrics"
        path = "/v1/catalog/{}/songs/{}/{}".format(
            urllib.parse.quote(storefront, safe=""),
            urllib.parse.quote(song_id, safe=""),
            resource,
        )
        return self.settings.base_url.rstrip("/") + path

    def _build_request(self, url: str) -> urllib.request.Request:
        return urllib.request.Request(
            url,
            headers={
                "Authorization": f"Bearer {self.developer_token}",
                "Origin": self.settings.origin,
                "Accept": "application/json",
            },
            method="GET",
        )

    def _get(self, url: str) -> bytes:
        try:
            with urllib.request.urlopen(
                self._build_request(url), timeout=self.settings.timeout
            ) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            raise wrap_external_error(
                e, SERVICE_NAME, f"GET {url}", code=_error_code(e)
            ) from e
        except (
            urllib.error.URLError,
            http.client.HTTPException,
            TimeoutError,
            ConnectionError,
        ) as e:
            raise wrap_external_error(e, SERVICE_NAME, f"GET {url}") from e

    def response(self, storefront: str | None = None) -> LyricsResponse:
        """Send the request and decode the response envelope.

        Args:
            storefront: Country code, defaults to the configured storefront

        Returns:
            Decoded LyricsResponse

        Raises:
            MissingDeveloperTokenError: If no developer token was given
            InvalidURLError: If the URL cannot be built
            TimedLyricsError: For network, HTTP and decoding failures
        """
        if not self.developer_token:
            raise MissingDeveloperTokenError(context={"song_id": self.song_id})

        url = self.endpoint_url(storefront)
        log = logger.with_context(song_id=self.song_id)
        log.info("Fetching lyrics", extra={"url": url})

        fetch = retry_with_backoff(RetryConfig(max_attempts=self.settings.max_attempts))(self._get)
        body = fetch(url)

        return decode_lyrics_response(body)


def fetch_lyrics(
    song_id: str,
    developer_token: str | None,
    settings: CatalogSettings | None = None,
    storefront: str | None = None,
) -> str:
    """Fetch the raw lyrics markup for a song.

    Raises:
        TimedLyricsError: If the request fails or carries no lyrics
    """
    request = LyricsRequest(song_id, developer_token, settings)
    return request.response(storefront).ttml


def fetch_paragraphs(
    song_id: str,
    developer_token: str | None,
    settings: CatalogSettings | None = None,
    parser_settings: ParserSettings | None = None,
    storefront: str | None = None,
) -> list[LyricParagraph]:
    """Fetch and parse the lyrics for a song.

    Raises:
        TimedLyricsError: If the request fails or carries no lyrics
    """
    markup = fetch_lyrics(song_id, developer_token, settings, storefront)
    return LyricsParser(parser_settings).parse(markup)
