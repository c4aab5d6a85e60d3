"""
Core HTTP client for the Tidal API.

Handles session headers, the mandatory country code, conditional updates
(etags) and error classification.
"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from email.message import Message
from typing import Any, TypeVar

from tidal_cli.core.auth import TidalCredentials
from tidal_cli.core.errors import (
    APIError,
    ClientError,
    ParseEtagError,
    ParseJSONError,
    RequestError,
    SessionRequiredError,
    StatusCodeError,
    UnauthorizedError,
)
from tidal_cli.core.types import TidalSearch

# Configuration
DEFAULT_BASE_URL = "https://api.tidalhifi.com/v1"
ORIGIN = "http://listen.tidal.com"
REQUEST_TIMEOUT = 60
DEFAULT_SEARCH_LIMIT = 10

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class Response:
    """A successful (2xx) response, read in full."""

    status: int
    headers: Message
    body: bytes

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RequestError(f"could not decode response body: {e}") from e


def classify_error(status: int, body: bytes) -> ClientError:
    """
    Map a non-2xx response to a ClientError.

    401 never looks at the body. 403 and 404 may carry a structured
    ``{status, message}`` body (``message`` is sometimes sent as
    ``userMessage``); when it cannot be parsed they fall back to a plain
    StatusCodeError like every other status.
    """
    if status == 401:
        return UnauthorizedError()
    if status in (403, 404):
        api_error = _parse_api_error(body)
        if api_error is not None:
            return api_error
    return StatusCodeError(status)


def _parse_api_error(body: bytes) -> APIError | None:
    try:
        data = json.loads(body.decode("utf-8"))
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    status = data.get("status")
    message = data.get("message", data.get("userMessage"))
    if not isinstance(status, int) or isinstance(status, bool) or not isinstance(message, str):
        return None
    return APIError(status, message, details=data)


def _is_header_text(value: str) -> bool:
    """Visible ASCII, space or tab."""
    return all(c == "\t" or 32 <= ord(c) < 127 for c in value)


class APIClient:
    """
    Low-level HTTP client for the Tidal API.

    Handles:
    - Session header and ``countryCode`` on every request
    - Form payloads and ``If-None-Match`` for conditional updates
    - Error classification and response decoding

    A client can only be built from credentials that carry a session.
    """

    def __init__(self, credentials: TidalCredentials, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize the API client.

        Args:
            credentials: Credentials with an established session
            base_url: API base URL

        Raises:
            SessionRequiredError: If ``credentials.session`` is None

        """
        if credentials.session is None:
            raise SessionRequiredError("A session needs to be obtained before using Tidal")
        self.credentials = credentials
        self.session = credentials.session
        self.base_url = base_url.rstrip("/")

    @property
    def user_id(self) -> int:
        """ID of the logged in user."""
        return self.session.user_id

    def _build_url(self, path: str, query: Mapping[str, str] | None = None) -> str:
        """Build full URL from path, always adding the session's country code."""
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        parts = urllib.parse.urlsplit(url)

        params = dict(urllib.parse.parse_qsl(parts.query, keep_blank_values=True))
        params.update(query or {})
        params["countryCode"] = self.session.country_code
        return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(params)))

    def call(
        self,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        form: Mapping[str, str] | None = None,
        etag: str | None = None,
    ) -> Response:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PUT)
            path: API path (e.g., /artists/37312) or absolute URL
            query: Extra query parameters; ``countryCode`` is always the session's
            form: URL-encoded form payload; no body is sent when None
            etag: Version token sent as ``If-None-Match``

        Returns:
            The 2xx Response

        Raises:
            ClientError: On a non-2xx status or a failed exchange

        """
        url = self._build_url(path, query)
        headers = {
            "X-Tidal-SessionId": self.session.session_id,
            "Origin": ORIGIN,
        }
        if etag is not None:
            headers["If-None-Match"] = etag

        body = None
        if form is not None:
            body = urllib.parse.urlencode(form).encode("utf-8")
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        logger.debug("%s %s", method, url)
        try:
            req = urllib.request.Request(url, data=body, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=REQUEST_TIMEOUT) as response:
                logger.debug("response status: %s", response.status)
                return Response(status=response.status, headers=response.headers, body=response.read())

        except urllib.error.HTTPError as e:
            logger.debug("response status: %s", e.code)
            with e:
                try:
                    error_body = e.read()
                except (http.client.HTTPException, OSError):
                    error_body = b""
            raise classify_error(e.code, error_body) from e

        except urllib.error.URLError as e:
            raise RequestError(f"connection error: {e.reason}") from e

        except TimeoutError as e:
            raise RequestError(f"request timed out after {REQUEST_TIMEOUT} seconds") from e

        except (http.client.HTTPException, OSError) as e:
            raise RequestError(str(e) or type(e).__name__) from e

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, query: Mapping[str, str] | None = None) -> str:
        """Make a GET request and return the body text."""
        return self.call("GET", path, query=query).text

    def post(self, path: str, form: Mapping[str, str], etag: str | None = None) -> str:
        """Make a POST request and return the body text."""
        return self.call("POST", path, form=form, etag=etag).text

    def put(self, path: str, form: Mapping[str, str], etag: str) -> str:
        """Make a PUT request and return the body text."""
        return self.call("PUT", path, form=form, etag=etag).text

    def etag(self, path: str) -> str:
        """
        Fetch the current version token of a resource.

        Raises:
            ParseEtagError: If the response has no usable ``etag`` header

        """
        value = self.call("GET", path).headers.get("etag")
        if value is None or not _is_header_text(value):
            raise ParseEtagError(path)
        return value

    def search(self, term: str, limit: int | None = None) -> TidalSearch:
        """Search artists, albums, playlists and tracks at once."""
        query = {
            "query": term,
            "limit": str(limit if limit is not None else DEFAULT_SEARCH_LIMIT),
        }
        return self.convert_result(self.get("/search", query), TidalSearch.from_dict)

    # =========================================================================
    # Decoding
    # =========================================================================

    @staticmethod
    def convert_result(text: str, parser: Callable[[Any], T]) -> T:
        """
        Decode a JSON body with a model parser (e.g. ``Artist.from_dict``).

        Raises:
            ParseJSONError: If the body is not JSON or does not fit the model

        """
        try:
            return parser(json.loads(text))
        # JSONDecodeError and unknown enum values are ValueErrors
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise ParseJSONError(str(e)) from e
