"""
Credentials and session handling.

A Tidal session is obtained by logging in with a username and password plus
an application token. The token can be found by inspecting the requests of
the Tidal desktop application (header ``X-Tidal-Token``).

Example:
    credentials = TidalCredentials(token).create_session(username, password)
    if credentials.session is None:
        ...  # login failed

"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, replace
from typing import Any

from tidal_cli.core.errors import ValidationError

DEFAULT_LOGIN_URL = "https://api.tidalhifi.com/v1/login/username"
LOGIN_TIMEOUT = 60

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """A server-issued session: who is logged in and from which country."""

    user_id: int
    session_id: str
    country_code: str

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        """Create from the login response dict."""
        if not isinstance(data, dict):
            raise TypeError("session: expected a JSON object")
        user_id = data.get("userId")
        session_id = data.get("sessionId")
        country_code = data.get("countryCode")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TypeError("userId: expected an integer")
        if not isinstance(session_id, str) or not isinstance(country_code, str):
            raise TypeError("sessionId and countryCode must be strings")
        return cls(user_id=user_id, session_id=session_id, country_code=country_code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "sessionId": self.session_id,
            "countryCode": self.country_code,
        }


@dataclass(frozen=True)
class TidalCredentials:
    """An application token and, once logged in, the session it produced."""

    token: str
    session: Session | None = None

    def with_session(self, session: Session | None) -> "TidalCredentials":
        """Return a copy carrying ``session``."""
        return replace(self, session=session)

    def create_session(
        self,
        username: str,
        password: str,
        login_url: str = DEFAULT_LOGIN_URL,
    ) -> "TidalCredentials":
        """
        Log in and return credentials carrying the new session.

        Login failures are not raised: the returned credentials simply have
        ``session`` set to None, which callers must check.

        Raises:
            ValidationError: If no application token is set

        """
        if not self.token:
            raise ValidationError("Application token needs to be set before creating a session")
        return self.with_session(fetch_session(self.token, username, password, login_url))


def fetch_session(token: str, username: str, password: str, login_url: str = DEFAULT_LOGIN_URL) -> Session | None:
    """POST the login form. Returns None on any failure."""
    query = urllib.parse.urlencode({"token": token})
    separator = "&" if "?" in login_url else "?"
    url = f"{login_url}{separator}{query}"
    body = urllib.parse.urlencode({"username": username, "password": password}).encode("utf-8")
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        req = urllib.request.Request(url, data=body, headers=headers, method="POST")
        with urllib.request.urlopen(req, timeout=LOGIN_TIMEOUT) as response:
            logger.debug("login response status: %s", response.status)
            return Session.from_dict(json.loads(response.read().decode("utf-8")))

    except urllib.error.HTTPError as e:
        e.close()
        logger.error("Creating session failed. token: %s, username: %s, status: %s", token, username, e.code)

    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        logger.error("Creating session failed. token: %s, username: %s, error: %s", token, username, e)

    except (ValueError, TypeError) as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.error("Creating session failed, malformed login response: %s", e)

    return None
