"""Pytest configuration - loads .env and provides a stub Tidal API server."""

import threading
import urllib.parse
from collections.abc import Iterator
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
from dotenv import load_dotenv

from tidal_cli.core.auth import Session, TidalCredentials
from tidal_cli.core.client import APIClient
from tidal_cli.sdk import Tidal

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

FILES = Path(__file__).parent / "files"


# =============================================================================
# Stub server
# =============================================================================


@dataclass
class RecordedRequest:
    """One request as received by the stub server."""

    method: str
    path: str
    query: dict[str, str]
    headers: Message
    form: dict[str, str]
    body: bytes


@dataclass
class StubResponse:
    status: int = 200
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)


class StubServer:
    """
    A local HTTP server answering canned responses per (method, path).

    Unrouted requests get a 501 so a wrong URL never looks like a real 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], StubResponse] = {}
        self.requests: list[RecordedRequest] = []
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(self))
        self._thread = threading.Thread(target=self._server.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: str = "",
        headers: dict[str, str] | None = None,
        fixture: str | None = None,
    ) -> None:
        """Route ``method path`` to a response; ``fixture`` names a file in tests/files."""
        if fixture:
            body = (FILES / fixture).read_text()
        self.routes[(method, path)] = StubResponse(status=status, body=body, headers=headers or {})

    def requests_to(self, method: str, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


def _make_handler(stub: StubServer) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def _handle(self) -> None:
            parts = urllib.parse.urlsplit(self.path)
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            stub.requests.append(
                RecordedRequest(
                    method=self.command,
                    path=parts.path,
                    query=dict(urllib.parse.parse_qsl(parts.query, keep_blank_values=True)),
                    headers=self.headers,
                    form=dict(urllib.parse.parse_qsl(body.decode("utf-8"), keep_blank_values=True)),
                    body=body,
                )
            )

            response = stub.routes.get((self.command, parts.path), StubResponse(status=501, body="no stub route"))
            payload = response.body.encode("utf-8")
            self.send_response(response.status)
            for name, value in response.headers.items():
                self.send_header(name, value)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        do_GET = do_POST = do_PUT = do_DELETE = _handle

        def log_message(self, format: str, *args: object) -> None:  # noqa: A002
            pass

    return Handler


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stub() -> Iterator[StubServer]:
    server = StubServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def session() -> Session:
    return Session(user_id=1234, session_id="xq123", country_code="US")


@pytest.fixture
def credentials(session: Session) -> TidalCredentials:
    return TidalCredentials("some_token").with_session(session)


@pytest.fixture
def api_client(stub: StubServer, credentials: TidalCredentials) -> APIClient:
    return APIClient(credentials, base_url=stub.url)


@pytest.fixture
def tidal(stub: StubServer, credentials: TidalCredentials) -> Tidal:
    return Tidal(credentials, base_url=stub.url)
