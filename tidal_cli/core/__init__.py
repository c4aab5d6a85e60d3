"""
Core layer - Session handling, typed models and the HTTP pipeline.

This layer provides:
- Credentials and login
- Typed dataclasses mirroring the API's JSON payloads
- Low-level HTTP client with session headers and error classification
"""

from tidal_cli.core.auth import Session, TidalCredentials
from tidal_cli.core.client import APIClient, Response
from tidal_cli.core.errors import (
    APIError,
    ClientError,
    ParseEtagError,
    ParseJSONError,
    RequestError,
    SessionRequiredError,
    StatusCodeError,
    TidalError,
    UnauthorizedError,
    ValidationError,
)
from tidal_cli.core.types import (
    Album,
    Artist,
    ArtistType,
    AudioMode,
    AudioQuality,
    ModelType,
    Playlist,
    TidalItems,
    TidalSearch,
    Track,
)

__all__ = [
    "APIClient",
    "APIError",
    "Album",
    "Artist",
    "ArtistType",
    "AudioMode",
    "AudioQuality",
    "ClientError",
    "ModelType",
    "ParseEtagError",
    "ParseJSONError",
    "Playlist",
    "RequestError",
    "Response",
    "Session",
    "SessionRequiredError",
    "StatusCodeError",
    "TidalCredentials",
    "TidalError",
    "TidalItems",
    "TidalSearch",
    "Track",
    "UnauthorizedError",
    "ValidationError",
]
