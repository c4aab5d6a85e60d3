"""
Tidal SDK - High-level client with nice ergonomics.

This layer provides a typed interface for artists, albums, playlists,
tracks and search. Built on top of the core APIClient.
"""

import os
import warnings

from tidal_cli.core.auth import DEFAULT_LOGIN_URL, Session, TidalCredentials
from tidal_cli.core.client import DEFAULT_BASE_URL, APIClient
from tidal_cli.core.errors import UnauthorizedError, ValidationError
from tidal_cli.core.types import Album, Artist, Playlist, TidalItems, TidalSearch, Track


class Tidal:
    """
    High-level Tidal API client with typed methods.

    Example:
        credentials = TidalCredentials(token).create_session(username, password)
        client = Tidal(credentials)

        artist = client.artists.get("37312")
        albums = client.artists.albums("37312")
        playlist = client.playlists.add_tracks(playlist_id, tracks)

    """

    def __init__(self, credentials: TidalCredentials, base_url: str | None = None):
        """
        Initialize the Tidal client.

        Args:
            credentials: Credentials with an established session
            base_url: API base URL (defaults to the production API)

        Raises:
            SessionRequiredError: If the credentials carry no session

        """
        self._client = APIClient(credentials, base_url=base_url or DEFAULT_BASE_URL)

        # Sub-clients for different domains
        self.albums = AlbumOperations(self._client)
        self.artists = ArtistOperations(self._client)
        self.playlists = PlaylistOperations(self._client)
        self.searches = SearchOperations(self._client)
        self.tracks = TrackOperations(self._client)

    @classmethod
    def from_env(cls) -> "Tidal":
        """
        Build a client from environment variables.

        Reuses a session when TIDAL_SESSION_ID, TIDAL_USER_ID and
        TIDAL_COUNTRY_CODE are all set, otherwise logs in with
        TIDAL_APP_TOKEN, TIDAL_USERNAME and TIDAL_PASSWORD.
        TIDAL_BASE_URL and TIDAL_LOGIN_URL override the endpoints.

        Raises:
            ValidationError: If required variables are missing
            UnauthorizedError: If the login is rejected

        """
        base_url = os.environ.get("TIDAL_BASE_URL")
        credentials = TidalCredentials(os.environ.get("TIDAL_APP_TOKEN", ""))

        session_id = os.environ.get("TIDAL_SESSION_ID")
        user_id = os.environ.get("TIDAL_USER_ID")
        country_code = os.environ.get("TIDAL_COUNTRY_CODE")
        if session_id and user_id and country_code:
            if not user_id.isdigit():
                raise ValidationError("TIDAL_USER_ID must be a number")
            session = Session(user_id=int(user_id), session_id=session_id, country_code=country_code)
            return cls(credentials.with_session(session), base_url=base_url)

        username = os.environ.get("TIDAL_USERNAME")
        password = os.environ.get("TIDAL_PASSWORD")
        if not credentials.token or not username or not password:
            raise ValidationError("TIDAL_APP_TOKEN, TIDAL_USERNAME and TIDAL_PASSWORD environment variables not set")

        login_url = os.environ.get("TIDAL_LOGIN_URL", DEFAULT_LOGIN_URL)
        credentials = credentials.create_session(username, password, login_url=login_url)
        if credentials.session is None:
            raise UnauthorizedError(details={"username": username})
        return cls(credentials, base_url=base_url)

    @property
    def session(self) -> Session:
        """The session requests are made with."""
        return self._client.session

    def user_id(self) -> int:
        """Get the ID of the logged in user."""
        return self._client.user_id

    # =========================================================================
    # Deprecated shortcuts
    # =========================================================================

    def search(self, term: str, limit: int | None = None) -> TidalSearch:
        _deprecated("search", "searches.find")
        return self.searches.find(term, limit)

    def artist(self, artist_id: str) -> Artist:
        _deprecated("artist", "artists.get")
        return self.artists.get(artist_id)

    def search_artist(self, term: str, limit: int | None = None) -> list[Artist]:
        _deprecated("search_artist", "artists.search")
        return self.artists.search(term, limit)

    def album(self, album_id: str) -> Album:
        _deprecated("album", "albums.get")
        return self.albums.get(album_id)

    def artist_albums(self, artist_id: str) -> list[Album]:
        _deprecated("artist_albums", "artists.albums")
        return self.artists.albums(artist_id)

    def search_album(self, term: str, limit: int | None = None) -> list[Album]:
        _deprecated("search_album", "albums.search")
        return self.albums.search(term, limit)

    def album_tracks(self, album_id: str) -> list[Track]:
        _deprecated("album_tracks", "albums.tracks")
        return self.albums.tracks(album_id)

    def search_track(self, term: str, limit: int | None = None) -> list[Track]:
        _deprecated("search_track", "tracks.search")
        return self.tracks.search(term, limit)

    def playlist(self, playlist_id: str) -> Playlist:
        _deprecated("playlist", "playlists.get")
        return self.playlists.get(playlist_id)

    def search_playlist(self, term: str, limit: int | None = None) -> list[Playlist]:
        _deprecated("search_playlist", "playlists.search")
        return self.playlists.search(term, limit)

    def user_playlists(self) -> list[Playlist]:
        _deprecated("user_playlists", "playlists.user_playlists")
        return self.playlists.user_playlists()

    def playlist_tracks(self, playlist_id: str) -> list[Track]:
        _deprecated("playlist_tracks", "playlists.tracks")
        return self.playlists.tracks(playlist_id)

    def playlist_add_tracks(self, playlist_id: str, tracks: list[Track], add_dupes: bool = False) -> Playlist:
        _deprecated("playlist_add_tracks", "playlists.add_tracks")
        return self.playlists.add_tracks(playlist_id, tracks, add_dupes)

    def create_playlist(self, title: str, description: str) -> Playlist:
        _deprecated("create_playlist", "playlists.create")
        return self.playlists.create(title, description)


def _deprecated(name: str, replacement: str) -> None:
    warnings.warn(
        f"Tidal.{name}() will be removed in the next version, use Tidal.{replacement}() instead",
        DeprecationWarning,
        stacklevel=3,
    )


# =============================================================================
# Artist Operations
# =============================================================================


class ArtistOperations:
    """Operations on artists."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, artist_id: str) -> Artist:
        """Get an artist by ID."""
        result = self._client.get(f"/artists/{artist_id}")
        return APIClient.convert_result(result, Artist.from_dict)

    def search(self, term: str, limit: int | None = None) -> list[Artist]:
        """Search artists by name."""
        return self._client.search(term, limit).artists.items

    def albums(self, artist_id: str) -> list[Album]:
        """
        List the albums of an artist.

        Args:
            artist_id: The artist ID

        Returns:
            Albums in the order the API returns them

        """
        result = self._client.get(f"/artists/{artist_id}/albums")
        return APIClient.convert_result(result, TidalItems.parser(Album.from_dict)).items


# =============================================================================
# Album Operations
# =============================================================================


class AlbumOperations:
    """Operations on albums."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, album_id: str) -> Album:
        """Get an album by ID."""
        result = self._client.get(f"/albums/{album_id}")
        return APIClient.convert_result(result, Album.from_dict)

    def search(self, term: str, limit: int | None = None) -> list[Album]:
        """Search albums by title."""
        return self._client.search(term, limit).albums.items

    def tracks(self, album_id: str) -> list[Track]:
        """List the tracks of an album."""
        result = self._client.get(f"/albums/{album_id}/tracks")
        return APIClient.convert_result(result, TidalItems.parser(Track.from_dict)).items


# =============================================================================
# Playlist Operations
# =============================================================================


class PlaylistOperations:
    """Operations for reading and editing playlists."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, playlist_id: str) -> Playlist:
        """Get a playlist by UUID."""
        result = self._client.get(f"/playlists/{playlist_id}")
        return APIClient.convert_result(result, Playlist.from_dict)

    def search(self, term: str, limit: int | None = None) -> list[Playlist]:
        """Search playlists by title."""
        return self._client.search(term, limit).playlists.items

    def tracks(self, playlist_id: str) -> list[Track]:
        """List the tracks of a playlist."""
        result = self._client.get(f"/playlists/{playlist_id}/tracks")
        return APIClient.convert_result(result, TidalItems.parser(Track.from_dict)).items

    def user_playlists(self) -> list[Playlist]:
        """List the playlists of the logged in user."""
        result = self._client.get(f"/users/{self._client.user_id}/playlists")
        return APIClient.convert_result(result, TidalItems.parser(Playlist.from_dict)).items

    def create(self, title: str, description: str) -> Playlist:
        """
        Create a playlist owned by the logged in user.

        Args:
            title: Playlist title
            description: Playlist description

        Returns:
            The created Playlist

        """
        result = self._client.post(
            f"/users/{self._client.user_id}/playlists",
            {"title": title, "description": description},
        )
        return APIClient.convert_result(result, Playlist.from_dict)

    def add_tracks(self, playlist_id: str, tracks: list[Track], add_dupes: bool = False) -> Playlist:
        """
        Append tracks to a playlist.

        The playlist's current etag is fetched first and sent back as
        ``If-None-Match``, so the API rejects the change if the playlist was
        modified in between. Conflicts are not retried.

        Args:
            playlist_id: The playlist UUID
            tracks: Tracks to add; each must have an ``id``
            add_dupes: Add tracks already in the playlist instead of failing

        Returns:
            The playlist as it is after the update

        Raises:
            ValidationError: If a track has no ID
            ClientError: If fetching the etag or the update fails

        """
        if any(track.id is None for track in tracks):
            raise ValidationError("Every track must have an ID to be added to a playlist")

        url = f"/playlists/{playlist_id}/items"
        etag = self._client.etag(url)

        form = {
            "trackIds": ",".join(str(track.id) for track in tracks),
            "onDupes": "ADD" if add_dupes else "FAIL",
        }
        self._client.post(url, form, etag=etag)

        # The update response is not a full playlist, fetch it again
        return self.get(playlist_id)


# =============================================================================
# Track Operations
# =============================================================================


class TrackOperations:
    """Operations on tracks."""

    def __init__(self, client: APIClient):
        self._client = client

    def search(self, term: str, limit: int | None = None) -> list[Track]:
        """Search tracks by title."""
        return self._client.search(term, limit).tracks.items


# =============================================================================
# Search Operations
# =============================================================================


class SearchOperations:
    """Combined search across all entity types."""

    def __init__(self, client: APIClient):
        self._client = client

    def find(self, term: str, limit: int | None = None) -> TidalSearch:
        """
        Search artists, albums, playlists and tracks.

        Args:
            term: Search term
            limit: Maximum results per collection (default 10)

        Returns:
            TidalSearch; each collection may be empty independently

        """
        return self._client.search(term, limit)
