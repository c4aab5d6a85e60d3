"""Tests for the high-level Tidal client and its resource operations."""

import pytest

from tidal_cli.core.auth import Session, TidalCredentials
from tidal_cli.core.errors import (
    APIError,
    ParseEtagError,
    SessionRequiredError,
    StatusCodeError,
    UnauthorizedError,
    ValidationError,
)
from tidal_cli.core.types import Track
from tidal_cli.sdk import Tidal

PLAYLIST_ID = "7ce7df87-6d37-4465-80db-84535a4e44a4"
SESSION_JSON = '{"userId": 123, "sessionId": "session-id-123", "countryCode": "US"}'


def test_requires_session():
    with pytest.raises(SessionRequiredError):
        Tidal(TidalCredentials("some_token"))


def test_user_id(tidal):
    assert tidal.user_id() == 1234


# =============================================================================
# Artists
# =============================================================================


class TestArtists:
    def test_get(self, stub, tidal):
        stub.add("GET", "/artists/37312", fixture="artist.json")

        artist = tidal.artists.get("37312")

        assert artist.id == 37312
        assert artist.name == "myband"
        (request,) = stub.requests_to("GET", "/artists/37312")
        assert request.query == {"countryCode": "US"}

    def test_albums(self, stub, tidal):
        stub.add("GET", "/artists/37312/albums", fixture="artist_albums.json")

        albums = tidal.artists.albums("37312")

        assert albums[0].id == 138458220
        assert albums[0].title == "What The Dead Men Say"
        assert len(albums) == 2

    def test_search(self, stub, tidal):
        stub.add("GET", "/search", fixture="search.json")

        artists = tidal.artists.search("myband")

        assert [a.id for a in artists] == [37312, 4820561, 5519780]
        (request,) = stub.requests_to("GET", "/search")
        assert request.query == {"query": "myband", "limit": "10", "countryCode": "US"}

    def test_not_found(self, stub, tidal):
        stub.add("GET", "/artists/1", status=404, body='{"status": 404, "userMessage": "Not found"}')

        with pytest.raises(APIError) as exc_info:
            tidal.artists.get("1")

        assert (exc_info.value.status, exc_info.value.message) == (404, "Not found")


# =============================================================================
# Albums
# =============================================================================


class TestAlbums:
    def test_get(self, stub, tidal):
        stub.add("GET", "/albums/79914998", fixture="album.json")

        album = tidal.albums.get("79914998")

        assert album.id == 79914998
        assert album.title == "My Album"

    def test_tracks(self, stub, tidal):
        stub.add("GET", "/albums/79914998/tracks", fixture="album_tracks.json")

        tracks = tidal.albums.tracks("79914998")

        assert [t.id for t in tracks] == [79915000, 79915001]

    def test_search_with_limit(self, stub, tidal):
        stub.add("GET", "/search", fixture="search.json")

        albums = tidal.albums.search("myband", limit=2)

        assert len(albums) == 2
        (request,) = stub.requests_to("GET", "/search")
        assert request.query["limit"] == "2"


# =============================================================================
# Playlists
# =============================================================================


class TestPlaylists:
    def test_get(self, stub, tidal):
        stub.add("GET", f"/playlists/{PLAYLIST_ID}", fixture="playlist.json")

        playlist = tidal.playlists.get(PLAYLIST_ID)

        assert playlist.uuid == PLAYLIST_ID
        assert playlist.title == "Road trip"

    def test_tracks(self, stub, tidal):
        stub.add("GET", f"/playlists/{PLAYLIST_ID}/tracks", fixture="playlist_tracks.json")

        tracks = tidal.playlists.tracks(PLAYLIST_ID)

        assert [t.title for t in tracks] == ["The Sin And The Sentence"]

    def test_user_playlists(self, stub, tidal):
        stub.add("GET", "/users/1234/playlists", fixture="user_playlists.json")

        playlists = tidal.playlists.user_playlists()

        assert [p.title for p in playlists] == ["Road trip", "Focus"]

    def test_create(self, stub, tidal):
        stub.add("POST", "/users/1234/playlists", fixture="playlist.json")

        playlist = tidal.playlists.create("Road trip", "Songs for the highway")

        assert playlist.uuid == PLAYLIST_ID
        (request,) = stub.requests_to("POST", "/users/1234/playlists")
        assert request.form == {"title": "Road trip", "description": "Songs for the highway"}
        assert request.headers["If-None-Match"] is None

    def test_add_tracks(self, stub, tidal):
        items = f"/playlists/{PLAYLIST_ID}/items"
        stub.add("GET", items, body="{}", headers={"etag": "123457689"})
        stub.add("POST", items, body='{"lastUpdated": 1591035673000, "addedItemIds": [1, 2]}')
        stub.add("GET", f"/playlists/{PLAYLIST_ID}", fixture="playlist.json")

        playlist = tidal.playlists.add_tracks(PLAYLIST_ID, [Track(id=79915000), Track(id=138458221)])

        assert playlist.uuid == PLAYLIST_ID
        (post,) = stub.requests_to("POST", items)
        assert post.headers["If-None-Match"] == "123457689"
        assert post.form == {"trackIds": "79915000,138458221", "onDupes": "FAIL"}
        assert post.query == {"countryCode": "US"}
        # etag, mutation, then the refreshed playlist
        assert [(r.method, r.path) for r in stub.requests] == [
            ("GET", items),
            ("POST", items),
            ("GET", f"/playlists/{PLAYLIST_ID}"),
        ]

    def test_add_tracks_allowing_dupes(self, stub, tidal):
        items = f"/playlists/{PLAYLIST_ID}/items"
        stub.add("GET", items, body="{}", headers={"etag": "1"})
        stub.add("POST", items, body="{}")
        stub.add("GET", f"/playlists/{PLAYLIST_ID}", fixture="playlist.json")

        tidal.playlists.add_tracks(PLAYLIST_ID, [Track(id=1)], add_dupes=True)

        (post,) = stub.requests_to("POST", items)
        assert post.form["onDupes"] == "ADD"

    def test_add_tracks_conflict_is_not_retried(self, stub, tidal):
        items = f"/playlists/{PLAYLIST_ID}/items"
        stub.add("GET", items, body="{}", headers={"etag": "1"})
        stub.add("POST", items, status=412, body='{"status": 412, "userMessage": "Precondition failed"}')

        with pytest.raises(StatusCodeError) as exc_info:
            tidal.playlists.add_tracks(PLAYLIST_ID, [Track(id=1)])

        assert exc_info.value.status == 412
        assert len(stub.requests_to("POST", items)) == 1
        assert stub.requests_to("GET", f"/playlists/{PLAYLIST_ID}") == []

    def test_add_tracks_without_etag(self, stub, tidal):
        items = f"/playlists/{PLAYLIST_ID}/items"
        stub.add("GET", items, body="{}")

        with pytest.raises(ParseEtagError):
            tidal.playlists.add_tracks(PLAYLIST_ID, [Track(id=1)])

        assert stub.requests_to("POST", items) == []

    def test_add_tracks_without_ids(self, stub, tidal):
        with pytest.raises(ValidationError):
            tidal.playlists.add_tracks(PLAYLIST_ID, [Track(title="no id")])
        assert stub.requests == []


# =============================================================================
# Tracks and search
# =============================================================================


def test_track_search(stub, tidal):
    stub.add("GET", "/search", fixture="search.json")

    tracks = tidal.tracks.search("myband")

    assert [t.title for t in tracks] == ["The Sin And The Sentence", "IX"]


def test_find(stub, tidal):
    stub.add("GET", "/search", fixture="search.json")

    result = tidal.searches.find("myband")

    assert len(result.artists.items) == 3
    assert len(result.albums.items) == 2
    assert len(result.playlists.items) == 1
    assert len(result.tracks.items) == 2


def test_find_partial_results(stub, tidal):
    stub.add("GET", "/search", body='{"artists": {"items": [{"id": 1}, {"id": 2}]}, "tracks": {"items": []}}')

    result = tidal.searches.find("myband")

    assert len(result.artists.items) == 2
    assert result.tracks.items == []
    assert result.albums.items == []


def test_expired_session(stub, tidal):
    stub.add("GET", "/search", status=401, body='{"status": 401, "subStatus": 11003, "userMessage": "expired"}')

    with pytest.raises(UnauthorizedError):
        tidal.searches.find("myband")


# =============================================================================
# Deprecated shortcuts
# =============================================================================


class TestDeprecatedShortcuts:
    def test_artist(self, stub, tidal):
        stub.add("GET", "/artists/37312", fixture="artist.json")

        with pytest.warns(DeprecationWarning, match="artists.get"):
            artist = tidal.artist("37312")

        assert artist.name == "myband"

    def test_search(self, stub, tidal):
        stub.add("GET", "/search", fixture="search.json")

        with pytest.warns(DeprecationWarning, match="searches.find"):
            result = tidal.search("myband")

        assert len(result.tracks.items) == 2

    def test_playlist_add_tracks(self, stub, tidal):
        items = f"/playlists/{PLAYLIST_ID}/items"
        stub.add("GET", items, body="{}", headers={"etag": "7"})
        stub.add("POST", items, body="{}")
        stub.add("GET", f"/playlists/{PLAYLIST_ID}", fixture="playlist.json")

        with pytest.warns(DeprecationWarning, match="playlists.add_tracks"):
            playlist = tidal.playlist_add_tracks(PLAYLIST_ID, [Track(id=1)], True)

        assert playlist.title == "Road trip"

    @pytest.mark.parametrize(
        "method,args,route,fixture",
        [
            ("album", ("79914998",), ("GET", "/albums/79914998"), "album.json"),
            ("artist_albums", ("37312",), ("GET", "/artists/37312/albums"), "artist_albums.json"),
            ("album_tracks", ("79914998",), ("GET", "/albums/79914998/tracks"), "album_tracks.json"),
            ("playlist", (PLAYLIST_ID,), ("GET", f"/playlists/{PLAYLIST_ID}"), "playlist.json"),
            ("playlist_tracks", (PLAYLIST_ID,), ("GET", f"/playlists/{PLAYLIST_ID}/tracks"), "playlist_tracks.json"),
            ("user_playlists", (), ("GET", "/users/1234/playlists"), "user_playlists.json"),
            ("create_playlist", ("Road trip", ""), ("POST", "/users/1234/playlists"), "playlist.json"),
            ("search_artist", ("myband",), ("GET", "/search"), "search.json"),
            ("search_album", ("myband",), ("GET", "/search"), "search.json"),
            ("search_track", ("myband",), ("GET", "/search"), "search.json"),
            ("search_playlist", ("myband",), ("GET", "/search"), "search.json"),
        ],
    )
    def test_shortcuts_delegate(self, stub, tidal, method, args, route, fixture):
        stub.add(*route, fixture=fixture)

        with pytest.warns(DeprecationWarning):
            getattr(tidal, method)(*args)

        assert len(stub.requests_to(*route)) == 1


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "TIDAL_APP_TOKEN",
        "TIDAL_USERNAME",
        "TIDAL_PASSWORD",
        "TIDAL_SESSION_ID",
        "TIDAL_USER_ID",
        "TIDAL_COUNTRY_CODE",
        "TIDAL_BASE_URL",
        "TIDAL_LOGIN_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    def test_login(self, stub, clean_env):
        stub.add("POST", "/login/username", body=SESSION_JSON)
        clean_env.setenv("TIDAL_APP_TOKEN", "some_token")
        clean_env.setenv("TIDAL_USERNAME", "myuser@example.com")
        clean_env.setenv("TIDAL_PASSWORD", "secret")
        clean_env.setenv("TIDAL_LOGIN_URL", f"{stub.url}/login/username")
        clean_env.setenv("TIDAL_BASE_URL", stub.url)

        client = Tidal.from_env()

        assert client.session == Session(user_id=123, session_id="session-id-123", country_code="US")

    def test_reuses_session(self, stub, clean_env):
        clean_env.setenv("TIDAL_SESSION_ID", "xq123")
        clean_env.setenv("TIDAL_USER_ID", "1234")
        clean_env.setenv("TIDAL_COUNTRY_CODE", "DE")
        clean_env.setenv("TIDAL_BASE_URL", stub.url)
        stub.add("GET", "/artists/37312", fixture="artist.json")

        client = Tidal.from_env()
        client.artists.get("37312")

        assert client.user_id() == 1234
        (request,) = stub.requests
        assert request.query == {"countryCode": "DE"}

    def test_missing_configuration(self, clean_env):
        with pytest.raises(ValidationError):
            Tidal.from_env()

    def test_bad_user_id(self, clean_env):
        clean_env.setenv("TIDAL_SESSION_ID", "xq123")
        clean_env.setenv("TIDAL_USER_ID", "abc")
        clean_env.setenv("TIDAL_COUNTRY_CODE", "DE")
        with pytest.raises(ValidationError):
            Tidal.from_env()

    def test_rejected_login(self, stub, clean_env):
        stub.add("POST", "/login/username", status=401, body="{}")
        clean_env.setenv("TIDAL_APP_TOKEN", "some_token")
        clean_env.setenv("TIDAL_USERNAME", "myuser@example.com")
        clean_env.setenv("TIDAL_PASSWORD", "wrong")
        clean_env.setenv("TIDAL_LOGIN_URL", f"{stub.url}/login/username")

        with pytest.raises(UnauthorizedError):
            Tidal.from_env()
