"""
Core types mirroring the Tidal API JSON payloads.

Every field is optional: the API omits fields depending on the endpoint, so
``None`` means "not sent". ``from_dict`` reads the camelCase wire keys and
``to_dict`` writes back only the fields that were present.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


# =============================================================================
# Field helpers
# =============================================================================


def _expect_dict(data: Any, name: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{name}: expected a JSON object, got {type(data).__name__}")
    return data


def _opt(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    """Read an optional scalar, rejecting values of the wrong JSON type."""
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; JSON true must not pass for a number
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise TypeError(f"{key}: expected {kind}, got bool")
    if not isinstance(value, kind):
        raise TypeError(f"{key}: expected {kind}, got {type(value).__name__}")
    return value


def _opt_float(data: dict[str, Any], key: str) -> float | None:
    value = _opt(data, key, (int, float))
    return float(value) if value is not None else None


def _opt_enum(data: dict[str, Any], key: str, enum: type[E]) -> E | None:
    value = _opt(data, key, str)
    return enum(value) if value is not None else None


def _enum_item(enum: type[E], value: Any) -> E:
    if not isinstance(value, str):
        raise TypeError(f"{enum.__name__}: expected str, got {type(value).__name__}")
    return enum(value)


def _opt_enum_list(data: dict[str, Any], key: str, enum: type[E]) -> list[E] | None:
    values = _opt(data, key, list)
    if values is None:
        return None
    return [_enum_item(enum, v) for v in values]


def _opt_list(data: dict[str, Any], key: str, parser: Callable[[Any], T]) -> list[T] | None:
    values = _opt(data, key, list)
    if values is None:
        return None
    return [parser(v) for v in values]


def _opt_sparse_list(data: dict[str, Any], key: str, parser: Callable[[Any], T]) -> list[T | None] | None:
    """Like ``_opt_list``, but ``null`` entries are kept as ``None``."""
    values = _opt(data, key, list)
    if values is None:
        return None
    return [parser(v) if v is not None else None for v in values]


def _opt_obj(data: dict[str, Any], key: str, parser: Callable[[Any], T]) -> T | None:
    value = data.get(key)
    return parser(value) if value is not None else None


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _compact(pairs: dict[str, Any]) -> dict[str, Any]:
    """Drop absent fields and encode the rest for the wire."""
    return {key: _encode(value) for key, value in pairs.items() if value is not None}


# =============================================================================
# Enumerations
# =============================================================================


class ModelType(str, Enum):
    """The ``type`` discriminator carried by several entities."""

    ALBUM = "ALBUM"
    ARTIST = "ARTIST"
    EDITORIAL = "EDITORIAL"
    MAIN = "MAIN"
    USER = "USER"
    PODCAST = "PODCAST"
    CONTRIBUTOR = "CONTRIBUTOR"


class AudioMode(str, Enum):
    MONO = "MONO"
    STEREO = "STEREO"
    SONY_360RA = "SONY_360RA"
    DOLBY_ATMOS = "DOLBY_ATMOS"


class AudioQuality(str, Enum):
    LOSSLESS = "LOSSLESS"
    HI_RES = "HI_RES"  # marketed as "Master"
    HIGH = "HIGH"
    LOW = "LOW"


class ArtistType(str, Enum):
    ARTIST = "ARTIST"
    CONTRIBUTOR = "CONTRIBUTOR"


# =============================================================================
# Artist
# =============================================================================


@dataclass
class Artist:
    """An artist, either standalone or embedded in an album or track."""

    id: int | None = None
    name: str | None = None
    artist_types: list[ArtistType] | None = None
    url: str | None = None
    picture: str | None = None
    popularity: int | None = None
    type: ModelType | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Artist":
        """Create from API response dict."""
        data = _expect_dict(data, "Artist")
        return cls(
            id=_opt(data, "id", int),
            name=_opt(data, "name", str),
            artist_types=_opt_enum_list(data, "artistTypes", ArtistType),
            url=_opt(data, "url", str),
            picture=_opt(data, "picture", str),
            popularity=_opt(data, "popularity", int),
            type=_opt_enum(data, "type", ModelType),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "artistTypes": self.artist_types,
                "url": self.url,
                "picture": self.picture,
                "popularity": self.popularity,
                "type": self.type,
            }
        )


# =============================================================================
# Album
# =============================================================================


@dataclass
class Album:
    """An album. Embedded artists are denormalized copies."""

    id: int | None = None
    title: str | None = None
    duration: int | None = None
    stream_ready: bool | None = None
    stream_start_date: str | None = None
    allow_streaming: bool | None = None
    premium_streaming_only: bool | None = None
    number_of_tracks: int | None = None
    number_of_videos: int | None = None
    number_of_volumes: int | None = None
    release_date: str | None = None
    copyright: str | None = None
    version: str | None = None
    url: str | None = None
    cover: str | None = None
    video_cover: str | None = None
    explicit: bool | None = None
    upc: str | None = None
    popularity: int | None = None
    audio_quality: AudioQuality | None = None
    audio_modes: list[AudioMode] | None = None
    artists: list[Artist] | None = None
    type: ModelType | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Album":
        """Create from API response dict."""
        data = _expect_dict(data, "Album")
        return cls(
            id=_opt(data, "id", int),
            title=_opt(data, "title", str),
            duration=_opt(data, "duration", int),
            stream_ready=_opt(data, "streamReady", bool),
            stream_start_date=_opt(data, "streamStartDate", str),
            allow_streaming=_opt(data, "allowStreaming", bool),
            premium_streaming_only=_opt(data, "premiumStreamingOnly", bool),
            number_of_tracks=_opt(data, "numberOfTracks", int),
            number_of_videos=_opt(data, "numberOfVideos", int),
            number_of_volumes=_opt(data, "numberOfVolumes", int),
            release_date=_opt(data, "releaseDate", str),
            copyright=_opt(data, "copyright", str),
            version=_opt(data, "version", str),
            url=_opt(data, "url", str),
            cover=_opt(data, "cover", str),
            video_cover=_opt(data, "videoCover", str),
            explicit=_opt(data, "explicit", bool),
            upc=_opt(data, "upc", str),
            popularity=_opt(data, "popularity", int),
            audio_quality=_opt_enum(data, "audioQuality", AudioQuality),
            audio_modes=_opt_enum_list(data, "audioModes", AudioMode),
            artists=_opt_list(data, "artists", Artist.from_dict),
            type=_opt_enum(data, "type", ModelType),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "title": self.title,
                "duration": self.duration,
                "streamReady": self.stream_ready,
                "streamStartDate": self.stream_start_date,
                "allowStreaming": self.allow_streaming,
                "premiumStreamingOnly": self.premium_streaming_only,
                "numberOfTracks": self.number_of_tracks,
                "numberOfVideos": self.number_of_videos,
                "numberOfVolumes": self.number_of_volumes,
                "releaseDate": self.release_date,
                "copyright": self.copyright,
                "version": self.version,
                "url": self.url,
                "cover": self.cover,
                "videoCover": self.video_cover,
                "explicit": self.explicit,
                "upc": self.upc,
                "popularity": self.popularity,
                "audioQuality": self.audio_quality,
                "audioModes": self.audio_modes,
                "artists": self.artists,
                "type": self.type,
            }
        )


# =============================================================================
# Playlist
# =============================================================================


@dataclass
class Playlist:
    """A playlist. Playlists are keyed by ``uuid`` rather than a numeric id."""

    uuid: str | None = None
    title: str | None = None
    number_of_tracks: int | None = None
    number_of_videos: int | None = None
    description: str | None = None
    duration: int | None = None
    last_updated: str | None = None
    created: str | None = None
    type: ModelType | None = None
    public_playlist: bool | None = None
    url: str | None = None
    image: str | None = None
    popularity: int | None = None
    square_image: str | None = None
    promoted_artists: list[Artist] | None = None
    last_item_added_at: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Playlist":
        """Create from API response dict."""
        data = _expect_dict(data, "Playlist")
        return cls(
            uuid=_opt(data, "uuid", str),
            title=_opt(data, "title", str),
            number_of_tracks=_opt(data, "numberOfTracks", int),
            number_of_videos=_opt(data, "numberOfVideos", int),
            description=_opt(data, "description", str),
            duration=_opt(data, "duration", int),
            last_updated=_opt(data, "lastUpdated", str),
            created=_opt(data, "created", str),
            type=_opt_enum(data, "type", ModelType),
            public_playlist=_opt(data, "publicPlaylist", bool),
            url=_opt(data, "url", str),
            image=_opt(data, "image", str),
            popularity=_opt(data, "popularity", int),
            square_image=_opt(data, "squareImage", str),
            promoted_artists=_opt_list(data, "promotedArtists", Artist.from_dict),
            last_item_added_at=_opt(data, "lastItemAddedAt", str),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "uuid": self.uuid,
                "title": self.title,
                "numberOfTracks": self.number_of_tracks,
                "numberOfVideos": self.number_of_videos,
                "description": self.description,
                "duration": self.duration,
                "lastUpdated": self.last_updated,
                "created": self.created,
                "type": self.type,
                "publicPlaylist": self.public_playlist,
                "url": self.url,
                "image": self.image,
                "popularity": self.popularity,
                "squareImage": self.square_image,
                "promotedArtists": self.promoted_artists,
                "lastItemAddedAt": self.last_item_added_at,
            }
        )


# =============================================================================
# Track
# =============================================================================


@dataclass
class Track:
    """A track, with its album and artists embedded."""

    id: int | None = None
    title: str | None = None
    duration: int | None = None
    replay_gain: float | None = None
    peak: float | None = None
    allow_streaming: bool | None = None
    stream_ready: bool | None = None
    stream_start_date: str | None = None
    premium_streaming_only: bool | None = None
    track_number: int | None = None
    volume_number: int | None = None
    version: str | None = None
    popularity: int | None = None
    copyright: str | None = None
    url: str | None = None
    isrc: str | None = None
    editable: bool | None = None
    explicit: bool | None = None
    audio_quality: AudioQuality | None = None
    # tracks may carry null entries in these two lists
    audio_modes: list[AudioMode | None] | None = None
    artist: Artist | None = None
    artists: list[Artist | None] | None = None
    album: Album | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Track":
        """Create from API response dict."""
        data = _expect_dict(data, "Track")
        return cls(
            id=_opt(data, "id", int),
            title=_opt(data, "title", str),
            duration=_opt(data, "duration", int),
            replay_gain=_opt_float(data, "replayGain"),
            peak=_opt_float(data, "peak"),
            allow_streaming=_opt(data, "allowStreaming", bool),
            stream_ready=_opt(data, "streamReady", bool),
            stream_start_date=_opt(data, "streamStartDate", str),
            premium_streaming_only=_opt(data, "premiumStreamingOnly", bool),
            track_number=_opt(data, "trackNumber", int),
            volume_number=_opt(data, "volumeNumber", int),
            version=_opt(data, "version", str),
            popularity=_opt(data, "popularity", int),
            copyright=_opt(data, "copyright", str),
            url=_opt(data, "url", str),
            isrc=_opt(data, "isrc", str),
            editable=_opt(data, "editable", bool),
            explicit=_opt(data, "explicit", bool),
            audio_quality=_opt_enum(data, "audioQuality", AudioQuality),
            audio_modes=_opt_sparse_list(data, "audioModes", partial(_enum_item, AudioMode)),
            artist=_opt_obj(data, "artist", Artist.from_dict),
            artists=_opt_sparse_list(data, "artists", Artist.from_dict),
            album=_opt_obj(data, "album", Album.from_dict),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "title": self.title,
                "duration": self.duration,
                "replayGain": self.replay_gain,
                "peak": self.peak,
                "allowStreaming": self.allow_streaming,
                "streamReady": self.stream_ready,
                "streamStartDate": self.stream_start_date,
                "premiumStreamingOnly": self.premium_streaming_only,
                "trackNumber": self.track_number,
                "volumeNumber": self.volume_number,
                "version": self.version,
                "popularity": self.popularity,
                "copyright": self.copyright,
                "url": self.url,
                "isrc": self.isrc,
                "editable": self.editable,
                "explicit": self.explicit,
                "audioQuality": self.audio_quality,
                "audioModes": self.audio_modes,
                "artist": self.artist,
                "artists": self.artists,
                "album": self.album,
            }
        )


# =============================================================================
# Collections
# =============================================================================


@dataclass
class TidalItems(Generic[T]):
    """The ``{"items": [...]}`` envelope returned by list endpoints."""

    items: list[T] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, parser: Callable[[Any], T]) -> "TidalItems[T]":
        """Create from API response dict, parsing each item with ``parser``."""
        data = _expect_dict(data, "TidalItems")
        items = data.get("items")
        if not isinstance(items, list):
            raise TypeError("items: expected a JSON array")
        return cls(items=[parser(item) for item in items])

    @classmethod
    def parser(cls, item_parser: Callable[[Any], T]) -> Callable[[Any], "TidalItems[T]"]:
        """Bind an item parser, for use with ``APIClient.convert_result``."""
        return partial(cls.from_dict, parser=item_parser)

    def to_dict(self) -> dict[str, Any]:
        return {"items": [_encode(item) for item in self.items]}


@dataclass
class TidalSearch:
    """Search results: four independent collections, any of which may be empty."""

    artists: TidalItems[Artist] = field(default_factory=TidalItems)
    albums: TidalItems[Album] = field(default_factory=TidalItems)
    playlists: TidalItems[Playlist] = field(default_factory=TidalItems)
    tracks: TidalItems[Track] = field(default_factory=TidalItems)

    @classmethod
    def from_dict(cls, data: Any) -> "TidalSearch":
        """Create from API response dict."""
        data = _expect_dict(data, "TidalSearch")

        def collection(key: str, parser: Callable[[Any], T]) -> TidalItems[T]:
            if data.get(key) is None:
                return TidalItems()
            return TidalItems.from_dict(data[key], parser)

        return cls(
            artists=collection("artists", Artist.from_dict),
            albums=collection("albums", Album.from_dict),
            playlists=collection("playlists", Playlist.from_dict),
            tracks=collection("tracks", Track.from_dict),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "artists": self.artists.to_dict(),
            "albums": self.albums.to_dict(),
            "playlists": self.playlists.to_dict(),
            "tracks": self.tracks.to_dict(),
        }
