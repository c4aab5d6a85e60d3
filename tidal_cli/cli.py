"""
Tidal CLI - Command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from tidal_cli.core.errors import TidalError
from tidal_cli.core.types import Album, Artist, Playlist, Track
from tidal_cli.sdk import Tidal

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: TidalError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def _artist_names(artists: list[Artist | None] | None) -> str:
    return ", ".join(a.name or "" for a in artists or [] if a is not None)


def artists_output(artists: list[Artist]) -> None:
    if not is_tty():
        json_output({"items": [a.to_dict() for a in artists]})
        return
    if not artists:
        print("No artists found.")
        return
    table_output(["ID", "Name", "Popularity"], [[a.id or "", a.name or "", a.popularity or ""] for a in artists], [10, 40, 10])


def albums_output(albums: list[Album]) -> None:
    if not is_tty():
        json_output({"items": [a.to_dict() for a in albums]})
        return
    if not albums:
        print("No albums found.")
        return
    table_output(
        ["ID", "Title", "Artists", "Released"],
        [[a.id or "", a.title or "", _artist_names(a.artists), a.release_date or ""] for a in albums],
        [10, 40, 30, 10],
    )


def playlists_output(playlists: list[Playlist]) -> None:
    if not is_tty():
        json_output({"items": [p.to_dict() for p in playlists]})
        return
    if not playlists:
        print("No playlists found.")
        return
    table_output(
        ["UUID", "Title", "Tracks"],
        [[p.uuid or "", p.title or "", p.number_of_tracks or 0] for p in playlists],
        [36, 40, 6],
    )


def tracks_output(tracks: list[Track]) -> None:
    if not is_tty():
        json_output({"items": [t.to_dict() for t in tracks]})
        return
    if not tracks:
        print("No tracks found.")
        return
    table_output(
        ["ID", "Title", "Artists", "Album"],
        [[t.id or "", t.title or "", _artist_names(t.artists), t.album.title if t.album else ""] for t in tracks],
        [10, 40, 30, 30],
    )


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_login(client: Tidal, _args: argparse.Namespace) -> None:
    """Print the session, for reuse through TIDAL_SESSION_ID & co."""
    json_output(client.session.to_dict())


def cmd_artist_get(client: Tidal, args: argparse.Namespace) -> None:
    json_output(client.artists.get(args.artist_id).to_dict())


def cmd_artist_albums(client: Tidal, args: argparse.Namespace) -> None:
    albums_output(client.artists.albums(args.artist_id))


def cmd_artist_search(client: Tidal, args: argparse.Namespace) -> None:
    artists_output(client.artists.search(args.term, args.limit))


def cmd_album_get(client: Tidal, args: argparse.Namespace) -> None:
    json_output(client.albums.get(args.album_id).to_dict())


def cmd_album_tracks(client: Tidal, args: argparse.Namespace) -> None:
    tracks_output(client.albums.tracks(args.album_id))


def cmd_album_search(client: Tidal, args: argparse.Namespace) -> None:
    albums_output(client.albums.search(args.term, args.limit))


def cmd_playlist_get(client: Tidal, args: argparse.Namespace) -> None:
    json_output(client.playlists.get(args.playlist_id).to_dict())


def cmd_playlist_tracks(client: Tidal, args: argparse.Namespace) -> None:
    tracks_output(client.playlists.tracks(args.playlist_id))


def cmd_playlist_search(client: Tidal, args: argparse.Namespace) -> None:
    playlists_output(client.playlists.search(args.term, args.limit))


def cmd_playlist_mine(client: Tidal, _args: argparse.Namespace) -> None:
    playlists_output(client.playlists.user_playlists())


def cmd_playlist_create(client: Tidal, args: argparse.Namespace) -> None:
    json_output(client.playlists.create(args.title, args.description).to_dict())


def cmd_playlist_add_tracks(client: Tidal, args: argparse.Namespace) -> None:
    """Add tracks by ID to a playlist."""
    tracks = [Track(id=track_id) for track_id in args.track_ids]
    playlist = client.playlists.add_tracks(args.playlist_id, tracks, add_dupes=args.add_dupes)
    json_output(playlist.to_dict())


def cmd_track_search(client: Tidal, args: argparse.Namespace) -> None:
    tracks_output(client.tracks.search(args.term, args.limit))


def cmd_search(client: Tidal, args: argparse.Namespace) -> None:
    """Search everything at once."""
    result = client.searches.find(args.term, args.limit)
    if not is_tty():
        json_output(result.to_dict())
        return

    print("Artists:")
    artists_output(result.artists.items)
    print("\nAlbums:")
    albums_output(result.albums.items)
    print("\nPlaylists:")
    playlists_output(result.playlists.items)
    print("\nTracks:")
    tracks_output(result.tracks.items)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tidal",
        description="Tidal API from the command line. Configure with TIDAL_* environment variables or a .env file.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests and responses")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Login ==========
    login = subparsers.add_parser("login", help="Log in and print the session")
    login.set_defaults(func=cmd_login)

    # ========== Artist ==========
    artist = subparsers.add_parser("artist", help="Look up artists")
    artist_sub = artist.add_subparsers(dest="subcommand")

    ar_get = artist_sub.add_parser("get", help="Get artist details")
    ar_get.add_argument("artist_id", help="Artist ID")
    ar_get.set_defaults(func=cmd_artist_get)

    ar_albums = artist_sub.add_parser("albums", help="List albums of an artist")
    ar_albums.add_argument("artist_id", help="Artist ID")
    ar_albums.set_defaults(func=cmd_artist_albums)

    ar_search = artist_sub.add_parser("search", help="Search artists")
    ar_search.add_argument("term", help="Search term")
    ar_search.add_argument("--limit", "-l", type=int, help="Maximum results")
    ar_search.set_defaults(func=cmd_artist_search)

    # ========== Album ==========
    album = subparsers.add_parser("album", help="Look up albums")
    album_sub = album.add_subparsers(dest="subcommand")

    al_get = album_sub.add_parser("get", help="Get album details")
    al_get.add_argument("album_id", help="Album ID")
    al_get.set_defaults(func=cmd_album_get)

    al_tracks = album_sub.add_parser("tracks", help="List tracks of an album")
    al_tracks.add_argument("album_id", help="Album ID")
    al_tracks.set_defaults(func=cmd_album_tracks)

    al_search = album_sub.add_parser("search", help="Search albums")
    al_search.add_argument("term", help="Search term")
    al_search.add_argument("--limit", "-l", type=int, help="Maximum results")
    al_search.set_defaults(func=cmd_album_search)

    # ========== Playlist ==========
    playlist = subparsers.add_parser("playlist", help="Read and edit playlists")
    playlist_sub = playlist.add_subparsers(dest="subcommand")

    pl_get = playlist_sub.add_parser("get", help="Get playlist details")
    pl_get.add_argument("playlist_id", help="Playlist UUID")
    pl_get.set_defaults(func=cmd_playlist_get)

    pl_tracks = playlist_sub.add_parser("tracks", help="List tracks of a playlist")
    pl_tracks.add_argument("playlist_id", help="Playlist UUID")
    pl_tracks.set_defaults(func=cmd_playlist_tracks)

    pl_search = playlist_sub.add_parser("search", help="Search playlists")
    pl_search.add_argument("term", help="Search term")
    pl_search.add_argument("--limit", "-l", type=int, help="Maximum results")
    pl_search.set_defaults(func=cmd_playlist_search)

    pl_mine = playlist_sub.add_parser("mine", help="List your playlists")
    pl_mine.set_defaults(func=cmd_playlist_mine)

    pl_create = playlist_sub.add_parser("create", help="Create a playlist")
    pl_create.add_argument("title", help="Playlist title")
    pl_create.add_argument("--description", "-d", default="", help="Playlist description")
    pl_create.set_defaults(func=cmd_playlist_create)

    pl_add = playlist_sub.add_parser("add-tracks", help="Add tracks to a playlist")
    pl_add.add_argument("playlist_id", help="Playlist UUID")
    pl_add.add_argument("track_ids", nargs="+", type=int, help="Track IDs")
    pl_add.add_argument(
        "--add-dupes",
        action="store_true",
        help="Add tracks already in the playlist (default: fail)",
    )
    pl_add.set_defaults(func=cmd_playlist_add_tracks)

    # ========== Track ==========
    track = subparsers.add_parser("track", help="Look up tracks")
    track_sub = track.add_subparsers(dest="subcommand")

    tr_search = track_sub.add_parser("search", help="Search tracks")
    tr_search.add_argument("term", help="Search term")
    tr_search.add_argument("--limit", "-l", type=int, help="Maximum results")
    tr_search.set_defaults(func=cmd_track_search)

    # ========== Search ==========
    search = subparsers.add_parser("search", help="Search artists, albums, playlists and tracks")
    search.add_argument("term", help="Search term")
    search.add_argument("--limit", "-l", type=int, help="Maximum results per type")
    search.set_defaults(func=cmd_search)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Command groups without a subcommand only print their help
    if getattr(args, "subcommand", "") is None:
        parser.parse_args([args.command, "--help"])

    try:
        client = Tidal.from_env()
        args.func(client, args)
    except TidalError as e:
        error_output(e)


if __name__ == "__main__":
    main()
