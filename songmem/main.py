import argparse
import logging
import sys
from collections.abc import Callable

from . import operations
from .config import Settings
from .context import RuntimeContext
from .durations import parse_duration
from .errors import SongmemError
from .store import SongStore

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID_NAME = 2
EXIT_OPEN_DATABASE = 3
EXIT_CREATE_SCHEMA = 4
EXIT_ADD_HEARING = 5
EXIT_REGISTER = 6
EXIT_LIST_ADDED = 7
EXIT_FAVOURITE = 8
EXIT_FRECENT = 9
EXIT_SUGGESTIONS = 10
EXIT_REMOVE_HEARING = 11
EXIT_REMOVE_SONG = 12
EXIT_RENAME = 13
EXIT_LIST_HEARD = 14

EPILOG = """\
If songmem is called without any arguments, it will list all songs, last heard
first.
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="songmem",
        description="Remember which songs you hear and get listings and suggestions from that history.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-r", "--register",
        action="store_true",
        help="Register that you just heard a song. If the song does not exist yet, it will be added.",
    )
    mode.add_argument(
        "-t", "--added-at",
        action="store_true",
        help="List songs by the date of their addition. Newest first.",
    )
    mode.add_argument(
        "-f", "--favourite",
        action="store_true",
        help="List songs you heard the most. Most heard first.",
    )
    mode.add_argument(
        "-c", "--frecent",
        action="store_true",
        help="List songs you recently heard a lot. Most frecent first.",
    )
    mode.add_argument(
        "-s", "--suggestions",
        action="store_true",
        help="List songs that you often hear before or after hearing the given song. Best suggestions first.",
    )
    mode.add_argument(
        "--remove-hearing",
        action="store_true",
        help="Remove the latest hearing. If a name is given, remove the latest hearing of that song.",
    )
    mode.add_argument(
        "--remove-song",
        action="store_true",
        help="Remove the last added song, or the named song. Fails while hearings of the song exist.",
    )
    mode.add_argument(
        "--rename",
        action="store_true",
        help="Rename the song <name> to <newname>.",
    )
    parser.add_argument(
        "-n", "--no-add",
        action="store_true",
        help="With --register: do not add unknown songs; fail instead.",
    )
    parser.add_argument(
        "-o", "--omit",
        metavar="TIMESPAN",
        help="Exclude hearings within TIMESPAN before now, e.g. 30m or 2h.",
    )
    parser.add_argument("names", nargs="*", metavar="name", help="Song name (and new name for --rename)")
    return parser


def _check_usage(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    n = len(args.names)
    if args.register or args.suggestions:
        if n != 1:
            parser.error("exactly one <name> is required")
    elif args.rename:
        if n != 2:
            parser.error("--rename requires <name> and <newname>")
    elif args.remove_hearing or args.remove_song:
        if n > 1:
            parser.error("at most one <name> may be given")
    elif n:
        parser.error("unexpected <name> without a command")

    if args.no_add and not args.register:
        parser.error("--no-add can only be used with --register")
    if args.omit is not None and not (args.favourite or args.frecent or args.suggestions):
        parser.error("--omit can only be used with --favourite, --frecent or --suggestions")


def _print_songs(songs: list[str]) -> None:
    for s in songs:
        print(s)


def _listing(
    ctx: RuntimeContext,
    args: argparse.Namespace,
    exit_code: int,
    lister: Callable[..., list[str]],
    *lister_args,
    **lister_kwargs,
) -> int:
    if args.omit:
        try:
            lister_kwargs["omit"] = parse_duration(args.omit)
        except ValueError as e:
            log.error('Could not parse duration "%s": %s', args.omit, e)
            return exit_code
    try:
        songs = lister(ctx.store, *lister_args, **lister_kwargs)
    except SongmemError as e:
        log.error("Error when listing songs: %s", e)
        return exit_code
    _print_songs(songs)
    return EXIT_OK


def _dispatch(ctx: RuntimeContext, args: argparse.Namespace, names: list[str]) -> int:
    store = ctx.store
    settings = ctx.settings

    if args.register and args.no_add:
        try:
            operations.add_hearing(store, names[0])
        except SongmemError as e:
            log.error("Error when adding hearing: %s", e)
            return EXIT_ADD_HEARING
        return EXIT_OK

    if args.register:
        try:
            store.validate_name(names[0])
        except SongmemError as e:
            log.error("Error: %s", e)
            return EXIT_INVALID_NAME
        try:
            operations.add_hearing_and_song_if_needed(store, names[0])
        except SongmemError as e:
            log.error("Error when adding song or hearing: %s", e)
            return EXIT_REGISTER
        return EXIT_OK

    if args.added_at:
        try:
            songs = operations.list_songs_in_order_of_addition(store)
        except SongmemError as e:
            log.error("Error when listing songs: %s", e)
            return EXIT_LIST_ADDED
        _print_songs(songs)
        return EXIT_OK

    if args.favourite:
        return _listing(ctx, args, EXIT_FAVOURITE, operations.list_favourite_songs)

    if args.frecent:
        return _listing(
            ctx,
            args,
            EXIT_FRECENT,
            operations.list_frecent_songs,
            half_life_hours=settings.frecency_half_life_hours,
        )

    if args.suggestions:
        return _listing(
            ctx,
            args,
            EXIT_SUGGESTIONS,
            operations.list_suggestions,
            names[0],
            half_life_minutes=settings.suggestion_half_life_minutes,
        )

    if args.remove_hearing:
        try:
            song = operations.remove_last_hearing(store, names[0] if names else None)
        except SongmemError as e:
            log.error("Error when removing hearing: %s", e)
            return EXIT_REMOVE_HEARING
        log.info("Removed latest hearing of: %s", song)
        return EXIT_OK

    if args.remove_song:
        try:
            song = operations.remove_song(store, names[0] if names else None)
        except SongmemError as e:
            log.error("Error when removing song: %s", e)
            return EXIT_REMOVE_SONG
        log.info("Removed song: %s", song)
        return EXIT_OK

    if args.rename:
        old_name, new_name = names
        try:
            store.validate_name(new_name)
        except SongmemError as e:
            log.error("Error: %s", e)
            return EXIT_INVALID_NAME
        try:
            operations.rename_song(store, old_name, new_name)
        except SongmemError as e:
            log.error("Error when renaming song: %s", e)
            return EXIT_RENAME
        log.info("Renamed song %s to %s", old_name, new_name)
        return EXIT_OK

    try:
        songs = operations.list_songs_in_order_of_last_hearing(store)
    except SongmemError as e:
        log.error("Error when listing songs: %s", e)
        return EXIT_LIST_HEARD
    _print_songs(songs)
    return EXIT_OK


def run(settings: Settings, argv: list[str] | None = None) -> int:
    """Parse the command line, run one command and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    _check_usage(parser, args)
    names = [n.strip() for n in args.names]

    try:
        store = SongStore(settings.db_path, max_name_length=settings.max_name_length)
    except SongmemError as e:
        log.error("Error when initializing database: %s", e)
        return EXIT_OPEN_DATABASE

    with store:
        try:
            store.create_schema_if_not_exists()
        except SongmemError as e:
            log.error("Error when creating database schema: %s", e)
            return EXIT_CREATE_SCHEMA

        ctx = RuntimeContext(settings=settings, store=store)
        return _dispatch(ctx, args, names)
