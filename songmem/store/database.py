from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from ..errors import IntegrityError, NotFound, StorageError, ValidationError
from .models import Hearing, Song, SongHearing
from .results import WriteResult, WriteStatus
from .schema import SCHEMA_STATEMENTS
from .timestamps import format_timestamp, now_local, parse_timestamp

log = logging.getLogger(__name__)

DEFAULT_MAX_NAME_LENGTH = 100

_LAST_HEARING_SQL = """
    SELECT hearing.id AS id, song.name AS name
    FROM hearing
    INNER JOIN song ON hearing.songID = song.id
    {where}
    ORDER BY hearing.id DESC
    LIMIT 1
"""


def validate_name(name: str, max_length: int = DEFAULT_MAX_NAME_LENGTH) -> None:
    """Reject names that would be unusable as a line of listing output."""
    if not name:
        raise ValidationError("the given name is empty")
    if len(name) > max_length:
        raise ValidationError(f"the given name is longer than {max_length} characters")
    if "\n" in name or "\r" in name:
        raise ValidationError("the given name contains a newline character")


class SongStore:
    """SQLite-backed catalog of songs and the log of their hearings.

    Song names are unique ignoring case. A song can only be removed once no
    hearing references it; hearings are never deleted as a side effect.
    """

    def __init__(
        self,
        db_path: str | Path,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
        clock: Callable[[], datetime] | None = None,
    ):
        """Open (or create) the database file.

        Args:
            db_path: Path of the SQLite file, or ":memory:"
            max_name_length: Longest accepted song name
            clock: Returns the current offset-aware local time
        """
        self.db_path = str(db_path)
        self.max_name_length = max_name_length
        self._clock = clock or now_local

        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode; transactions are opened explicitly in _transaction().
            self._conn = sqlite3.connect(self.db_path, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"cannot open database {self.db_path}: {e}") from e
        log.debug("Opened song database %s", self.db_path)

    def __enter__(self) -> SongStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements atomically, rolling back on any error."""
        try:
            self._conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        try:
            yield self._conn
        except sqlite3.Error as e:
            self._rollback()
            raise StorageError(str(e)) from e
        except BaseException:
            self._rollback()
            raise
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def _rollback(self) -> None:
        # SQLite may already have rolled back on its own (SQLITE_FULL, SQLITE_BUSY, ...).
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def now(self) -> datetime:
        """Return the current time as seen by this store's clock."""
        return self._clock()

    def _now(self) -> datetime:
        # Stored timestamps have second precision; keep returned models identical.
        return self._clock().replace(microsecond=0)

    def create_schema_if_not_exists(self) -> None:
        """Create tables and indexes in a single transaction."""
        with self._transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
        log.debug("Schema ready in %s", self.db_path)

    def validate_name(self, name: str) -> None:
        validate_name(name, self.max_name_length)

    # Writes

    def _insert_song(self, name: str, added_at: datetime) -> WriteResult:
        try:
            with self._transaction() as conn:
                cur = conn.execute(
                    "INSERT OR IGNORE INTO song(name, addedAt) VALUES (?, ?)",
                    (name, format_timestamp(added_at)),
                )
        except StorageError as e:
            return WriteResult.error(str(e))
        if cur.rowcount == 0:
            return WriteResult.already_exists(f"the song '{name}' already exists")
        return WriteResult.ok(cur.lastrowid)

    def add_song(self, name: str) -> Song:
        """Add a song, stamped with the current local time.

        Feel free to include the artist's name in the song name.

        Raises:
            ValidationError: If the name is empty, too long or multi-line
            AlreadyExists: If a song of that name exists, ignoring case
        """
        self.validate_name(name)
        added_at = self._now()
        result = self._insert_song(name, added_at)
        result.raise_for_status()
        log.debug("Added song '%s' (id=%d)", name, result.row_id)
        return Song(id=result.row_id, name=name, added_at=added_at)

    def add_hearing(self, name: str) -> Hearing:
        """Register that an existing song was just heard.

        Raises:
            ValidationError: If the name is empty
            NotFound: If no song matches the name, ignoring case
        """
        if not name:
            raise ValidationError("the given song is empty")
        heard_at = self._now()
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT id FROM song WHERE name = ? COLLATE NOCASE",
                (name,),
            ).fetchone()
            if row is None:
                raise NotFound(f"the song '{name}' does not exist")
            cur = conn.execute(
                "INSERT INTO hearing(songID, heardAt) VALUES (?, ?)",
                (row["id"], format_timestamp(heard_at)),
            )
        log.debug("Added hearing of '%s' at %s", name, format_timestamp(heard_at))
        return Hearing(id=cur.lastrowid, song_id=row["id"], heard_at=heard_at)

    def add_hearing_and_song_if_needed(self, name: str) -> Hearing:
        """Register a hearing, adding the song first when it is new."""
        self.validate_name(name)
        result = self._insert_song(name, self._now())
        if result.is_ok:
            log.debug("Added song '%s' (id=%d)", name, result.row_id)
        elif result.status is WriteStatus.ALREADY_EXISTS:
            log.debug("Song '%s' already known", name)
        else:
            result.raise_for_status()
        return self.add_hearing(name)

    def _remove_last_hearing(self, where: str, params: tuple, missing: str) -> str:
        with self._transaction() as conn:
            row = conn.execute(_LAST_HEARING_SQL.format(where=where), params).fetchone()
            if row is None:
                raise NotFound(missing)
            cur = conn.execute("DELETE FROM hearing WHERE id = ?", (row["id"],))
            if cur.rowcount != 1:
                raise StorageError("hearing got lost in transit")
        log.debug("Removed hearing %d of '%s'", row["id"], row["name"])
        return row["name"]

    def remove_last_hearing(self) -> str:
        """Remove the latest hearing and return the name of its song."""
        return self._remove_last_hearing("", (), "no hearing found")

    def remove_last_hearing_of(self, name: str) -> str:
        """Remove the latest hearing of the given song.

        Raises:
            NotFound: If the song does not exist or was never heard
        """
        return self._remove_last_hearing(
            "WHERE song.name = ? COLLATE NOCASE",
            (name,),
            f"no hearing of '{name}' found",
        )

    def _remove_song_row(self, conn: sqlite3.Connection, row: sqlite3.Row) -> str:
        (references,) = conn.execute(
            "SELECT COUNT(*) FROM hearing WHERE songID = ?",
            (row["id"],),
        ).fetchone()
        if references:
            raise IntegrityError(
                f"the song '{row['name']}' is still referenced by {references} hearing(s)"
            )
        cur = conn.execute("DELETE FROM song WHERE id = ?", (row["id"],))
        if cur.rowcount != 1:
            raise StorageError("song got lost in transit")
        log.debug("Removed song '%s' (id=%d)", row["name"], row["id"])
        return row["name"]

    def remove_song(self, name: str) -> str:
        """Remove the song with exactly this name.

        Raises:
            NotFound: If no song has this name
            IntegrityError: If hearings of the song still exist
        """
        with self._transaction() as conn:
            row = conn.execute("SELECT id, name FROM song WHERE name = ?", (name,)).fetchone()
            if row is None:
                raise NotFound(f"the song '{name}' does not exist")
            return self._remove_song_row(conn, row)

    def remove_last_added_song(self) -> str:
        """Remove the most recently added song and return its name."""
        with self._transaction() as conn:
            row = conn.execute("SELECT id, name FROM song ORDER BY id DESC LIMIT 1").fetchone()
            if row is None:
                raise NotFound("no song found")
            return self._remove_song_row(conn, row)

    def rename_song(self, name: str, new_name: str) -> Song:
        """Rename a song. Its id is kept, so all hearings follow the new name.

        Raises:
            ValidationError: If the new name is invalid
            NotFound: If no song has exactly the old name
            AlreadyExists: If another song already uses the new name
        """
        self.validate_name(new_name)
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT id, addedAt FROM song WHERE name = ?",
                (name,),
            ).fetchone()
            if row is None:
                raise NotFound(f"the song '{name}' does not exist")
            cur = conn.execute(
                "UPDATE OR IGNORE song SET name = ? WHERE id = ?",
                (new_name, row["id"]),
            )
            if cur.rowcount == 1:
                result = WriteResult.ok(row["id"])
            else:
                result = WriteResult.already_exists(f"the song '{new_name}' already exists")
        result.raise_for_status()
        log.debug("Renamed song '%s' to '%s'", name, new_name)
        return Song(id=row["id"], name=new_name, added_at=_parse_column(row["addedAt"]))

    # Reads

    def get_song(self, name: str) -> Song:
        """Look up a song by name, ignoring case."""
        rows = self._query(
            "SELECT id, name, addedAt FROM song WHERE name = ? COLLATE NOCASE",
            (name,),
        )
        if not rows:
            raise NotFound(f"the song '{name}' does not exist")
        return _row_to_song(rows[0])

    def songs(self) -> list[Song]:
        """Return all songs in order of addition, oldest first."""
        rows = self._query("SELECT id, name, addedAt FROM song ORDER BY id")
        return [_row_to_song(row) for row in rows]

    def song_hearings(self) -> list[SongHearing]:
        """Return every hearing as (song name, time), oldest hearing first."""
        rows = self._query(
            """
            SELECT song.name AS name, hearing.heardAt AS heardAt
            FROM hearing
            INNER JOIN song ON song.id = hearing.songID
            ORDER BY hearing.id
            """
        )
        return [SongHearing(name=row["name"], heard_at=_parse_column(row["heardAt"])) for row in rows]

    def hearing_count(self, name: str | None = None) -> int:
        """Count all hearings, or only those of the given song."""
        if name is None:
            rows = self._query("SELECT COUNT(*) FROM hearing")
        else:
            rows = self._query(
                """
                SELECT COUNT(*) FROM hearing
                INNER JOIN song ON song.id = hearing.songID
                WHERE song.name = ? COLLATE NOCASE
                """,
                (name,),
            )
        return int(rows[0][0])


def _parse_column(text: str) -> datetime:
    try:
        return parse_timestamp(text)
    except ValueError as e:
        raise StorageError(f"invalid timestamp in database: {text!r}") from e


def _row_to_song(row: sqlite3.Row) -> Song:
    return Song(id=row["id"], name=row["name"], added_at=_parse_column(row["addedAt"]))
