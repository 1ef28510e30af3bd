"""Database layout shared with existing songmem.sql files.

``id`` is declared explicitly instead of relying on ``rowid`` so that
AUTOINCREMENT applies: ids are never reused, which makes "last added song" and
"last hearing" a matter of picking the greatest id.
"""

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS song(
        id      INTEGER PRIMARY KEY AUTOINCREMENT,
        name    TEXT NOT NULL,
        addedAt TEXT NOT NULL,
        CONSTRAINT name_unique UNIQUE(name COLLATE NOCASE)
    )
    """,
    "CREATE INDEX IF NOT EXISTS song_name ON song(name)",
    """
    CREATE TABLE IF NOT EXISTS hearing(
        id      INTEGER PRIMARY KEY AUTOINCREMENT,
        songID  INTEGER NOT NULL,
        heardAt TEXT NOT NULL,
        FOREIGN KEY(songID) REFERENCES song(id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS hearing_songID ON hearing(songID)",
)
