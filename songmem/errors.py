class SongmemError(Exception):
    """Base class for all errors raised by songmem."""


class ValidationError(SongmemError):
    """A song name was rejected before touching the database."""


class AlreadyExists(SongmemError):
    """A song with the same name (ignoring case) is already stored."""


class NotFound(SongmemError):
    """The referenced song or hearing does not exist."""


class IntegrityError(SongmemError):
    """A song cannot be removed while hearings still reference it."""


class StorageError(SongmemError):
    """Any other failure reported by the database."""
