from dataclasses import dataclass
from enum import Enum

from ..errors import AlreadyExists, StorageError


class WriteStatus(Enum):
    OK = "ok"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of an insert or rename, tagged instead of raised."""

    status: WriteStatus
    row_id: int | None = None
    detail: str = ""

    @classmethod
    def ok(cls, row_id: int | None = None) -> "WriteResult":
        return cls(WriteStatus.OK, row_id=row_id)

    @classmethod
    def already_exists(cls, detail: str) -> "WriteResult":
        return cls(WriteStatus.ALREADY_EXISTS, detail=detail)

    @classmethod
    def error(cls, detail: str) -> "WriteResult":
        return cls(WriteStatus.ERROR, detail=detail)

    @property
    def is_ok(self) -> bool:
        return self.status is WriteStatus.OK

    def raise_for_status(self) -> None:
        """Raise the matching songmem error unless the write succeeded."""
        if self.status is WriteStatus.ALREADY_EXISTS:
            raise AlreadyExists(self.detail)
        if self.status is WriteStatus.ERROR:
            raise StorageError(self.detail)
