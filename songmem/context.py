from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Settings
    from .store import SongStore


@dataclass
class RuntimeContext:
    """Runtime context holding the settings and the open song store.

    Passed explicitly to every command instead of a process-wide database
    handle.
    """

    settings: Settings
    store: SongStore
