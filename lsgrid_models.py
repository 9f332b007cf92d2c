"""Data models for the lsgrid directory lister."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class FileType(Enum):
    """Kind of filesystem entry, as reported by lstat."""
    DIRECTORY = "directory"
    REGULAR = "regular"
    SYMLINK = "symlink"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    FIFO = "fifo"
    SOCKET = "socket"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EntryMetadata:
    """Metadata of a single entry, gathered before any detail line is formatted."""
    file_type: FileType
    mode: int                 # st_mode, type and permission bits
    link_count: int
    owner_id: int
    group_id: int
    owner_name: str
    group_name: str
    size: int                 # bytes
    blocks: int               # 512-byte blocks allocated
    mod_time: datetime        # local time


@dataclass(frozen=True)
class ColumnWidths:
    """Widest string of each aligned detail field across a whole listing."""
    link_count: int = 0
    owner_name: int = 0
    group_name: int = 0
    size: int = 0


@dataclass(frozen=True)
class ListingOptions:
    """What to list and how."""
    path: Path
    detail: bool = False
    tui: bool = False


class ListingError(Exception):
    """Base class for errors that abort a listing."""


class NotFoundError(ListingError):
    """Target path does not exist or is not a directory."""

    def __init__(self, path, reason: str = "No such directory"):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot access '{path}': {reason}")


class FilesystemError(ListingError):
    """An entry could not be stat-ed."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"cannot stat '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NameLookupError(ListingError, LookupError):
    """A uid or gid has no entry in the user/group database."""

    def __init__(self, kind: str, ident: int):
        self.kind = kind
        self.ident = ident
        super().__init__(f"no {kind} name for id {ident}")
