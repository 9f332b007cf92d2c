"""Filesystem access for lsgrid: directory enumeration, stat and name lookup."""

import grp
import logging
import os
import pwd
import stat
from datetime import datetime
from pathlib import Path

from lsgrid_models import (
    EntryMetadata,
    FileType,
    FilesystemError,
    NameLookupError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# S_IFMT value -> FileType
FILE_TYPES = {
    stat.S_IFDIR: FileType.DIRECTORY,
    stat.S_IFREG: FileType.REGULAR,
    stat.S_IFLNK: FileType.SYMLINK,
    stat.S_IFCHR: FileType.CHAR_DEVICE,
    stat.S_IFBLK: FileType.BLOCK_DEVICE,
    stat.S_IFIFO: FileType.FIFO,
    stat.S_IFSOCK: FileType.SOCKET,
}


def file_type_from_mode(mode: int) -> FileType:
    """Decode the type bits of an st_mode value."""
    return FILE_TYPES.get(stat.S_IFMT(mode), FileType.UNKNOWN)


class PosixMetadataProvider:
    """Reads directories and entry metadata from the local filesystem.

    With ``numeric_fallback`` (the default) an unknown uid or gid is shown as
    its number, like ``ls`` does. Without it a ``NameLookupError`` is raised.
    """

    def __init__(self, numeric_fallback: bool = True):
        self.numeric_fallback = numeric_fallback
        self._users: dict[int, str] = {}
        self._groups: dict[int, str] = {}

    def list_directory(self, path) -> list[str]:
        try:
            return os.listdir(path)
        except FileNotFoundError:
            raise NotFoundError(path) from None
        except NotADirectoryError:
            raise NotFoundError(path, "Not a directory") from None
        except OSError as e:
            raise FilesystemError(path, e.strerror or str(e)) from e

    def stat(self, path) -> EntryMetadata:
        try:
            st = os.lstat(path)
        except OSError as e:
            raise FilesystemError(path, e.strerror or str(e)) from e

        return EntryMetadata(
            file_type=file_type_from_mode(st.st_mode),
            mode=st.st_mode,
            link_count=st.st_nlink,
            owner_id=st.st_uid,
            group_id=st.st_gid,
            owner_name=self.lookup_user_name(st.st_uid),
            group_name=self.lookup_group_name(st.st_gid),
            size=st.st_size,
            blocks=getattr(st, "st_blocks", 0),
            mod_time=datetime.fromtimestamp(st.st_mtime),
        )

    def lookup_user_name(self, uid: int) -> str:
        if uid not in self._users:
            try:
                self._users[uid] = pwd.getpwuid(uid).pw_name
            except KeyError:
                self._users[uid] = self._fallback("user", uid)
        return self._users[uid]

    def lookup_group_name(self, gid: int) -> str:
        if gid not in self._groups:
            try:
                self._groups[gid] = grp.getgrgid(gid).gr_name
            except KeyError:
                self._groups[gid] = self._fallback("group", gid)
        return self._groups[gid]

    def _fallback(self, kind: str, ident: int) -> str:
        if not self.numeric_fallback:
            raise NameLookupError(kind, ident)
        logger.debug("no %s name for id %d, showing the number", kind, ident)
        return str(ident)


def collect_entries(path, provider=None) -> list[str]:
    """List the visible children of ``path`` in byte order.

    Matches a shell ``*`` glob: dotfiles (and so ``.`` and ``..``) are skipped.
    """
    provider = provider or PosixMetadataProvider()
    names = {name for name in provider.list_directory(path) if name and not name.startswith(".")}
    entries = sorted(names, key=os.fsencode)
    logger.debug("collected %d entries from %s", len(entries), path)
    return entries


def gather_metadata(path, names: list[str], provider=None) -> list[EntryMetadata]:
    """Stat every entry up front; the first failure aborts the listing."""
    provider = provider or PosixMetadataProvider()
    base = Path(path)
    return [provider.stat(base / name) for name in names]
