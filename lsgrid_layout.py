"""Grid and detail layouts for lsgrid.

Both layouts are pure functions of already gathered data: entry names for the
grid, names plus ``EntryMetadata`` records for the detail listing.
"""

from datetime import datetime
from types import MappingProxyType

from lsgrid_models import ColumnWidths, EntryMetadata, FileType

OUTPUT_COLUMN_NUMBER = 3
GUTTER = 2
PERMISSION_FIELD_WIDTH = 11

FILE_TYPE_CHARS = MappingProxyType({
    FileType.DIRECTORY: "d",
    FileType.REGULAR: "-",
    FileType.SYMLINK: "l",
    FileType.CHAR_DEVICE: "c",
    FileType.BLOCK_DEVICE: "b",
    FileType.FIFO: "p",
    FileType.SOCKET: "s",
    FileType.UNKNOWN: "?",
})

# Indexed by one octal digit
PERMISSIONS = ("---", "--x", "-w-", "-wx", "r--", "r-x", "rw-", "rwx")


# ═══════════════════════════════════════════════════════════════════════════════
# Grid
# ═══════════════════════════════════════════════════════════════════════════════

def fullwidth_count(name: str) -> int:
    """Count characters taking 3 bytes in UTF-8, treated as two columns wide."""
    return sum(1 for char in name if len(char.encode("utf-8", "surrogateescape")) == 3)


def max_name_length(names: list[str]) -> int:
    return max((len(name) for name in names), default=0)


def pad_entries(names: list[str]) -> list[str]:
    """Append blank placeholders until the count divides into the columns."""
    padded = list(names)
    while len(padded) % OUTPUT_COLUMN_NUMBER:
        padded.append("")
    return padded


def partition_columns(padded: list[str]) -> list[list[str]]:
    """Cut the padded names into equal contiguous chunks, one per column."""
    if not padded:
        return []
    size = len(padded) // OUTPUT_COLUMN_NUMBER
    return [padded[i * size:(i + 1) * size] for i in range(OUTPUT_COLUMN_NUMBER)]


def transpose(columns: list[list[str]]) -> list[tuple[str, ...]]:
    return list(zip(*columns))


def build_grid(names: list[str]) -> list[tuple[str, ...]]:
    """Rows of the grid: names read top to bottom, then left to right."""
    return transpose(partition_columns(pad_entries(names)))


def format_grid_cell(name: str, max_width: int) -> str:
    """Left-justify ``name``, one pad character fewer per fullwidth character."""
    return name.ljust(max_width - fullwidth_count(name) + GUTTER)


def grid_lines(names: list[str]) -> list[str]:
    """Render names as a 3-column grid, one string per row."""
    rows = build_grid(names)
    max_width = max_name_length(names)
    return ["".join(format_grid_cell(name, max_width) for name in row) for row in rows]


# ═══════════════════════════════════════════════════════════════════════════════
# Detail
# ═══════════════════════════════════════════════════════════════════════════════

def type_char(file_type: FileType) -> str:
    return FILE_TYPE_CHARS[file_type]


def permission_string(mode: int) -> str:
    """rwx string for the owner, group and other digits of ``mode``."""
    digits = f"{mode & 0o777:03o}"
    return "".join(PERMISSIONS[int(digit)] for digit in digits)


def format_mod_time(dt: datetime) -> str:
    """Month and day space-padded, then 24-hour HH:MM, e.g. `` 3  7 09:05``."""
    return f"{dt.month:>2} {dt.day:>2} {dt:%H:%M}"


def measure_widths(metadata: list[EntryMetadata]) -> ColumnWidths:
    """Widest value of each aligned field, over the whole listing."""
    if not metadata:
        return ColumnWidths()
    return ColumnWidths(
        link_count=max(len(str(m.link_count)) for m in metadata),
        owner_name=max(len(m.owner_name) for m in metadata),
        group_name=max(len(m.group_name) for m in metadata),
        size=max(len(str(m.size)) for m in metadata),
    )


def total_blocks(metadata: list[EntryMetadata]) -> int:
    return sum(m.blocks for m in metadata)


def detail_fields(meta: EntryMetadata, widths: ColumnWidths) -> tuple[str, ...]:
    """Padded fields of one detail line, without the trailing name."""
    return (
        type_char(meta.file_type) + permission_string(meta.mode).ljust(PERMISSION_FIELD_WIDTH),
        str(meta.link_count).rjust(widths.link_count) + " ",
        meta.owner_name.ljust(widths.owner_name + GUTTER),
        meta.group_name.ljust(widths.group_name + GUTTER),
        str(meta.size).rjust(widths.size) + " ",
        format_mod_time(meta.mod_time) + " ",
    )


def format_detail_line(name: str, meta: EntryMetadata, widths: ColumnWidths) -> str:
    return "".join(detail_fields(meta, widths)) + name


def detail_lines(names: list[str], metadata: list[EntryMetadata]) -> list[str]:
    """``total`` header followed by one metadata line per entry."""
    if len(names) != len(metadata):
        raise ValueError(f"{len(names)} names but {len(metadata)} metadata records")
    widths = measure_widths(metadata)
    lines = [f"total {total_blocks(metadata)}"]
    lines.extend(format_detail_line(name, meta, widths) for name, meta in zip(names, metadata))
    return lines
