"""Interactive directory browser for lsgrid, built on Textual.

Shows the same detail and grid layouts as the command line listing.

Keyboard shortcuts:
  g         - Toggle between detail table and name grid
  Enter     - Open the selected directory
  Backspace - Go to parent directory
  q         - Quit
"""

from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.widgets import DataTable, Footer, Static

from lsgrid_config import load_config, save_config
from lsgrid_layout import detail_fields, grid_lines, measure_widths, total_blocks
from lsgrid_models import FileType, ListingError
from lsgrid_provider import PosixMetadataProvider, collect_entries, gather_metadata

COLUMNS = [
    ("Mode", "mode"),
    ("Links", "links"),
    ("Owner", "owner"),
    ("Group", "group"),
    ("Size", "size"),
    ("Modified", "modified"),
    ("Name", "name"),
]


class LsgridApp(App):
    """Browse directories with the lsgrid layouts."""

    CSS = """
    Screen {
        background: $surface;
    }

    #status {
        dock: top;
        height: 1;
        background: $primary-darken-2;
        color: $text;
        padding: 0 1;
    }

    #list-panel {
        height: 1fr;
        border: round $border;
        margin: 0 1;
        border-title-align: left;
        border-title-color: $text-muted;
    }

    #list-panel:focus-within {
        border: round $primary;
        border-title-color: $primary;
    }

    DataTable {
        height: 1fr;
    }

    #grid-scroll {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("g", "toggle_view", "Grid/Detail"),
        Binding("backspace", "go_parent", "Parent"),
    ]

    def __init__(self, path: Path = None, provider=None):
        super().__init__()
        config = load_config()
        theme = config.get("theme")
        if theme in self.available_themes:
            self.theme = theme
        self.view_mode = "grid" if config.get("view") == "grid" else "detail"
        self.path = path or Path.cwd()
        self.provider = provider or PosixMetadataProvider()
        self.names: list[str] = []
        self.metadata = []

    def compose(self) -> ComposeResult:
        yield Static(id="status")
        list_panel = Vertical(id="list-panel")
        list_panel.border_title = "Files"
        with list_panel:
            yield DataTable(id="file-table")
            with VerticalScroll(id="grid-scroll"):
                yield Static(id="grid")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#file-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = False
        for label, key in COLUMNS:
            table.add_column(label, key=key)
        self.load_listing()
        self.refresh_view()
        table.focus()

    def load_listing(self) -> bool:
        """Read the current directory; keep the old listing on failure."""
        try:
            names = collect_entries(self.path, self.provider)
            metadata = gather_metadata(self.path, names, self.provider)
        except ListingError as e:
            self.notify(str(e), severity="error")
            return False
        self.names = names
        self.metadata = metadata
        return True

    def refresh_view(self) -> None:
        table = self.query_one("#file-table", DataTable)
        table.clear()
        widths = measure_widths(self.metadata)
        for name, meta in zip(self.names, self.metadata):
            cells = [field.rstrip() for field in detail_fields(meta, widths)]
            if meta.file_type == FileType.DIRECTORY:
                label = Text(name, style="bold cyan")
            else:
                label = Text(name)
            table.add_row(*cells, label, key=name)

        self.query_one("#grid", Static).update(Text("\n".join(grid_lines(self.names))))
        self._apply_view()
        self.update_status()

    def update_status(self) -> None:
        status = self.query_one("#status", Static)
        path_str = str(self.path)
        if len(path_str) > 50:
            path_str = "..." + path_str[-47:]
        status.update(Text(
            f" {path_str}  |  total {total_blocks(self.metadata)}  |  "
            f"{len(self.names)} entries  |  {self.view_mode}"
        ))

    def _apply_view(self) -> None:
        table = self.query_one("#file-table", DataTable)
        grid = self.query_one("#grid-scroll", VerticalScroll)
        table.display = self.view_mode == "detail"
        grid.display = self.view_mode == "grid"

    def change_dir(self, path: Path) -> None:
        previous = self.path
        self.path = path
        if not self.load_listing():
            self.path = previous
            return
        self.refresh_view()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        name = event.row_key.value
        meta = dict(zip(self.names, self.metadata)).get(name)
        if meta is None or meta.file_type != FileType.DIRECTORY:
            return
        self.change_dir(self.path / name)

    def action_go_parent(self) -> None:
        if self.path.parent != self.path:
            self.change_dir(self.path.parent)

    def action_toggle_view(self) -> None:
        self.view_mode = "grid" if self.view_mode == "detail" else "detail"
        config = load_config()
        config["view"] = self.view_mode
        save_config(config)
        self._apply_view()
        self.update_status()
