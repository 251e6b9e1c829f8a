"""
Log List Module - Scrollable, always-growing record list

Handles:
- One row widget per record, appended in arrival order
- Search highlighting and hidden rows
- Separators between bursts
- Stick-to-bottom auto-follow
"""
from typing import List, Sequence

from rich.style import Style
from rich.text import Text
from textual.containers import VerticalScroll
from textual.widgets import Static

from .scroll import ScrollController
from .view_model import RowView

HIGHLIGHT_STYLE = "bold black on yellow"


def render_row(row: RowView) -> Text:
    """
    Rich text for one row: time, message (or highlighted raw text while a
    filter is active), then a chip per meta field
    """
    record = row.record
    text = Text(no_wrap=False)
    text.append(record.time_string, style="dim")
    text.append("  ")

    if row.filtered:
        body = Text(record.raw)
        for start, end in row.highlights:
            body.stylize(HIGHLIGHT_STYLE, start, end)
        text.append_text(body)
    elif record.message:
        text.append(record.message)

    for key, field in record.fields.items():
        text.append("  ")
        text.append(f"{key} ", style="dim italic")
        text.append(f" {field.value} ", style=Style(color=field.text_color, bgcolor=field.color))

    return text


class LogRow(Static):
    """A single record in the list"""

    def __init__(self, row: RowView, **kwargs):
        super().__init__(render_row(row), **kwargs)
        self.row = row
        self._apply_classes()

    def _apply_classes(self) -> None:
        self.set_class(not self.row.visible, "hidden")
        self.set_class(self.row.separator, "separator")
        self.set_class(self.row.record.is_structured, "structured")

    def update_row(self, row: RowView) -> None:
        """Re-render only when something visible about the row changed"""
        if row == self.row:
            return
        previous = self.row
        self.row = row
        if (row.highlights, row.filtered) != (previous.highlights, previous.filtered):
            self.update(render_row(row))
        self._apply_classes()


class LogStreamList(VerticalScroll):
    """
    Vertical list of LogRows

    Rows are never removed or reordered; filtering only hides them.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.row_widgets: List[LogRow] = []
        self.scroll_controller = ScrollController()

    @property
    def row_count(self) -> int:
        return len(self.row_widgets)

    def sync_rows(self, rows: Sequence[RowView]) -> None:
        """
        Bring the list in line with the view model

        Existing rows are updated in place, new rows are appended. If the
        list was scrolled to the bottom before the update it is scrolled
        back there afterwards.
        """
        self.scroll_controller.sample(self)

        for widget, row in zip(self.row_widgets, rows):
            widget.update_row(row)

        new_rows = [LogRow(row) for row in rows[len(self.row_widgets):]]
        if new_rows:
            self.row_widgets.extend(new_rows)
            self.mount_all(new_rows)

        self.call_after_refresh(self.scroll_controller.restore, self)

    def jump_to_top(self) -> None:
        self.scroll_home(animate=False)

    def jump_to_bottom(self) -> None:
        self.scroll_end(animate=False)
