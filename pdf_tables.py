# pdf_tables.py
"""
Line-item grids drawn with platypus Tables on the top-down Sheet.

Rows are measured one at a time with the same column widths and style the
final table uses, packed onto the current page while they fit above the
layout's content limit, and drawn chunk by chunk with the header repeated at
the top of every continuation page.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Table, TableStyle

from pdf_layout import EPSILON, PageCursor, Sheet, font_name, to_color
from rich_text import flatten_html, split_bold

logger = logging.getLogger(__name__)

_ALIGNMENTS = {"LEFT": TA_LEFT, "RIGHT": TA_RIGHT, "CENTER": TA_CENTER}


@dataclass(frozen=True)
class Column:
    header: str
    width: float | None = None  # mm; None shares what is left
    align: str = "LEFT"
    valign: str = "MIDDLE"
    rich: bool = False
    bold: bool = False


@dataclass
class TableTheme:
    font_family: str = "Helvetica"
    font_size: float = 9.0
    head_font_size: float = 9.0
    head_fill: Any = (0, 0, 0)
    head_text: Any = 255
    text_color: Any = 0
    padding: float = 1.5  # mm
    grid_color: Any = (200, 200, 200)
    grid_width: float = 0.5  # points
    stripe: Any = None

    @property
    def leading(self) -> float:
        return self.font_size * 1.2


@dataclass
class TableLayout:
    start_y: float
    final_y: float
    start_page: int = 1
    page_rows: list[int] = field(default_factory=list)

    @property
    def body_rows(self) -> int:
        return sum(self.page_rows)

    @property
    def pages(self) -> int:
        return len(self.page_rows)


def column_widths(columns: Sequence[Column], total: float) -> list[float]:
    fixed_total = sum(c.width for c in columns if c.width is not None)
    auto = [c for c in columns if c.width is None]
    share = max(total - fixed_total, 0.0) / len(auto) if auto else 0.0
    return [c.width if c.width is not None else share for c in columns]


# -----------------------------
# Cells
# -----------------------------
def _paragraph_style(theme: TableTheme, column: Column) -> ParagraphStyle:
    return ParagraphStyle(
        name=f"cell-{column.align}-{'b' if column.bold else 'n'}",
        fontName=font_name(theme.font_family, "bold" if column.bold else "normal"),
        fontSize=theme.font_size,
        leading=theme.leading,
        alignment=_ALIGNMENTS.get(column.align.upper(), TA_LEFT),
        textColor=to_color(theme.text_color),
    )


def rich_markup(value) -> str:
    """Flattened rich text as Paragraph markup, one <br/> per line."""
    parts = []
    for line in flatten_html(value).split("\n"):
        if not line.strip():
            continue
        text, is_bold = split_bold(line)
        text = escape(text)
        parts.append(f"<b>{text}</b>" if is_bold else text)
    return "<br/>".join(parts)


def _plain_markup(value) -> str:
    if value is None:
        return ""
    return "<br/>".join(escape(line) for line in str(value).split("\n"))


def _body_row(columns: Sequence[Column], row: Sequence[Any], styles: list[ParagraphStyle]) -> list[Paragraph]:
    cells = []
    for idx, column in enumerate(columns):
        value = row[idx] if idx < len(row) else ""
        markup = rich_markup(value) if column.rich else _plain_markup(value)
        cells.append(Paragraph(markup, styles[idx]))
    return cells


def _table_style(columns: Sequence[Column], theme: TableTheme, rows: int, head: bool) -> TableStyle:
    pad = theme.padding * mm
    cmds = [
        ("FONTNAME", (0, 0), (-1, -1), font_name(theme.font_family, "normal")),
        ("FONTSIZE", (0, 0), (-1, -1), theme.font_size),
        ("LEADING", (0, 0), (-1, -1), theme.leading),
        ("LEFTPADDING", (0, 0), (-1, -1), pad),
        ("RIGHTPADDING", (0, 0), (-1, -1), pad),
        ("TOPPADDING", (0, 0), (-1, -1), pad),
        ("BOTTOMPADDING", (0, 0), (-1, -1), pad),
    ]
    for idx, column in enumerate(columns):
        cmds.append(("VALIGN", (idx, 0), (idx, -1), column.valign.upper()))
        cmds.append(("ALIGN", (idx, 0), (idx, -1), column.align.upper()))
    if theme.grid_color is not None:
        cmds.append(("GRID", (0, 0), (-1, -1), theme.grid_width, to_color(theme.grid_color)))
    if head:
        cmds += [
            ("BACKGROUND", (0, 0), (-1, 0), to_color(theme.head_fill)),
            ("TEXTCOLOR", (0, 0), (-1, 0), to_color(theme.head_text)),
            ("FONTNAME", (0, 0), (-1, 0), font_name(theme.font_family, "bold")),
            ("FONTSIZE", (0, 0), (-1, 0), theme.head_font_size),
            ("LEADING", (0, 0), (-1, 0), theme.head_font_size * 1.2),
        ]
    first_body = 1 if head else 0
    if theme.stripe is not None and rows > first_body:
        cmds.append(("ROWBACKGROUNDS", (0, first_body), (-1, -1), [colors.white, to_color(theme.stripe)]))
    return TableStyle(cmds)


def _build(data, columns, widths_pt, theme, head) -> Table:
    table = Table(data, colWidths=widths_pt)
    table.setStyle(_table_style(columns, theme, len(data), head))
    return table


def _measure(sheet: Sheet, data, columns, widths_pt, theme, head) -> float:
    table = _build(data, columns, widths_pt, theme, head)
    _w, h = table.wrapOn(sheet.pdf, sum(widths_pt), sheet.layout.page_height * mm)
    return h / mm


# -----------------------------
# Drawing
# -----------------------------
def draw_table(
    sheet: Sheet,
    cursor: PageCursor,
    columns: Sequence[Column],
    rows: Sequence[Sequence[Any]],
    theme: TableTheme | None = None,
    *,
    x: float | None = None,
    width: float | None = None,
    head: bool = True,
    on_page: Callable[[int, float], None] | None = None,
) -> TableLayout:
    theme = theme or TableTheme()
    x = sheet.layout.margin_left if x is None else x
    widths_pt = [w * mm for w in column_widths(columns, width or sheet.layout.content_width)]
    styles = [_paragraph_style(theme, c) for c in columns]

    header = [c.header for c in columns]
    body = [_body_row(columns, row, styles) for row in rows]

    head_h = _measure(sheet, [header], columns, widths_pt, theme, True) if head else 0.0
    heights = [_measure(sheet, [r], columns, widths_pt, theme, False) for r in body]

    page_rows: list[int] = []
    start_y = None
    start_page = sheet.page_number
    i = 0
    while True:
        available = cursor.remaining - head_h
        chunk_h = 0.0
        j = i
        while j < len(body) and chunk_h + heights[j] <= available + EPSILON:
            chunk_h += heights[j]
            j += 1

        if j == i and (body or not cursor.fits(head_h)):
            if not cursor.at_top():
                cursor.new_page()
                continue
            if body:
                # Taller than a whole page: place it alone and let it overflow.
                logger.warning("Table row %d is taller than the printable area", i + 1)
                j = i + 1
                chunk_h = heights[i]

        if start_y is None:
            start_y = cursor.y
            start_page = sheet.page_number

        chunk = body[i:j]
        data = ([header] if head else []) + chunk
        if data:
            table = _build(data, columns, widths_pt, theme, head)
            _w, h_pt = table.wrapOn(sheet.pdf, sum(widths_pt), sheet.layout.page_height * mm)
            table.drawOn(sheet.pdf, x * mm, (sheet.layout.page_height - cursor.y) * mm - h_pt)
            cursor.advance(h_pt / mm)

        page_rows.append(j - i)
        if on_page:
            on_page(sheet.page_number, cursor.y)

        i = j
        if i >= len(body):
            break
        cursor.new_page()

    return TableLayout(start_y=start_y, final_y=cursor.y, start_page=start_page, page_rows=page_rows)
