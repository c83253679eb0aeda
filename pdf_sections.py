# pdf_sections.py
"""
Blocks shared by the document layouts. Each one draws at the cursor (or at an
explicit Y for fixed header blocks) and reports where it ended.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from formatting import NA
from pdf_layout import PageCursor, Sheet, load_image

logger = logging.getLogger(__name__)

SIGNATURE_IMAGE = "signature.png"
SIGNATURE_FALLBACK = "Authorized Signature: ___________________"


def na(value) -> str:
    if value is None:
        return NA
    s = str(value).strip()
    return s if s else NA


# -----------------------------
# Party boxes
# -----------------------------
def draw_party_box(
    sheet: Sheet,
    x: float,
    y: float,
    width: float,
    title: str,
    lines: Sequence[str],
    *,
    title_size: float = 10,
    text_size: float = 9,
    line_height: float = 5,
    fill: Any = None,
    stroke: bool = True,
    title_style: str = "normal",
) -> float:
    """Title plus wrapped lines in a box whose height follows its own content."""
    sheet.set_font(text_size, "normal")
    wrapped = []
    for line in lines:
        wrapped.extend(sheet.split_text(line, width - 4) if line else [""])

    height = 6 + len(wrapped) * line_height + 5
    style = ("F" if fill is not None else "") + ("S" if stroke else "")
    if style:
        if fill is not None:
            sheet.set_fill_color(fill)
        sheet.rect(x, y, width, height, style)

    sheet.set_font(title_size, title_style).text(x + 2, y + 6, title)
    sheet.set_font(text_size, "normal")
    for i, line in enumerate(wrapped):
        sheet.text(x + 2, y + 12 + i * line_height, line)
    return y + height


# -----------------------------
# Totals
# -----------------------------
@dataclass(frozen=True)
class TotalLine:
    label: str
    value: str
    emphasized: bool = False


@dataclass(frozen=True)
class TotalsStyle:
    label_x: float
    value_x: float
    label_align: str = "left"
    font_size: float = 9
    row_height: float = 6
    emphasis_height: float = 8
    emphasis_gap: float = 0
    box_x: float | None = None
    box_width: float = 60
    fill: Any = None
    emphasis_fill: Any = None
    emphasis_text: Any = 0
    emphasis_bold: bool = False


def totals_height(lines: Sequence[TotalLine], style: TotalsStyle) -> float:
    h = 0.0
    for line in lines:
        if line.emphasized:
            h += style.emphasis_gap + style.emphasis_height
        else:
            h += style.row_height
    return h


def draw_totals(sheet: Sheet, cursor: PageCursor, lines: Sequence[TotalLine], style: TotalsStyle) -> float:
    cursor.ensure_space(totals_height(lines, style))

    for line in lines:
        if line.emphasized:
            cursor.advance(style.emphasis_gap)
            h = style.emphasis_height
            fill = style.emphasis_fill
        else:
            h = style.row_height
            fill = style.fill

        if fill is not None and style.box_x is not None:
            sheet.set_fill_color(fill).rect(style.box_x, cursor.y, style.box_width, h, "F")

        bold = line.emphasized and style.emphasis_bold
        sheet.set_font(style.font_size, "bold" if bold else "normal")
        sheet.set_text_color(style.emphasis_text if line.emphasized else 0)
        baseline = cursor.y + h - 2
        sheet.text(style.label_x, baseline, line.label, align=style.label_align)
        sheet.text(style.value_x, baseline, line.value, align="right")
        cursor.advance(h)

    sheet.set_text_color(0).set_font(style.font_size, "normal")
    return cursor.y


# -----------------------------
# Terms
# -----------------------------
def _term_text(term) -> str:
    if isinstance(term, (tuple, list)):
        label, value = term
        return f"{label} {value or ''}".strip()
    return str(term)


def continued_heading(heading: str) -> str:
    return f"{heading.rstrip().rstrip(':')} (cont.):"


def measure_terms(sheet: Sheet, terms, width: float, line_height: float = 5) -> tuple[list[str], float]:
    """Wrap every term with the sheet's current font; height includes the heading line."""
    lines = []
    for term in terms:
        lines.extend(sheet.split_text(_term_text(term), width))
    return lines, line_height * (1 + len(lines))


def _heading(sheet: Sheet, x: float, baseline: float, text: str, size: float, underline: bool):
    sheet.set_font(size, "bold").text(x, baseline, text)
    if underline:
        sheet.set_line_width(0.3).underline(x, baseline, text)


def draw_terms(
    sheet: Sheet,
    cursor: PageCursor,
    terms,
    heading: str,
    *,
    x: float | None = None,
    width: float | None = None,
    line_height: float = 5,
    heading_size: float = 9,
    text_size: float = 8,
    underline: bool = False,
) -> float:
    layout = sheet.layout
    x = layout.margin_left if x is None else x
    width = width or layout.content_width
    baseline = line_height - 1.5

    sheet.set_font(text_size, "normal")
    lines, height = measure_terms(sheet, terms, width, line_height)

    if not cursor.fits(height) and height <= layout.content_max_y - layout.top_margin:
        cursor.new_page()

    cursor.ensure_space(2 * line_height)
    _heading(sheet, x, cursor.y + baseline, heading, heading_size, underline)
    cursor.advance(line_height)

    def reprint_heading():
        _heading(sheet, x, cursor.y + baseline, continued_heading(heading), heading_size, underline)
        cursor.advance(line_height)
        sheet.set_font(text_size, "normal")

    sheet.set_font(text_size, "normal")
    for line in lines:
        cursor.ensure_space(line_height, on_new_page=reprint_heading)
        sheet.text(x, cursor.y + baseline, line)
        cursor.advance(line_height)
    return cursor.y


# -----------------------------
# Signature
# -----------------------------
def draw_signature(
    sheet: Sheet,
    cursor: PageCursor,
    assets_dir: str | None = None,
    *,
    x: float | None = None,
    width: float = 60,
    height: float = 20,
    caption: str | None = None,
    caption_size: float = 9,
) -> float:
    """Signature image at the cursor, or a blank signature line when it cannot be drawn."""
    x = sheet.layout.margin_left if x is None else x
    block = 5 + (height or width / 2) + (8 if caption else 0)
    cursor.ensure_space(block)
    top = cursor.y

    drawn = 0.0
    reader = load_image(SIGNATURE_IMAGE, assets_dir)
    if reader is not None:
        try:
            drawn = sheet.image(reader, x, top + 5, width, height)
        except Exception as e:
            logger.warning("Failed to draw signature image (%s)", e)
            drawn = 0.0

    if not drawn:
        sheet.set_font(8, "normal").set_text_color(0).text(x, top + 10, SIGNATURE_FALLBACK)
        drawn = 7

    bottom = top + 5 + drawn
    if caption:
        sheet.set_font(caption_size, "bold").set_text_color(0).text(x, bottom + 5, caption)
        bottom += 8
    cursor.y = bottom
    return bottom
