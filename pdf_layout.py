# pdf_layout.py
"""
Drawing surface shared by the document layouts.

reportlab measures from the bottom-left corner in points; every layout in this
project is written top-down in millimetres on an A4 sheet. `Sheet` does the
translation, `PageCursor` owns the vertical position and the page-break rule,
and `DocumentCanvas` lets a layout stamp things (page numbers, footers) on
every page once the final page count is known.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from config import Config

logger = logging.getLogger(__name__)

# Comparisons against the content limit tolerate float noise so a block that
# exactly fills the page does not spill onto a new one.
EPSILON = 1e-6


# -----------------------------
# Page geometry
# -----------------------------
@dataclass(frozen=True)
class PageLayout:
    bottom_margin: float
    top_margin: float = 20.0
    margin_left: float = 14.0
    margin_right: float = 14.0
    page_width: float = A4[0] / mm
    page_height: float = A4[1] / mm

    @property
    def content_max_y(self) -> float:
        return self.page_height - self.bottom_margin

    @property
    def right_x(self) -> float:
        return self.page_width - self.margin_right

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right


# -----------------------------
# Canvas with deferred page decorations
# -----------------------------
PageDecorator = Callable[["Sheet", int, int], None]


class DocumentCanvas(canvas.Canvas):
    """Keeps every page open until save() so decorators can see the page count."""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self.page_decorators: list[PageDecorator] = []
        self.layout: PageLayout | None = None

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        if self._code:
            self.showPage()
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            if self.page_decorators:
                sheet = Sheet(self, self.layout)
                for decorate in self.page_decorators:
                    sheet.reset_style()
                    decorate(sheet, self._pageNumber, page_count)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)


def open_document(
    target,
    *,
    title: str,
    layout: PageLayout,
    canvas_cls: type[DocumentCanvas] = DocumentCanvas,
) -> "Sheet":
    # invariant=1 pins the creation date and document id so output is reproducible
    pdf = canvas_cls(
        target,
        pagesize=(layout.page_width * mm, layout.page_height * mm),
        invariant=1,
        pageCompression=Config.PDF_PAGE_COMPRESSION,
    )
    pdf.setTitle(title)
    pdf.layout = layout
    return Sheet(pdf, layout)


# -----------------------------
# Text helpers
# -----------------------------
def wrap_text(text, font, size, max_width):
    """Word-wrap to max_width points; long tokens are split so every line fits."""
    words = str(text).split()
    lines = []
    current = ""

    def split_long_token(token: str):
        if stringWidth(token, font, size) <= max_width:
            return [token]
        chunks = []
        remaining = token
        while remaining:
            lo, hi = 1, len(remaining)
            fit = 1
            while lo <= hi:
                mid = (lo + hi) // 2
                piece = remaining[:mid]
                if stringWidth(piece, font, size) <= max_width:
                    fit = mid
                    lo = mid + 1
                else:
                    hi = mid - 1
            chunks.append(remaining[:fit])
            remaining = remaining[fit:]
        return chunks

    expanded_words = []
    for w in words:
        expanded_words.extend(split_long_token(w))

    for w in expanded_words:
        test = current + (" " if current else "") + w
        if stringWidth(test, font, size) <= max_width:
            current = test
        else:
            if current:
                lines.append(current)
            current = w
    if current:
        lines.append(current)
    return lines or [""]


def font_name(family: str, style: str) -> str:
    fam = (family or "Helvetica").strip().lower()
    style = (style or "normal").strip().lower()
    is_bold = "bold" in style
    is_italic = "italic" in style

    if fam in {"times", "times-roman", "times new roman"}:
        if is_bold and is_italic:
            return "Times-BoldItalic"
        if is_bold:
            return "Times-Bold"
        if is_italic:
            return "Times-Italic"
        return "Times-Roman"
    if fam in {"courier", "courier new"}:
        if is_bold and is_italic:
            return "Courier-BoldOblique"
        if is_bold:
            return "Courier-Bold"
        if is_italic:
            return "Courier-Oblique"
        return "Courier"

    if is_bold and is_italic:
        return "Helvetica-BoldOblique"
    if is_bold:
        return "Helvetica-Bold"
    if is_italic:
        return "Helvetica-Oblique"
    return "Helvetica"


def to_color(value) -> colors.Color:
    """Accept a 0-255 grey level, an (r, g, b) tuple of 0-255 ints, or a Color."""
    if isinstance(value, colors.Color):
        return value
    if isinstance(value, (int, float)):
        level = max(0.0, min(255.0, float(value))) / 255.0
        return colors.Color(level, level, level)
    r, g, b = value
    return colors.Color(r / 255.0, g / 255.0, b / 255.0)


# -----------------------------
# Images
# -----------------------------
def load_image(name: str, assets_dir: str | None = None) -> ImageReader | None:
    """
    Resolve a static image (e.g. "/images/signature.png") under the assets dir.
    Returns None, with a warning, when it is missing or unreadable.
    """
    base = Path(assets_dir or Config.ASSETS_DIR)
    path = base / Path(name).name
    if not os.path.exists(path):
        logger.warning("Image asset not found: %s", path)
        return None
    try:
        reader = ImageReader(str(path))
        reader.getSize()
        return reader
    except Exception as e:
        logger.warning("Failed to load image asset %s (%s)", path, e)
        return None


# -----------------------------
# Sheet: top-down millimetre drawing
# -----------------------------
class Sheet:
    def __init__(self, pdf: canvas.Canvas, layout: PageLayout):
        self.pdf = pdf
        self.layout = layout
        self.reset_style()

    @property
    def page_number(self) -> int:
        return self.pdf.getPageNumber()

    @property
    def font(self) -> str:
        return font_name(self.font_family, self.font_style)

    def _px(self, x: float) -> float:
        return x * mm

    def _py(self, y: float) -> float:
        return (self.layout.page_height - y) * mm

    # --- state ---
    def reset_style(self):
        self.font_family = "Helvetica"
        self.font_style = "normal"
        self.font_size = 10.0
        self._text_color = to_color(0)
        self._fill_color = to_color(0)
        self._draw_color = to_color(0)
        self._line_width = 0.2
        self._apply()

    def _apply(self):
        self.pdf.setFont(self.font, self.font_size)
        self.pdf.setLineWidth(self._line_width * mm)
        self.pdf.setStrokeColor(self._draw_color)

    def set_font(self, size: float | None = None, style: str | None = None, family: str | None = None) -> "Sheet":
        if size is not None:
            self.font_size = float(size)
        if style is not None:
            self.font_style = style
        if family is not None:
            self.font_family = family
        self.pdf.setFont(self.font, self.font_size)
        return self

    def set_text_color(self, value) -> "Sheet":
        self._text_color = to_color(value)
        return self

    def set_fill_color(self, value) -> "Sheet":
        self._fill_color = to_color(value)
        return self

    def set_draw_color(self, value) -> "Sheet":
        self._draw_color = to_color(value)
        self.pdf.setStrokeColor(self._draw_color)
        return self

    def set_line_width(self, width: float) -> "Sheet":
        self._line_width = width
        self.pdf.setLineWidth(width * mm)
        return self

    # --- drawing ---
    def text_width(self, value) -> float:
        return stringWidth(str(value), self.font, self.font_size) / mm

    def text(self, x: float, y: float, value, align: str = "left") -> "Sheet":
        s = str(value)
        w = self.text_width(s)
        if align == "right":
            x -= w
        elif align == "center":
            x -= w / 2.0
        self.pdf.setFillColor(self._text_color)
        self.pdf.drawString(self._px(x), self._py(y), s)
        return self

    def link_text(self, x: float, y: float, value, url: str, align: str = "left") -> "Sheet":
        s = str(value)
        w = self.text_width(s)
        left = x - w if align == "right" else x - w / 2.0 if align == "center" else x
        self.text(left, y, s)
        if url:
            box = (self._px(left), self._py(y + 1), self._px(left + w), self._py(y - self.font_size / mm))
            self.pdf.linkURL(url, box)
        return self

    def rect(self, x: float, y: float, w: float, h: float, style: str = "S") -> "Sheet":
        fill = 1 if "F" in style else 0
        stroke = 1 if ("S" in style or "D" in style) else 0
        self.pdf.setFillColor(self._fill_color)
        self.pdf.rect(self._px(x), self._py(y + h), w * mm, h * mm, stroke=stroke, fill=fill)
        return self

    def line(self, x1: float, y1: float, x2: float, y2: float) -> "Sheet":
        self.pdf.line(self._px(x1), self._py(y1), self._px(x2), self._py(y2))
        return self

    def underline(self, x: float, y: float, value, offset: float = 1.0) -> "Sheet":
        return self.line(x, y + offset, x + self.text_width(value), y + offset)

    def image(self, reader: ImageReader, x: float, y: float, w: float, h: float = 0.0) -> float:
        """Draw at (x, y) top-left; h=0 keeps the aspect ratio. Returns drawn height."""
        if not h:
            iw, ih = reader.getSize()
            h = w * (float(ih) / float(iw)) if iw else w
        self.pdf.drawImage(reader, self._px(x), self._py(y + h), width=w * mm, height=h * mm, mask="auto")
        return h

    def split_text(self, value, max_width: float) -> list[str]:
        return wrap_text(value, self.font, self.font_size, max_width * mm)

    def new_page(self):
        self.pdf.showPage()
        self._apply()


# -----------------------------
# Cursor
# -----------------------------
class PageCursor:
    """Vertical write position (mm from the page top) for one render pass."""

    def __init__(self, sheet: Sheet, y: float | None = None):
        self.sheet = sheet
        self.layout = sheet.layout
        self.y = self.layout.top_margin if y is None else float(y)

    @property
    def content_max_y(self) -> float:
        return self.layout.content_max_y

    @property
    def page_index(self) -> int:
        return self.sheet.page_number - 1

    @property
    def remaining(self) -> float:
        return self.content_max_y - self.y

    def fits(self, height: float) -> bool:
        return self.y + height <= self.content_max_y + EPSILON

    def at_top(self) -> bool:
        return self.y <= self.layout.top_margin + EPSILON

    def advance(self, dy: float) -> float:
        self.y += dy
        return self.y

    def new_page(self, on_new_page: Callable[[], None] | None = None):
        self.sheet.new_page()
        self.y = self.layout.top_margin
        if on_new_page:
            on_new_page()

    def ensure_space(self, height: float, on_new_page: Callable[[], None] | None = None) -> bool:
        if self.fits(height):
            return False
        self.new_page(on_new_page)
        return True
