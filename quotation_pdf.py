# quotation_pdf.py
"""
Quotations print on one of two company templates chosen by `forCompany`.
The two layouts are independent; they only share the table engine and the
section blocks.
"""
from __future__ import annotations

import io
import logging
from typing import Callable

from companies import COMPANIES, PAKTECH, TECHNO
from config import Config
from formatting import add_days, fixed, number, percent, quantity, safe_filename, short_date
from models import Quotation, QuotationTemplate
from pdf_layout import DocumentCanvas, PageCursor, PageLayout, Sheet, load_image, open_document
from pdf_sections import (
    TotalLine,
    TotalsStyle,
    continued_heading,
    draw_party_box,
    draw_signature,
    draw_terms,
    draw_totals,
    measure_terms,
    na,
)
from pdf_tables import Column, TableTheme, draw_table

logger = logging.getLogger(__name__)

RED = (200, 0, 0)
SYSTEM_FOOTER = "This is a system generated document and needs no signature."


def quotation_filename(quotation: Quotation, template: QuotationTemplate) -> str:
    fallback = "Paktech" if template is QuotationTemplate.PAKTECH else "Preview"
    return safe_filename(f"Quotation_{quotation.quote_no or fallback}") + ".pdf"


def _item_rows(quotation: Quotation, fmt: Callable[[float], str]) -> list[list[str]]:
    m = quotation.unit_price_multiplier
    rows = []
    for item in quotation.items:
        rows.append([
            str(item.s_no),
            item.ref_no or "-",
            item.description,
            quantity(item.qty),
            fmt(item.unit_price * m),
            fmt(item.qty * item.unit_price * m),
        ])
    return rows


def _origin(quotation: Quotation) -> str:
    return ", ".join(quotation.co_origin) if quotation.co_origin else "N/A"


# -----------------------------
# Paktech
# -----------------------------
def paktech_layout() -> PageLayout:
    return PageLayout(bottom_margin=Config.QUOTATION_PAKTECH_BOTTOM_MARGIN_MM)


def _paktech_letterhead(sheet: Sheet, assets_dir):
    company = COMPANIES[PAKTECH]
    sheet.set_font(14, "bold").text(14, 15, company.name)
    sheet.set_font(9, "normal")
    for i, line in enumerate(company.info):
        sheet.text(14, 20 + i * 5, line)

    logo = load_image("paktech-logo.png", assets_dir)
    if logo is not None:
        sheet.image(logo, 135, 5, 70, 15)


def _paktech_expiry(quotation: Quotation) -> str:
    if quotation.expiry_date:
        return short_date(quotation.expiry_date)
    return short_date(add_days(quotation.quote_date, quotation.quote_validity_days))


def draw_paktech_quotation(quotation: Quotation, target, *, assets_dir=None, canvas_cls=DocumentCanvas):
    currency = quotation.currency_unit or "$"
    customer = quotation.customer
    sheet = open_document(target, title=f"Quotation {quotation.quote_no}".strip(), layout=paktech_layout(), canvas_cls=canvas_cls)
    cursor = PageCursor(sheet)

    _paktech_letterhead(sheet, assets_dir)

    # Title
    sheet.set_font(14, "bold").set_text_color(RED).text(105, 40, "QUOTATION", align="center")
    title_x = 105 - sheet.text_width("QUOTATION") / 2
    sheet.set_draw_color(RED).set_line_width(0.5).underline(title_x, 40, "QUOTATION")
    sheet.set_text_color(0).set_draw_color(0).set_line_width(0.2)

    # Bill To / Ship To
    address = [
        f"{customer.name}," if customer.name else "",
        f"{customer.university_name}," if customer.university_name else "",
        f"{customer.address}." if customer.address else "",
    ]
    address = [a for a in address if a] or ["N/A"]
    address_bottom = 0.0
    for block_y, label in ((45, "Bill To"), (80, "Ship To")):
        sheet.set_font(10, "bold").text(14, block_y, label)
        sheet.set_font(9, "normal")
        row = 0
        for line in address:
            for part in sheet.split_text(line, 100):
                row += 1
                sheet.text(14, block_y + row * 5, part)
        address_bottom = block_y + row * 5

    # Info grid beside the addresses
    info = [
        ["Quotation No.", na(quotation.quote_no)],
        ["Quotation Date", short_date(quotation.quote_date)],
        ["Expiry Date", _paktech_expiry(quotation)],
        ["Customer Ref", customer.name],
        ["Lead By", quotation.prepared_by],
        ["Incoterms", quotation.incoterms],
        ["Payment Terms", quotation.payment_terms],
        ["Prices", currency],
    ]
    cursor.y = 45
    info_theme = TableTheme(font_size=8, padding=1.5, grid_color=(80, 80, 80))
    info_table = draw_table(
        sheet, cursor,
        [Column("", width=28), Column("")],
        info, info_theme, x=130, width=65, head=False,
    )

    # Items
    cursor.y = max(info_table.final_y, address_bottom) + 10
    columns = [
        Column("Sr-#", width=12),
        Column("Model", width=20),
        Column("Item & Description", width=85, valign="TOP", rich=True),
        Column("Qty", width=15, align="RIGHT"),
        Column(f"Rate ({currency})", width=25, align="RIGHT"),
        Column(f"Amount ({currency})", width=25, align="RIGHT"),
    ]
    theme = TableTheme(font_size=8, head_font_size=8, head_fill=(242, 242, 242), head_text=0, grid_color=(80, 80, 80))
    draw_table(sheet, cursor, columns, _item_rows(quotation, number), theme)

    # Totals
    cursor.advance(5)
    draw_totals(
        sheet, cursor,
        [
            TotalLine("Sub Total", number(quotation.sub_total)),
            TotalLine("GST Amount", number(quotation.tax_amount)),
            TotalLine("Total", f"{currency} {number(quotation.grand_total)}", emphasized=True),
        ],
        TotalsStyle(
            label_x=160, value_x=195, label_align="right", row_height=5,
            emphasis_height=5, emphasis_gap=8, emphasis_text=RED, emphasis_bold=True,
        ),
    )
    cursor.advance(5)

    # Terms
    terms = [
        f"Prices quoted in {currency}",
        f"Origin: {_origin(quotation)}",
        f"Warranty: {na(quotation.warranty)}",
        f"Delivery: {na(quotation.delivery)}",
        "*Due to global supply change issues delivery dates are tentative",
    ]
    draw_terms(sheet, cursor, terms, "Term & Conditions:", underline=True)

    draw_signature(
        sheet, cursor, assets_dir,
        width=61, height=30, caption="Authorized Signature ___________________",
    )
    sheet.pdf.save()


# -----------------------------
# Techno
# -----------------------------
def techno_layout() -> PageLayout:
    return PageLayout(bottom_margin=Config.QUOTATION_TECHNO_BOTTOM_MARGIN_MM)


def _techno_footer(sheet: Sheet, page_number: int, page_count: int):
    sheet.set_font(7, "italic").set_text_color(100)
    sheet.text(105, 290, SYSTEM_FOOTER, align="center")


def _techno_letterhead(sheet: Sheet):
    company = COMPANIES[TECHNO]
    sheet.set_font(12, "bold").text(14, 14, company.name)
    sheet.set_font(8, "normal")
    sheet.text(14, 19, " ".join(company.info[1:3]))
    sheet.text(14, 23, "  |  ".join(company.info[3:]))


def draw_techno_quotation(quotation: Quotation, target, *, assets_dir=None, canvas_cls=DocumentCanvas):
    currency = quotation.currency_unit or "PKR"
    customer = quotation.customer
    sheet = open_document(target, title=f"Quotation {quotation.quote_no}".strip(), layout=techno_layout(), canvas_cls=canvas_cls)
    sheet.pdf.page_decorators.append(_techno_footer)
    cursor = PageCursor(sheet)

    _techno_letterhead(sheet)
    sheet.set_font(16, "normal").text(105, 35, "QUOTATION", align="center")

    # Quote details
    sheet.set_font(9, "normal")
    details = [
        f"Quote No: {na(quotation.quote_no)}",
        f"Date: {short_date(quotation.quote_date)}",
        f"Mode: {na(quotation.incoterms)}",
        f"Prices: {currency}",
        f"Validity: {quotation.quote_validity_days} Days",
    ]
    for i, line in enumerate(details):
        sheet.text(14, 45 + i * 5, line)

    box_bottom = draw_party_box(
        sheet, 120, 40, 75, "Customer:",
        [
            f"{na(customer.department_name)} Department",
            na(customer.university_name),
            f"Address: {na(customer.address)}",
            f"Phone: {na(customer.phone)}",
            f"Email: {na(customer.email)}",
        ],
        title_size=9, text_size=8, fill=240, stroke=False,
    )

    # Items
    cursor.y = max(45 + len(details) * 5, box_bottom) + 5
    columns = [
        Column("#", width=10),
        Column("Model No", width=25),
        Column("Items Description", width=75, valign="TOP", rich=True),
        Column("Qty", width=15, align="RIGHT"),
        Column(f"Unit ({currency})", width=28, align="RIGHT"),
        Column(f"Total ({currency})", align="RIGHT"),
    ]
    theme = TableTheme(font_size=8, head_font_size=9, head_fill=0, head_text=255, grid_color=None, stripe=250)
    draw_table(sheet, cursor, columns, _item_rows(quotation, fixed), theme)

    # Totals
    cursor.advance(5)
    draw_totals(
        sheet, cursor,
        [
            TotalLine("Sub Total:", f"{currency} {fixed(quotation.sub_total)}"),
            TotalLine(f"Tax ({percent(quotation.tax)}):", f"{currency} {fixed(quotation.tax_amount)}"),
            TotalLine("Grand Total:", f"{currency} {fixed(quotation.grand_total)}", emphasized=True),
        ],
        TotalsStyle(
            label_x=145, value_x=195, box_x=140, box_width=60,
            fill=245, emphasis_fill=0, emphasis_text=255,
        ),
    )

    # Assurance + boxed terms, kept together
    terms = [
        ("Delivery:", na(quotation.delivery)),
        ("Warranty:", na(quotation.warranty)),
        ("Payment:", na(quotation.payment_terms)),
        ("Origin:", _origin(quotation)),
        ("Principal:", ", ".join(quotation.principal) if quotation.principal else "N/A"),
    ]
    cursor.advance(5)
    _techno_terms(sheet, cursor, terms)

    draw_signature(sheet, cursor, assets_dir, width=40, height=0)
    sheet.pdf.save()


def _techno_terms(sheet: Sheet, cursor: PageCursor, terms):
    """Assurance line plus the boxed terms; one box per page when the terms run long."""
    heading = "Terms and Conditions:"
    sheet.set_font(8, "normal")
    lines, terms_h = measure_terms(sheet, terms, 176)
    box_h = terms_h + 5
    layout = sheet.layout

    if 10 + box_h <= layout.content_max_y - layout.top_margin:
        cursor.ensure_space(10 + box_h)
        _assurance(sheet, cursor)
        sheet.set_draw_color(150).rect(14, cursor.y, 180, box_h)
        sheet.set_draw_color(0)
        sheet.set_font(9, "normal").text(16, cursor.y + 5, heading)
        sheet.set_font(8, "normal")
        for i, line in enumerate(lines):
            sheet.text(16, cursor.y + 10 + i * 5, line)
        cursor.advance(box_h)
        return

    cursor.ensure_space(7 + 10)
    _assurance(sheet, cursor)
    top = cursor.y

    def frame():
        sheet.set_draw_color(150).rect(14, top, 180, cursor.y - top)
        sheet.set_draw_color(0)

    def start_segment(title):
        sheet.set_font(9, "normal").text(16, cursor.y + 4, title)
        cursor.advance(5)
        sheet.set_font(8, "normal")

    start_segment(heading)
    for line in lines:
        if not cursor.fits(5):
            frame()
            cursor.new_page()
            top = cursor.y
            start_segment(continued_heading(heading))
        sheet.text(16, cursor.y + 4, line)
        cursor.advance(5)
    cursor.advance(min(2.0, cursor.remaining))
    frame()


def _assurance(sheet: Sheet, cursor: PageCursor):
    sheet.set_font(8, "normal").text(14, cursor.y + 5, "We assure you of the best quality products with prompt services.")
    cursor.advance(7)


# -----------------------------
# Selection
# -----------------------------
QUOTATION_TEMPLATES = {
    QuotationTemplate.PAKTECH: draw_paktech_quotation,
    QuotationTemplate.TECHNO: draw_techno_quotation,
}


def draw_quotation(quotation: Quotation, target, *, assets_dir=None, canvas_cls=DocumentCanvas) -> QuotationTemplate:
    template = QuotationTemplate.from_value(quotation.for_company)
    QUOTATION_TEMPLATES[template](quotation, target, assets_dir=assets_dir, canvas_cls=canvas_cls)
    return template


def generate_quotation_pdf(data, *, assets_dir=None) -> tuple[str, bytes]:
    quotation = data if isinstance(data, Quotation) else Quotation.from_dict(data)
    buf = io.BytesIO()
    template = draw_quotation(quotation, buf, assets_dir=assets_dir)
    filename = quotation_filename(quotation, template)
    logger.info("Rendered %s quotation %s", template.value, filename)
    return filename, buf.getvalue()
