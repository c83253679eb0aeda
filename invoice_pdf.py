# invoice_pdf.py
"""
Invoices print as an Invoice, a Bill or a Delivery Chalan on the letterhead
of the company named in `forCompany` (Paktech, Link Lines or Techno).
"""
from __future__ import annotations

import io
import logging

from companies import LINK_LINES, PAKTECH, CompanyProfile, company_profile
from config import Config
from formatting import fixed, quantity, safe_filename, short_date
from models import Invoice, InvalidDocumentTypeError
from pdf_layout import DocumentCanvas, PageCursor, PageLayout, Sheet, load_image, open_document
from pdf_sections import TotalLine, TotalsStyle, draw_party_box, draw_totals, na
from pdf_tables import Column, TableTheme, draw_table

logger = logging.getLogger(__name__)

INVOICE = "Invoice"
BILL = "Bill"
DELIVERY_CHALAN = "Delivery Chalan"

# document type -> number label printed in the info box
DOCUMENT_TYPES = {
    INVOICE: "INVOICE NO",
    BILL: "BILL NO",
    DELIVERY_CHALAN: "CHALAN NO",
}

WORDS_PLACEHOLDER = "__________________________"


def invoice_layout() -> PageLayout:
    return PageLayout(bottom_margin=Config.INVOICE_BOTTOM_MARGIN_MM)


def resolve_document_type(invoice: Invoice, document_type: str | None = None) -> str:
    value = (document_type or invoice.document_type or INVOICE).strip()
    if value not in DOCUMENT_TYPES:
        raise InvalidDocumentTypeError(
            f"Invalid document type {value!r}. Must be one of: {', '.join(DOCUMENT_TYPES)}."
        )
    return value


def document_number(invoice: Invoice, document_type: str) -> str:
    if document_type == INVOICE:
        return invoice.invoice_no or "N/A"
    return invoice.bill_no or "N/A"


def invoice_filename(invoice: Invoice, document_type: str) -> str:
    return safe_filename(f"{document_type}_{document_number(invoice, document_type)}") + ".pdf"


def _order_ref(invoice: Invoice) -> str:
    ref = invoice.order_reference
    return ref.quote_no or ref.id or "N/A"


# -----------------------------
# Items
# -----------------------------
def _columns_and_rows(invoice: Invoice, document_type: str, company: CompanyProfile):
    if document_type == DELIVERY_CHALAN:
        desc = "Description" if company.key == PAKTECH else "DESCRIPTION"
        columns = [
            Column("S. No", width=16, align="CENTER"),
            Column(desc, valign="TOP", rich=True),
            Column("Qty", width=22, align="CENTER"),
        ]
        rows = [[str(i), it.description, quantity(it.qty)] for i, it in enumerate(invoice.items, start=1)]
        return columns, rows

    rows = []
    for i, it in enumerate(invoice.items, start=1):
        gst = it.gst or 0.0
        total = it.total_with_tax if it.total_with_tax is not None else it.line_total + gst
        if company.key == PAKTECH:
            rows.append([str(i), it.description, fixed(it.unit_price), fixed(it.line_total), fixed(gst), fixed(total)])
        else:
            rows.append([str(i), it.description, quantity(it.qty), fixed(it.unit_price), fixed(gst), fixed(total)])

    if company.key == PAKTECH:
        columns = [
            Column("S. No", width=14, align="CENTER"),
            Column("Description", valign="TOP", rich=True),
            Column("Unit Price", width=24, align="CENTER"),
            Column("Excl. Tax", width=24, align="CENTER"),
            Column("GST 18%", width=22, align="CENTER"),
            Column("Total", width=26, align="CENTER"),
        ]
    else:
        columns = [
            Column("S. No", width=14, align="CENTER"),
            Column("DESCRIPTION", valign="TOP", rich=True),
            Column("Qty", width=14, align="CENTER"),
            Column("Unit Price\nwithout Tax", width=26, align="CENTER"),
            Column("GST @ 18%", width=22, align="CENTER"),
            Column("TOTAL with Tax", width=26, align="CENTER"),
        ]
    return columns, rows


def _table_theme(company: CompanyProfile) -> TableTheme:
    return TableTheme(
        font_family=company.font,
        font_size=company.text_size,
        head_font_size=company.text_size,
        head_fill=company.head_fill,
        head_text=company.head_text,
        grid_color=(160, 160, 160),
    )


def _totals(invoice: Invoice) -> list[TotalLine]:
    return [
        TotalLine("Subtotal:", fixed(invoice.sub_total)),
        TotalLine("Total GST:", fixed(invoice.total_gst)),
        TotalLine("Grand Total:", fixed(invoice.grand_total), emphasized=True),
    ]


def _payment_instructions(sheet: Sheet, cursor: PageCursor, text: str, size: float):
    sheet.set_font(size, "normal")
    for line in sheet.split_text(text, sheet.layout.content_width):
        cursor.ensure_space(5)
        sheet.text(14, cursor.y + 4, line)
        cursor.advance(5)


def _bill_to_lines(invoice: Invoice) -> list[str]:
    c = invoice.customer
    return [
        na(c.name),
        na(c.address),
        f"TELL: {na(c.phone)}",
        f"Email: {na(c.email)}",
        f"NTN: {na(c.ntn)}",
    ]


def _info_lines(invoice: Invoice, company: CompanyProfile) -> list[str]:
    return [
        f"DATE: {short_date(invoice.invoice_date)}",
        f"Order Ref: {_order_ref(invoice)}",
        f"NTN: {company.ntn}",
        f"GST: {company.gst}",
    ]


def _letterhead_footer(company: CompanyProfile, line_y: float, with_address: bool):
    def decorate(sheet: Sheet, page_number: int, page_count: int):
        sheet.set_draw_color(company.header_color).set_line_width(0.5 if with_address else 0.3)
        sheet.line(14, line_y, 196, line_y)
        sheet.set_font(8, "bold", company.font).set_text_color(0)
        if with_address:
            sheet.text(105, 290, company.footer_address, align="center")
        sheet.set_font(8, "normal", company.font)
        sheet.link_text(105, 295, company.footer_contact, company.footer_link, align="center")
    return decorate


def _words_and_total_box(sheet: Sheet, cursor: PageCursor, invoice: Invoice, company: CompanyProfile):
    cursor.ensure_space(12)
    y = cursor.y
    words = invoice.amount_in_words.upper() if invoice.amount_in_words else WORDS_PLACEHOLDER
    sheet.set_draw_color(0).set_line_width(0.2)
    sheet.rect(14, y, 160, 10)
    sheet.rect(174, y, 22, 10)
    sheet.set_font(company.text_size, "normal", company.font).set_text_color(0)
    sheet.text(16, y + 6, "AMOUNT IN WORDS")
    sheet.text(60, y + 6, sheet.split_text(words, 110)[0])
    sheet.text(194, y + 6, fixed(invoice.grand_total), align="right")
    cursor.advance(12)


# -----------------------------
# Paktech
# -----------------------------
def _draw_paktech(sheet: Sheet, cursor: PageCursor, invoice: Invoice, document_type: str, company: CompanyProfile, assets_dir):
    size = company.text_size
    sheet.set_font(company.title_size, "bold", company.font).set_text_color(company.header_color)
    sheet.text(105, 15, document_type.upper(), align="center")
    sheet.set_text_color(0)

    c = invoice.customer
    supplier_bottom = draw_party_box(
        sheet, 14, 25, 90, company.supplier_lines[0], list(company.supplier_lines[1:]),
        title_size=size, text_size=size,
    )
    buyer_bottom = draw_party_box(
        sheet, 110, 25, 86, f"Buyer Name: {na(c.name)}",
        [c.university_name or c.department_name, c.address, c.city_zip(), f"NTN/S Tax #: {c.ntn}"],
        title_size=size, text_size=size,
    )

    ref = invoice.order_reference
    y = max(supplier_bottom, buyer_bottom) + 8
    sheet.set_font(size - 1, "normal", company.font)
    for line in sheet.split_text(f"Ref: {na(ref.title)}", sheet.layout.content_width):
        sheet.text(14, y, line)
        y += 5
    sheet.text(14, y, f"Tender No: {na(ref.tender_no)}, Against Order: {na(ref.quote_no)}")
    sheet.text(196, y, f"{DOCUMENT_TYPES[document_type]}: {document_number(invoice, document_type)}   DATE: {short_date(invoice.invoice_date)}", align="right")

    cursor.y = y + 5
    columns, rows = _columns_and_rows(invoice, document_type, company)
    draw_table(sheet, cursor, columns, rows, _table_theme(company))

    if document_type != DELIVERY_CHALAN:
        cursor.advance(10)
        cursor.ensure_space(32)
        top = cursor.y
        cursor.advance(2)
        draw_totals(
            sheet, cursor, _totals(invoice),
            TotalsStyle(label_x=20, value_x=190, font_size=size, row_height=6, emphasis_height=6, emphasis_bold=True),
        )
        sheet.set_font(size, "normal", company.font)
        words = f"In Words: {invoice.amount_in_words or WORDS_PLACEHOLDER}"
        for line in sheet.split_text(words, 170):
            sheet.text(20, cursor.y + 4, line)
            cursor.advance(6)
        sheet.set_draw_color(0).set_line_width(0.2).rect(14, top, 182, cursor.y - top + 2)
        cursor.advance(4)

    if invoice.payment_instructions:
        cursor.advance(5)
        _payment_instructions(sheet, cursor, invoice.payment_instructions, size)

    def received_by(page_sheet: Sheet, page_number: int, page_count: int):
        if page_number != page_count:
            return
        page_sheet.set_font(size, "normal", company.font).text(14, 285, "Received By: ___________________________")
        page_sheet.set_font(size - 1, "normal", company.font).text(14, 290, "Paktech Instruments Co")

    sheet.pdf.page_decorators.append(received_by)


# -----------------------------
# Link Lines
# -----------------------------
def _draw_link_lines(sheet: Sheet, cursor: PageCursor, invoice: Invoice, document_type: str, company: CompanyProfile, assets_dir):
    size = company.text_size
    sheet.set_fill_color(company.header_color).rect(0, 0, 210, 30, "F")

    header = load_image(company.header_image, assets_dir)
    if header is not None:
        x, y, w, h = company.header_box
        sheet.image(header, x, y, w, h)

    sheet.set_font(size, "normal", company.font).set_text_color(255)
    for i, line in enumerate(company.info):
        sheet.text(200, 7 + i * 5, line, align="right")

    sheet.set_font(company.title_size, "bold", company.font).set_text_color(company.header_color)
    sheet.text(14, 45, document_type.upper())
    sheet.set_text_color(0)

    _bill_to_and_info(sheet, cursor, invoice, document_type, company, 55)
    _itemised_body(sheet, cursor, invoice, document_type, company)
    sheet.pdf.page_decorators.append(_letterhead_footer(company, 290, with_address=False))


# -----------------------------
# Techno (also the fallback letterhead)
# -----------------------------
def _draw_techno(sheet: Sheet, cursor: PageCursor, invoice: Invoice, document_type: str, company: CompanyProfile, assets_dir):
    header = load_image(company.header_image, assets_dir) if company.header_image else None
    if header is not None:
        x, y, w, h = company.header_box
        sheet.image(header, x, y, w, h)
    else:
        sheet.set_font(company.text_size + 2, "bold", company.font).set_text_color(company.header_color)
        sheet.text(14, 12, company.info[0] if company.info else company.name)
        sheet.set_font(company.text_size - 1, "normal", company.font)
        for i, line in enumerate(company.info[1:]):
            sheet.text(14, 17 + i * 4, line)

    sheet.set_font(company.title_size, "bold", company.font).set_text_color(0)
    sheet.text(105, 40, document_type.upper(), align="center")

    _bill_to_and_info(sheet, cursor, invoice, document_type, company, 48)
    _itemised_body(sheet, cursor, invoice, document_type, company)
    sheet.pdf.page_decorators.append(_letterhead_footer(company, 285, with_address=True))


def _bill_to_and_info(sheet, cursor, invoice, document_type, company, top):
    size = company.text_size
    sheet.set_draw_color(0).set_line_width(0.2)
    sheet.set_font(size, "normal", company.font)
    left = draw_party_box(sheet, 14, top, 90, "BILL TO:", _bill_to_lines(invoice), title_size=size, text_size=size)
    right = draw_party_box(
        sheet, 110, top, 86,
        f"{DOCUMENT_TYPES[document_type]}: {document_number(invoice, document_type)}",
        _info_lines(invoice, company),
        title_size=size, text_size=size,
    )
    sheet.set_font(size, "normal", company.font)
    cursor.y = max(left, right) + 2


def _itemised_body(sheet, cursor, invoice, document_type, company):
    size = company.text_size
    columns, rows = _columns_and_rows(invoice, document_type, company)
    draw_table(sheet, cursor, columns, rows, _table_theme(company))

    if document_type != DELIVERY_CHALAN:
        cursor.advance(5)
        draw_totals(
            sheet, cursor, _totals(invoice),
            TotalsStyle(
                label_x=140, value_x=194, font_size=size, row_height=6, emphasis_height=7,
                box_x=136, box_width=60, emphasis_fill=company.header_color, emphasis_text=255,
                emphasis_bold=True,
            ),
        )
        cursor.advance(2)
        _words_and_total_box(sheet, cursor, invoice, company)

    cursor.advance(3)
    _payment_instructions(sheet, cursor, invoice.payment_instructions or "N/A", size)


# company key -> layout; anything else prints on the Techno letterhead
INVOICE_LAYOUTS = {
    PAKTECH: _draw_paktech,
    LINK_LINES: _draw_link_lines,
}


def draw_invoice(invoice: Invoice, target, document_type: str | None = None, *, assets_dir=None, canvas_cls=DocumentCanvas) -> str:
    document_type = resolve_document_type(invoice, document_type)
    company = company_profile(invoice.for_company)
    number = document_number(invoice, document_type)

    sheet = open_document(target, title=f"{document_type} {number}", layout=invoice_layout(), canvas_cls=canvas_cls)
    sheet.set_font(company.text_size, "normal", company.font)
    cursor = PageCursor(sheet)

    draw = INVOICE_LAYOUTS.get(company.key, _draw_techno)
    draw(sheet, cursor, invoice, document_type, company, assets_dir)
    sheet.pdf.save()
    return document_type


def generate_invoice_pdf(data, document_type: str | None = None, *, assets_dir=None) -> tuple[str, bytes]:
    invoice = data if isinstance(data, Invoice) else Invoice.from_dict(data)
    buf = io.BytesIO()
    document_type = draw_invoice(invoice, buf, document_type, assets_dir=assets_dir)
    filename = invoice_filename(invoice, document_type)
    logger.info("Rendered %s for %s: %s", document_type, invoice.for_company, filename)
    return filename, buf.getvalue()
