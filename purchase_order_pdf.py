# purchase_order_pdf.py
from __future__ import annotations

import io
import logging

from companies import COMPANIES, PAKTECH
from config import Config
from formatting import long_date, money, percent, quantity, safe_filename
from models import PurchaseOrder
from pdf_layout import DocumentCanvas, PageCursor, PageLayout, Sheet, load_image, open_document
from pdf_sections import TotalLine, TotalsStyle, draw_party_box, draw_signature, draw_terms, draw_totals, na
from pdf_tables import Column, TableTheme, draw_table

logger = logging.getLogger(__name__)

BLUE = (41, 128, 185)


def purchase_order_layout() -> PageLayout:
    return PageLayout(bottom_margin=Config.PURCHASE_ORDER_BOTTOM_MARGIN_MM)


def purchase_order_filename(po: PurchaseOrder) -> str:
    return safe_filename(po.po_number, fallback="PurchaseOrder") + ".pdf"


def _page_footer(sheet: Sheet, page_number: int, page_count: int):
    sheet.set_font(8, "normal").text(105, 290, f"Page {page_number} of {page_count}", align="center")


def _letterhead(sheet: Sheet, po: PurchaseOrder, assets_dir):
    logo = load_image("paktech-logo.png", assets_dir)
    if logo is not None:
        sheet.image(logo, 135, 2, 70, 15)

    company = COMPANIES[PAKTECH]
    sheet.set_font(14, "normal").text(14, 15, company.name)
    sheet.set_font(10, "normal")
    for i, line in enumerate(company.info):
        sheet.text(14, 20 + i * 5, line)

    sheet.set_font(12, "normal")
    sheet.rect(140, 20, 60, 18)
    sheet.text(170, 26, "PURCHASE ORDER", align="center")
    sheet.set_font(9, "normal").text(142, 33, f"{na(po.po_number)}    Date: {long_date(po.po_date)}")

    sheet.set_font(10, "normal")
    sheet.text(14, 42, f"Order Ref #: {na(po.client_ref_no)}")
    sheet.text(80, 42, f"Client Order #: {na(po.client_order_no)}")


def _shipping_row(sheet: Sheet, y: float, po: PurchaseOrder) -> float:
    cells = [
        (14, 60, "Shipping Terms", na(po.shipping_terms)),
        (74, 60, "Shipping Method", na(po.shipping_method)),
        (134, 66, "Delivery Date", long_date(po.delivery_date)),
    ]
    sheet.set_fill_color(210).set_font(9, "normal")
    for x, w, label, value in cells:
        sheet.rect(x, y, w, 10, "F")
        sheet.set_text_color(255).text(x + 2, y + 7, label)
        sheet.set_text_color(0).text(x + 2, y + 15, value)
    return y + 18


def draw_purchase_order(po: PurchaseOrder, target, *, assets_dir=None, canvas_cls=DocumentCanvas):
    currency = po.currency
    sheet = open_document(target, title=f"Purchase Order {po.po_number}".strip(), layout=purchase_order_layout(), canvas_cls=canvas_cls)
    sheet.pdf.page_decorators.append(_page_footer)
    cursor = PageCursor(sheet)

    _letterhead(sheet, po, assets_dir)

    # Vendor / Ship To
    vendor, ship_to = po.vendor, po.ship_to
    block_y = 48
    vendor_bottom = draw_party_box(
        sheet, 14, block_y, 90, "VENDOR",
        [na(vendor.name), na(vendor.address), vendor.city_zip(), na(vendor.phone), na(vendor.email)],
        fill=240, stroke=False,
    )
    ship_bottom = draw_party_box(
        sheet, 110, block_y, 90, "SHIP TO",
        [na(ship_to.name), na(ship_to.address), na(ship_to.phone), na(ship_to.email), ship_to.city_zip()],
        fill=240, stroke=False,
    )

    cursor.y = _shipping_row(sheet, max(vendor_bottom, ship_bottom) + 6, po)

    # Items
    rows = []
    for item in po.items:
        total = item.total_price if item.total_price is not None else item.line_total
        rows.append([
            str(item.s_no),
            item.description or "N/A",
            quantity(item.qty),
            money(item.unit_price, currency),
            money(total, currency),
        ])
    columns = [
        Column("S.No", width=14, align="CENTER"),
        Column("Description", valign="TOP", rich=True),
        Column("Qty", width=16, align="RIGHT"),
        Column("Unit Price", width=34, align="RIGHT"),
        Column("Total Price", width=34, align="RIGHT"),
    ]
    theme = TableTheme(font_size=9, head_font_size=9, head_fill=BLUE, head_text=255, grid_color=(120, 120, 120))
    draw_table(sheet, cursor, columns, rows, theme)

    # Totals
    totals = [TotalLine("Subtotal:", money(po.sub_total, currency))]
    if po.tax:
        totals.append(TotalLine(f"Tax ({percent(po.tax)}):", money(po.tax_amount, currency)))
    totals.append(TotalLine("Grand Total:", money(po.grand_total, currency), emphasized=True))
    cursor.advance(5)
    draw_totals(
        sheet, cursor, totals,
        TotalsStyle(
            label_x=140, value_x=198, font_size=10, row_height=7, emphasis_height=8, emphasis_gap=1,
            box_x=138, box_width=62, emphasis_fill=200, emphasis_bold=True,
        ),
    )

    # Terms
    terms = [
        ("Delivery Terms:", po.delivery_terms),
        ("Payment Terms:", po.payment_terms),
        ("Warranty:", po.warranty),
        ("Import Duties & Taxes:", po.import_duties_taxes),
        ("Inspection Terms:", po.inspection_terms),
        ("Force Majeure:", po.force_majeure),
        ("Customs Compliance:", po.customs_compliance),
    ]
    cursor.advance(8)
    draw_terms(sheet, cursor, terms, "Terms and Conditions", width=180, heading_size=11, text_size=9)

    if po.notes:
        sheet.set_font(9, "italic")
        for line in sheet.split_text(po.notes, 180):
            cursor.ensure_space(5)
            sheet.text(14, cursor.y + 3.5, line)
            cursor.advance(5)

    draw_signature(sheet, cursor, assets_dir, width=60, height=20, caption="Authorized Signature")
    sheet.pdf.save()


def generate_purchase_order_pdf(data, *, assets_dir=None) -> tuple[str, bytes]:
    po = data if isinstance(data, PurchaseOrder) else PurchaseOrder.from_dict(data)
    buf = io.BytesIO()
    draw_purchase_order(po, buf, assets_dir=assets_dir)
    filename = purchase_order_filename(po)
    logger.info("Rendered purchase order %s", filename)
    return filename, buf.getvalue()
