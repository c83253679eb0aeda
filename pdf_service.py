# pdf_service.py
import logging
import os
from pathlib import Path

from config import Config
from invoice_pdf import generate_invoice_pdf, invoice_filename, resolve_document_type
from models import Invoice, PurchaseOrder, Quotation, QuotationTemplate
from purchase_order_pdf import generate_purchase_order_pdf, purchase_order_filename
from quotation_pdf import generate_quotation_pdf, quotation_filename

logger = logging.getLogger(__name__)

INVOICE = "invoice"
PURCHASE_ORDER = "purchase_order"
QUOTATION = "quotation"

# kind -> sub-directory under EXPORTS_DIR
EXPORT_SUBDIRS = {
    INVOICE: "invoices",
    PURCHASE_ORDER: "purchase_orders",
    QUOTATION: "quotations",
}

# kind -> model parsed from the backend JSON
DOCUMENT_MODELS = {
    INVOICE: Invoice,
    PURCHASE_ORDER: PurchaseOrder,
    QUOTATION: Quotation,
}


class UnknownDocumentKindError(ValueError):
    pass


def _check_kind(kind: str) -> str:
    kind = (kind or "").strip().lower().replace("-", "_")
    if kind not in EXPORT_SUBDIRS:
        raise UnknownDocumentKindError(
            f"Unknown document kind {kind!r}. Must be one of: {', '.join(EXPORT_SUBDIRS)}."
        )
    return kind


def generate_pdf(kind: str, payload, document_type: str | None = None, *, assets_dir: str | None = None) -> tuple[str, bytes]:
    """
    Render one document record (backend JSON or a parsed model).
    Returns (filename, pdf_bytes).
    """
    kind = _check_kind(kind)
    if kind == INVOICE:
        return generate_invoice_pdf(payload, document_type, assets_dir=assets_dir)
    if kind == PURCHASE_ORDER:
        return generate_purchase_order_pdf(payload, assets_dir=assets_dir)
    return generate_quotation_pdf(payload, assets_dir=assets_dir)


def parse_document(kind: str, payload):
    model = DOCUMENT_MODELS[_check_kind(kind)]
    return payload if isinstance(payload, model) else model.from_dict(payload)


def pdf_filename(kind: str, payload, document_type: str | None = None) -> str:
    """Filename generate_pdf would return, without rendering anything."""
    kind = _check_kind(kind)
    doc = parse_document(kind, payload)
    if kind == INVOICE:
        return invoice_filename(doc, resolve_document_type(doc, document_type))
    if kind == PURCHASE_ORDER:
        return purchase_order_filename(doc)
    return quotation_filename(doc, QuotationTemplate.from_value(doc.for_company))


def export_dir(kind: str, exports_dir: str | None = None) -> Path:
    kind = _check_kind(kind)
    return Path(exports_dir or Config.EXPORTS_DIR) / EXPORT_SUBDIRS[kind]


def generate_and_store_pdf(
    kind: str,
    payload,
    document_type: str | None = None,
    *,
    exports_dir: str | None = None,
    assets_dir: str | None = None,
) -> str:
    """
    Generates (or regenerates) the PDF and writes it to EXPORTS_DIR/<kind>/.

    Returns: absolute pdf path on disk.
    """
    filename, data = generate_pdf(kind, payload, document_type, assets_dir=assets_dir)
    return store_pdf(kind, filename, data, exports_dir)


def store_pdf(kind: str, filename: str, data: bytes, exports_dir: str | None = None) -> str:
    out_dir = export_dir(kind, exports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = os.path.abspath(out_dir / filename)
    with open(pdf_path, "wb") as f:
        f.write(data)

    logger.info("Stored %s PDF at %s (%d bytes)", kind, pdf_path, len(data))
    return pdf_path


def stored_pdfs(kind: str | None = None, exports_dir: str | None = None) -> list[Path]:
    kinds = [_check_kind(kind)] if kind else list(EXPORT_SUBDIRS)
    paths = []
    for k in kinds:
        d = export_dir(k, exports_dir)
        if d.is_dir():
            paths.extend(sorted(p for p in d.glob("*.pdf") if p.is_file()))
    return paths
