# models.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# -----------------------------
# Errors
# -----------------------------
class InvalidTemplateError(ValueError):
    """Unknown quotation template key (forCompany)."""


class InvalidDocumentTypeError(ValueError):
    """Unknown invoice print type (Invoice / Bill / Delivery Chalan)."""


# -----------------------------
# Helpers
# -----------------------------
def _to_float(s, default=0.0) -> float:
    try:
        if isinstance(s, str):
            s = s.strip()
        val = float(s) if s not in (None, "") else float(default)
    except Exception:
        return float(default)
    return val if math.isfinite(val) else float(default)


def _opt_float(s) -> Optional[float]:
    if s is None or (isinstance(s, str) and not s.strip()):
        return None
    try:
        val = float(s)
    except (TypeError, ValueError):
        return None
    return val if math.isfinite(val) else None


def _text(s) -> str:
    if s is None:
        return ""
    return str(s).strip()


def _ref(value) -> dict:
    # Unpopulated references come back from the API as plain id strings.
    return value if isinstance(value, dict) else {}


def _str_list(value) -> list[str]:
    if isinstance(value, str):
        value = [value]
    return [str(v).strip() for v in (value or []) if str(v or "").strip()]


def _get(d: dict, key: str, default: Any) -> Any:
    # Explicit nulls from the API behave like a missing key.
    val = d.get(key)
    return default if val is None else val


# -----------------------------
# Parties / references
# -----------------------------
@dataclass
class Party:
    name: str = ""
    address: str = ""
    city: str = ""
    zip: str = ""
    phone: str = ""
    fax: str = ""
    email: str = ""
    ntn: str = ""
    university_name: str = ""
    department_name: str = ""

    @classmethod
    def from_dict(cls, data) -> "Party":
        d = _ref(data)
        return cls(
            name=_text(d.get("name")),
            address=_text(d.get("address")),
            city=_text(d.get("city")),
            zip=_text(d.get("zip")),
            phone=_text(d.get("phone")),
            fax=_text(d.get("fax")),
            email=_text(d.get("email")),
            ntn=_text(d.get("ntn")),
            university_name=_text(d.get("universityName")),
            department_name=_text(d.get("departmentName")),
        )

    def city_zip(self) -> str:
        return ", ".join(p for p in [self.city, self.zip] if p)


@dataclass
class OrderReference:
    quote_no: str = ""
    tender_no: str = ""
    title: str = ""
    id: str = ""

    @classmethod
    def from_dict(cls, data) -> "OrderReference":
        if isinstance(data, str):
            return cls(id=data.strip())
        d = _ref(data)
        return cls(
            quote_no=_text(d.get("quoteNo")),
            tender_no=_text(d.get("tenderNo")),
            title=_text(d.get("title")),
            id=_text(d.get("_id") or d.get("id")),
        )


def _user_name(data) -> str:
    d = _ref(data)
    return _text(d.get("name")) or _text(d.get("email"))


# -----------------------------
# Line items
# -----------------------------
@dataclass
class LineItem:
    s_no: int
    description: str = ""
    qty: float = 0.0
    unit_price: float = 0.0
    ref_no: str = ""
    gst: Optional[float] = None
    total_price: Optional[float] = None
    total_with_tax: Optional[float] = None

    @property
    def line_total(self) -> float:
        return self.qty * self.unit_price

    @classmethod
    def from_dict(cls, data, position: int) -> "LineItem":
        d = _ref(data)
        s_no = d.get("sNo")
        try:
            s_no = int(s_no) if s_no not in (None, "") else position
        except (TypeError, ValueError):
            s_no = position
        return cls(
            s_no=s_no,
            description=str(d.get("description") or d.get("item") or ""),
            qty=_to_float(d.get("qty")),
            unit_price=_to_float(d.get("unitPrice")),
            ref_no=_text(d.get("refNo")),
            gst=_opt_float(d.get("gst")),
            total_price=_opt_float(d.get("totalPrice")),
            total_with_tax=_opt_float(d.get("totalWithTax")),
        )


def _items(raw) -> list[LineItem]:
    return [LineItem.from_dict(it, i) for i, it in enumerate(raw or [], start=1)]


# -----------------------------
# Documents
# -----------------------------
@dataclass
class Invoice:
    invoice_no: str = ""
    bill_no: str = ""
    invoice_date: Optional[str] = None
    customer: Party = field(default_factory=Party)
    prepared_by: str = ""
    order_reference: OrderReference = field(default_factory=OrderReference)
    for_company: str = "Techno"
    items: list[LineItem] = field(default_factory=list)
    sub_total: float = 0.0
    total_gst: float = 0.0
    grand_total: float = 0.0
    amount_in_words: str = ""
    payment_instructions: str = ""
    document_type: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Invoice":
        d = _ref(data)
        return cls(
            invoice_no=_text(d.get("invoiceNo")),
            bill_no=_text(d.get("billNo")),
            invoice_date=d.get("invoiceDate"),
            customer=Party.from_dict(d.get("customerId")),
            prepared_by=_user_name(d.get("userId")),
            order_reference=OrderReference.from_dict(d.get("orderReference")),
            for_company=_text(d.get("forCompany")) or "Techno",
            items=_items(d.get("items")),
            sub_total=_to_float(d.get("subTotal")),
            total_gst=_to_float(d.get("totalGST")),
            grand_total=_to_float(d.get("grandTotal")),
            amount_in_words=_text(d.get("amountInWords")),
            payment_instructions=_text(d.get("paymentInstructions")),
            document_type=_text(d.get("documentType")),
        )


DEFAULT_PO_TERMS = {
    "delivery_terms": "12-16 weeks after confirmed order",
    "warranty": "The equipment shall be covered by a 12 Months warranty, commencing after two weeks from the date of delivery.",
    "notes": "We are highly anticipating this partnership and we’re looking forward to working with you.",
    "import_duties_taxes": "Including all duties and Taxes, GST mentioned separately.",
    "inspection_terms": "The Buyer shall inspect the equipment upon delivery and notify the Seller of any defects or discrepancies within five days.",
    "force_majeure": "Paktech will not be liable for any failure to perform due to unforeseen circumstances beyond our control.",
    "customs_compliance": "The Buyer shall comply with all applicable customs regulations and provide necessary documentation if applicable.",
}


@dataclass
class PurchaseOrder:
    po_number: str = ""
    po_date: Optional[str] = None
    prepared_by: str = ""
    vendor: Party = field(default_factory=Party)
    client_ref_no: str = ""
    client_order_no: str = ""
    mode: str = "F.O.R"
    currency_unit: str = ""
    ship_to: Party = field(default_factory=Party)
    shipping_terms: str = ""
    shipping_method: str = ""
    delivery_date: Optional[str] = None
    items: list[LineItem] = field(default_factory=list)
    sub_total: float = 0.0
    tax: float = 0.0
    grand_total: float = 0.0
    delivery_terms: str = DEFAULT_PO_TERMS["delivery_terms"]
    payment_terms: str = ""
    warranty: str = DEFAULT_PO_TERMS["warranty"]
    notes: str = DEFAULT_PO_TERMS["notes"]
    import_duties_taxes: str = DEFAULT_PO_TERMS["import_duties_taxes"]
    inspection_terms: str = DEFAULT_PO_TERMS["inspection_terms"]
    force_majeure: str = DEFAULT_PO_TERMS["force_majeure"]
    customs_compliance: str = DEFAULT_PO_TERMS["customs_compliance"]

    @property
    def currency(self) -> str:
        if self.currency_unit:
            return self.currency_unit
        return "PKR" if self.mode == "F.O.R" else "USD"

    @property
    def tax_amount(self) -> float:
        return self.sub_total * self.tax

    @classmethod
    def from_dict(cls, data: dict) -> "PurchaseOrder":
        d = _ref(data)
        client_ref = d.get("clientRefNo")
        if isinstance(client_ref, dict):
            client_ref_no = _text(client_ref.get("quoteNo"))
        else:
            client_ref_no = _text(client_ref)
        terms = {
            key: _text(d.get(camel)) or DEFAULT_PO_TERMS[key]
            for key, camel in [
                ("delivery_terms", "deliveryTerms"),
                ("warranty", "warranty"),
                ("notes", "notes"),
                ("import_duties_taxes", "importDutiesTaxes"),
                ("inspection_terms", "inspectionTerms"),
                ("force_majeure", "forceMajeure"),
                ("customs_compliance", "customsCompliance"),
            ]
        }
        return cls(
            po_number=_text(d.get("poNumber")),
            po_date=d.get("poDate"),
            prepared_by=_user_name(d.get("userId")),
            vendor=Party.from_dict(d.get("vendorId")),
            client_ref_no=client_ref_no,
            client_order_no=_text(d.get("clientOrderNo")),
            mode=_text(d.get("mode")) or "F.O.R",
            currency_unit=_text(d.get("currencyUnit")),
            ship_to=Party.from_dict(d.get("shipTo")),
            shipping_terms=_text(d.get("shippingTerms")),
            shipping_method=_text(d.get("shippingMethod")),
            delivery_date=d.get("deliveryDate"),
            items=_items(d.get("items")),
            sub_total=_to_float(d.get("subTotal")),
            tax=_to_float(d.get("tax")),
            grand_total=_to_float(d.get("grandTotal")),
            payment_terms=_text(d.get("paymentTerms")),
            **terms,
        )


class QuotationTemplate(Enum):
    PAKTECH = "Paktech"
    TECHNO = "Techno"

    @classmethod
    def from_value(cls, value) -> "QuotationTemplate":
        for member in cls:
            if member.value == value:
                return member
        raise InvalidTemplateError(
            f"Invalid forCompany value {value!r}. Must be 'Techno' or 'Paktech'."
        )


@dataclass
class Quotation:
    quote_no: str = ""
    quote_date: Optional[str] = None
    expiry_date: Optional[str] = None
    prepared_by: str = ""
    customer: Party = field(default_factory=Party)
    items: list[LineItem] = field(default_factory=list)
    sub_total: float = 0.0
    tax: float = 0.0
    grand_total: float = 0.0
    currency_unit: str = ""
    delivery: str = ""
    warranty: str = ""
    co_origin: list[str] = field(default_factory=list)
    principal: list[str] = field(default_factory=list)
    payment_terms: str = ""
    mode: str = "F.O.R"
    mode_other_text: str = ""
    quote_validity_days: int = 30
    unit_price_multiplier: float = 1.0
    for_company: Any = ""  # raw request value, validated by QuotationTemplate

    @property
    def tax_amount(self) -> float:
        return self.sub_total * self.tax

    @property
    def incoterms(self) -> str:
        if self.mode == "Other":
            return f"{self.mode} ({self.mode_other_text})"
        return self.mode

    @classmethod
    def from_dict(cls, data: dict) -> "Quotation":
        d = _ref(data)
        validity = int(_to_float(_get(d, "quoteValidityDays", 30), 30))
        return cls(
            quote_no=_text(d.get("quoteNo")),
            quote_date=d.get("quoteDate"),
            expiry_date=d.get("expiryDate") or None,
            prepared_by=_user_name(d.get("userId")),
            customer=Party.from_dict(d.get("customerId")),
            items=_items(d.get("items")),
            sub_total=_to_float(d.get("subTotal")),
            tax=_to_float(d.get("tax")),
            grand_total=_to_float(d.get("grandTotal")),
            currency_unit=_text(d.get("currencyUnit")),
            delivery=_text(d.get("delivery")),
            warranty=_text(d.get("warranty")),
            co_origin=_str_list(d.get("coOrigin")),
            principal=_str_list(d.get("principal")),
            payment_terms=_text(d.get("paymentTerms")),
            mode=_text(d.get("mode")) or "F.O.R",
            mode_other_text=_text(d.get("modeOtherText")),
            quote_validity_days=validity,
            unit_price_multiplier=_to_float(_get(d, "unitPriceMultiplier", 1), 1.0),
            for_company=d.get("forCompany"),
        )
