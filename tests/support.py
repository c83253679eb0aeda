"""Shared helpers: a canvas that records drawn strings, sample documents, PNG assets."""

import copy
from collections import defaultdict

from PIL import Image

from pdf_layout import DocumentCanvas


class RecordingCanvas(DocumentCanvas):
    """DocumentCanvas that remembers every string drawn, keyed by page number."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.drawn = []
        self.placed = []

    def _record(self, text, y):
        self.drawn.append((self._pageNumber, str(text)))
        self.placed.append((self._pageNumber, y, str(text)))

    def drawString(self, x, y, text, *args, **kwargs):
        self._record(text, y)
        return super().drawString(x, y, text, *args, **kwargs)

    def drawRightString(self, x, y, text, *args, **kwargs):
        self._record(text, y)
        return super().drawRightString(x, y, text, *args, **kwargs)

    def drawCentredString(self, x, y, text, *args, **kwargs):
        self._record(text, y)
        return super().drawCentredString(x, y, text, *args, **kwargs)

    @property
    def page_count(self):
        return len(self._saved_page_states)

    def texts(self, page=None):
        return [t for p, t in self.drawn if page is None or p == page]

    def by_page(self):
        pages = defaultdict(list)
        for p, t in self.drawn:
            pages[p].append(t)
        return dict(pages)


def recording_canvas():
    """Return (canvas class, list that receives each instance created)."""
    created = []

    class _Canvas(RecordingCanvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    return _Canvas, created


def make_png(path, size=(120, 60), color=(20, 20, 120)):
    Image.new("RGB", size, color).save(path, format="PNG")
    return path


# -----------------------------
# Sample documents (backend JSON shape)
# -----------------------------
_QUOTATION = {
    "quoteNo": "Q-2025-001",
    "quoteDate": "2025-01-05T00:00:00.000Z",
    "userId": {"name": "Sara Khan", "email": "sara@example.com"},
    "customerId": {
        "name": "Dr. Ali",
        "universityName": "University of Karachi",
        "departmentName": "Chemistry",
        "address": "University Road, Karachi",
        "phone": "021-111",
        "email": "chem@uok.edu.pk",
    },
    "items": [
        {"sNo": 1, "refNo": "PH-200", "item": "<p>pH Meter</p><ul><li>Range 0-14</li></ul>", "qty": 2, "unitPrice": 50},
        {"sNo": 2, "refNo": "BK-1", "item": "<strong>Beaker set</strong>", "qty": 4, "unitPrice": 25},
    ],
    "subTotal": 200,
    "tax": 0.1,
    "grandTotal": 220,
    "currencyUnit": "PKR",
    "delivery": "4-6 weeks",
    "warranty": "1 year",
    "coOrigin": ["Germany"],
    "principal": ["Hanna"],
    "paymentTerms": "50% advance",
    "mode": "F.O.R",
    "quoteValidityDays": 30,
    "unitPriceMultiplier": 1,
    "forCompany": "Techno",
}

_PURCHASE_ORDER = {
    "poNumber": "PO-7788",
    "poDate": "2025-03-01",
    "userId": {"name": "Procurement"},
    "vendorId": {"name": "Lab Supplies Ltd", "address": "Main Blvd", "city": "Lahore", "zip": "54000",
                 "phone": "042-123", "email": "sales@labsupplies.pk"},
    "clientRefNo": {"quoteNo": "Q-2025-001"},
    "clientOrderNo": "CO-55",
    "mode": "F.O.R",
    "shipTo": {"name": "Paktech Store", "address": "Sharafabad", "city": "Karachi", "zip": "74800"},
    "shippingTerms": "DAP",
    "shippingMethod": "Road",
    "deliveryDate": "2025-04-15",
    "items": [
        {"description": "Centrifuge", "qty": 1, "unitPrice": 150000, "totalPrice": 150000},
        {"description": "Rotor", "qty": 2, "unitPrice": 25000, "totalPrice": 50000},
    ],
    "subTotal": 200000,
    "tax": 0.18,
    "grandTotal": 236000,
    "paymentTerms": "30 days",
}

_INVOICE = {
    "invoiceNo": "INV-101",
    "billNo": "B-55",
    "invoiceDate": "2025-02-10",
    "customerId": {"name": "University of Karachi", "address": "University Road", "phone": "021-999",
                   "email": "accounts@uok.edu.pk", "ntn": "1234567-8"},
    "userId": {"name": "Admin"},
    "orderReference": {"quoteNo": "Q-2025-001", "tenderNo": "T-9", "title": "Lab equipment supply"},
    "forCompany": "Techno",
    "items": [
        {"description": "Centrifuge", "qty": 1, "unitPrice": 1000, "gst": 180, "totalWithTax": 1180},
        {"description": "Rotor", "qty": 2, "unitPrice": 100, "gst": 36, "totalWithTax": 236},
    ],
    "subTotal": 1200,
    "totalGST": 216,
    "grandTotal": 1416,
    "amountInWords": "One thousand four hundred sixteen",
    "paymentInstructions": "Pay by cheque.",
}


def quotation_payload(**overrides):
    data = copy.deepcopy(_QUOTATION)
    data.update(overrides)
    return data


def purchase_order_payload(**overrides):
    data = copy.deepcopy(_PURCHASE_ORDER)
    data.update(overrides)
    return data


def invoice_payload(**overrides):
    data = copy.deepcopy(_INVOICE)
    data.update(overrides)
    return data


def many_items(n, key="description"):
    return [{key: f"Item number {i}", "qty": 1, "unitPrice": 10, "refNo": f"M-{i}"} for i in range(1, n + 1)]
