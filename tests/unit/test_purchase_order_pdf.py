import io
import tempfile
import unittest

from models import PurchaseOrder
from purchase_order_pdf import draw_purchase_order, generate_purchase_order_pdf, purchase_order_filename
from support import many_items, purchase_order_payload, recording_canvas


def _draw(payload, assets_dir):
    canvas_cls, created = recording_canvas()
    draw_purchase_order(PurchaseOrder.from_dict(payload), io.BytesIO(), assets_dir=assets_dir, canvas_cls=canvas_cls)
    return created[0]


class PurchaseOrderTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.assets = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()


class TestPurchaseOrderContent(PurchaseOrderTestCase):
    def test_letterhead_and_references(self):
        texts = _draw(purchase_order_payload(), self.assets).texts(1)
        self.assertEqual(texts[0], "Paktech Instrumentation Co.")
        self.assertIn("PURCHASE ORDER", texts)
        self.assertIn("PO-7788    Date: March 1, 2025", texts)
        self.assertIn("Order Ref #: Q-2025-001", texts)
        self.assertIn("Client Order #: CO-55", texts)
        self.assertIn("VENDOR", texts)
        self.assertIn("SHIP TO", texts)
        self.assertIn("Lahore, 54000", texts)
        self.assertIn("April 15, 2025", texts)

    def test_totals_in_rupees_for_local_orders(self):
        texts = _draw(purchase_order_payload(), self.assets).texts()
        self.assertIn("Subtotal:", texts)
        self.assertIn("PKR 200,000.00", texts)
        self.assertIn("Tax (18%):", texts)
        self.assertIn("PKR 36,000.00", texts)
        self.assertIn("Grand Total:", texts)
        self.assertIn("PKR 236,000.00", texts)

    def test_foreign_orders_use_dollars(self):
        texts = _draw(purchase_order_payload(mode="C&F"), self.assets).texts()
        self.assertIn("$200,000.00", texts)
        self.assertIn("$236,000.00", texts)

    def test_tax_row_omitted_without_tax(self):
        texts = _draw(purchase_order_payload(tax=0, grandTotal=200000), self.assets).texts()
        self.assertFalse(any(t.startswith("Tax (") for t in texts))
        self.assertIn("PKR 200,000.00", texts)

    def test_missing_fields_render_na(self):
        payload = purchase_order_payload(
            poNumber="", poDate=None, clientRefNo=None, clientOrderNo="", vendorId=None,
            shippingTerms="", deliveryDate="bad date",
        )
        texts = _draw(payload, self.assets).texts(1)
        self.assertIn("N/A    Date: N/A", texts)
        self.assertIn("Order Ref #: N/A", texts)
        self.assertIn("Client Order #: N/A", texts)
        # vendor box lines and empty shipping values
        self.assertGreaterEqual(texts.count("N/A"), 5)

    def test_terms_and_signature(self):
        texts = _draw(purchase_order_payload(), self.assets).texts()
        self.assertIn("Terms and Conditions", texts)
        self.assertIn("Payment Terms: 30 days", texts)
        self.assertIn("Authorized Signature", texts)


class TestPurchaseOrderPaging(PurchaseOrderTestCase):
    def test_page_numbers_on_every_page(self):
        pdf = _draw(purchase_order_payload(items=many_items(80)), self.assets)
        total = pdf.page_count
        self.assertGreater(total, 1)
        for page in range(1, total + 1):
            self.assertIn(f"Page {page} of {total}", pdf.texts(page))

    def test_long_terms_continue_with_heading(self):
        warranty = "Replacement parts are covered for the full period. " * 150
        pdf = _draw(purchase_order_payload(warranty=warranty), self.assets)
        self.assertGreater(pdf.page_count, 1)
        self.assertIn("Terms and Conditions (cont.):", pdf.texts())

    def test_single_page_order(self):
        pdf = _draw(purchase_order_payload(), self.assets)
        self.assertEqual(pdf.page_count, 1)
        self.assertIn("Page 1 of 1", pdf.texts(1))


class TestGeneratePurchaseOrderPdf(PurchaseOrderTestCase):
    def test_filename_and_bytes(self):
        name, data = generate_purchase_order_pdf(purchase_order_payload(), assets_dir=self.assets)
        self.assertEqual(name, "PO-7788.pdf")
        self.assertTrue(data.startswith(b"%PDF"))

    def test_filename_fallback(self):
        po = PurchaseOrder.from_dict(purchase_order_payload(poNumber=""))
        self.assertEqual(purchase_order_filename(po), "PurchaseOrder.pdf")

    def test_rendering_twice_is_byte_identical(self):
        first = generate_purchase_order_pdf(purchase_order_payload(), assets_dir=self.assets)[1]
        second = generate_purchase_order_pdf(purchase_order_payload(), assets_dir=self.assets)[1]
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
