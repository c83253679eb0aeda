import os
import tempfile
import unittest
from pathlib import Path

from models import InvalidTemplateError, Invoice
from pdf_service import (
    INVOICE,
    PURCHASE_ORDER,
    QUOTATION,
    UnknownDocumentKindError,
    export_dir,
    generate_and_store_pdf,
    generate_pdf,
    pdf_filename,
    stored_pdfs,
)
from support import invoice_payload, purchase_order_payload, quotation_payload


class TestPdfService(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.exports = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_kind_aliases(self):
        name, _ = generate_pdf("purchase-order", purchase_order_payload(), assets_dir=self.exports)
        self.assertEqual(name, "PO-7788.pdf")

    def test_unknown_kind(self):
        with self.assertRaises(UnknownDocumentKindError):
            generate_pdf("receipt", {})
        self.assertTrue(issubclass(UnknownDocumentKindError, ValueError))

    def test_accepts_parsed_models(self):
        name, data = generate_pdf(INVOICE, Invoice.from_dict(invoice_payload()), "Bill", assets_dir=self.exports)
        self.assertEqual(name, "Bill_B-55.pdf")
        self.assertTrue(data.startswith(b"%PDF"))

    def test_filename_without_rendering(self):
        self.assertEqual(pdf_filename(INVOICE, invoice_payload(), "Delivery Chalan"), "Delivery Chalan_B-55.pdf")
        self.assertEqual(pdf_filename(PURCHASE_ORDER, purchase_order_payload()), "PO-7788.pdf")
        self.assertEqual(pdf_filename(QUOTATION, quotation_payload(quoteNo="")), "Quotation_Preview.pdf")
        with self.assertRaises(InvalidTemplateError):
            pdf_filename(QUOTATION, quotation_payload(forCompany="Acme"))

    def test_filename_matches_generated(self):
        for kind, payload in ((INVOICE, invoice_payload()), (QUOTATION, quotation_payload(forCompany="Paktech"))):
            with self.subTest(kind=kind):
                name, _ = generate_pdf(kind, payload, assets_dir=self.exports)
                self.assertEqual(pdf_filename(kind, payload), name)

    def test_generate_and_store(self):
        path = generate_and_store_pdf(PURCHASE_ORDER, purchase_order_payload(), exports_dir=self.exports,
                                      assets_dir=self.exports)
        self.assertTrue(os.path.isabs(path))
        self.assertEqual(Path(path).parent, export_dir(PURCHASE_ORDER, self.exports))
        self.assertEqual(stored_pdfs(exports_dir=self.exports), [Path(path)])
        self.assertEqual(stored_pdfs(INVOICE, self.exports), [])


if __name__ == "__main__":
    unittest.main()
