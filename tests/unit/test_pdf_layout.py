import io
import os
import tempfile
import unittest

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from pdf_layout import PageCursor, PageLayout, load_image, open_document, wrap_text
from pdf_sections import draw_terms, measure_terms
from support import make_png, recording_canvas

# 297 - 47 = 250 mm usable depth
LAYOUT = PageLayout(bottom_margin=47)


def _sheet():
    canvas_cls, created = recording_canvas()
    sheet = open_document(io.BytesIO(), title="test", layout=LAYOUT, canvas_cls=canvas_cls)
    return sheet, created[0]


class TestPageCursor(unittest.TestCase):
    def test_content_max_y(self):
        self.assertEqual(LAYOUT.content_max_y, 250)
        self.assertAlmostEqual(LAYOUT.page_width, 210, places=3)

    def test_block_exactly_filling_page_fits(self):
        sheet, _ = _sheet()
        cursor = PageCursor(sheet, y=225)
        self.assertTrue(cursor.fits(25))
        self.assertFalse(cursor.ensure_space(25))
        self.assertEqual(sheet.page_number, 1)
        self.assertEqual(cursor.y, 225)

    def test_one_unit_taller_breaks(self):
        sheet, _ = _sheet()
        cursor = PageCursor(sheet, y=225)
        calls = []
        self.assertFalse(cursor.fits(26))
        self.assertTrue(cursor.ensure_space(26, on_new_page=lambda: calls.append(cursor.y)))
        self.assertEqual(sheet.page_number, 2)
        self.assertEqual(cursor.page_index, 1)
        self.assertEqual(cursor.y, LAYOUT.top_margin)
        self.assertEqual(calls, [LAYOUT.top_margin])

    def test_at_top(self):
        sheet, _ = _sheet()
        cursor = PageCursor(sheet)
        self.assertTrue(cursor.at_top())
        cursor.advance(3)
        self.assertFalse(cursor.at_top())


class TestWrapText(unittest.TestCase):
    def test_every_line_fits(self):
        text = "The Buyer shall inspect the equipment upon delivery and notify the Seller of any defects. " * 4
        max_w = 80 * mm
        lines = wrap_text(text, "Helvetica", 9, max_w)
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(stringWidth(line, "Helvetica", 9), max_w)

    def test_overlong_token_is_split(self):
        token = "X" * 300
        lines = wrap_text(token, "Helvetica", 9, 40 * mm)
        self.assertGreater(len(lines), 1)
        self.assertEqual("".join(lines), token)
        for line in lines:
            self.assertLessEqual(stringWidth(line, "Helvetica", 9), 40 * mm)

    def test_empty_text_gives_one_empty_line(self):
        self.assertEqual(wrap_text("", "Helvetica", 9, 100), [""])


class TestTermsPlacement(unittest.TestCase):
    TERMS = [("Delivery:", "4 weeks"), ("Warranty:", "1 year"), ("Payment:", "Advance"), ("Origin:", "Germany")]

    def test_measured_height(self):
        sheet, _ = _sheet()
        sheet.set_font(8, "normal")
        lines, height = measure_terms(sheet, self.TERMS, 182)
        self.assertEqual(len(lines), 4)
        self.assertEqual(height, 25)

    def test_block_exactly_filling_remaining_space_stays(self):
        sheet, pdf = _sheet()
        cursor = PageCursor(sheet, y=225)
        draw_terms(sheet, cursor, self.TERMS, "Terms:")
        self.assertEqual(sheet.page_number, 1)
        self.assertEqual(cursor.y, 250)
        self.assertIn("Origin: Germany", pdf.texts(1))

    def test_block_one_unit_taller_moves_to_new_page(self):
        sheet, pdf = _sheet()
        cursor = PageCursor(sheet, y=226)
        draw_terms(sheet, cursor, self.TERMS, "Terms:")
        self.assertEqual(sheet.page_number, 2)
        self.assertIn("Terms:", pdf.texts(2))
        self.assertIn("Delivery: 4 weeks", pdf.texts(2))
        self.assertNotIn("Delivery: 4 weeks", pdf.texts(1))

    def test_block_taller_than_a_page_flows_with_continued_heading(self):
        sheet, pdf = _sheet()
        cursor = PageCursor(sheet, y=200)
        terms = [("Clause %d:" % i, "text") for i in range(60)]
        draw_terms(sheet, cursor, terms, "Terms:")
        self.assertGreaterEqual(sheet.page_number, 2)
        self.assertIn("Terms:", pdf.texts(1))
        self.assertIn("Terms (cont.):", pdf.texts(2))


class TestDocumentCanvas(unittest.TestCase):
    def test_decorators_see_final_page_count(self):
        sheet, pdf = _sheet()
        sheet.pdf.page_decorators.append(
            lambda s, n, total: s.text(105, 290, f"Page {n} of {total}", align="center")
        )
        sheet.text(14, 30, "first")
        sheet.new_page()
        sheet.text(14, 30, "second")
        sheet.new_page()
        sheet.text(14, 30, "third")
        sheet.pdf.save()

        self.assertEqual(pdf.page_count, 3)
        self.assertEqual(pdf.texts(1), ["first", "Page 1 of 3"])
        self.assertEqual(pdf.texts(3), ["third", "Page 3 of 3"])

    def test_output_is_deterministic(self):
        def render():
            buf = io.BytesIO()
            sheet = open_document(buf, title="same", layout=LAYOUT)
            sheet.set_font(12, "bold").text(14, 20, "Hello")
            sheet.rect(14, 30, 50, 10, "FD")
            sheet.pdf.save()
            return buf.getvalue()

        first, second = render(), render()
        self.assertTrue(first.startswith(b"%PDF"))
        self.assertEqual(first, second)


class TestLoadImage(unittest.TestCase):
    def test_missing_image_logs_and_returns_none(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("pdf_layout", level="WARNING"):
                self.assertIsNone(load_image("/images/signature.png", td))

    def test_corrupt_image_returns_none(self):
        with tempfile.TemporaryDirectory() as td:
            with open(os.path.join(td, "signature.png"), "wb") as f:
                f.write(b"not a png")
            with self.assertLogs("pdf_layout", level="WARNING"):
                self.assertIsNone(load_image("signature.png", td))

    def test_valid_image(self):
        with tempfile.TemporaryDirectory() as td:
            make_png(os.path.join(td, "logo.png"), size=(100, 50))
            reader = load_image("/images/logo.png", td)
            self.assertIsNotNone(reader)
            self.assertEqual(reader.getSize(), (100, 50))


if __name__ == "__main__":
    unittest.main()
