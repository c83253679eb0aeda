import unittest

from rich_text import flatten_html, split_bold


class TestFlattenHtml(unittest.TestCase):
    def test_empty_inputs_give_empty_string(self):
        for value in (None, "", "<p></p>", "<ul><li>   </li></ul>", "<p>&nbsp;</p><br/>"):
            with self.subTest(value=value):
                self.assertEqual(flatten_html(value), "")

    def test_plain_text_passes_through(self):
        self.assertEqual(flatten_html("Just text"), "Just text")

    def test_paragraph_and_list(self):
        html = "<p>Valve</p><ul><li>DN50</li><li>PN16</li></ul>"
        self.assertEqual(flatten_html(html), "Valve\n• DN50\n• PN16")

    def test_ordered_list_uses_bullets_too(self):
        self.assertEqual(flatten_html("<ol><li>one</li><li>two</li></ol>"), "• one\n• two")

    def test_bold_run_is_marked(self):
        self.assertEqual(flatten_html("<p>Spec</p><strong>Note</strong>"), "Spec\n**Note**")
        self.assertEqual(flatten_html("<b> Bold </b>"), "**Bold**")

    def test_blank_bold_run_is_skipped(self):
        self.assertEqual(flatten_html("<strong> </strong><p>x</p>"), "x")

    def test_nested_list_items_are_separate_lines(self):
        html = "<ul><li>Outer<ul><li>Inner</li></ul></li><li>Next</li></ul>"
        self.assertEqual(flatten_html(html), "• Outer\n• Inner\n• Next")

    def test_stray_list_item(self):
        self.assertEqual(flatten_html("<li>Loose</li>"), "• Loose")

    def test_entities_and_symbols_are_cleaned(self):
        self.assertEqual(flatten_html("<p>A&nbsp;&amp;&nbsp;B</p>"), "A & B")
        self.assertEqual(flatten_html("<p>● point</p>"), "• point")
        self.assertEqual(flatten_html("<p>A &amp;amp; B</p>"), "A & B")

    def test_script_and_style_content_dropped(self):
        html = "<script>alert(1)</script><style>p{}</style><p>ok</p>"
        self.assertEqual(flatten_html(html), "ok")

    def test_malformed_markup_does_not_raise(self):
        self.assertEqual(flatten_html("<div><span>hi"), "hi")
        self.assertEqual(flatten_html("</p>text</ul>"), "text")
        self.assertEqual(flatten_html("<unknown>a</unknown><p>b</p>"), "a\nb")


class TestSplitBold(unittest.TestCase):
    def test_wrapped_line_is_bold(self):
        self.assertEqual(split_bold("**Note**"), ("Note", True))

    def test_plain_line(self):
        self.assertEqual(split_bold("plain"), ("plain", False))

    def test_stray_markers_are_removed(self):
        self.assertEqual(split_bold("a **b** c"), ("a b c", False))


if __name__ == "__main__":
    unittest.main()
