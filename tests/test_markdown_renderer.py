from __future__ import annotations

import unittest

from projtrack.ui.markdown_renderer import MarkdownRenderer


class TestMarkdownRenderer(unittest.TestCase):
    def setUp(self) -> None:
        self.renderer = MarkdownRenderer()

    def test_checklists_become_unicode_boxes(self) -> None:
        self.assertEqual("- ☑ domain\n- ☐ hosting", self.renderer.preprocess("- [x] domain\n- [ ] hosting"))

    def test_empty_notes(self) -> None:
        self.assertEqual("", self.renderer.preprocess(""))
        self.assertIn("<body>", self.renderer.to_html(""))

    def test_notes_render_to_html(self) -> None:
        html = self.renderer.body_html("# Plan\n\nShip **v1**")
        self.assertIn("<h1>Plan</h1>", html)
        self.assertIn("<strong>v1</strong>", html)


if __name__ == "__main__":
    unittest.main()
