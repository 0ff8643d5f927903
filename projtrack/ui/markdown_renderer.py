# ui/markdown_renderer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from markdown import markdown


@dataclass(frozen=True)
class MarkdownTheme:
    text: str = "#111827"
    muted: str = "#6B7280"
    border: str = "#E5E7EB"
    panel: str = "#FFFFFF"
    codebg: str = "#F3F4F6"
    link: str = "#2563EB"


class MarkdownRenderer:
    """
    Project notes: markdown -> HTML for the tkinterweb preview.

    tkhtml does not render <input>, so "- [ ]" / "- [x]" checklists are
    rewritten to unicode boxes before conversion.
    """

    EXTENSIONS = ["extra", "sane_lists", "nl2br"]

    _unchecked = re.compile(r"^(\s*[-*+]\s+)\[ \]\s+")
    _checked = re.compile(r"^(\s*[-*+]\s+)\[(x|X)\]\s+")

    def __init__(self, theme: Optional[MarkdownTheme] = None):
        self.theme = theme or MarkdownTheme()

    def preprocess(self, md_text: str) -> str:
        if not md_text:
            return ""
        out: List[str] = []
        for line in md_text.splitlines():
            line = self._checked.sub(r"\1☑ ", line)
            line = self._unchecked.sub(r"\1☐ ", line)
            out.append(line)
        return "\n".join(out)

    def css(self) -> str:
        t = self.theme
        return f"""
        body {{
          font-family: "Segoe UI", Roboto, Arial, sans-serif;
          margin: 10px;
          color: {t.text};
          background: {t.panel};
          font-size: 13px;
          line-height: 1.5;
        }}
        h1, h2, h3 {{ margin: 0.8em 0 0.4em; }}
        a {{ color: {t.link}; text-decoration: none; }}
        blockquote {{
          margin: 0.6em 0;
          padding-left: 0.8em;
          border-left: 3px solid {t.border};
          color: {t.muted};
        }}
        code, pre {{ background: {t.codebg}; }}
        pre {{ padding: 8px 10px; border: 1px solid {t.border}; }}
        """

    def body_html(self, md_text: str) -> str:
        return markdown(
            self.preprocess(md_text or ""),
            extensions=self.EXTENSIONS,
            output_format="html5",
        )

    def to_html(self, md_text: str) -> str:
        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <style>{self.css()}</style>
          </head>
          <body>{self.body_html(md_text)}</body>
        </html>
        """
