# -*- coding: utf-8 -*-
"""
Qt viewer: a QTextBrowser that shows Markdown through the formatter.
"""

import sys
import logging
from typing import Optional

from PyQt6.QtWidgets import QApplication, QMainWindow, QTextBrowser
from PyQt6.QtGui import QFont

from richmark.markdown_formatter import markdown_to_html
from richmark.models import RenderStyle, ViewerOptions

logger = logging.getLogger(__name__)


class MarkdownBrowser(QTextBrowser):
    """Read-only text browser fed with Markdown."""

    def __init__(
        self,
        style: Optional[RenderStyle] = None,
        options: Optional[ViewerOptions] = None,
        parent=None
    ):
        super().__init__(parent)
        self._render_style = style or RenderStyle()
        options = options or ViewerOptions()
        self._markdown = ""

        self.setOpenExternalLinks(options.open_external_links)
        self.setFont(QFont(options.font_family, options.font_size))

    def set_markdown(self, text: str):
        """Convert ``text`` and display it."""
        self._markdown = text or ""
        html = markdown_to_html(self._markdown, self._render_style)
        self.setHtml(html)

    def markdown(self) -> str:
        return self._markdown

    def set_render_style(self, style: RenderStyle):
        """Switch style and re-render the current text."""
        self._render_style = style
        self.set_markdown(self._markdown)


def run_viewer(
    text: str,
    title: str = "richmark",
    style: Optional[RenderStyle] = None,
    options: Optional[ViewerOptions] = None
) -> int:
    """Open a window with the rendered Markdown and run the event loop."""
    options = options or ViewerOptions()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("richmark")

    window = QMainWindow()
    window.setWindowTitle(title)
    browser = MarkdownBrowser(style=style, options=options, parent=window)
    browser.set_markdown(text)
    window.setCentralWidget(browser)
    window.resize(options.width, options.height)
    window.show()

    logger.info(f"Viewer opened: {title}")
    return app.exec()
