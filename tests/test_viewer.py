"""Tests for the Qt viewer widget (skipped without a usable PyQt6)."""

from __future__ import annotations

import pytest

QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

from richmark.models import RenderStyle, ViewerOptions  # noqa: E402
from richmark.viewer import MarkdownBrowser  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def test_set_markdown_renders_text(qapp) -> None:
    browser = MarkdownBrowser()
    browser.set_markdown("# Title\n\n**bold** text")
    assert browser.markdown() == "# Title\n\n**bold** text"
    plain = browser.toPlainText()
    assert "Title" in plain
    assert "bold text" in plain
    assert "**" not in plain


def test_set_markdown_empty(qapp) -> None:
    browser = MarkdownBrowser()
    browser.set_markdown(None)
    assert browser.markdown() == ""
    assert browser.toPlainText() == ""


def test_viewer_options_applied(qapp) -> None:
    options = ViewerOptions(font_family="Monospace", font_size=14, open_external_links=False)
    browser = MarkdownBrowser(options=options)
    assert browser.openExternalLinks() is False
    assert browser.font().pointSize() == 14


def test_set_render_style_rerenders(qapp) -> None:
    browser = MarkdownBrowser()
    browser.set_markdown("> quoted")
    browser.set_render_style(RenderStyle(include_prologue=False))
    assert "quoted" in browser.toPlainText()
    assert browser.markdown() == "> quoted"
