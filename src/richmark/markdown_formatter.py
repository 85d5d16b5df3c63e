# -*- coding: utf-8 -*-
"""
Markdown → rich text formatter for Qt/QML text widgets.

Converts a restricted Markdown dialect (headers, emphasis, fenced and inline
code, links, flat lists, blockquotes, bare URLs, paragraphs) into the HTML
subset that QTextBrowser and QML ``Text`` in RichText mode can render.

The conversion is a fixed sequence of regex passes. Anything a later pass
could damage (code, lists, quotes) is finished early and parked in a
``PlaceholderTable`` until it is safe to put it back.
"""

import logging
import re
from typing import Optional, Tuple

from richmark.models import RenderStyle
from richmark.placeholders import (
    CODE_BLOCK,
    INLINE_CODE,
    MARKER,
    PROTECTED_BLOCK,
    PlaceholderTable,
    strip_markers,
)

logger = logging.getLogger(__name__)


def escape_html(text: str) -> str:
    """Escape the three HTML-sensitive characters."""
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


# ---------------------------------------------------------------------------
# Code protection
# ---------------------------------------------------------------------------

_FENCED_CODE_RE = re.compile(r'```(.*?)```', re.DOTALL)
_LANG_HINT_RE = re.compile(r'\A[\w+#-]+\n')
_EDGE_NEWLINES_RE = re.compile(r'\A\n+|\n+\Z')
_INLINE_CODE_RE = re.compile(r'`([^`]+)`')


def _code_block_html(code: str) -> str:
    # Drop a ```python style language hint, then one run of blank lines at each end
    code = _LANG_HINT_RE.sub('', code, count=1)
    code = _EDGE_NEWLINES_RE.sub('', code)
    return f'<pre><code>{escape_html(code)}</code></pre>'


def _inline_code_html(code: str, style: RenderStyle) -> str:
    return (
        f'<span style="font-family: monospace; '
        f'background-color: {style.inline_code_background};">'
        f'&nbsp;{escape_html(code)}&nbsp;</span>'
    )


def protect_code(text: str, table: PlaceholderTable, style: Optional[RenderStyle] = None) -> str:
    """
    Extract fenced code blocks, then inline code spans, into placeholders.

    Fenced blocks go first so that backticks inside them are never read as
    inline code. Unbalanced fences and backticks are left as plain text.
    """
    style = style or RenderStyle()

    text = _FENCED_CODE_RE.sub(
        lambda m: table.protect(CODE_BLOCK, _code_block_html(m.group(1))),
        text,
    )
    return _INLINE_CODE_RE.sub(
        lambda m: table.protect(INLINE_CODE, _inline_code_html(m.group(1), style)),
        text,
    )


# ---------------------------------------------------------------------------
# Headers, emphasis, links
# ---------------------------------------------------------------------------

# Deepest level first; none of these can match another level's line
HEADER_RULES: Tuple[Tuple[int, re.Pattern], ...] = (
    (3, re.compile(r'^### (.*?)$', re.MULTILINE)),
    (2, re.compile(r'^## (.*?)$', re.MULTILINE)),
    (1, re.compile(r'^# (.*?)$', re.MULTILINE)),
)

# Order matters: triple before double before single for each delimiter
EMPHASIS_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r'\*\*\*(.*?)\*\*\*'), r'<b><i>\1</i></b>'),
    (re.compile(r'\*\*(.*?)\*\*'), r'<b>\1</b>'),
    (re.compile(r'\*(.*?)\*'), r'<i>\1</i>'),
    (re.compile(r'___(.*?)___'), r'<b><i>\1</i></b>'),
    (re.compile(r'__(.*?)__'), r'<b>\1</b>'),
    (re.compile(r'_(.*?)_'), r'<i>\1</i>'),
)

_LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')


def _format_headers(text: str, style: RenderStyle) -> str:
    for level, pattern in HEADER_RULES:
        size = style.heading_font_sizes[level]
        text = pattern.sub(
            lambda m, level=level, size=size: (
                f'<h{level}><font size="{size}">{m.group(1)}</font></h{level}>'
            ),
            text,
        )
    return text


def _format_emphasis(text: str) -> str:
    for pattern, replacement in EMPHASIS_RULES:
        text = pattern.sub(replacement, text)
    return text


def _format_links(text: str) -> str:
    return _LINK_RE.sub(r'<a href="\2">\1</a>', text)


# ---------------------------------------------------------------------------
# Lists and blockquotes (protected from line-break conversion)
# ---------------------------------------------------------------------------

_UL_ITEM_RE = re.compile(r'^\s*[*\-] (.*?)$', re.MULTILINE)
_OL_ITEM_RE = re.compile(r'^\s*\d+\. (.*?)$', re.MULTILINE)

# A run is one or more item lines plus the whitespace after them
_LIST_RUN_RES = (
    ('ul', re.compile(r'(?:<li_ul>.*?</li_ul>\s*)+', re.DOTALL)),
    ('ol', re.compile(r'(?:<li_ol>.*?</li_ol>\s*)+', re.DOTALL)),
)

_QUOTE_LINE_RE = re.compile(r'^&gt; (.*?)$', re.MULTILINE)
_QUOTE_RUN_RE = re.compile(r'(?:<bq_line>.*?</bq_line>\s*)+', re.DOTALL)
_QUOTE_JOIN_RE = re.compile(r'</bq_line>\s*<bq_line>')


def _protect_lists(text: str, table: PlaceholderTable) -> str:
    """Tag list items, merge consecutive items into <ul>/<ol> and park them."""
    text = _UL_ITEM_RE.sub(r'<li_ul>\1</li_ul>', text)
    text = _OL_ITEM_RE.sub(r'<li_ol>\1</li_ol>', text)

    for kind, run_re in _LIST_RUN_RES:
        item_tag_re = re.compile(f'<(/?)li_{kind}>')

        def _replacer(m, kind=kind, item_tag_re=item_tag_re):
            content = item_tag_re.sub(r'<\1li>', m.group(0)).replace('\n', '')
            return table.protect(PROTECTED_BLOCK, f'<{kind}>{content}</{kind}>') + '\n'

        text = run_re.sub(_replacer, text)
    return text


def _protect_blockquotes(text: str, table: PlaceholderTable, style: RenderStyle) -> str:
    """Merge consecutive ``> `` lines into one styled blockquote and park it."""
    # '>' has already been escaped at this point
    text = _QUOTE_LINE_RE.sub(r'<bq_line>\1</bq_line>', text)

    def _replacer(m):
        inner = _QUOTE_JOIN_RE.sub('<br/>', m.group(0))
        inner = inner.replace('<bq_line>', '').replace('</bq_line>', '').strip()
        block = (
            f'<blockquote><font color="{style.blockquote_color}">'
            f'<i>{inner}</i></font></blockquote>'
        )
        return table.protect(PROTECTED_BLOCK, block) + '\n'

    return _QUOTE_RUN_RE.sub(_replacer, text)


# ---------------------------------------------------------------------------
# Bare URLs
# ---------------------------------------------------------------------------

# The preceding-character guard skips URLs already inside href="..." or >...</a>.
# NUL is excluded so a URL never runs into a placeholder token.
_BARE_URL_RE = re.compile(r'(^|[^"\'>])((?:https?|file)://[^\s<\x00]+)')


def _autolink(text: str) -> str:
    return _BARE_URL_RE.sub(r'\1<a href="\2">\2</a>', text)


def apply_structural_markup(
    text: str,
    table: PlaceholderTable,
    style: Optional[RenderStyle] = None
) -> str:
    """Headers, emphasis, links, lists, blockquotes and bare URLs, in that order."""
    style = style or RenderStyle()
    text = _format_headers(text, style)
    text = _format_emphasis(text)
    text = _format_links(text)
    text = _protect_lists(text, table)
    text = _protect_blockquotes(text, table, style)
    return _autolink(text)


# ---------------------------------------------------------------------------
# Paragraphs, line breaks, cleanup
# ---------------------------------------------------------------------------

_PRE_SPLIT_RE = re.compile(r'(<pre>.*?</pre>)', re.DOTALL)
_PARAGRAPH_BREAK_RE = re.compile(r'\n{2,}')


def compose_paragraphs(text: str) -> str:
    """
    Turn blank-line runs into paragraph boundaries and single newlines into <br/>.

    Restored <pre> fragments are passed through as-is.
    """
    parts = _PRE_SPLIT_RE.split(text)
    # Even indexes are outside <pre>, odd ones are the <pre> fragments
    for i in range(0, len(parts), 2):
        part = _PARAGRAPH_BREAK_RE.sub('</p><p>', parts[i])
        parts[i] = part.replace('\n', '<br/>')
    html = ''.join(parts)

    if not html.startswith('<') and not html.startswith(MARKER):
        html = f'<p>{html}</p>'
    return html


CLEANUP_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    # Spurious line break in front of a block element
    (re.compile(r'<br/>\s*(<(?:pre|ul|ol|blockquote|h[1-6])>)'), r'\1'),
    # Empty paragraphs
    (re.compile(r'<p>\s*</p>'), ''),
    (re.compile(r'<p>\s*<br/>\s*</p>'), ''),
    # At most two consecutive line breaks
    (re.compile(r'(?:<br/>){3,}'), '<br/><br/>'),
    (re.compile(r'(</p>)\s*(<p>)'), r'\1\2'),
)


def cleanup(html: str) -> str:
    """Tidy the composed markup."""
    for pattern, replacement in CLEANUP_RULES:
        html = pattern.sub(replacement, html)
    return html.strip()


# ---------------------------------------------------------------------------
# Style prologue
# ---------------------------------------------------------------------------

PROLOGUE_RULES = (
    'h1 { margin-top: 0px; margin-bottom: 8px; }',
    'h2 { margin-top: 12px; margin-bottom: 4px; }',
    'h3 { margin-top: 8px; margin-bottom: 2px; }',
    'p { margin-top: 0px; margin-bottom: 8px; }',
    'ul, ol { margin-top: 0px; margin-bottom: 8px; }',
    'li { margin-bottom: 0px; }',
    'blockquote { margin-top: 4px; margin-bottom: 4px; }',
)


def build_prologue() -> str:
    """Margins and spacing for Qt rich text, which ignores most defaults."""
    return '<style>' + ''.join(PROLOGUE_RULES) + '</style>'


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def markdown_to_html(text: Optional[str], style: Optional[RenderStyle] = None) -> str:
    """
    Convert markdown text to rich text markup for Qt/QML text widgets.

    Never raises: malformed constructs come out as escaped literal text.
    Empty input gives an empty string, without the style prologue.
    """
    if not text:
        return ''

    html = strip_markers(text)
    if not html:
        return ''

    style = style or RenderStyle()
    table = PlaceholderTable()

    # 1. Code blocks and inline code → placeholders (already escaped)
    html = protect_code(html, table, style)

    # 2. Escape everything else
    html = escape_html(html)

    # 3. Headers, emphasis, links, lists, quotes, bare URLs
    html = apply_structural_markup(html, table, style)

    # 4. Code back in before line breaks; <pre> is skipped by the composer
    html = table.restore(html, CODE_BLOCK, INLINE_CODE)

    # 5. Paragraphs and line breaks
    html = compose_paragraphs(html)

    # 6. Lists and quotes back in, then tidy up
    html = table.restore(html, PROTECTED_BLOCK)
    html = cleanup(html)

    logger.debug(
        f'Converted {len(text)} chars: '
        f'{len(table.fragments(CODE_BLOCK))} code blocks, '
        f'{len(table.fragments(INLINE_CODE))} inline code spans, '
        f'{len(table.fragments(PROTECTED_BLOCK))} lists/quotes'
    )

    if style.include_prologue:
        return build_prologue() + html
    return html


# Name used by chat widgets
format_message = markdown_to_html
