"""
richmark.

Markdown → rich text markup for Qt/QML text widgets.
"""

from richmark.markdown_formatter import markdown_to_html, format_message
from richmark.placeholders import PlaceholderTable
from richmark.models import RenderStyle, ViewerOptions, RichMarkConfig
from richmark.exceptions import (
    RichMarkError,
    ConfigError,
    InputError,
)

__version__ = "1.0.0"

__all__ = [
    # Converter
    "markdown_to_html",
    "format_message",
    "PlaceholderTable",
    # Models
    "RenderStyle",
    "ViewerOptions",
    "RichMarkConfig",
    # Exceptions
    "RichMarkError",
    "ConfigError",
    "InputError",
]
