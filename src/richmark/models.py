"""
Pydantic models for render style and persisted configuration.
"""

from typing import Dict
from pydantic import BaseModel, Field, field_validator


# ===== RENDER MODELS =====

class RenderStyle(BaseModel):
    """Visual knobs of the Markdown → rich text conversion."""
    include_prologue: bool = Field(
        default=True,
        description="Prepend the <style> block with heading/paragraph/list margins"
    )
    inline_code_background: str = Field(
        default="#30FFFFFF",
        pattern=r"^#[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$",
        description="Inline code background (#RRGGBB or Qt #AARRGGBB)"
    )
    blockquote_color: str = Field(
        default="#a0a0a0",
        pattern=r"^#[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$",
        description="Font colour of blockquote text"
    )
    heading_font_sizes: Dict[int, int] = Field(
        default_factory=lambda: {1: 6, 2: 5, 3: 4},
        description="<font size> used inside h1..h3"
    )

    @field_validator("heading_font_sizes")
    @classmethod
    def _check_heading_sizes(cls, value: Dict[int, int]) -> Dict[int, int]:
        if set(value) != {1, 2, 3}:
            raise ValueError("heading_font_sizes needs exactly the levels 1, 2 and 3")
        for level, size in value.items():
            if not 1 <= size <= 7:
                raise ValueError(f"font size for h{level} must be between 1 and 7, got {size}")
        return value


# ===== VIEWER MODELS =====

class ViewerOptions(BaseModel):
    """Options of the Qt viewer window."""
    font_family: str = "Segoe UI"
    font_size: int = Field(default=11, ge=6, le=48)
    open_external_links: bool = True
    width: int = Field(default=720, ge=200)
    height: int = Field(default=640, ge=150)


# ===== CONFIG =====

class RichMarkConfig(BaseModel):
    """Persisted configuration."""
    style: RenderStyle = Field(default_factory=RenderStyle)
    viewer: ViewerOptions = Field(default_factory=ViewerOptions)
