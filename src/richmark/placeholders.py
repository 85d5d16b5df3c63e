# -*- coding: utf-8 -*-
"""
Placeholder table for protecting finished markup fragments.

A stage that has produced final markup (a code block, a list, a quote)
parks it here and leaves an opaque token in the working string. Tokens are
``\\x00`` + category + index + ``\\x00``; NUL never survives into the working
string (see ``strip_markers``), so tokens cannot collide with user text.
"""

import logging
import re
from typing import Dict, List

logger = logging.getLogger(__name__)

MARKER = '\x00'

# Categories
CODE_BLOCK = 'CODEBLOCK'
INLINE_CODE = 'INLINECODE'
PROTECTED_BLOCK = 'PROTECTEDBLOCK'

CATEGORIES = (CODE_BLOCK, INLINE_CODE, PROTECTED_BLOCK)


def strip_markers(text: str) -> str:
    """Remove the reserved marker character from raw input."""
    return text.replace(MARKER, '')


class PlaceholderTable:
    """Per-call, append-only fragment store with one list per category."""

    def __init__(self):
        self._fragments: Dict[str, List[str]] = {name: [] for name in CATEGORIES}

    @staticmethod
    def token(category: str, index: int) -> str:
        """Build the token for ``index`` in ``category``."""
        return f'{MARKER}{category}{index}{MARKER}'

    def protect(self, category: str, fragment: str) -> str:
        """Store ``fragment`` and return the token that stands in for it."""
        fragments = self._fragments[category]
        fragments.append(fragment)
        return self.token(category, len(fragments) - 1)

    def fragments(self, category: str) -> List[str]:
        """Stored fragments of one category, in allocation order."""
        return list(self._fragments[category])

    def restore(self, text: str, *categories: str) -> str:
        """Replace tokens of the given categories with their fragments."""
        if not categories:
            return text
        for name in categories:
            if name not in self._fragments:
                raise KeyError(f'Unknown placeholder category: {name}')

        pattern = re.compile(
            f'{MARKER}({"|".join(categories)})(\\d+){MARKER}'
        )

        def _replacer(m):
            fragments = self._fragments[m.group(1)]
            index = int(m.group(2))
            if index >= len(fragments):
                logger.warning(f'Unknown placeholder token {m.group(1)}{index}, left in place')
                return m.group(0)
            return fragments[index]

        return pattern.sub(_replacer, text)

    def __len__(self) -> int:
        return sum(len(items) for items in self._fragments.values())

    def __repr__(self) -> str:
        counts = ', '.join(f'{name}={len(items)}' for name, items in self._fragments.items())
        return f'PlaceholderTable({counts})'
