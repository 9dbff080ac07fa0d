"""Repair unterminated bold/italic markers before parsing."""

import logging
import re

logger = logging.getLogger(__name__)

BOLD = '**'
ITALIC = '__'

# Escapes and code are consumed first so their contents never count as markers.
_TOKEN_RE = re.compile(r'\\.|```.*?```|`[^`\n]+`|\*\*|__', re.DOTALL)
_TRAILING_BACKSLASHES_RE = re.compile(r'\\+$')


def count_markers(text: str) -> dict[str, int]:
    """Count unescaped ** and __ markers outside inline and fenced code."""
    counts = {BOLD: 0, ITALIC: 0}
    for m in _TOKEN_RE.finditer(text):
        tok = m.group()
        if tok in counts:
            counts[tok] += 1
    return counts


def correct(text: str) -> str:
    """Close unterminated ** and __ spans by appending the missing closer.

    Crossed spans such as ``**X__Y**`` or ``__X**Y__`` are kept verbatim:
    the inner marker stays nested inside the outer span and only gets its
    closer from the parity rule. Applying this twice is a no-op.
    """
    if not isinstance(text, str):
        raise TypeError(f'correct() expects str, got {type(text).__name__}')

    counts = count_markers(text)
    closers = ''.join(marker for marker in (BOLD, ITALIC) if counts[marker] % 2)
    if not closers:
        return text

    # A dangling backslash would escape the first character of the closer.
    m = _TRAILING_BACKSLASHES_RE.search(text)
    if m and len(m.group()) % 2:
        text += '\\'

    logger.debug('Appending unterminated markers %r', closers)
    return text + closers
