"""Markdown → Telegram MarkdownV2 converter using markdown-it-py."""

import logging
from collections.abc import Mapping

from mdv2.context import Rule
from mdv2.corrector import correct
from mdv2.escaper import escape
from mdv2.renderer import MarkdownParseError, render
from mdv2.spans import parse, render_spans

logger = logging.getLogger(__name__)


def to_markdown_v2(
    text: str,
    rules: Mapping[str, Rule] | None = None,
    fallback: bool = True,
) -> str:
    """Convert chat Markdown to MarkdownV2 via the full markdown-it token tree.

    Unterminated ** / __ are closed first. If the tokenizer fails, the raw
    text is escaped instead (or the error re-raised when ``fallback`` is off).
    """
    if not isinstance(text, str):
        raise TypeError(f'to_markdown_v2() expects str, got {type(text).__name__}')
    if not text:
        return ''

    corrected = correct(text)
    try:
        return render(corrected, rules)
    except MarkdownParseError:
        if not fallback:
            raise
        logger.warning('Markdown render failed, falling back to escaped text', exc_info=True)
        return escape(text)


def spans_to_markdown_v2(text: str, ordered: bool = False) -> str:
    """Convert only the recognised spans (bold, italic, links, code, quotes, list items).

    Text outside those spans is not emitted.
    """
    if not isinstance(text, str):
        raise TypeError(f'spans_to_markdown_v2() expects str, got {type(text).__name__}')
    return render_spans(parse(correct(text), ordered=ordered))


def escape_markdown_v2(text: str) -> str:
    """Escape-only path: no structure is interpreted beyond already-valid markup."""
    return escape(text)
