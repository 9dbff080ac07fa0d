"""MarkdownV2 escaping with a pass-through for already-valid markup."""

import re

# Telegram Bot API, "MarkdownV2 style"
RESERVED = frozenset('_*~`[](){}>#+-=|.!')

_BOLD_RE = re.compile(r'(?<!\\)\*\*(?=\S)([^\n]*?\S)\*\*')
_ITALIC_RE = re.compile(r'(?<![\\\w])__(?=\S)([^\n]*?\S)__(?!\w)')
_LINK_RE = re.compile(r'(?<!\\)\[([^\]\n]*)\]\(([^()\s]*)\)')


def _markup_delimiters(text: str) -> set[int]:
    """Offsets of delimiter characters that belong to complete bold/italic/link constructs."""
    offsets: set[int] = set()
    for regex in (_BOLD_RE, _ITALIC_RE):
        for m in regex.finditer(text):
            offsets.update((m.start(), m.start() + 1, m.end() - 2, m.end() - 1))
    for m in _LINK_RE.finditer(text):
        close_bracket = m.end(1)
        offsets.update((m.start(), close_bracket, close_bracket + 1, m.end() - 1))
    return offsets


def is_inside_valid_markup(text: str, offset: int) -> bool:
    """True if text[offset] is a delimiter of a complete **x**, __x__ or [x](y)."""
    if not isinstance(text, str) or not 0 <= offset < len(text):
        return False
    return offset in _markup_delimiters(text)


def escape_literal(text: str) -> str:
    """Escape text that is known to hold no markup, backslashes included."""
    if not isinstance(text, str):
        raise TypeError(f'escape_literal() expects str, got {type(text).__name__}')
    return ''.join('\\' + ch if ch in RESERVED or ch == '\\' else ch for ch in text)


def escape(text: str) -> str:
    """Backslash-escape every reserved character outside valid markup.

    Characters already escaped (preceded by an odd run of backslashes) are
    left alone, so escaping twice never produces ``\\\\!``.
    """
    if not isinstance(text, str):
        raise TypeError(f'escape() expects str, got {type(text).__name__}')
    if not text:
        return text

    keep = _markup_delimiters(text)
    out: list[str] = []
    backslashes = 0
    for i, ch in enumerate(text):
        if ch in RESERVED and backslashes % 2 == 0 and i not in keep:
            out.append('\\')
        out.append(ch)
        backslashes = backslashes + 1 if ch == '\\' else 0
    return ''.join(out)
