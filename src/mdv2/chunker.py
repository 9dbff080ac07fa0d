"""Split rendered MarkdownV2 into Telegram-sized messages at line boundaries."""

import logging
from collections.abc import Iterator

from telegram.constants import MessageLimit

from mdv2.corrector import count_markers

logger = logging.getLogger(__name__)

FENCE = '```'
_MIN_LIMIT = 16


def _balanced(block: str) -> bool:
    """No open code fence and an even number of ** and __ markers."""
    if block.count(FENCE) % 2:
        return False
    return not any(n % 2 for n in count_markers(block).values())


def _units(text: str) -> Iterator[str]:
    """Yield runs of lines that can be sent on their own without breaking markup."""
    unit: list[str] = []
    for line in text.split('\n'):
        unit.append(line)
        block = '\n'.join(unit)
        if _balanced(block):
            yield block
            unit = []
    if unit:
        yield '\n'.join(unit)


def _ends_in_escape(piece: str) -> bool:
    run = len(piece) - len(piece.rstrip('\\'))
    return run % 2 == 1


def _hard_split(unit: str, limit: int) -> list[str]:
    """Cut an oversized unit, closing and reopening a code fence across the cut."""
    pieces: list[str] = []
    rest = unit
    room = limit - len(FENCE) - 1
    while len(rest) > limit:
        cut = rest.rfind('\n', 0, room + 1)
        if cut > room // 2:
            piece, rest = rest[:cut], rest[cut + 1:]
        else:
            cut = room
            if _ends_in_escape(rest[:cut]):
                cut -= 1
            piece, rest = rest[:cut], rest[cut:]
        if piece.count(FENCE) % 2:
            piece += '\n' + FENCE
            rest = FENCE + '\n' + rest
        pieces.append(piece)
    pieces.append(rest)
    return pieces


def split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    """Split text into chunks of at most ``limit`` characters.

    Breaks fall on line boundaries where every bold, italic and code span is
    closed. A single span longer than ``limit`` is hard-cut as a last resort.
    """
    if limit < _MIN_LIMIT:
        raise ValueError(f'limit must be at least {_MIN_LIMIT}, got {limit}')
    if not text:
        return []
    if len(text) <= limit:
        return [text]

    chunks: list[str] = []
    current = ''
    for unit in _units(text):
        if len(unit) > limit:
            logger.debug('Unit of %d chars exceeds limit %d, hard-splitting', len(unit), limit)
            pieces = _hard_split(unit, limit)
        else:
            pieces = [unit]
        for piece in pieces:
            if not current:
                current = piece
            elif len(current) + 1 + len(piece) <= limit:
                current += '\n' + piece
            else:
                chunks.append(current)
                current = piece
    if current:
        chunks.append(current)

    logger.debug('Split %d chars into %d chunks', len(text), len(chunks))
    return chunks
