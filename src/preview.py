"""Preview how chat Markdown will look once converted to Telegram MarkdownV2.

Reads messages from the command line (one per argument) or from stdin,
converts each with the path chosen by PREVIEW_MODE, and prints the
resulting Telegram-sized chunks. With no input, a built-in set of sample
LLM replies is used.
"""

import logging
import os
import sys

from telegram.constants import MessageLimit

from format import escape_markdown_v2, spans_to_markdown_v2, to_markdown_v2
from mdv2.chunker import split_message

logging.basicConfig(
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s',
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
)
logger = logging.getLogger(__name__)

PREVIEW_MODE = os.getenv('PREVIEW_MODE', 'tree')
CHUNK_LIMIT = int(os.getenv('CHUNK_LIMIT', MessageLimit.MAX_TEXT_LENGTH))

CONVERTERS = {
    'tree': to_markdown_v2,
    'spans': spans_to_markdown_v2,
    'escape': escape_markdown_v2,
}

SAMPLE_MESSAGES = [
    '**This is bold** and __this is italic__.',
    '**Bold and __italic__ in one sentence**',
    '**This is unfinished bold and __broken italic__',
    "Here's a [link](https://example.com) and `inline code`.",
    '```javascript\nconst a = 10;\nconsole.log(a);\n```',
    "Use commands like **/start** or visit __Telegram's homepage__ at [here](https://t.me)!",
    '1. First step\n2. Second step\n\n- bullet one\n- bullet two\n\n---\n\n> quoted reply',
]


def preview(messages: list[str], mode: str = PREVIEW_MODE, limit: int = CHUNK_LIMIT) -> list[list[str]]:
    """Convert each message and split it into sendable chunks."""
    convert = CONVERTERS.get(mode)
    if convert is None:
        raise ValueError(f'unknown PREVIEW_MODE {mode!r}; expected one of {sorted(CONVERTERS)}')
    results = []
    for message in messages:
        converted = convert(message)
        chunks = split_message(converted, limit)
        logger.info('%s: %d chars in, %d chars out, %d chunk(s)', mode, len(message), len(converted), len(chunks))
        results.append(chunks)
    return results


def main() -> None:
    if len(sys.argv) > 1:
        messages = sys.argv[1:]
    elif not sys.stdin.isatty():
        messages = [sys.stdin.read()]
    else:
        messages = SAMPLE_MESSAGES

    for idx, chunks in enumerate(preview(messages), start=1):
        for part, chunk in enumerate(chunks, start=1):
            print(f'--- message {idx}, chunk {part}/{len(chunks)} ---')
            print(chunk)


if __name__ == '__main__':
    main()
