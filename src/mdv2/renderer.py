"""Markdown → Telegram MarkdownV2 renderer over the markdown-it-py token stream.

Rules are looked up per token type in a table built for each call, so
overrides passed to one ``render()`` never leak into another.
"""

import logging
from collections.abc import Mapping

from markdown_it import MarkdownIt
from markdown_it.token import Token

from mdv2.context import ListRenderState, RenderContext, Rule, build_rule_table
from mdv2.escaper import escape, escape_literal

logger = logging.getLogger(__name__)

BULLET = '• '
HR_LINE = '------'
INDENT = '  '

# Parser only; its own HTML renderer is never used or modified.
_md = MarkdownIt('commonmark', {'html': False}).enable('strikethrough')


class MarkdownParseError(Exception):
    """The markdown tokenizer rejected the input."""


def _block_end(ctx: RenderContext) -> str:
    return '\n' if ctx.lists or ctx.quote_depth else '\n\n'


# ── paragraphs, breaks, headings ──


def _paragraph_close(token: Token, idx: int, ctx: RenderContext) -> str:
    # tight list items flatten into a single line
    if token.hidden:
        return ''
    return _block_end(ctx)


def _line_break(token: Token, idx: int, ctx: RenderContext) -> str:
    return '\n'


def _heading_close(token: Token, idx: int, ctx: RenderContext) -> str:
    return '**' + _block_end(ctx)


# ── links ──


def _link_open(token: Token, idx: int, ctx: RenderContext) -> str:
    ctx.links.append(str(token.attrGet('href') or ''))
    return '['


def _link_close(token: Token, idx: int, ctx: RenderContext) -> str:
    href = ctx.links.pop() if ctx.links else ''
    return f']({escape_literal(href)})'


# ── code ──


def _code_block(token: Token, idx: int, ctx: RenderContext) -> str:
    info = token.info.strip()
    lang = info.split()[0] if info else ''
    body = token.content.strip('\n')
    return f'```{lang}\n{body}\n```' + _block_end(ctx)


def _code_inline(token: Token, idx: int, ctx: RenderContext) -> str:
    return f'`{token.content}`'


def _hr(token: Token, idx: int, ctx: RenderContext) -> str:
    return escape(HR_LINE) + '\n'


# ── lists ──


def _list_open(kind: str):
    def rule(token: Token, idx: int, ctx: RenderContext) -> str:
        start = int(token.attrGet('start') or 1) if kind == 'ordered' else 1
        prefix = '' if ctx.line_start else '\n'
        ctx.lists.append(ListRenderState(kind=kind, counter=start))
        return prefix
    return rule


def _list_close(token: Token, idx: int, ctx: RenderContext) -> str:
    if ctx.lists:
        ctx.lists.pop()
    return '' if ctx.lists or ctx.quote_depth else '\n'


def _list_item_open(token: Token, idx: int, ctx: RenderContext) -> str:
    state = ctx.current_list
    indent = INDENT * max(len(ctx.lists) - 1, 0)
    if state.kind == 'ordered':
        return f'{indent}{state.next_ordinal()}\\. '
    return indent + BULLET


def _list_item_close(token: Token, idx: int, ctx: RenderContext) -> str:
    return '' if ctx.line_start else '\n'


# ── quotes ──


def _blockquote_open(token: Token, idx: int, ctx: RenderContext) -> str:
    ctx.quote_depth += 1
    return ''


def _blockquote_close(token: Token, idx: int, ctx: RenderContext) -> str:
    ctx.quote_depth -= 1
    if ctx.quote_depth or ctx.lists:
        return ''
    return '\n' if ctx.line_start else '\n\n'


def _constant(value: str) -> Rule:
    return lambda token, idx, ctx: value


DEFAULT_RULES: Mapping[str, Rule] = build_rule_table({
    'paragraph_open': _constant(''),
    'paragraph_close': _paragraph_close,
    'heading_open': _constant('**'),
    'heading_close': _heading_close,
    'strong_open': _constant('**'),
    'strong_close': _constant('**'),
    'em_open': _constant('__'),
    'em_close': _constant('__'),
    's_open': _constant('~'),
    's_close': _constant('~'),
    'link_open': _link_open,
    'link_close': _link_close,
    'code_inline': _code_inline,
    'fence': _code_block,
    'code_block': _code_block,
    'hr': _hr,
    'bullet_list_open': _list_open('bullet'),
    'bullet_list_close': _list_close,
    'ordered_list_open': _list_open('ordered'),
    'ordered_list_close': _list_close,
    'list_item_open': _list_item_open,
    'list_item_close': _list_item_close,
    'blockquote_open': _blockquote_open,
    'blockquote_close': _blockquote_close,
    'softbreak': _line_break,
    'hardbreak': _line_break,
    'text': lambda token, idx, ctx: escape_literal(token.content),
})


def tokenize(markdown: str) -> list[Token]:
    """Run the markdown-it block/inline parser; failures become MarkdownParseError."""
    if not isinstance(markdown, str):
        raise TypeError(f'render() expects str, got {type(markdown).__name__}')
    try:
        return _md.parse(markdown)
    except Exception as exc:
        raise MarkdownParseError(f'markdown tokenizer failed: {exc}') from exc


def _quote_lines(text: str, ctx: RenderContext) -> str:
    """Prefix every line that starts inside a blockquote with its > markers."""
    prefix = '>' * ctx.quote_depth
    lines = text.split('\n')
    for n, line in enumerate(lines):
        if line and (n > 0 or ctx.line_start):
            lines[n] = prefix + line
    return '\n'.join(lines)


def _walk(tokens: list[Token], ctx: RenderContext, out: list[str]) -> None:
    for idx, token in enumerate(tokens):
        if token.type == 'inline' and 'inline' not in ctx.rules:
            _walk(token.children or [], ctx, out)
            continue
        rule = ctx.rules.get(token.type)
        if rule is None:
            logger.debug('No render rule for %s, passing content through', token.type)
            text = token.content
        else:
            text = rule(token, idx, ctx)
        if text:
            if ctx.quote_depth:
                text = _quote_lines(text, ctx)
            out.append(text)
            ctx.line_start = text.endswith('\n')


def render(markdown: str, rules: Mapping[str, Rule] | None = None) -> str:
    """Render Markdown to MarkdownV2.

    ``rules`` maps token types (``strong_open``, ``fence``, ``text``, ...) to
    ``rule(token, index, context) -> str`` and overrides the defaults for
    this call only. Token types with no rule emit their raw content.
    """
    tokens = tokenize(markdown)
    ctx = RenderContext(rules=build_rule_table(DEFAULT_RULES, rules))
    out: list[str] = []
    _walk(tokens, ctx, out)
    return ''.join(out).strip()
