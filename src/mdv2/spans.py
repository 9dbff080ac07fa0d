"""Regex span parser and its MarkdownV2 renderer.

The parser scans the whole text once per span kind, so by default the
result is grouped by kind rather than by position in the source. Pass
``ordered=True`` to get the same spans in document order instead.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from mdv2.context import RenderContext, Rule, build_rule_table
from mdv2.escaper import escape

logger = logging.getLogger(__name__)


class SpanKind(StrEnum):
    bold = 'bold'
    italic = 'italic'
    link = 'link'
    inline_code = 'inline_code'
    fenced_code = 'fenced_code'
    quote = 'quote'
    list_item = 'list_item'
    plain_text = 'plain_text'


@dataclass(frozen=True)
class FormattingSpan:
    kind: SpanKind
    content: str
    href: str | None = None
    ordinal: int | None = None


# Scan order; each pattern runs over the entire text.
_PATTERNS: tuple[tuple[SpanKind, re.Pattern], ...] = (
    (SpanKind.bold, re.compile(r'\*\*(.*?)\*\*')),
    (SpanKind.italic, re.compile(r'__(.*?)__')),
    (SpanKind.link, re.compile(r'\[(.*?)\]\((.*?)\)')),
    (SpanKind.fenced_code, re.compile(r'```([\s\S]*?)```')),
    (SpanKind.inline_code, re.compile(r'`([^`]+)`')),
    (SpanKind.quote, re.compile(r'^>+ ?(.*)$', re.MULTILINE)),
    (SpanKind.list_item, re.compile(r'^[ \t]*(?:[-*+]|(\d+)[.)])[ \t]+(.+)$', re.MULTILINE)),
)


def _span_from_match(kind: SpanKind, m: re.Match) -> FormattingSpan:
    if kind is SpanKind.link:
        return FormattingSpan(kind, m.group(1), href=m.group(2))
    if kind is SpanKind.list_item:
        ordinal = int(m.group(1)) if m.group(1) else None
        return FormattingSpan(kind, m.group(2), ordinal=ordinal)
    return FormattingSpan(kind, m.group(1))


def parse(text: str, ordered: bool = False) -> list[FormattingSpan]:
    """Extract every bold, italic, link, code, quote and list-item span.

    Overlapping matches of different kinds are all kept, and text outside
    any span is dropped.
    """
    found: list[tuple[int, FormattingSpan]] = []
    for kind, regex in _PATTERNS:
        for m in regex.finditer(text):
            found.append((m.start(), _span_from_match(kind, m)))
    if ordered:
        found.sort(key=lambda item: item[0])
    return [span for _, span in found]


# ── rendering ──


def _fenced(content: str) -> str:
    body = content.strip('\n')
    return f'```\n{body}\n```'


def _list_item(span: FormattingSpan, index: int, ctx: RenderContext) -> str:
    marker = f'{span.ordinal}\\. ' if span.ordinal is not None else '• '
    return marker + escape(span.content)


SPAN_RULES: Mapping[str, Rule] = build_rule_table({
    SpanKind.bold: lambda span, i, ctx: f'**{escape(span.content)}**',
    SpanKind.italic: lambda span, i, ctx: f'__{escape(span.content)}__',
    SpanKind.link: lambda span, i, ctx: f'[{escape(span.content)}]({escape(span.href or "")})',
    SpanKind.inline_code: lambda span, i, ctx: f'`{span.content}`',
    SpanKind.fenced_code: lambda span, i, ctx: _fenced(span.content),
    SpanKind.quote: lambda span, i, ctx: f'>{escape(span.content)}',
    SpanKind.list_item: _list_item,
    SpanKind.plain_text: lambda span, i, ctx: escape(span.content),
})


def render_spans(
    spans: list[FormattingSpan],
    rules: Mapping[str, Rule] | None = None,
) -> str:
    """Render spans to MarkdownV2 in sequence order, concatenated."""
    ctx = RenderContext(rules=build_rule_table(SPAN_RULES, rules))
    out: list[str] = []
    for i, span in enumerate(spans):
        rule = ctx.rules.get(span.kind)
        if rule is None:
            logger.debug('No span rule for %s, passing content through', span.kind)
            out.append(span.content)
        else:
            out.append(rule(span, i, ctx))
    return ''.join(out)
