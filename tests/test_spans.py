"""Tests for the regex span parser and span renderer (mdv2.spans)."""

from dataclasses import FrozenInstanceError

import pytest

from mdv2.spans import SPAN_RULES, FormattingSpan, SpanKind, parse, render_spans


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

def test_spans_grouped_by_kind():
    spans = parse('A __it__ then **b** and `c`')
    assert [s.kind for s in spans] == [SpanKind.bold, SpanKind.italic, SpanKind.inline_code]
    assert [s.content for s in spans] == ['b', 'it', 'c']


def test_ordered_spans_follow_document_order():
    spans = parse('A __it__ then **b** and `c`', ordered=True)
    assert [s.kind for s in spans] == [SpanKind.italic, SpanKind.bold, SpanKind.inline_code]


def test_link_keeps_href():
    assert parse('[x](http://t.me)') == [FormattingSpan(SpanKind.link, 'x', href='http://t.me')]


def test_overlapping_matches_not_deduplicated():
    spans = parse('**`code`**')
    assert [(s.kind, s.content) for s in spans] == [
        (SpanKind.bold, '`code`'),
        (SpanKind.inline_code, 'code'),
    ]


def test_fenced_code_captured_as_is():
    spans = parse('```\nx = 1\n```')
    assert spans[0] == FormattingSpan(SpanKind.fenced_code, '\nx = 1\n')


def test_quote_and_list_items():
    spans = parse('> hello\n1. one\n2. two\n- three')
    assert spans == [
        FormattingSpan(SpanKind.quote, 'hello'),
        FormattingSpan(SpanKind.list_item, 'one', ordinal=1),
        FormattingSpan(SpanKind.list_item, 'two', ordinal=2),
        FormattingSpan(SpanKind.list_item, 'three'),
    ]


def test_plain_text_not_emitted():
    assert parse('just some words.') == []


def test_span_is_immutable():
    span = FormattingSpan(SpanKind.bold, 'b')
    with pytest.raises(FrozenInstanceError):
        span.content = 'x'


# ---------------------------------------------------------------------------
# render_spans
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('span, expected', [
    (FormattingSpan(SpanKind.bold, 'hi!'), '**hi\\!**'),
    (FormattingSpan(SpanKind.italic, 'v1.0'), '__v1\\.0__'),
    (FormattingSpan(SpanKind.link, 'x', href='http://a.b/c_d'), '[x](http://a\\.b/c\\_d)'),
    (FormattingSpan(SpanKind.inline_code, 'a_b()'), '`a_b()`'),
    (FormattingSpan(SpanKind.fenced_code, '\na_b *c*\n'), '```\na_b *c*\n```'),
    (FormattingSpan(SpanKind.quote, 'q!'), '>q\\!'),
    (FormattingSpan(SpanKind.list_item, 'two.', ordinal=2), '2\\. two\\.'),
    (FormattingSpan(SpanKind.list_item, 'x'), '• x'),
    (FormattingSpan(SpanKind.plain_text, 'a.b'), 'a\\.b'),
])
def test_default_span_rules(span, expected):
    assert render_spans([span]) == expected


def test_spans_concatenated_in_sequence_order():
    spans = [FormattingSpan(SpanKind.bold, 'a'), FormattingSpan(SpanKind.italic, 'b')]
    assert render_spans(spans) == '**a**__b__'


def test_override_applies_to_one_call_only():
    spans = [FormattingSpan(SpanKind.bold, 'hi')]
    assert render_spans(spans, {'bold': lambda s, i, ctx: s.content.upper()}) == 'HI'
    assert render_spans(spans) == '**hi**'


def test_rule_receives_index():
    spans = [FormattingSpan(SpanKind.plain_text, 'a'), FormattingSpan(SpanKind.plain_text, 'b')]
    rules = {SpanKind.plain_text: lambda s, i, ctx: f'{i}:{s.content} '}
    assert render_spans(spans, rules) == '0:a 1:b '


def test_unknown_kind_passes_content_through():
    assert render_spans([FormattingSpan('underline', 'a_b')]) == 'a_b'


def test_default_table_is_read_only():
    with pytest.raises(TypeError):
        SPAN_RULES['bold'] = lambda s, i, ctx: ''
