"""Tests for unterminated-marker repair (mdv2.corrector)."""

import pytest

from mdv2.corrector import correct, count_markers


def test_unterminated_bold_is_closed():
    assert correct('**bold') == '**bold**'


def test_unterminated_italic_is_closed():
    assert correct('__it') == '__it__'


def test_balanced_text_unchanged():
    text = '**a** and __b__'
    assert correct(text) == text


def test_unfinished_bold_with_closed_italic():
    text = '**This is unfinished bold and __broken italic__'
    assert correct(text) == text + '**'


def test_both_unterminated_bold_first():
    assert correct('**b __i') == '**b __i**__'


def test_crossed_italic_inside_bold_kept_verbatim():
    assert correct('**X__Y**') == '**X__Y**__'


def test_crossed_bold_inside_italic_kept_verbatim():
    assert correct('__X**Y__') == '__X**Y__**'


def test_markers_in_inline_code_ignored():
    text = 'call `f(**kwargs)` now'
    assert correct(text) == text


def test_markers_in_fenced_code_ignored():
    text = '```py\ndef f(**kw):\n    pass\n```'
    assert correct(text) == text


def test_escaped_markers_ignored():
    text = '\\*\\* not bold'
    assert correct(text) == text


def test_dangling_backslash_does_not_swallow_closer():
    assert correct('**a\\') == '**a\\\\**'


def test_count_markers():
    assert count_markers('**a** __b') == {'**': 2, '__': 1}


@pytest.mark.parametrize('text', [
    '',
    'plain',
    '**bold',
    '***',
    '**a*',
    'x___',
    '**a\\',
    '**X__Y**',
    '__X**Y__',
    '**a __b** c__',
    '`**kwargs`',
    '```\n**kw\n```\n**open',
    'snake__case',
])
def test_idempotent(text):
    once = correct(text)
    assert correct(once) == once


def test_non_string_rejected():
    with pytest.raises(TypeError):
        correct(None)
