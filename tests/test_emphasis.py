from mandarin_deck.models import Token
from mandarin_deck.text import (
    EmphasisToggle,
    has_balanced_emphasis,
    render,
    render_plain,
    render_reading,
    strip_delimiters,
)

OPEN = EmphasisToggle.OPEN
CLOSE = EmphasisToggle.CLOSE


def _tokens(*texts):
    return [Token(text, None if text == "*" else ()) for text in texts]


def test_render_even_delimiters():
    html = render(_tokens("你", "*", "時尚", "*", "嗎"))

    assert html == f"你{OPEN}時尚{CLOSE}嗎"


def test_render_odd_delimiters_leaves_span_open():
    html = render(_tokens("*", "你", "*", "好", "*", "嗎"))

    assert html == f"{OPEN}你{CLOSE}好{OPEN}嗎"
    assert html.count(OPEN) == html.count(CLOSE) + 1


def test_render_plain_drops_delimiters():
    plain = render_plain(_tokens("你", "*", "時尚", "*"))

    assert plain == "你時尚"
    assert "*" not in plain
    assert "span" not in plain


def test_render_reading_uses_the_same_toggle():
    assert render_reading("nǐ *hǎo*") == f"nǐ {OPEN}hǎo{CLOSE}"


def test_toggle_alternates():
    toggle = EmphasisToggle()

    assert [toggle.next() for _ in range(3)] == [OPEN, CLOSE, OPEN]


def test_balance_helpers():
    assert has_balanced_emphasis("a*b*c")
    assert not has_balanced_emphasis("a*b")
    assert strip_delimiters("*a*") == "a"
