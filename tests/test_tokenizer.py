import pytest

from mandarin_deck.text import tokenize, tokenize_sentence


class _FixedSegmenter:
    """Segmenter returning a canned word list."""

    def __init__(self, words, known=()):
        self.words = words
        self.known = set(known)

    def segment(self, text):
        return list(self.words)

    def lookup(self, word):
        return ["entry"] if word in self.known else []


@pytest.mark.parametrize("raw", [
    "你好",
    "你今天看起來很*時尚*",
    "你好，學生！",
    "I said 你好 twice: 你好",
    "hello",
    "*",
    "",
])
def test_partition_is_lossless(raw, dictionary):
    tokens = tokenize(raw, dictionary)

    assert "".join(token.text for token in tokens) == raw


def test_gaps_become_single_character_tokens(dictionary):
    tokens = tokenize("你好，學生", dictionary)

    assert [token.text for token in tokens] == ["你好", "，", "學生"]
    assert tokens[1].entries is None
    assert tokens[0].entries == tuple(dictionary.lookup("你好"))


def test_no_recognised_words_gives_one_token_per_character(dictionary):
    tokens = tokenize("abc", dictionary)

    assert [token.text for token in tokens] == ["a", "b", "c"]
    assert all(token.entries is None for token in tokens)


def test_empty_input_gives_no_tokens(dictionary):
    assert tokenize("", dictionary) == []


def test_word_without_entries_keeps_empty_tuple():
    tokens = tokenize("魑魅", _FixedSegmenter(["魑魅"]))

    assert len(tokens) == 1
    assert tokens[0].entries == ()
    assert tokens[0].is_mandarin
    assert not tokens[0].has_entries


def test_missing_word_is_skipped():
    tokens = tokenize("你好", _FixedSegmenter(["學生", "你好"], known=["你好"]))

    assert [token.text for token in tokens] == ["你好"]


def test_repeated_word_advances_cursor():
    tokens = tokenize("好好", _FixedSegmenter(["好", "好"], known=["好"]))

    assert [token.text for token in tokens] == ["好", "好"]
    assert all(token.has_entries for token in tokens)


def test_tokenize_sentence(dictionary):
    sentence = tokenize_sentence("你好，學生", dictionary)

    assert sentence.raw_text == "你好，學生"
    assert sentence.has_mandarin
    assert len(sentence.tokens) == 3
