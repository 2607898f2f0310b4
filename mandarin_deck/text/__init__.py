"""Tokenization, phonetic readings and emphasis rendering."""

from .emphasis import (
    EMPHASIS_DELIMITER,
    EmphasisToggle,
    count_delimiters,
    has_balanced_emphasis,
    render,
    render_plain,
    render_reading,
    strip_delimiters,
)
from .phonetics import (
    ManualCorrector,
    PhoneticReconciler,
    PinyinStreamParser,
    convert_pinyin_to_zhuyin,
    entry_reading,
    prompt_for_correction,
)
from .tokenizer import tokenize, tokenize_sentence

__all__ = [
    'EMPHASIS_DELIMITER',
    'EmphasisToggle',
    'ManualCorrector',
    'PhoneticReconciler',
    'PinyinStreamParser',
    'convert_pinyin_to_zhuyin',
    'count_delimiters',
    'entry_reading',
    'has_balanced_emphasis',
    'prompt_for_correction',
    'render',
    'render_plain',
    'render_reading',
    'strip_delimiters',
    'tokenize',
    'tokenize_sentence',
]
