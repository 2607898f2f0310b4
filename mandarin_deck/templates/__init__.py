"""Card templates with CSS and HTML."""

from typing import Dict, List

import genanki

from ..config import ModelConfig


class CardTemplates:
    """Container for both note models, their templates and styling."""

    WORD_MODEL_NAME = "Mandarin Word"
    SENTENCE_MODEL_NAME = "Mandarin Sentence"

    WORD_FIELDS: List[str] = ["timestamp", "Hanzi", "Definition", "Audio", "Reading", "Similar Words"]
    SENTENCE_FIELDS: List[str] = ["timestamp", "Hanzi", "Meaning", "Audio", "Reading"]

    CSS = """
    .card {
        font-family: arial;
        font-size: 20px;
        text-align: center;
        color: black;
        background-color: white;
    }
    """

    STARRED_CSS = """
    .starred {
        color: red;
    }
    """

    LISTENING_FRONT = "Listen.{{Audio}}"
    READING_FRONT = "{{Hanzi}}"

    WORD_LISTENING_BACK = """
    {{FrontSide}}
    <hr id=answer>
    {{Hanzi}}<br>{{Reading}}<br>{{Definition}}
    <hr id=answer>
    {{Similar Words}}
    """

    WORD_READING_BACK = """
    {{FrontSide}}
    <hr id=answer>
    {{Reading}}<br>{{Definition}}<br>{{Audio}}
    <hr id=answer>
    {{Similar Words}}
    """

    SENTENCE_LISTENING_BACK = """
    {{FrontSide}}
    <hr id=answer>
    {{Hanzi}}<br>{{Reading}}<br>{{Meaning}}
    """

    SENTENCE_READING_BACK = """
    {{FrontSide}}
    <hr id=answer>
    {{Reading}}<br>{{Meaning}}<br>{{Audio}}
    """

    @staticmethod
    def _fields(names: List[str]) -> List[Dict[str, str]]:
        return [{"name": name} for name in names]

    @classmethod
    def word_templates(cls) -> List[Dict[str, str]]:
        return [
            {"name": "Listening", "qfmt": cls.LISTENING_FRONT, "afmt": cls.WORD_LISTENING_BACK},
            {"name": "Reading", "qfmt": cls.READING_FRONT, "afmt": cls.WORD_READING_BACK},
        ]

    @classmethod
    def sentence_templates(cls) -> List[Dict[str, str]]:
        return [
            {"name": "Listening", "qfmt": cls.LISTENING_FRONT, "afmt": cls.SENTENCE_LISTENING_BACK},
            {"name": "Reading", "qfmt": cls.READING_FRONT, "afmt": cls.SENTENCE_READING_BACK},
        ]

    @classmethod
    def word_model(cls, model_config: ModelConfig) -> genanki.Model:
        return genanki.Model(
            model_config.word_model_id,
            cls.WORD_MODEL_NAME,
            fields=cls._fields(cls.WORD_FIELDS),
            templates=cls.word_templates(),
            css=cls.CSS,
        )

    @classmethod
    def sentence_model(cls, model_config: ModelConfig) -> genanki.Model:
        """Sentence model; its CSS also styles emphasised spans."""
        return genanki.Model(
            model_config.sentence_model_id,
            cls.SENTENCE_MODEL_NAME,
            fields=cls._fields(cls.SENTENCE_FIELDS),
            templates=cls.sentence_templates(),
            css=cls.CSS + cls.STARRED_CSS,
        )
