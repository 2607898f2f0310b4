import zipfile

import pytest

from mandarin_deck.deck import CardFactory, MandarinDeckBuilder
from mandarin_deck.exceptions import MandarinDeckError, PackageWriteError
from mandarin_deck.text import PhoneticReconciler
from tests.conftest import StubTranslator


def _write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


def _unexpected_prompt(candidate):
    raise AssertionError(candidate)


@pytest.fixture
def builder(config, dictionary):
    builder = MandarinDeckBuilder(config, dictionary, correction_callback=_unexpected_prompt)
    yield builder
    builder.cleanup()


@pytest.fixture
def factory(builder, config, dictionary, translator, speech, ai_service):
    reconciler = PhoneticReconciler(config, dictionary, translator, builder.corrector)
    return CardFactory(config, reconciler, translator, speech, ai_service, builder.media_dir)


def test_classify_row(builder):
    assert builder.classify_row("你好")[0] == "word"
    assert builder.classify_row("基金會")[0] == "word"
    assert builder.classify_row("你好，學生")[0] == "sentence"
    assert builder.classify_row("")[0] is None


async def test_build_and_export(builder, factory, tmp_path):
    csv_file = _write_csv(
        tmp_path / "input.csv",
        "你好\n"
        "你今天看起來很*時尚*,You look fashionable today\n"
        "hello\n"
        "基金會, foundation ,extra\n"
        "\n"
        ",orphan definition\n",
    )

    added = await builder.build(csv_file, factory=factory)

    assert added == 3
    models = sorted(note.model.name for note in builder.deck.notes)
    assert models == ["Mandarin Sentence", "Mandarin Word", "Mandarin Word"]
    assert builder.stats.get("rows_skipped") == 1

    output = tmp_path / "output.apkg"
    builder.export(str(output))

    with zipfile.ZipFile(output) as package:
        names = package.namelist()
    assert "collection.anki2" in names
    assert "media" in names
    assert len(builder.media_files) == 3


async def test_override_reaches_the_note(builder, factory, tmp_path):
    csv_file = _write_csv(tmp_path / "input.csv", "基金會, foundation ,extra\n")

    await builder.build(csv_file, factory=factory)

    assert builder.deck.notes[0].fields[2] == "foundation"


async def test_failing_row_does_not_stop_others(builder, config, dictionary, speech, ai_service, tmp_path):
    translator = StubTranslator({"你好，學生": "nǐ hǎo， xuéshēng"}, fail=True)
    reconciler = PhoneticReconciler(config, dictionary, translator, builder.corrector)
    factory = CardFactory(config, reconciler, translator, speech, ai_service, builder.media_dir)
    csv_file = _write_csv(tmp_path / "input.csv", "你好，學生\n你好\n")

    added = await builder.build(csv_file, factory=factory)

    assert added == 1
    assert builder.stats.get("rows_failed") == 1
    assert builder.stats.get_all()["failed_rows"] == ["你好，學生"]


async def test_missing_input_file(builder, factory, tmp_path):
    with pytest.raises(MandarinDeckError):
        await builder.build(str(tmp_path / "missing.csv"), factory=factory)
    assert builder.deck.notes == []


def test_export_into_missing_directory(builder, tmp_path):
    output = tmp_path / "decks" / "output.apkg"

    builder.export(str(output))

    assert output.exists()


def test_export_to_unwritable_path(builder, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(PackageWriteError):
        builder.export(str(blocker / "output.apkg"))


def test_export_onto_a_directory(builder, tmp_path):
    with pytest.raises(PackageWriteError):
        builder.export(str(tmp_path))
