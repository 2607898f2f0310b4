import pytest

import build_deck
from tests.conftest import BASE_ENV, CEDICT_SAMPLE


@pytest.fixture
def environment(monkeypatch, tmp_path):
    for key, value in BASE_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("GENANKI_RUNTIME__DICTIONARY_PATH", str(CEDICT_SAMPLE))
    monkeypatch.setenv("GENANKI_RUNTIME__TRACE_LOG", str(tmp_path / "trace.log"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_build_is_the_default_command():
    args = build_deck.parse_args([])

    assert args.command == "build"
    assert args.input == "input.csv"
    assert args.output == "output.apkg"
    assert not args.verbose


def test_build_options_without_subcommand():
    args = build_deck.parse_args(["--input", "words.csv", "-v"])

    assert args.command == "build"
    assert args.input == "words.csv"
    assert args.verbose


def test_other_commands():
    assert build_deck.parse_args(["voices"]).locale == "zh-TW"
    assert build_deck.parse_args(["scripts", "--language", "zh-Hans"]).language == "zh-Hans"
    assert build_deck.parse_args(["download-dictionary", "--path", "d.u8"]).path == "d.u8"


async def test_missing_input_exits_with_error(environment):
    status = await build_deck.main(["--input", "missing.csv", "--output", "out.apkg"])

    assert status == 1
    assert not (environment / "out.apkg").exists()


async def test_missing_keys_exit_with_error(monkeypatch, environment):
    monkeypatch.delenv("GENANKI_AZURE__TRANSLATOR__KEY")

    assert await build_deck.main(["--input", "missing.csv"]) == 1
