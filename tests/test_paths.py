from urllib.parse import quote

from mandarin_deck.utils import MediaPathGenerator, next_timestamp


def test_audio_name_pads_short_text():
    assert MediaPathGenerator.audio_name("hi", salt="AbC12") == "hi--------AbC12.mp3"


def test_audio_name_truncates_encoded_text():
    name = MediaPathGenerator.audio_name("你好", salt="AbC12")

    assert name == quote("你好", safe="")[:10] + "AbC12.mp3"


def test_reserved_paths_are_unique(tmp_path):
    paths = {MediaPathGenerator.reserve_audio_path(tmp_path, "你好") for _ in range(20)}

    assert len(paths) == 20
    assert all(path.exists() for path in paths)


def test_timestamps_strictly_increase():
    stamps = [int(next_timestamp()) for _ in range(100)]

    assert stamps == sorted(set(stamps))
