"""
Application configuration.

Settings are read once at start-up and frozen. Sources, lowest to highest
priority:

1. ``DEFAULTS`` below
2. a JSON settings file (``config.json`` unless told otherwise)
3. a ``.env`` file in the working directory
4. environment variables prefixed ``GENANKI_``; ``__`` separates nesting
   levels, e.g. ``GENANKI_AZURE__SPEECH__KEY``

The resulting ``Config`` is passed explicitly to every component that needs it.
"""

import copy
import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from dotenv import load_dotenv

from ..exceptions import ConfigError
from .scripts import MandarinReading, MandarinScript

ENV_PREFIX = "GENANKI_"
DEFAULT_SETTINGS_FILE = "config.json"

E = TypeVar("E", bound=Enum)

# Older settings files name the related-words section after its first provider.
SECTION_ALIASES = {"openai": "ai"}


class AIProvider(Enum):
    """Supported providers for related-word suggestions."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"  # Local models


class SpeechProvider(Enum):
    """Supported speech synthesis back ends."""
    AZURE = "azure"
    EDGE = "edge"


DEFAULTS: Dict[str, Any] = {
    "model": {
        "word_model_id": 1607392319,
        "sentence_model_id": 1607392320,
        "deck_id": 2059400110,
        "deck_name": "Generated Mandarin Flashcards",
        "deck_description": "A Deck comprised of all the flashcards I have ever generated using my Script",
    },
    "azure": {
        "region": "",
        "translator": {
            "key": "",
        },
        "speech": {
            "key": "",
            "voice_name": "zh-TW-YunJheNeural",
            "locale": "zh-TW",
            "provider": "azure",
        },
    },
    "ai": {
        "provider": "openai",
        "key": "",
        "organisation": None,
        "model": "gpt-3.5-turbo",
        "base_url": None,
        "temperature": 0.7,
        "max_tokens": 500,
    },
    "mandarin": {
        "script": "Traditional",
        "reading": "Zhuyin",
    },
    "runtime": {
        "concurrency": 4,
        "retries": 5,
        "timeout": 60,
        "max_delay": 120,
        "dictionary_path": "cedict_ts.u8",
        "trace_log": "trace.log",
    },
}


@dataclass(frozen=True)
class ModelConfig:
    word_model_id: int
    sentence_model_id: int
    deck_id: int
    deck_name: str
    deck_description: str


@dataclass(frozen=True)
class SpeechConfig:
    key: str
    voice_name: str
    locale: str
    provider: SpeechProvider = SpeechProvider.AZURE


@dataclass(frozen=True)
class AzureConfig:
    region: str
    translator_key: str
    speech: SpeechConfig


@dataclass(frozen=True)
class AIConfig:
    """Configuration for the related-words service."""
    provider: AIProvider = AIProvider.OPENAI
    model: str = "gpt-3.5-turbo"
    api_key: Optional[str] = None
    organisation: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 500


@dataclass(frozen=True)
class MandarinConfig:
    script: MandarinScript = MandarinScript.TRADITIONAL
    reading: MandarinReading = MandarinReading.ZHUYIN


@dataclass(frozen=True)
class RuntimeConfig:
    concurrency: int = 4
    retries: int = 5
    timeout: int = 60
    max_delay: float = 120
    dictionary_path: str = "cedict_ts.u8"
    trace_log: str = "trace.log"


@dataclass(frozen=True)
class Config:
    """Immutable, process-wide configuration."""
    model: ModelConfig
    azure: AzureConfig
    ai: AIConfig
    mandarin: MandarinConfig
    runtime: RuntimeConfig


def load_config(
    settings_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    validate: bool = True,
) -> Config:
    """
    Load, merge and validate configuration.

    Args:
        settings_file: Path to a JSON settings file. A missing default file is
                       fine; a missing explicitly named file is an error.
        environ: Environment mapping (defaults to ``os.environ`` after loading ``.env``)
        validate: Check that the required service keys are present

    Returns:
        The frozen ``Config``

    Raises:
        ConfigError: On unreadable files, bad values or missing keys
    """
    settings = copy.deepcopy(DEFAULTS)

    path = Path(settings_file or DEFAULT_SETTINGS_FILE)
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_settings = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Could not read settings file {path}: {e}") from e
        if not isinstance(file_settings, dict):
            raise ConfigError(f"Settings file {path} must contain a JSON object")
        _merge(settings, file_settings, DEFAULTS)
    elif settings_file is not None:
        raise ConfigError(f"Settings file not found: {path}")

    if environ is None:
        load_dotenv()
        environ = os.environ
    _apply_environment(settings, environ)

    config = _build_config(settings)
    if validate:
        _validate(config)
    return config


def _merge(target: Dict[str, Any], overrides: Mapping[str, Any], defaults: Mapping[str, Any], prefix: str = "") -> None:
    """Recursively merge ``overrides`` into ``target``, rejecting unknown keys."""
    for key, value in overrides.items():
        if not prefix:
            key = SECTION_ALIASES.get(key, key)
        dotted = f"{prefix}{key}"
        if key not in defaults:
            raise ConfigError(f"Unknown setting: {dotted}")
        if isinstance(defaults[key], dict):
            if not isinstance(value, dict):
                raise ConfigError(f"Setting {dotted} must be an object")
            _merge(target[key], value, defaults[key], prefix=f"{dotted}.")
        else:
            target[key] = value


def _apply_environment(settings: Dict[str, Any], environ: Mapping[str, str]) -> None:
    """Override settings from ``GENANKI_SECTION__KEY`` style variables."""
    for name, raw_value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = name[len(ENV_PREFIX):].lower().split("__")
        path[0] = SECTION_ALIASES.get(path[0], path[0])
        node, defaults = settings, DEFAULTS
        for part in path[:-1]:
            if not isinstance(defaults.get(part), dict):
                break
            node, defaults = node[part], defaults[part]
        else:
            leaf = path[-1]
            if leaf in defaults and not isinstance(defaults[leaf], dict):
                node[leaf] = _parse_env_value(raw_value, defaults[leaf], name)


def _parse_env_value(value: str, default: Any, name: str) -> Any:
    """Parse an environment string to the type of its default."""
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError as e:
            raise ConfigError(f"{name} must be a number, got {value!r}") from e
    return value


def _parse_enum(enum_cls: Type[E], value: Any, name: str) -> E:
    """Accept an enum value or member name, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if text in (str(member.value).lower(), member.name.lower()):
            return member
    choices = ", ".join(str(member.value) for member in enum_cls)
    raise ConfigError(f"{name} must be one of {choices}, got {value!r}")


def _build_config(settings: Dict[str, Any]) -> Config:
    try:
        model = settings["model"]
        azure = settings["azure"]
        ai = settings["ai"]
        runtime = settings["runtime"]
        return Config(
            model=ModelConfig(
                word_model_id=int(model["word_model_id"]),
                sentence_model_id=int(model["sentence_model_id"]),
                deck_id=int(model["deck_id"]),
                deck_name=str(model["deck_name"]),
                deck_description=str(model["deck_description"]),
            ),
            azure=AzureConfig(
                region=str(azure["region"]),
                translator_key=str(azure["translator"]["key"]),
                speech=SpeechConfig(
                    key=str(azure["speech"]["key"]),
                    voice_name=str(azure["speech"]["voice_name"]),
                    locale=str(azure["speech"]["locale"]),
                    provider=_parse_enum(SpeechProvider, azure["speech"]["provider"], "azure.speech.provider"),
                ),
            ),
            ai=AIConfig(
                provider=_parse_enum(AIProvider, ai["provider"], "ai.provider"),
                model=str(ai["model"]),
                api_key=ai["key"] or None,
                organisation=ai["organisation"] or None,
                base_url=ai["base_url"] or None,
                temperature=float(ai["temperature"]),
                max_tokens=int(ai["max_tokens"]),
            ),
            mandarin=MandarinConfig(
                script=_parse_enum(MandarinScript, settings["mandarin"]["script"], "mandarin.script"),
                reading=_parse_enum(MandarinReading, settings["mandarin"]["reading"], "mandarin.reading"),
            ),
            runtime=RuntimeConfig(
                concurrency=int(runtime["concurrency"]),
                retries=int(runtime["retries"]),
                timeout=int(runtime["timeout"]),
                max_delay=float(runtime["max_delay"]),
                dictionary_path=str(runtime["dictionary_path"]),
                trace_log=str(runtime["trace_log"]),
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid setting value: {e}") from e


def _validate(config: Config) -> None:
    missing = []
    if not config.azure.region:
        missing.append("azure.region")
    if not config.azure.translator_key:
        missing.append("azure.translator.key")
    if config.azure.speech.provider is SpeechProvider.AZURE and not config.azure.speech.key:
        missing.append("azure.speech.key")
    if config.ai.provider is not AIProvider.OLLAMA and not config.ai.api_key:
        missing.append("ai.key")
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")
    if config.runtime.concurrency < 1:
        raise ConfigError("runtime.concurrency must be at least 1")
    if config.runtime.retries < 1:
        raise ConfigError("runtime.retries must be at least 1")
