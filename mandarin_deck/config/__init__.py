"""Configuration module for the Mandarin deck builder."""

from .scripts import MandarinReading, MandarinScript, SCRIPT_CONFIG
from .settings import (
    AIConfig,
    AIProvider,
    AzureConfig,
    Config,
    DEFAULTS,
    MandarinConfig,
    ModelConfig,
    RuntimeConfig,
    SpeechConfig,
    SpeechProvider,
    load_config,
)

__all__ = [
    'AIConfig',
    'AIProvider',
    'AzureConfig',
    'Config',
    'DEFAULTS',
    'MandarinConfig',
    'MandarinReading',
    'MandarinScript',
    'ModelConfig',
    'RuntimeConfig',
    'SCRIPT_CONFIG',
    'SpeechConfig',
    'SpeechProvider',
    'load_config',
]
