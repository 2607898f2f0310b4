"""
Mandarin Deck: Anki flashcards from Mandarin vocabulary lists
--------------------------------------------------------------

Main entry point. ``build`` is the default command:

    mandarin-deck --input input.csv --output output.apkg
    mandarin-deck voices --locale zh-TW
    mandarin-deck scripts --language zh-Hant
    mandarin-deck download-dictionary
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import aiohttp
from loguru import logger
from rich.console import Console
from rich.table import Table

from mandarin_deck import __version__
from mandarin_deck.config import Config, load_config
from mandarin_deck.deck import MandarinDeckBuilder
from mandarin_deck.dictionary import CedictDictionary, download_cedict
from mandarin_deck.exceptions import MandarinDeckError
from mandarin_deck.fetchers import AzureSpeechFetcher
from mandarin_deck.services import AzureTranslator
from mandarin_deck.utils import setup_logger

COMMANDS = ("build", "voices", "scripts", "download-dictionary")

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandarin-deck",
        description="Generate Anki flashcards from a CSV of Mandarin words and sentences.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Build an .apkg from a CSV (default)")
    build.add_argument("--input", "-i", default="input.csv", help="Vocabulary CSV (default: input.csv)")
    build.add_argument("--output", "-o", default="output.apkg", help="Package to write (default: output.apkg)")
    build.add_argument("--config", "-c", default=None, help="JSON settings file (default: config.json if present)")
    build.add_argument("--verbose", "-v", action="store_true", help="Show debug output")

    voices = subparsers.add_parser("voices", help="List Azure neural voices")
    voices.add_argument("--locale", default="zh-TW", help="Locale to list voices for")
    voices.add_argument("--config", "-c", default=None)

    scripts = subparsers.add_parser("scripts", help="List transliteration scripts for a language")
    scripts.add_argument("--language", default="zh-Hant", help="Language code")
    scripts.add_argument("--config", "-c", default=None)

    download = subparsers.add_parser("download-dictionary", help="Download CC-CEDICT from MDBG")
    download.add_argument("--path", default=None, help="Where to save the dictionary")
    download.add_argument("--config", "-c", default=None)

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse arguments, treating a missing sub-command as ``build``."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ("-h", "--help", "--version")):
        argv.insert(0, "build")
    return build_parser().parse_args(argv)


async def run_build(args: argparse.Namespace, config: Config) -> bool:
    dictionary = CedictDictionary.load(config.runtime.dictionary_path)
    builder = MandarinDeckBuilder(config, dictionary)
    try:
        await builder.build(args.input)
        builder.export(args.output)
    finally:
        builder.cleanup()
    return True


async def run_voices(args: argparse.Namespace, config: Config) -> bool:
    async with aiohttp.ClientSession() as session:
        fetcher = AzureSpeechFetcher(session, config.azure, config.runtime)
        voices = await fetcher.list_voices(args.locale)

    table = Table(title=f"Voices for {args.locale}")
    table.add_column("ShortName")
    table.add_column("Gender")
    table.add_column("LocalName")
    for voice in voices:
        table.add_row(voice.get("ShortName", ""), voice.get("Gender", ""), voice.get("LocalName", ""))
    console.print(table)
    return True


async def run_scripts(args: argparse.Namespace, config: Config) -> bool:
    async with aiohttp.ClientSession() as session:
        translator = AzureTranslator(session, config.azure, config.runtime)
        scripts = await translator.transliteration_scripts(args.language)

    table = Table(title=f"Transliteration scripts for {args.language}")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("To")
    for script in scripts:
        table.add_row(script["code"], script["name"], script["to"])
    console.print(table)
    return bool(scripts)


async def run_download(args: argparse.Namespace, config: Config) -> bool:
    path = args.path or config.runtime.dictionary_path
    async with aiohttp.ClientSession() as session:
        await download_cedict(path, session)
    return True


RUNNERS = {
    "build": run_build,
    "voices": run_voices,
    "scripts": run_scripts,
    "download-dictionary": run_download,
}


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)
    try:
        # Only build needs every service key.
        config = load_config(args.config, validate=args.command == "build")
    except MandarinDeckError as e:
        setup_logger(trace_file=None)
        logger.error(str(e))
        return 1

    setup_logger(verbose=getattr(args, "verbose", False), trace_file=config.runtime.trace_log)
    try:
        success = await RUNNERS[args.command](args, config)
    except MandarinDeckError as e:
        logger.error(str(e))
        return 1
    except aiohttp.ClientError as e:
        logger.error(f"Network error: {e}")
        return 1
    return 0 if success else 1


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.warning("Aborted by user.")
        sys.exit(1)


if __name__ == "__main__":
    run()
