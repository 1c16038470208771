"""glot command line: fetch texts, process them, and inspect the stores.

Usage:
    glot fetch en beginner [--topic Science] [--count 3]
    glot read ja "東京は日本の首都です。" --target en
    glot translate en house --target sk
    glot preload
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


async def _fetch(pipeline, args) -> int:
    provider = pipeline.provider(args.language, args.difficulty)
    texts = await provider.get_texts(topic=args.topic, count=args.count)
    _print_json([
        {
            "title": t.title,
            "source": t.metadata.source,
            "words": t.word_count,
            "reading_minutes": t.metadata.reading_minutes,
        }
        for t in texts
    ])
    return 0 if texts else 1


async def _read(pipeline, args) -> int:
    sentence = await pipeline.processing.process_sentence(args.text, args.language, args.target)
    _print_json({
        "sentence": sentence.original,
        "translation": sentence.translation,
        "words": [
            {
                "word": w.original,
                "translation": w.display_text,
                "transliteration": w.transliteration,
                "furigana": w.furigana,
            }
            for w in sentence.content_words
        ],
    })
    return 0


async def _translate(pipeline, args) -> int:
    translation = await pipeline.processing.translate_word(args.word, args.language, args.target)
    _print_json({"word": args.word, "translation": translation})
    return 0 if translation else 1


async def _preload(pipeline, args) -> int:
    _print_json(await pipeline.preloader().preload_all())
    return 0


COMMANDS = {
    "fetch": _fetch,
    "read": _read,
    "translate": _translate,
    "preload": _preload,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glot", description="Multi-language reading pipeline")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch texts for a language and difficulty")
    fetch.add_argument("language")
    fetch.add_argument("difficulty", choices=["beginner", "intermediate", "advanced"])
    fetch.add_argument("--topic", default=None)
    fetch.add_argument("--count", type=int, default=5)

    read = sub.add_parser("read", help="Tokenize and translate a sentence")
    read.add_argument("language")
    read.add_argument("text")
    read.add_argument("--target", default="en")

    translate = sub.add_parser("translate", help="Translate a single word")
    translate.add_argument("language")
    translate.add_argument("word")
    translate.add_argument("--target", default="en")

    sub.add_parser("preload", help="Warm the text cache for every language and difficulty")
    return parser


async def run(args) -> int:
    from app.bootstrap import build_pipeline
    from domain.model.errors import DomainError

    pipeline = None
    try:
        pipeline = build_pipeline()
        return await COMMANDS[args.command](pipeline, args)
    except DomainError as e:
        logger.error("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"error: {e}", file=sys.stderr)
        return 2
    finally:
        if pipeline is not None:
            await pipeline.background.drain()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    from utils.logging import setup_structured_logging

    args = build_parser().parse_args(argv)
    setup_structured_logging(logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
