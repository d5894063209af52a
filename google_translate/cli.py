"""
Command line front end

    google-translate translate "Hello world" --target es
    google-translate translate "Hola" --source es --target en --no-detect
    google-translate detect "Bonjour"
"""
import sys
import argparse
import logging
from dataclasses import replace
from typing import List, Optional

from .config import settings
from .translation_service import ClientConfig, TranslationClient, TranslateError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="google-translate",
        description="Translate text or detect its language with the Google Translate v2 API"
    )
    parser.add_argument('--api-key', help='API key (預設: GOOGLE_TRANSLATE_API_KEY)')
    parser.add_argument('--timeout', type=float, help='request timeout in seconds')
    parser.add_argument('--verbose', '-v', action='store_true', help='debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    translate_parser = subparsers.add_parser('translate', help='translate text')
    translate_parser.add_argument('text', help='text to translate')
    translate_parser.add_argument('--target', '-t', default=settings.target_lang, help='target language code')
    translate_parser.add_argument('--source', '-s', default=settings.source_lang, help='source language code')
    translate_parser.add_argument('--no-detect', dest='auto_detect', action='store_false',
                                  help='fail instead of detecting the source language')

    detect_parser = subparsers.add_parser('detect', help='detect the language of text')
    detect_parser.add_argument('text', help='text to inspect')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or settings.debug) else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = ClientConfig.from_settings(settings, api_key=args.api_key)
        if args.timeout is not None:
            config = replace(config, timeout=args.timeout)
        client = TranslationClient(config)

        if args.command == 'detect':
            print(client.detect(args.text))
            return 0

        translated = client.translate(
            args.text,
            target_lang=args.target,
            source_lang=args.source,
            auto_detect=args.auto_detect
        )
    except TranslateError as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 1

    if translated is None:
        print("錯誤: 服務沒有回傳翻譯結果", file=sys.stderr)
        return 1
    print(translated)
    return 0


if __name__ == "__main__":
    sys.exit(main())
