"""
main.py — command-line entry point.

  python main.py photo.jpg 349
  python main.py https://example.com/photo.jpg 12.99 --provider openai --no-similar

Prints the caller-facing report as JSON on stdout. Fatal pipeline failures
are reported as one line on stderr with exit code 1.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import config
from errors import EcoScanError
from sources.registry import SOURCES, get_source

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    handlers=[logging.StreamHandler(sys.stderr)],
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("aiohttp").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Eco-impact report and greener alternatives for a product photo.")
    parser.add_argument("image", help="path to a product photo, or an http(s) URL")
    parser.add_argument("price", type=float, help="price paid for the product")
    parser.add_argument(
        "--provider",
        choices=["auto", "google", "openai", "anthropic"],
        help="override JUDGE_PROVIDER for this run",
    )
    parser.add_argument("--no-similar", action="store_true", help="skip the alternatives search")
    parser.add_argument(
        "--source",
        action="append",
        metavar="NAME",
        help="only consult this catalog source (repeatable, priority order kept as given)",
    )
    return parser.parse_args(argv)


def _read_image(arg: str):
    if arg.startswith(("http://", "https://")):
        return arg
    return Path(arg).read_bytes()


async def run(args: argparse.Namespace) -> dict:
    from analysis import analyze_product

    if args.provider:
        config.JUDGE_PROVIDER = args.provider

    registry = [get_source(name) for name in args.source] if args.source else SOURCES

    report = await analyze_product(
        _read_image(args.image),
        args.price,
        registry=registry,
        include_similar=not args.no_similar,
    )
    return report.to_dict()


def main(argv=None) -> int:
    args = _parse_args(argv)
    try:
        result = asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
    except EcoScanError as exc:
        logger.debug("Analysis failed", exc_info=True)
        print(f"Analysis failed: {exc.message}", file=sys.stderr)
        return 1
    except Exception as exc:
        # SDK, filesystem and config errors: still one line, traceback only at DEBUG
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Analysis failed: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
