"""
CLI entrypoint that parses a text dataset's labels and maintains its cache.

Example:
    python -m vwlabel.runner --data train.txt --passes 3 --output labels.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import CONFIG_PATH, Settings, get_settings
from .errors import VWLabelError
from .pipeline import LabelingPipeline, LabelSession
from .storage import save_labels_csv


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse and cache example labels")
    parser.add_argument("--data", required=True, type=Path, help="Text dataset, one example per line")
    parser.add_argument(
        "--cache",
        type=Path,
        default=None,
        help="Cache file path (defaults to the dataset path plus the configured suffix)",
    )
    parser.add_argument("--no-cache", action="store_true", help="Always parse from text")
    parser.add_argument("--passes", type=positive_int, default=1, help="Number of passes over the data")
    parser.add_argument("--settings", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--output", type=Path, default=None, help="Write parsed labels to this CSV")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    if args.settings:
        settings = get_settings(args.settings)
    elif CONFIG_PATH.exists():
        settings = get_settings()
    else:
        settings = Settings()
    session = LabelSession(settings)
    cache_path = None
    if not args.no_cache:
        cache_path = args.cache or args.data.with_name(args.data.name + settings.cache.suffix)

    if not args.data.exists():
        logging.error("Dataset not found: %s", args.data)
        return 1

    try:
        result = LabelingPipeline(session).run(args.data, cache_path, passes=args.passes)
    except VWLabelError as exc:
        logging.error("Label pipeline failed: %s", exc)
        return 1

    shared = session.shared
    logging.info(
        "Finished %d passes: %d examples, %d from cache, %d fallbacks, weighted=%.1f",
        args.passes,
        result.examples_seen,
        result.passes_from_cache,
        result.fallbacks,
        shared.weighted_examples,
    )
    if shared.has_label_range:
        logging.info("Label range [%g, %g]", shared.min_label, shared.max_label)

    if args.output:
        path = save_labels_csv(args.output, result.labels)
        logging.info("Labels written to %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
