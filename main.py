"""devlog — pretty-print NDJSON request logs for local development."""

import asyncio
import dataclasses
import logging
import sys
from argparse import ArgumentParser

from devlogger.config import load_config
from devlogger.pipeline import DevLogger

logger = logging.getLogger("devlog")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="devlog",
        description="Pretty print a NDJSON log. If `file` is omitted, reads stdin.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="NDJSON log file (default: stdin)",
    )
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--color",
        dest="color",
        action="store_const",
        const="always",
        help="Always emit ANSI colors",
    )
    color.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Never emit ANSI colors",
    )
    parser.add_argument(
        "--utc",
        action="store_true",
        default=None,
        help="Show request times in UTC instead of local time",
    )
    parser.add_argument(
        "--grace-ms",
        type=int,
        help="How long a finished request still claims late log lines (default: 33)",
    )
    parser.add_argument(
        "--config",
        help="YAML config file (default: $DEVLOG_CONFIG)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log diagnostics to stderr",
    )
    return parser


def apply_overrides(config, args):
    """Layer explicitly-given CLI flags over the loaded config."""
    overrides = {}
    if args.color is not None:
        overrides["color"] = args.color
    if args.utc is not None:
        overrides["utc"] = args.utc
    if args.grace_ms is not None:
        if args.grace_ms < 0:
            print("Error: --grace-ms must be >= 0", file=sys.stderr)
            sys.exit(1)
        overrides["grace_ms"] = args.grace_ms
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return dataclasses.replace(config, **overrides)


def run_pipeline(args, config):
    """Open the input, wire the sink, and format until EOF."""
    sink = sys.stdout
    sink.reconfigure(encoding="utf-8", errors="surrogateescape")
    devlogger = DevLogger(sink, config)

    if args.file is None:
        asyncio.run(devlogger.run(sys.stdin.buffer))
        return

    try:
        stream = open(args.file, "rb")
    except FileNotFoundError:
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)
    with stream:
        asyncio.run(devlogger.run(stream))


def main():
    parser = build_parser()
    args = parser.parse_args()
    config = apply_overrides(load_config(args.config), args)

    # Diagnostics go to stderr, separate from formatted output
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [DEVLOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Config: %s", config)

    try:
        run_pipeline(args, config)
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)


if __name__ == "__main__":
    main()
