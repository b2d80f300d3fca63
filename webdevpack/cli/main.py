from __future__ import annotations

import argparse
import logging
from typing import List

from webdevpack.cli.commands import register_commands, run_command


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="webdevpack", description="WebDevPack API command line")
    p.add_argument("--api-key", default=None, help="API key (default: $WDP_API_KEY)")
    p.add_argument(
        "--base-url", default=None, help="API base URL (default: $WDP_BASE_URL or production)"
    )
    p.add_argument(
        "--log-level",
        default="warning",
        type=str.lower,
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: warning)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    register_commands(sub)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
