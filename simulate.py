#!/usr/bin/env -S uv run

from __future__ import annotations

import argparse
from pathlib import Path

from childweight.commands import run_simulate
from childweight.settings import DEFAULT_CONFIG_PATH


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate child fat-free mass / fat mass under a prescribed energy intake."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to config JSON (default: {DEFAULT_CONFIG_PATH.name} at repo root). Relative input/output paths resolve against its folder.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print errors.")
    args = parser.parse_args()

    echo = (lambda *_a, **_k: None) if args.quiet else print
    run_simulate(args.config, echo=echo)


if __name__ == "__main__":
    main()
