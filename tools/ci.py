#!/usr/bin/env python3
# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the project checks locally: formatting, lint, tests, CLI smoke test and build."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "tests": ["uv", "run", "pytest", "--cov=typekit", "--cov-report=term-missing"],
    "smoke": ["uv", "run", "typekit", "--help"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected steps (all by default) and print a summary."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("steps", nargs="*", help=f"Steps to run, among {', '.join(STEPS)} (default: all)")
    args = parser.parse_args()

    unknown = [s for s in args.steps if s not in STEPS]
    if unknown:
        parser.error(f"unknown steps: {', '.join(unknown)}")
    selected = args.steps or list(STEPS)
    results = [_run_step(name, STEPS[name]) for name in selected]
    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_SEPARATOR = "=" * 60


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    print(f"\n{chalk.blue(_SEPARATOR)}\n{chalk.blue(name)}\n{chalk.blue(_SEPARATOR)}")
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=Path(__file__).parent.parent)
    return name, proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    print(f"\n{chalk.blue(_SEPARATOR)}\n{chalk.blue('  Summary')}\n{chalk.blue(_SEPARATOR)}")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()


if __name__ == "__main__":
    sys.exit(main())
