#!/usr/bin/env python3
# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the wsdlgen CI checks locally.

Pass step names (``format``, ``lint``, ``tests``, ``build``) to run a subset.
"""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/"],
    "tests": ["uv", "run", "pytest", "--cov=wsdlgen", "--cov-report=term-missing"],
    "build": ["uv", "build"],
}


def main(argv: list[str]) -> int:
    """Run the selected CI steps and print a summary."""
    selected = argv or list(STEPS)
    unknown = [name for name in selected if name not in STEPS]
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(unknown)}"))
        return 2

    failures = 0
    summary: list[str] = []
    for name in selected:
        _banner(name)
        start = time.monotonic()
        returncode = subprocess.run(STEPS[name], cwd=_REPO_ROOT).returncode
        elapsed = time.monotonic() - start
        if returncode == 0:
            summary.append(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            failures += 1
            summary.append(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)"))

    _banner("summary")
    print("\n".join(summary))
    print()
    return 1 if failures else 0


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    rule = chalk.blue("=" * 60)
    print(f"\n{rule}\n{chalk.blue(title.capitalize())}\n{rule}")


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
