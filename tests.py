"""
Run the pilotta test suite: ``python tests.py [pytest args...]``.

Installs the package with its ``dev`` extra first when pytest or numpy is
missing from the current interpreter.
"""
from __future__ import annotations

import importlib.util
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
REQUIRED = ("pytest", "numpy")


def missing_modules() -> list[str]:
    return [name for name in REQUIRED if importlib.util.find_spec(name) is None]


def pytest_command(args: list[str]) -> list[str]:
    return [sys.executable, "-m", "pytest", *args]


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    missing = missing_modules()
    if missing:
        print(f"Installing .[dev] (missing: {', '.join(missing)}) ...")
        subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", ".[dev]"], cwd=ROOT)
    return subprocess.call(pytest_command(args), cwd=ROOT)


if __name__ == "__main__":
    sys.exit(main())
