import importlib.util
import sys
from pathlib import Path

RUNNER = Path(__file__).resolve().parent.parent / "tests.py"


def _load_runner():
    found = importlib.util.spec_from_file_location("pilotta_test_runner", RUNNER)
    module = importlib.util.module_from_spec(found)
    found.loader.exec_module(module)
    return module


def test_runner_forwards_arguments_to_pytest():
    runner = _load_runner()
    assert runner.pytest_command(["-k", "deck"]) == [sys.executable, "-m", "pytest", "-k", "deck"]


def test_runner_sees_installed_test_dependencies():
    runner = _load_runner()
    assert runner.missing_modules() == []
