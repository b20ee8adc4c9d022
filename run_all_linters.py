#!/usr/bin/env python3
"""Run the formatters, linters and the test suite in one go.

Steps, in order:
1. Black format check
2. isort import-order check
3. Ruff lint
4. pytest

Output from every step is collected and failures are repeated at the end.
Pass ``--no-tests`` to skip pytest.
"""

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
PACKAGES = ["app", "core", "infrastructure", "main.py"]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the project root; return (success, combined output)."""
    print(f"\n{'=' * 60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    success = result.returncode == 0
    output = result.stdout + result.stderr
    print("OK" if success else "FAILED")
    if output.strip():
        print("\nOutput:")
        print(output)
    return success, output


def build_commands(with_tests: bool) -> list[tuple[list[str], str]]:
    py = sys.executable
    commands = [
        ([py, "-m", "black", *PACKAGES, "tests", "--check"], "Black format check"),
        ([py, "-m", "isort", *PACKAGES, "tests", "--check-only"], "isort import order"),
        ([py, "-m", "ruff", "check", *PACKAGES, "tests"], "Ruff lint"),
    ]
    if with_tests:
        commands.append(([py, "-m", "pytest", "-q"], "pytest"))
    return commands


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    results = []
    for cmd, description in build_commands(with_tests="--no-tests" not in args):
        success, output = run_command(cmd, description)
        results.append((description, success, output))

    print(f"\n{'=' * 60}")
    print("Summary")
    print("=" * 60)
    all_passed = True
    for description, success, _ in results:
        print(f"{description}: {'passed' if success else 'FAILED'}")
        all_passed = all_passed and success

    if not all_passed:
        print("\nFailure details:")
        for description, success, output in results:
            if not success and output.strip():
                print(f"\n--- {description} ---")
                print(output)
    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
