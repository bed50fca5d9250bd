#!/usr/bin/env python3
"""Run the test suite headless (Qt offscreen platform).

Usage:
  python scripts/run_tests_offscreen.py [--timeout SECONDS] [--uv] [--] [pytest args...]

Examples:
  python scripts/run_tests_offscreen.py tests/test_viewport_controller.py
  python scripts/run_tests_offscreen.py --uv -- -k canvas -q
"""

from __future__ import annotations

import argparse
import os
import shlex
import subprocess
import sys


def main() -> int:
    p = argparse.ArgumentParser(description="Run pytest with Qt offscreen mode")
    p.add_argument("--timeout", type=int, default=300, help="Maximum seconds for the whole pytest run")
    p.add_argument("--uv", action="store_true", help="Run through `uv run` instead of the current interpreter")
    p.add_argument("--verbose", action="store_true", help="Don't use -q (quiet)")
    p.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Additional pytest args")
    args = p.parse_args()

    env = os.environ.copy()
    env.setdefault("QT_QPA_PLATFORM", "offscreen")
    env.setdefault("CROP_IMAGE_LOG_LEVEL", "warning")

    base_cmd = ["uv", "run", "python", "-m", "pytest"] if args.uv else [sys.executable, "-m", "pytest"]
    flags = [] if args.verbose else ["-q"]
    # Per-test timeout via pytest-timeout
    timeout_flag = [f"--timeout={min(60, args.timeout)}"]
    user_args = [a for a in args.pytest_args if a != "--"]
    cmd = base_cmd + flags + timeout_flag + user_args

    print("Running:", " ".join(shlex.quote(c) for c in cmd))
    try:
        completed = subprocess.run(cmd, env=env, check=False, timeout=args.timeout)
        return completed.returncode
    except subprocess.TimeoutExpired:
        print(f"pytest run timed out after {args.timeout} seconds", file=sys.stderr)
        return 124


if __name__ == "__main__":
    raise SystemExit(main())
