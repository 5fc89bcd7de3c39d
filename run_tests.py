#!/usr/bin/env python3
"""Test runner script for storedup."""

import sys
import subprocess
from pathlib import Path

MARKERS = ("unit", "normalization", "config", "integration")


def main():
    """Run tests with pytest."""
    project_root = Path(__file__).parent

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        str(project_root / "tests"),
        "-v",
        "--tb=short",
        "--color=yes",
    ]

    if len(sys.argv) > 1 and sys.argv[1] in MARKERS:
        cmd.extend(["-m", sys.argv[1]])

    print(f"🧪 Running tests: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\n⏹️  Tests interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
