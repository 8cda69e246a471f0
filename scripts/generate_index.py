#!/usr/bin/env python3
"""
generate_index.py
--------------------
Pre-publish step: read the GitHub contents listing for the logo repository and
write logokit/data/component-index.json so listing and existence checks can be
answered without a network round trip.

Usage:
    python scripts/generate_index.py
    python scripts/generate_index.py --output /tmp/component-index.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from logokit.component_index import regenerate  # noqa: E402
from logokit.config import RegistrySettings  # noqa: E402
from logokit.exceptions import LogoError  # noqa: E402
from logokit.paths import Paths  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate the bundled component index")
    parser.add_argument("--output", default=None, metavar="PATH", help="Index file to write")
    args = parser.parse_args()

    output = Path(args.output).resolve() if args.output else Paths.bundled_index()
    try:
        settings = RegistrySettings.from_env()
        index = asyncio.run(
            regenerate(
                settings.github_repo,
                settings.github_branch,
                settings.github_path,
                output,
                settings.timeout,
            )
        )
    except (LogoError, OSError) as exc:
        print(f"Failed to generate component index: {exc}")
        return 1

    print(f"Generated index with {len(index.components)} components")
    print(f"Saved to: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
