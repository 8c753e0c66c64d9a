#!/usr/bin/env python3
"""
Publish built search indexes into the static asset directory.

Copies search-index-<locale>.json to index-<locale>-<hash>.json and
search-meta.json to meta.json. Running it before the first content build is
a no-op.

Usage:
    python Ingress/publish_search.py
    python Ingress/publish_search.py --public-dir public/search --prune
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
import settings
from search_index import publish


def main():
    parser = argparse.ArgumentParser(
        description="Publish search indexes under content-hashed names",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Publish from the default build directory
    python Ingress/publish_search.py

    # Remove indexes from earlier builds
    python Ingress/publish_search.py --prune
        """
    )

    parser.add_argument(
        "--build-dir",
        type=Path,
        default=settings.BUILD_DIR,
        help=f"Build artifacts directory (default: {settings.BUILD_DIR})"
    )

    parser.add_argument(
        "--public-dir",
        type=Path,
        default=settings.PUBLIC_SEARCH_DIR,
        help=f"Static asset directory (default: {settings.PUBLIC_SEARCH_DIR})"
    )

    parser.add_argument(
        "--prune",
        action="store_true",
        help="Delete published indexes that belong to other hashes"
    )

    args = parser.parse_args()
    settings.configure_logging()

    print("\n" + "=" * 70)
    print("Search Index Publisher")
    print("=" * 70)

    try:
        result = publish(args.build_dir, args.public_dir, prune=args.prune)
    except (OSError, KeyError, ValueError) as e:
        print(f"\n✗ Error: {e}")
        return 1

    if result is None:
        print(f"\n⚠ No search build found in {args.build_dir}, nothing to publish")
        return 0

    print(f"\n✓ Published hash {result.hash}")
    for path in result.files:
        print(f"  • {path}")
    if result.removed:
        print(f"\nRemoved {len(result.removed)} stale file(s)")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
