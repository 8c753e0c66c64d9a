#!/usr/bin/env python3
"""
Validate the content tree without writing anything.

Runs the full manifest build (schemas, routes, references, MDX
compilation) and reports every problem found, plus component warnings.
Exit code is 0 when the tree is valid (warnings are OK), 1 otherwise.

Usage:
    python Ingress/validate_content.py
    python Ingress/validate_content.py --content-dir path/to/content
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
import settings
from manifest import ContentIntegrityError, build_manifest


def main():
    parser = argparse.ArgumentParser(description="Validate the content tree")
    parser.add_argument(
        "--content-dir",
        type=Path,
        default=settings.CONTENT_DIR,
        help=f"Content root (default: {settings.CONTENT_DIR})"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.COMPILE_WORKERS,
        help="Threads used to compile article bodies"
    )
    args = parser.parse_args()
    settings.configure_logging()

    print("\n" + "=" * 70)
    print("Content Validation")
    print("=" * 70)

    try:
        manifest = build_manifest(args.content_dir, workers=args.workers)
    except ContentIntegrityError as e:
        print("\n✗ Validation failed:\n")
        print(e.format_report())
        print(f"\nTotal errors: {len(e.issues)}")
        return 1

    for warning in manifest.warnings:
        print(f"  ⚠ {warning}")
    print(f"\n✓ Content is valid ({len(manifest.warnings)} warning(s))\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
