#!/usr/bin/env python3
"""
Build the content manifest and search indexes.

This script:
1. Loads and validates every subject, teacher, article and system record
2. Checks routes and cross-references across the whole tree
3. Compiles every MDX body (HTML + table of contents)
4. Writes manifest.json, route-map.json, compiled/ and toc/
5. Writes search-index-<locale>.json and search-meta.json

Usage:
    python Ingress/build_content.py
    python Ingress/build_content.py --content-dir content --build-dir .content-build
    python Ingress/build_content.py --workers 4 --verbose
"""

import argparse
import shutil
import sys
import time
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
import settings
from manifest import ContentIntegrityError, build_manifest, write_build_output
from search_index import build_indexes, write_indexes


def main():
    parser = argparse.ArgumentParser(
        description="Build the content manifest and search indexes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build from the default content directory
    python Ingress/build_content.py

    # Compile article bodies on 4 threads
    python Ingress/build_content.py --workers 4

    # Keep files from a previous build
    python Ingress/build_content.py --no-clean
        """
    )

    parser.add_argument(
        "--content-dir",
        type=Path,
        default=settings.CONTENT_DIR,
        help=f"Content root (default: {settings.CONTENT_DIR})"
    )

    parser.add_argument(
        "--build-dir",
        type=Path,
        default=settings.BUILD_DIR,
        help=f"Output directory for build artifacts (default: {settings.BUILD_DIR})"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=settings.COMPILE_WORKERS,
        help=f"Threads used to compile article bodies (default: {settings.COMPILE_WORKERS})"
    )

    parser.add_argument(
        "--excerpt-length",
        type=int,
        default=settings.SEARCH_EXCERPT_LENGTH,
        help=f"Maximum search excerpt length (default: {settings.SEARCH_EXCERPT_LENGTH})"
    )

    parser.add_argument(
        "--no-clean",
        action="store_true",
        help="Do not remove the build directory before building"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output"
    )

    args = parser.parse_args()
    settings.configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)
    start = time.perf_counter()

    print("\n" + "=" * 70)
    print("Wikipefia Content Build")
    print("=" * 70)
    print(f"\nInput: {args.content_dir}")
    print(f"Output: {args.build_dir}")
    print("=" * 70)

    if not args.content_dir.exists():
        print(f"\n✗ Error: Directory not found: {args.content_dir}")
        return 1

    # Build the manifest before touching the build directory, so a failed
    # build leaves the previous artifacts in place
    try:
        manifest = build_manifest(args.content_dir, workers=args.workers)
    except ContentIntegrityError as e:
        print("\n" + "=" * 70)
        print("CONTENT VALIDATION FAILED")
        print("=" * 70 + "\n")
        print(e.format_report())
        print(f"\nTotal errors: {len(e.issues)}")
        return 1

    if not args.no_clean and args.build_dir.exists():
        print(f"\nCleaning {args.build_dir}")
        shutil.rmtree(args.build_dir)

    write_build_output(manifest, args.build_dir)
    search = build_indexes(
        manifest,
        excerpt_length=args.excerpt_length,
        hash_length=settings.SEARCH_HASH_LENGTH,
    )
    write_indexes(search, args.build_dir)

    # Summary
    elapsed = time.perf_counter() - start
    print("\n" + "=" * 70)
    print(f"BUILD COMPLETE in {elapsed:.2f}s")
    print("=" * 70)
    print(f"  Subjects: {len(manifest.subjects)}")
    print(f"  Teachers: {len(manifest.teachers)}")
    print(f"  System articles: {len(manifest.system_articles)}")
    print(f"  Warnings: {len(manifest.warnings)}")
    print(f"  Build hash: {manifest.build_hash}")
    print(f"  Search hash: {search.meta.hash}")
    for locale, stats in search.meta.locales.items():
        print(f"    • {locale}: {stats.documents} documents, {stats.bytes} bytes")

    if args.verbose and manifest.warnings:
        print("\nWarnings:")
        for warning in manifest.warnings:
            print(f"  ⚠ {warning}")

    print(f"\nBuild location: {args.build_dir}")
    print("  • manifest.json          - Resolved content manifest")
    print("  • route-map.json         - Top-level route lookup")
    print("  • compiled/, toc/        - Article bodies and tables of contents")
    print("  • search-index-*.json    - Per-locale search indexes")
    print("=" * 70 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
