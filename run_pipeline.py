#!/usr/bin/env python3
"""
End-to-end content pipeline runner for Wikipefia.

WORKFLOW:
1. Build: validate the content tree, compile MDX, write the manifest and
   search indexes to the build directory (Ingress/build_content.py)
2. Publish: copy the search indexes into the static asset directory under
   content-hashed names (Ingress/publish_search.py)

A failed build stops the pipeline before publishing, so the previously
published indexes stay in place.

Usage:
    python run_pipeline.py [options]

Options:
    --skip-build        Only publish an existing build
    --skip-publish      Build without publishing
    --validate-only     Only validate the content tree
    --content-dir DIR   Content tree to build (default: CONTENT_DIR)
    --workers N         Threads used to compile article bodies
    --prune             Remove published indexes from earlier builds

Examples:
    # Full pipeline
    python run_pipeline.py

    # Check content before committing
    python run_pipeline.py --validate-only
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import settings


BASE_DIR = Path(__file__).resolve().parent
INGRESS_DIR = BASE_DIR / "Ingress"

# step name -> (script under Ingress/, banner title)
STEPS = {
    "validate": ("validate_content.py", "Validate content tree"),
    "build": ("build_content.py", "Build manifest and search indexes"),
    "publish": ("publish_search.py", "Publish search indexes"),
}


def plan_steps(args: argparse.Namespace) -> List[Tuple[str, List[str]]]:
    """Turn the parsed options into (step name, script arguments) pairs, in run order."""
    content = ["--content-dir", str(args.content_dir)] if args.content_dir else []
    workers = ["--workers", str(args.workers)] if args.workers else []

    if args.validate_only:
        return [("validate", content + workers)]

    plan = []
    if not args.skip_build:
        plan.append(("build", content + workers))
    if not args.skip_publish:
        plan.append(("publish", ["--prune"] if args.prune else []))
    return plan


def run_step(step: str, script_args: List[str]) -> int:
    """Run one Ingress script in a child interpreter and return its exit code."""
    script, title = STEPS[step]
    cmd = [sys.executable, str(INGRESS_DIR / script)] + script_args
    print(f"\n{'='*70}")
    print(f"STEP: {title}")
    print(f"{'='*70}")
    print(f"Running: {' '.join(cmd)}")
    print()

    returncode = subprocess.run(cmd, cwd=BASE_DIR).returncode
    if returncode == 0:
        print(f"\n✓ {title} completed successfully")
    else:
        print(f"\n✗ {title} failed with exit code {returncode}")
    return returncode


def check_prerequisites(plan: List[Tuple[str, List[str]]], content_dir: Optional[Path] = None) -> bool:
    """Check that every planned script exists, and the content tree when it is read."""
    print("Checking prerequisites...")

    checks = [((INGRESS_DIR / STEPS[step][0]).is_file(), f"{STEPS[step][0]} exists") for step, _ in plan]
    if any(step in ("validate", "build") for step, _ in plan) and content_dir is not None:
        checks.append((content_dir.is_dir(), f"Content directory exists: {content_dir}"))

    for passed, message in checks:
        print(f"  {'✓' if passed else '✗'} {message}")
    print()
    return all(passed for passed, _ in checks)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the complete Wikipefia content pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--skip-build",
        action="store_true",
        help="Skip the content build and only publish",
    )
    parser.add_argument(
        "--skip-publish",
        action="store_true",
        help="Skip publishing search indexes",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate the content tree",
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        help=f"Content tree to build (default: {settings.CONTENT_DIR})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Threads used to compile article bodies",
    )
    parser.add_argument(
        "--prune",
        action="store_true",
        help="Remove published indexes that belong to earlier builds",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    print("\n" + "="*70)
    print("Wikipefia Content Pipeline Runner")
    print("="*70)

    plan = plan_steps(args)
    if not check_prerequisites(plan, args.content_dir or settings.CONTENT_DIR):
        print("\n✗ Prerequisite check failed. Please fix the issues above.")
        return 1

    for step, script_args in plan:
        if run_step(step, script_args) != 0:
            if step == "build":
                print("\nPublished search indexes were left untouched.")
            return 1

    print("\n" + "="*70)
    print("PIPELINE COMPLETE!" if plan else "Nothing to run.")
    print("="*70 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
