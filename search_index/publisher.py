"""
Search index publisher.

Copies the built indexes into the static asset root under content-hashed
names:
    <build_dir>/search-index-<locale>.json -> <public_dir>/index-<locale>-<hash>.json
    <build_dir>/search-meta.json           -> <public_dir>/meta.json

Every file is written to a temporary sibling and moved into place with
``os.replace``, so readers never see a partially written index. A missing
build directory is the fresh-checkout case: nothing is published.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .indexer import INDEX_FILENAME, META_FILENAME, content_hash

logger = logging.getLogger(__name__)

PUBLISHED_META = "meta.json"
PUBLISHED_INDEX = "index-{locale}-{hash}.json"
PUBLISHED_INDEX_RE = re.compile(r"^index-(?P<locale>[a-z]+)-(?P<hash>[0-9a-f]+)\.json$")


class PublishSkipped(Exception):
    """Reason a publish run did nothing. Logged, never raised to callers."""


class IndexHashMismatch(ValueError):
    """The built indexes do not hash to the value recorded in the meta."""


@dataclass(frozen=True)
class PublishResult:
    hash: str
    files: Tuple[Path, ...]
    removed: Tuple[Path, ...] = ()


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def _read_meta(build_dir: Path) -> dict:
    if not build_dir.is_dir():
        raise PublishSkipped(f"Build directory {build_dir} does not exist")
    meta_path = build_dir / META_FILENAME
    if not meta_path.is_file():
        raise PublishSkipped(f"No {META_FILENAME} in {build_dir}")
    return json.loads(meta_path.read_text(encoding="utf-8"))


def publish(build_dir: Path, public_dir: Path, prune: bool = False) -> Optional[PublishResult]:
    """Publish the built search indexes.

    Args:
        build_dir: Directory holding ``search-meta.json`` and the indexes
        public_dir: Static asset directory to publish into
        prune: Remove published indexes that belong to other hashes

    Returns:
        PublishResult, or None when there is nothing to publish

    Raises:
        FileNotFoundError: If the meta lists a locale whose index is missing
        IndexHashMismatch: If the indexes do not match the hash in the meta
    """
    build_dir = Path(build_dir)
    public_dir = Path(public_dir)
    try:
        meta = _read_meta(build_dir)
    except PublishSkipped as reason:
        logger.info("Skipping search publish: %s", reason)
        return None

    expected = meta["hash"]
    indexes: Dict[str, bytes] = {}
    for locale in meta.get("locales", {}):
        source = build_dir / INDEX_FILENAME.format(locale=locale)
        if not source.is_file():
            raise FileNotFoundError(f"Search index for locale '{locale}' is missing: {source}")
        indexes[locale] = source.read_bytes()

    # a published name must always point at the bytes it was hashed from
    actual = content_hash(indexes, length=len(expected))
    if actual != expected:
        raise IndexHashMismatch(
            f"Indexes in {build_dir} hash to {actual}, but {META_FILENAME} records {expected}"
        )

    written: List[Path] = []
    for locale, data in indexes.items():
        target = public_dir / PUBLISHED_INDEX.format(locale=locale, hash=expected)
        atomic_write(target, data)
        written.append(target)

    # meta last, so it never points at an index that is not in place yet
    meta_target = public_dir / PUBLISHED_META
    atomic_write(meta_target, (build_dir / META_FILENAME).read_bytes())
    written.append(meta_target)

    removed: List[Path] = []
    if prune:
        removed = prune_stale(public_dir, expected)

    logger.info("Published %d search file(s) with hash %s to %s", len(written), expected, public_dir)
    return PublishResult(hash=expected, files=tuple(written), removed=tuple(removed))


def prune_stale(public_dir: Path, current_hash: str) -> List[Path]:
    """Delete ``index-*-<hash>.json`` files whose hash is not ``current_hash``."""
    removed = []
    for path in sorted(Path(public_dir).glob("index-*.json")):
        match = PUBLISHED_INDEX_RE.match(path.name)
        if match and match.group("hash") != current_hash:
            path.unlink()
            removed.append(path)
    if removed:
        logger.info("Pruned %d stale search index file(s)", len(removed))
    return removed
