"""Write a built manifest and its compiled bodies to the build directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Tuple

from mdx import CompiledDocument

from .model import Manifest

logger = logging.getLogger(__name__)


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def _compiled_bodies(manifest: Manifest) -> Iterable[Tuple[str, str, CompiledDocument]]:
    """Yield (compiled path, toc path, document) for every localized body."""
    for article in manifest.iter_articles():
        data = article.to_dict()
        for locale, document in article.documents.items():
            yield data["compiledPath"].format(locale=locale), data["tocPath"].format(locale=locale), document
    for article in manifest.system_articles.values():
        data = article.to_dict()
        for locale, document in article.documents.items():
            yield data["compiledPath"].format(locale=locale), data["tocPath"].format(locale=locale), document


def write_build_output(manifest: Manifest, build_dir: Path) -> Path:
    """Write ``manifest.json``, ``route-map.json`` and every compiled body.

    Args:
        manifest: Built manifest
        build_dir: Output directory (created if missing)

    Returns:
        Path of the written ``manifest.json``
    """
    build_dir = Path(build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)

    count = 0
    for compiled_path, toc_path, document in _compiled_bodies(manifest):
        html_path = build_dir / compiled_path
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(document.html, encoding="utf-8")
        write_json(build_dir / toc_path, [entry.to_dict() for entry in document.toc])
        count += 1

    manifest_path = build_dir / "manifest.json"
    write_json(manifest_path, manifest.to_dict())
    write_json(
        build_dir / "route-map.json",
        {slug: {"type": kind} for slug, kind in manifest.route_map.items()},
    )
    logger.info("Wrote manifest %s and %d compiled body(ies) to %s", manifest.build_hash, count, build_dir)
    return manifest_path
