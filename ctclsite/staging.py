"""Utilities for populating the static output tree."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config, FileType
from .errors import StaticCollectionError

logger = logging.getLogger(__name__)

JS_DIRNAME = "js"
PAGES_DIRNAME = "pages"


@dataclass
class CollectionResult:
    """Summary of copied and skipped static assets."""

    copied_paths: list[Path] = field(default_factory=list)
    skipped_paths: list[Path] = field(default_factory=list)


def collect_static_assets(config: Config) -> CollectionResult:
    """Copy scripts, classified page assets, and global static files into the output directory.

    The first failing path aborts the collection; files copied before it stay in place.
    Source trees that contain the output directory never walk into it.
    """
    result = CollectionResult()
    output_root = config.outputpath.resolve()
    _make_directory(output_root)

    if config.jspath is not None:
        _mirror_tree(config.jspath, output_root / JS_DIRNAME, output_root, result)

    _collect_page_assets(config, output_root / PAGES_DIRNAME, output_root, result)

    if config.staticpath is not None:
        if config.staticpath.resolve() == output_root:
            logger.debug("Static source %s is the output directory; nothing to copy.", output_root)
        else:
            _mirror_tree(config.staticpath, output_root, output_root, result)

    logger.info(
        "Collected %d static file(s), skipped %d.",
        len(result.copied_paths),
        len(result.skipped_paths),
    )
    return result


def _collect_page_assets(config: Config, destination_root: Path, output_root: Path, result: CollectionResult) -> None:
    source_root = config.pagepath
    _require_directory(source_root)
    _make_directory(destination_root)

    for item in _walk(source_root, output_root):
        destination = destination_root / item.relative_to(source_root)
        if item.is_dir():
            _make_directory(destination)
            continue
        kind = config.filetype(item)
        if kind is None or kind is FileType.CONFIG:
            result.skipped_paths.append(item)
            continue
        _copy_file(item, destination, result)


def _mirror_tree(source_root: Path, destination_root: Path, output_root: Path, result: CollectionResult) -> None:
    _require_directory(source_root)
    _make_directory(destination_root)
    for item in _walk(source_root, output_root):
        destination = destination_root / item.relative_to(source_root)
        if item.is_dir():
            _make_directory(destination)
        else:
            _copy_file(item, destination, result)


def _walk(source_root: Path, output_root: Path) -> list[Path]:
    """Sorted entries below ``source_root``, leaving out the output tree."""
    items: list[Path] = []
    for item in sorted(source_root.rglob("*")):
        try:
            item.resolve().relative_to(output_root)
        except ValueError:
            items.append(item)
    return items


def _require_directory(path: Path) -> None:
    if not path.is_dir():
        raise StaticCollectionError(f"Static source directory {path} not found", path=path)


def _make_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StaticCollectionError(f"Can't create directory {path}: {exc}", path=path) from exc


def _copy_file(source: Path, destination: Path, result: CollectionResult) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
    except OSError as exc:
        raise StaticCollectionError(f"Failed to copy {source} to {destination}: {exc}", path=source) from exc
    result.copied_paths.append(destination)
