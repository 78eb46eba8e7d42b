#!/usr/bin/env python3
"""
Pre-generate thumbnails for raw images so first requests are cache hits.

Layout (THUMBD_RAW_DIR=raw, THUMBD_THUMB_DIR=thumbs, THUMBD_THUMB_FORMAT=png):
    raw/photo.gif      ->  thumbs/photo.gif.png
    raw/sub/cat.jpg    ->  thumbs/sub/cat.jpg.png

Usage: python -m thumbd.scripts.warm_cache [--dry-run] [name ...]
"""

import argparse
import asyncio
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.config import Settings, get_settings
from ..core.errors import NotRecognized, ThumbnailError, UnsupportedFormat
from ..core.formats import ImageFormat
from ..core.service import ThumbnailService


@dataclass
class WarmReport:
    generated: List[str] = field(default_factory=list)
    cached: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def _is_supported(name: str) -> bool:
    try:
        ImageFormat.from_filename(name)
    except UnsupportedFormat:
        return False
    return True


async def warm_cache(
    service: ThumbnailService,
    names: Optional[Iterable[str]] = None,
    dry_run: bool = False,
) -> WarmReport:
    report = WarmReport()
    candidates = list(names) if names else service.raw_store.list_files()
    suffix = f".{service.target_format.value}"
    for name in candidates:
        try:
            name = service.resolver.resolve_identity(name + suffix)
        except NotRecognized:
            report.skipped.append(name)
            continue
        if not _is_supported(name):
            report.skipped.append(name)
            continue
        if dry_run:
            spec = service.resolver.spec_for(name)
            try:
                has_raw = await asyncio.to_thread(service.raw_store.exists, service.resolver.raw_path(name))
                cached = has_raw and await asyncio.to_thread(service.cache_store.exists, service.resolver.cache_path(spec))
            except ThumbnailError as exc:
                print(f"  ✗ {name}: {exc}")
                report.failed.append(name)
                continue
            if not has_raw:
                print(f"  ✗ {name}: no raw asset")
                report.failed.append(name)
            elif cached:
                report.cached.append(name)
            else:
                print(f"  would generate {spec.cache_key}")
                report.generated.append(name)
            continue
        try:
            thumb = await service.load_thumbnail(name)
        except ThumbnailError as exc:
            print(f"  ✗ {name}: {exc}")
            report.failed.append(name)
            continue
        if thumb.generated:
            print(f"  ✓ {thumb.cache_key} ({len(thumb.content)} bytes)")
            report.generated.append(name)
        else:
            report.cached.append(name)
    return report


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    parser = argparse.ArgumentParser(description="Pre-generate cached thumbnails for raw images.")
    parser.add_argument("names", nargs="*", help="Raw file names (default: everything under the raw directory).")
    parser.add_argument("--dry-run", action="store_true", help="Preview without generating.")
    args = parser.parse_args(argv)

    settings = settings or get_settings()
    service = ThumbnailService.from_settings(settings)
    print(f"Warming {settings.THUMB_FORMAT} thumbnails from {settings.RAW_DIR} into {settings.THUMB_DIR}")

    report = asyncio.run(warm_cache(service, args.names, dry_run=args.dry_run))
    verb = "Would generate" if args.dry_run else "Generated"
    print(
        f"{verb} {len(report.generated)}, already cached {len(report.cached)}, "
        f"skipped {len(report.skipped)}, failed {len(report.failed)}."
    )
    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
