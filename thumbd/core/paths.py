"""
Mapping between request paths, raw source files and cached thumbnails.

Pure functions of their inputs; nothing in here touches the filesystem.
"""

import posixpath
from dataclasses import dataclass
from pathlib import Path

from .errors import NotRecognized
from .formats import ImageFormat

# Raw filename including its own extension, e.g. "photo.gif".
ImageIdentity = str


@dataclass(frozen=True)
class ThumbnailSpec:
    identity: ImageIdentity
    target_format: ImageFormat
    max_width: int
    max_height: int

    @property
    def cache_key(self) -> str:
        return f"{self.identity}.{self.target_format.value}"

    @property
    def source_format(self) -> ImageFormat:
        return ImageFormat.from_filename(self.identity)


def _is_safe_identity(identity: str) -> bool:
    if not identity or "\x00" in identity or "\\" in identity:
        return False
    if identity.startswith("/"):
        return False
    cleaned = posixpath.normpath(identity)
    if cleaned in (".", "..") or cleaned.startswith("../"):
        return False
    return cleaned == identity


class PathResolver:
    """Derives raw and cache locations for a configured target format."""

    def __init__(
        self,
        raw_dir: str | Path,
        thumb_dir: str | Path,
        target_format: ImageFormat,
        max_width: int,
        max_height: int,
    ):
        self.raw_dir = Path(raw_dir)
        self.thumb_dir = Path(thumb_dir)
        self.target_format = target_format
        self.max_width = max_width
        self.max_height = max_height

    def resolve_identity(self, request_path: str, target_format: ImageFormat | None = None) -> ImageIdentity:
        fmt = target_format or self.target_format
        suffix = f".{fmt.value}"
        if not request_path.endswith(suffix):
            raise NotRecognized(f"{request_path!r} does not end with {suffix!r}")
        identity = request_path[: -len(suffix)]
        if not _is_safe_identity(identity):
            raise NotRecognized(f"{request_path!r} does not name a file inside the raw directory")
        return identity

    def spec_for(self, identity: ImageIdentity) -> ThumbnailSpec:
        return ThumbnailSpec(
            identity=identity,
            target_format=self.target_format,
            max_width=self.max_width,
            max_height=self.max_height,
        )

    def raw_path(self, identity: ImageIdentity) -> Path:
        return self.raw_dir / identity

    def cache_path(self, spec: ThumbnailSpec) -> Path:
        return self.thumb_dir / spec.cache_key
