"""Error taxonomy for the thumbnail pipeline.

Two families: ``AssetNotFound`` (served as 404, indistinguishable to the
client) and ``GenerationError`` (served as 500 and logged).
"""

from typing import Optional


class ThumbnailError(Exception):
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class AssetNotFound(ThumbnailError):
    pass


class NotRecognized(AssetNotFound):
    """Request path does not name a servable thumbnail."""


class RawAssetMissing(AssetNotFound):
    """Source image is not present in the raw directory."""


class GenerationError(ThumbnailError):
    pass


class UnsupportedFormat(GenerationError):
    pass


class DecodeError(GenerationError):
    pass


class EncodeError(GenerationError):
    pass


class StorageError(GenerationError):
    """Filesystem failure other than not-found."""
