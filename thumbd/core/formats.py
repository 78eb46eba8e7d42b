"""Closed set of image formats the service decodes and encodes."""

from enum import Enum
from typing import Any, Dict

from .errors import UnsupportedFormat


class ImageFormat(str, Enum):
    GIF = "gif"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"

    @classmethod
    def from_extension(cls, ext: str) -> "ImageFormat":
        """Map a file extension (with or without the dot) to a format."""
        normalized = (ext or "").strip().lower().lstrip(".")
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormat(f"unsupported image format: {ext!r}") from None

    @classmethod
    def from_filename(cls, name: str) -> "ImageFormat":
        _, dot, ext = name.rpartition(".")
        if not dot:
            raise UnsupportedFormat(f"no extension on {name!r}")
        return cls.from_extension(ext)

    @property
    def pil_format(self) -> str:
        return _CODECS[self]["pil"]

    @property
    def save_options(self) -> Dict[str, Any]:
        return dict(_CODECS[self]["save"])

    @property
    def supports_alpha(self) -> bool:
        return bool(_CODECS[self]["alpha"])

    @property
    def media_type(self) -> str:
        # Literal extension, not the registered MIME type (image/jpg, not image/jpeg).
        return f"image/{self.value}"


# Pillow decoder/encoder name and save parameters per format.
_CODECS: Dict[ImageFormat, Dict[str, Any]] = {
    ImageFormat.GIF: {"pil": "GIF", "save": {}, "alpha": False},
    ImageFormat.PNG: {"pil": "PNG", "save": {"optimize": False}, "alpha": True},
    ImageFormat.JPG: {"pil": "JPEG", "save": {"quality": 85}, "alpha": False},
    ImageFormat.JPEG: {"pil": "JPEG", "save": {"quality": 85}, "alpha": False},
}
