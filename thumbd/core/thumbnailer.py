"""
Decode -> resize -> encode pipeline built on Pillow.
"""

from __future__ import annotations

import struct
import threading
from io import BytesIO

from PIL import Image

from .errors import DecodeError, EncodeError
from .formats import ImageFormat
from .paths import ThumbnailSpec


class ThumbnailGenerator:
    """Produces thumbnail bytes from raw source bytes.

    Holds no per-call state; ``generated`` counts completed pipeline runs and
    is the only thing shared between threads.
    """

    resample = Image.Resampling.LANCZOS

    def __init__(self) -> None:
        self._count_lock = threading.Lock()
        self._generated = 0

    @property
    def generated(self) -> int:
        with self._count_lock:
            return self._generated

    def generate(self, raw_bytes: bytes, source_format: ImageFormat, spec: ThumbnailSpec) -> bytes:
        im = self.decode(raw_bytes, source_format, key=spec.cache_key)
        im = self.resize(im, spec.max_width, spec.max_height)
        data = self.encode(im, spec.target_format, key=spec.cache_key)
        with self._count_lock:
            self._generated += 1
        return data

    def decode(self, raw_bytes: bytes, source_format: ImageFormat, key: str | None = None) -> Image.Image:
        try:
            im = Image.open(BytesIO(raw_bytes), formats=[source_format.pil_format])
            # First frame only for animated sources
            im.seek(0)
            im.load()
        except (OSError, ValueError, EOFError, SyntaxError, struct.error, Image.DecompressionBombError) as exc:
            raise DecodeError(f"cannot decode {source_format.value} image: {exc}", key=key) from exc

        if im.mode not in ("RGB", "RGBA", "L", "LA"):
            im = im.convert("RGBA" if _has_alpha(im) else "RGB")
        return im

    def resize(self, im: Image.Image, max_width: int, max_height: int) -> Image.Image:
        """Fit inside the box keeping aspect ratio; never upscales."""
        im = im.copy()
        im.thumbnail((max_width, max_height), self.resample, reducing_gap=None)
        return im

    def encode(self, im: Image.Image, target_format: ImageFormat, key: str | None = None) -> bytes:
        if not target_format.supports_alpha and im.mode not in ("RGB", "L"):
            im = im.convert("RGB")
        out = BytesIO()
        try:
            im.save(out, target_format.pil_format, **target_format.save_options)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"cannot encode {target_format.value}: {exc}", key=key) from exc
        return out.getvalue()


def _has_alpha(im: Image.Image) -> bool:
    return im.mode in ("RGBA", "LA", "PA") or "transparency" in im.info
