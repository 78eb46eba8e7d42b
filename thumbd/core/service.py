"""
Request-to-artifact pipeline: identify, check raw, check cache, generate.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .artifact_store import ArtifactStore
from .config import Settings
from .coordinator import GenerationCoordinator
from .errors import RawAssetMissing, ThumbnailError
from .formats import ImageFormat
from .paths import ImageIdentity, PathResolver, ThumbnailSpec
from .thumbnailer import ThumbnailGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thumbnail:
    content: bytes
    media_type: str
    cache_key: str
    generated: bool = False


class ThumbnailService:
    def __init__(
        self,
        resolver: PathResolver,
        raw_store: ArtifactStore,
        cache_store: ArtifactStore,
        generator: ThumbnailGenerator | None = None,
        coordinator: GenerationCoordinator | None = None,
    ):
        self.resolver = resolver
        self.raw_store = raw_store
        self.cache_store = cache_store
        self.generator = generator or ThumbnailGenerator()
        self.coordinator = coordinator or GenerationCoordinator()

    @classmethod
    def from_settings(cls, settings: Settings, generator: ThumbnailGenerator | None = None) -> "ThumbnailService":
        resolver = PathResolver(
            raw_dir=settings.RAW_DIR,
            thumb_dir=settings.THUMB_DIR,
            target_format=ImageFormat.from_extension(settings.THUMB_FORMAT),
            max_width=settings.THUMB_WIDTH,
            max_height=settings.THUMB_HEIGHT,
        )
        return cls(
            resolver,
            raw_store=ArtifactStore(settings.RAW_DIR),
            cache_store=ArtifactStore(settings.THUMB_DIR),
            generator=generator,
        )

    @property
    def target_format(self) -> ImageFormat:
        return self.resolver.target_format

    async def get(self, request_path: str) -> Thumbnail:
        """Serve ``request_path`` (leading slash stripped) from cache or by generating it."""
        identity = self.resolver.resolve_identity(request_path.removeprefix("/"))
        return await self.load_thumbnail(identity)

    async def load_thumbnail(self, identity: ImageIdentity) -> Thumbnail:
        spec = self.resolver.spec_for(identity)
        raw_path = self.resolver.raw_path(identity)
        cache_path = self.resolver.cache_path(spec)

        with _keyed(spec.cache_key):
            if not await asyncio.to_thread(self.raw_store.exists, raw_path):
                raise RawAssetMissing(f"no raw asset for {identity!r}", key=spec.cache_key)

            if await asyncio.to_thread(self.cache_store.exists, cache_path):
                content = await asyncio.to_thread(self.cache_store.read, cache_path)
                return Thumbnail(content, spec.target_format.media_type, spec.cache_key)

        async def produce() -> tuple[bytes, bool]:
            return await asyncio.to_thread(self._produce, spec)

        content, generated = await self.coordinator.run_once(spec.cache_key, produce)
        return Thumbnail(content, spec.target_format.media_type, spec.cache_key, generated=generated)

    def _produce(self, spec: ThumbnailSpec) -> tuple[bytes, bool]:
        with _keyed(spec.cache_key):
            cache_path = self.resolver.cache_path(spec)
            # A peer may have finished between our cache check and entering the coordinator.
            if self.cache_store.exists(cache_path):
                return self.cache_store.read(cache_path), False

            raw = self.raw_store.read(self.resolver.raw_path(spec.identity))
            content = self.generator.generate(raw, spec.source_format, spec)
            self.cache_store.write_atomic(cache_path, content)
        logger.info("[thumbnails] generated %s (%d bytes)", spec.cache_key, len(content))
        return content, True


@contextmanager
def _keyed(key: str) -> Iterator[None]:
    """Attach ``key`` to pipeline errors raised without one."""
    try:
        yield
    except ThumbnailError as exc:
        if exc.key is None:
            exc.key = key
        raise
