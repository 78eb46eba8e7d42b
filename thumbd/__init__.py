"""thumbd: lazily generated, disk-cached image thumbnails over HTTP."""

__version__ = "0.1.0"
