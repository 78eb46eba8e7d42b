from io import BytesIO

import pytest
from PIL import Image

from thumbd.core.errors import DecodeError, UnsupportedFormat
from thumbd.core.formats import ImageFormat
from thumbd.core.paths import ThumbnailSpec
from thumbd.core.thumbnailer import ThumbnailGenerator

from .conftest import make_image_bytes

SOURCES = {
    "gif": ((480, 270), "P"),
    "png": ((300, 400), "RGBA"),
    "jpg": ((640, 480), "RGB"),
    "jpeg": ((400, 400), "RGB"),
}


def spec(identity: str, target: str, width: int = 200, height: int = 200) -> ThumbnailSpec:
    return ThumbnailSpec(identity, ImageFormat.from_extension(target), width, height)


@pytest.mark.parametrize("target", ["gif", "png", "jpg", "jpeg"])
@pytest.mark.parametrize("source", ["gif", "png", "jpg", "jpeg"])
def test_output_fits_bounding_box(source, target):
    size, mode = SOURCES[source]
    raw = make_image_bytes(size, mode, source)
    out = ThumbnailGenerator().generate(raw, ImageFormat.from_extension(source), spec(f"img.{source}", target))

    im = Image.open(BytesIO(out))
    assert im.format == ImageFormat.from_extension(target).pil_format
    assert im.width <= 200 and im.height <= 200
    assert im.width == 200 or im.height == 200


def test_aspect_ratio_is_preserved():
    raw = make_image_bytes((640, 480), "RGB", "jpg")
    out = ThumbnailGenerator().generate(raw, ImageFormat.JPG, spec("a.jpg", "png", 300, 250))
    assert Image.open(BytesIO(out)).size == (300, 225)


def test_never_upscales():
    raw = make_image_bytes((50, 40), "RGB", "png")
    out = ThumbnailGenerator().generate(raw, ImageFormat.PNG, spec("tiny.png", "png"))
    assert Image.open(BytesIO(out)).size == (50, 40)


def test_generation_is_deterministic():
    raw = make_image_bytes((480, 270), "P", "gif")
    generator = ThumbnailGenerator()
    first = generator.generate(raw, ImageFormat.GIF, spec("a.gif", "png"))
    second = generator.generate(raw, ImageFormat.GIF, spec("a.gif", "png"))
    assert first == second


def test_counts_pipeline_runs():
    raw = make_image_bytes((100, 100), "RGB", "png")
    generator = ThumbnailGenerator()
    assert generator.generated == 0
    generator.generate(raw, ImageFormat.PNG, spec("a.png", "png"))
    generator.generate(raw, ImageFormat.PNG, spec("a.png", "jpg"))
    assert generator.generated == 2


def test_format_is_taken_from_extension_not_content():
    png_bytes = make_image_bytes((100, 100), "RGB", "png")
    with pytest.raises(DecodeError):
        ThumbnailGenerator().generate(png_bytes, ImageFormat.GIF, spec("liar.gif", "png"))


def test_garbage_input_is_decode_error():
    generator = ThumbnailGenerator()
    with pytest.raises(DecodeError) as excinfo:
        generator.generate(b"definitely not an image", ImageFormat.PNG, spec("bad.png", "png"))
    assert excinfo.value.key == "bad.png.png"
    assert generator.generated == 0


def test_truncated_input_is_decode_error():
    raw = make_image_bytes((300, 300), "RGB", "png")
    with pytest.raises(DecodeError):
        ThumbnailGenerator().generate(raw[: len(raw) // 2], ImageFormat.PNG, spec("cut.png", "png"))


def test_unsupported_source_extension():
    with pytest.raises(UnsupportedFormat):
        ImageFormat.from_filename("picture.webp")
