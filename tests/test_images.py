"""Tests for image encoding."""

import base64
import io

import pytest
from PIL import Image

from chessvision.core.images import JPEG_MAGIC, encode_image
from chessvision.core.models import ImagePayload


def decode(payload: ImagePayload) -> bytes:
    return base64.b64decode(payload.data)


def decoded_size(payload: ImagePayload) -> tuple[int, int]:
    with Image.open(io.BytesIO(decode(payload))) as image:
        return image.size


class TestEncodeImage:
    """Tests for encode_image."""

    def test_jpeg_bytes_pass_through(self, sample_jpeg_bytes):
        payload = encode_image(sample_jpeg_bytes)

        assert payload.mime_type == "image/jpeg"
        assert decode(payload) == sample_jpeg_bytes

    def test_jpeg_path_pass_through(self, tmp_path, sample_jpeg_bytes):
        path = tmp_path / "board.jpg"
        path.write_bytes(sample_jpeg_bytes)

        assert decode(encode_image(path)) == sample_jpeg_bytes
        assert decode(encode_image(str(path))) == sample_jpeg_bytes

    def test_png_is_reencoded_as_jpeg(self, tmp_path, sample_png_bytes):
        path = tmp_path / "board.png"
        path.write_bytes(sample_png_bytes)

        payload = encode_image(path)

        assert decode(payload).startswith(JPEG_MAGIC)
        assert decoded_size(payload) == (160, 160)

    def test_numpy_array(self, sample_chessboard_image):
        payload = encode_image(sample_chessboard_image)

        assert decode(payload).startswith(JPEG_MAGIC)
        assert decoded_size(payload) == (160, 160)

    def test_rgba_image_is_flattened(self):
        image = Image.new("RGBA", (40, 30), (10, 20, 30, 128))

        payload = encode_image(image)

        with Image.open(io.BytesIO(decode(payload))) as decoded:
            assert decoded.mode == "RGB"
            assert decoded.size == (40, 30)

    def test_downscale_keeps_aspect_ratio(self):
        image = Image.new("RGB", (400, 200), (255, 255, 255))

        payload = encode_image(image, max_size=100)

        assert decoded_size(payload) == (100, 50)

    def test_large_jpeg_is_downscaled(self, sample_jpeg_bytes):
        payload = encode_image(sample_jpeg_bytes, max_size=80)

        assert decode(payload) != sample_jpeg_bytes
        assert decoded_size(payload) == (80, 80)

    def test_small_jpeg_is_not_touched_by_max_size(self, sample_jpeg_bytes):
        payload = encode_image(sample_jpeg_bytes, max_size=1000)
        assert decode(payload) == sample_jpeg_bytes

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            encode_image(tmp_path / "nope.jpg")

    def test_garbage_bytes(self):
        with pytest.raises(OSError):
            encode_image(b"definitely not an image")


class TestImagePayload:

    def test_data_uri(self):
        payload = ImagePayload("QUJD")
        assert payload.data_uri == "data:image/jpeg;base64,QUJD"
