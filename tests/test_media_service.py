from __future__ import annotations

import asyncio
from io import BytesIO

from PIL import Image
import pytest

from magic_meme.media.client import GenerationClient
from magic_meme.media.errors import MemeMakerError
from magic_meme.media.normalizer import image_dimensions
from magic_meme.media.payload import ImagePayload
from magic_meme.media.prompts import INTENSITY_CLAUSES, STYLE_CLAUSES, IntensityTier, MemeStyle
from magic_meme.media.providers import MockImageProvider
from magic_meme.media.service import (
    CROP_FAILED_MESSAGE,
    MISSING_IMAGE_MESSAGE,
    create_meme,
    export_meme,
    prepare_source_image,
)


def _write_photo(tmp_path, width: int, height: int, name: str = "photo.png"):
    path = tmp_path / name
    Image.new("RGB", (width, height), (240, 200, 30)).save(path, format="PNG")
    return path


def _image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), (30, 90, 160)).save(buffer, format=fmt)
    return buffer.getvalue()


def _pixels(data_url: str) -> list:
    with Image.open(BytesIO(ImagePayload.from_data_url(data_url).data)) as image:
        return list(image.convert("RGB").getdata())


def test_end_to_end_crop_then_generate(tmp_path) -> None:
    provider = MockImageProvider()
    client = GenerationClient(provider, timeout_seconds=5)

    cropped = prepare_source_image(_write_photo(tmp_path, 400, 200))
    assert image_dimensions(cropped) == (200, 200)

    result = asyncio.run(
        create_meme(client, cropped, style="Anime", intensity=50, caption="hello", description="")
    )

    assert result.success is True
    assert result.status == "succeeded"
    assert image_dimensions(result.image) == (200, 200)
    assert _pixels(result.image) == _pixels(cropped)
    assert result.mime_type == "image/png"

    instruction = provider.calls[0]["instruction"]
    assert STYLE_CLAUSES[MemeStyle.ANIME] in instruction
    assert INTENSITY_CLAUSES[IntensityTier.BALANCED] in instruction
    assert 'integrate the text "hello"' in instruction
    assert "Crucially" not in instruction


def test_prepare_source_image_accepts_uploaded_file_object() -> None:
    buffer = BytesIO()
    Image.new("RGB", (30, 90)).save(buffer, format="JPEG")
    buffer.seek(0)

    cropped = prepare_source_image(buffer, mime_type="image/jpeg")

    assert cropped.startswith("data:image/png;base64,")
    assert image_dimensions(cropped) == (30, 30)


def test_prepare_source_image_reports_one_message_for_bad_files(tmp_path) -> None:
    not_an_image = tmp_path / "notes.txt"
    not_an_image.write_text("shopping list", encoding="utf-8")

    with pytest.raises(MemeMakerError) as excinfo:
        prepare_source_image(not_an_image)
    assert str(excinfo.value) == CROP_FAILED_MESSAGE

    with pytest.raises(MemeMakerError):
        prepare_source_image(tmp_path / "missing.png")


def test_create_meme_requires_an_image() -> None:
    client = GenerationClient(MockImageProvider())

    result = asyncio.run(create_meme(client, None))

    assert result.success is False
    assert result.status == "missing_image"
    assert result.message == MISSING_IMAGE_MESSAGE


def test_create_meme_rejects_invalid_data_url() -> None:
    provider = MockImageProvider()
    client = GenerationClient(provider)

    result = asyncio.run(create_meme(client, "data:image/png;base64,"))

    assert result.success is False
    assert result.status == "invalid_image"
    assert result.message == "Generation failed: Invalid image data URL."
    assert len(provider.calls) == 0


def test_create_meme_surfaces_model_refusal() -> None:
    client = GenerationClient(MockImageProvider(refusal_text="I cannot draw that."))
    source = ImagePayload.from_bytes(_image_bytes(24, 24), "image/png").data_url

    result = asyncio.run(create_meme(client, source, style="Comical"))

    assert result.success is False
    assert result.status == "refused"
    assert result.message == (
        "Generation failed: API Error: Model returned text instead of an image: I cannot draw that."
    )
    assert result.image is None


def test_create_meme_crops_a_jpeg_and_sends_real_png() -> None:
    provider = MockImageProvider()
    client = GenerationClient(provider)
    source = ImagePayload.from_bytes(_image_bytes(60, 20, fmt="JPEG"), "image/jpeg").data_url

    result = asyncio.run(create_meme(client, source))

    assert result.success is True
    assert provider.calls[0]["mime_type"] == "image/png"
    assert provider.calls[0]["data"].startswith(b"\x89PNG")
    assert image_dimensions(result.image) == (20, 20)


def test_create_meme_rejects_data_url_that_is_not_an_image() -> None:
    provider = MockImageProvider()
    client = GenerationClient(provider)
    source = ImagePayload.from_bytes(b"bytes", "application/octet-stream").data_url

    result = asyncio.run(create_meme(client, source))

    assert result.success is False
    assert result.status == "invalid_image"
    assert result.message == f"Generation failed: {CROP_FAILED_MESSAGE}"
    assert len(provider.calls) == 0


def test_export_meme_writes_decoded_bytes(tmp_path) -> None:
    data_url = ImagePayload.from_bytes(b"meme-bytes", "image/png").data_url

    path = export_meme(data_url, tmp_path / "out" / "meme.png")

    assert path.read_bytes() == b"meme-bytes"


def test_mock_provider_keeps_a_bounded_call_record() -> None:
    provider = MockImageProvider(max_recorded_calls=2)
    image = ImagePayload.from_bytes(_image_bytes(4, 4), "image/png")

    for index in range(5):
        asyncio.run(provider.generate_content(image=image, instruction=f"call {index}"))

    assert [call["instruction"] for call in provider.calls] == ["call 3", "call 4"]
