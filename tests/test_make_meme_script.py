from __future__ import annotations

import importlib.util
from pathlib import Path
import sys

from PIL import Image
import pytest

from magic_meme.core.config import get_settings
from magic_meme.media.client import get_generation_client
from magic_meme.media.providers import reset_image_provider_cache


SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "make_meme.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("make_meme_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def _clear_caches() -> None:
    get_settings.cache_clear()
    reset_image_provider_cache()
    get_generation_client.cache_clear()


def test_make_meme_script_writes_output(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("IMAGE_PROVIDER", "mock")
    _clear_caches()
    photo = tmp_path / "photo.png"
    Image.new("RGB", (120, 80), (200, 50, 50)).save(photo, format="PNG")
    output = tmp_path / "meme.png"
    monkeypatch.setattr(
        sys,
        "argv",
        ["make_meme.py", str(photo), "--style", "Anime", "--caption", "hello", "--output", str(output)],
    )

    try:
        _load_script().main()
    finally:
        _clear_caches()

    with Image.open(output) as generated:
        assert generated.size == (80, 80)
    assert "status=succeeded" in capsys.readouterr().out


def test_make_meme_script_rejects_out_of_range_intensity(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["make_meme.py", str(tmp_path / "photo.png"), "--intensity", "150"])

    with pytest.raises(SystemExit) as excinfo:
        _load_script().main()

    assert excinfo.value.code == 2
    stderr = capsys.readouterr().err
    assert "usage:" in stderr
    assert "--intensity must be between 0 and 100" in stderr
