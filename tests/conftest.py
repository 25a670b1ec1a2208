from __future__ import annotations

import os
from pathlib import Path

from PIL import Image
import pytest


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    Image.new("RGB", (16, 9), "white").save(tmp_path / "photo.png")
    Image.new("RGB", (40, 30), "black").save(tmp_path / "my photo.jpg")
    (tmp_path / "notes.txt").write_text("not an image", encoding="utf-8")
    return tmp_path


@pytest.fixture
def img_dir(image_dir: Path) -> str:
    """Prefix suitable for the ``imgDir`` option (concatenated verbatim)."""
    return f"{image_dir}{os.sep}"
