# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def write_image(path: Path, size: tuple[int, int] = (40, 30), mode: str = "RGB") -> Path:
    """Write a gradient image of the given (width, height); format follows the suffix."""
    w, h = size
    arr = np.zeros((h, w, 3), dtype=np.uint8)
    arr[..., 0] = np.linspace(0, 255, w, dtype=np.uint8)[None, :]
    arr[..., 1] = np.linspace(0, 255, h, dtype=np.uint8)[:, None]
    img = Image.fromarray(arr)
    if mode != "RGB":
        img = img.convert(mode)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path


@pytest.fixture
def src_tree(tmp_path: Path) -> Path:
    """
    src/
      a.png           40x30
      b.jpg           41x31
      readme.txt
      e.gif
      sub/c.jpeg      50x20
      sub/deep/d.png  33x17 RGBA
    """
    root = tmp_path / "src"
    write_image(root / "a.png", (40, 30))
    write_image(root / "b.jpg", (41, 31))
    write_image(root / "e.gif", (10, 10), mode="P")
    write_image(root / "sub" / "c.jpeg", (50, 20))
    write_image(root / "sub" / "deep" / "d.png", (33, 17), mode="RGBA")
    (root / "readme.txt").write_text("not an image")
    return root


@pytest.fixture
def image_count() -> int:
    # Recognized images in src_tree
    return 4


@pytest.fixture
def colliding_tree(tmp_path: Path) -> Path:
    """Two sources with the same stem and different extensions, plus one unique."""
    root = tmp_path / "dup"
    write_image(root / "photo.png", (20, 20))
    write_image(root / "nested" / "photo.jpg", (60, 40))
    write_image(root / "other.jpeg", (30, 30))
    return root


@pytest.fixture
def corrupt_tree(src_tree: Path) -> Path:
    (src_tree / "broken.jpg").write_bytes(b"this is not a jpeg")
    return src_tree


@pytest.fixture
def dst_dir(tmp_path: Path) -> Path:
    # Not created; the resizers must create it
    return tmp_path / "out" / "resized"


@pytest.fixture
def make_image():
    return write_image
