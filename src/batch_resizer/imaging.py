"""
Thin Pillow layer used by the resizers.

Defines:
    decode(path) -> Image.Image
    target_size(size, scale) -> (width, height)
    resample(img, width, height, resample) -> Image.Image
    encode(img, fmt, quality) -> bytes
"""
import io

from PIL import Image

RESAMPLE_CHOICES = ["nearest", "bilinear", "bicubic", "lanczos"]


def get_resample_filter(name: str) -> Image.Resampling:
    """
    Map resample name to PIL constant.
    """
    return {
        "nearest": Image.Resampling.NEAREST,
        "bilinear": Image.Resampling.BILINEAR,
        "bicubic": Image.Resampling.BICUBIC,
        "lanczos": Image.Resampling.LANCZOS,
    }[name]


def decode(path: str) -> Image.Image:
    """
    Load an image file fully into memory as RGB.
    """
    with Image.open(path) as img:
        # JPEG has no alpha or palette
        return img.convert("RGB")


def target_size(size: tuple[int, int], scale: float) -> tuple[int, int]:
    # int() truncates toward zero; a 0 axis is left for Pillow to reject
    width, height = size
    return int(width * scale), int(height * scale)


def resample(
    img: Image.Image, width: int, height: int, resample: Image.Resampling
) -> Image.Image:
    return img.resize((width, height), resample)


def encode(img: Image.Image, fmt: str = "JPEG", quality: int = 100) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt, quality=quality)
    return buf.getvalue()
