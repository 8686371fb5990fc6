"""WebP 编码实现，基于 Pillow。"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from webp_mirror.core.config import WEBP_METHOD
from webp_mirror.core.exceptions import WebpMirrorError

LOGGER = logging.getLogger(__name__)


class CodecError(WebpMirrorError):
    """输入图片损坏或格式不受支持。"""


class WebPTranscoder:
    """负责将单张图片编码为 WebP，或原样复制已是 WebP 的文件。"""

    def __init__(self, method: int = WEBP_METHOD) -> None:
        self.method = method

    def encode(self, input_path: Path, output_path: Path, quality: int) -> int:
        """将图片编码为 WebP 并写入 output_path，返回写入的字节数。"""

        try:
            with Image.open(input_path) as img:
                img.load()
                prepared = _normalize_mode(ImageOps.exif_transpose(img))
                prepared.save(output_path, format="WEBP", quality=quality, method=self.method)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            LOGGER.debug("无法编码图像文件 %s: %s", input_path, exc)
            raise CodecError(f"无法编码图像: {input_path.name}: {exc}") from exc

        return output_path.stat().st_size

    def copy(self, input_path: Path, output_path: Path) -> None:
        """逐字节复制文件。"""

        shutil.copyfile(input_path, output_path)


def _normalize_mode(img: Image.Image) -> Image.Image:
    """将图像转换为 WebP 可写入的模式，保留透明通道。"""

    if img.mode in {"RGB", "RGBA"}:
        return img

    if img.mode in {"LA", "PA"} or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")

    # P / CMYK / L / I;16 等其他模式
    return img.convert("RGB")
