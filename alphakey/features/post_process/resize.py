"""
輸出後處理模組

去背完成後的尺寸調整與編碼。透明處理一律在縮放之前完成，避免背景色滲入邊緣。
"""

import io
import logging
from enum import StrEnum

from PIL import Image, ImageOps


logger = logging.getLogger(__name__)

# 常數定義
NEAREST_MAX_SIZE = 64  # 輸出兩邊都 ≤ 64 時用最近鄰（保留像素風格）
JPEG_QUALITY = 90


class ResizeMode(StrEnum):
    """縮放模式"""

    CROP = "crop"  # 置中裁切填滿
    STRETCH = "stretch"  # 直接拉伸
    LETTERBOX = "letterbox"  # 等比縮放並補邊
    CONTAIN = "contain"  # 先裁掉透明邊再等比縮放補邊


class OutputFormat(StrEnum):
    """輸出格式"""

    PNG = "png"
    JPG = "jpg"
    WEBP = "webp"

    @property
    def supports_alpha(self) -> bool:
        return self != OutputFormat.JPG

    @property
    def mime_type(self) -> str:
        return {
            OutputFormat.PNG: "image/png",
            OutputFormat.JPG: "image/jpeg",
            OutputFormat.WEBP: "image/webp",
        }[self]


def select_resample(width: int, height: int) -> Image.Resampling:
    """小尺寸 sprite 用最近鄰，其餘用 Lanczos"""
    if width <= NEAREST_MAX_SIZE and height <= NEAREST_MAX_SIZE:
        return Image.Resampling.NEAREST
    return Image.Resampling.LANCZOS


def _letterbox(
    image: Image.Image,
    size: tuple[int, int],
    resample: Image.Resampling,
    *,
    transparent: bool,
) -> Image.Image:
    fitted = ImageOps.contain(image, size, method=resample)
    if transparent:
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        fitted = fitted.convert("RGBA")
    else:
        canvas = Image.new("RGB", size, (0, 0, 0))
        fitted = fitted.convert("RGB")

    offset = ((size[0] - fitted.width) // 2, (size[1] - fitted.height) // 2)
    canvas.paste(fitted, offset)
    return canvas


def trim_transparent(image: Image.Image) -> Image.Image:
    """裁掉完全透明的外框；全透明時原樣返回"""
    if image.mode != "RGBA":
        return image
    bbox = image.getchannel("A").getbbox()
    if bbox is None:
        return image
    return image.crop(bbox)


def apply_resize(
    image: Image.Image,
    width: int,
    height: int,
    mode: ResizeMode | str = ResizeMode.CROP,
    *,
    has_transparency: bool = False,
    output_format: OutputFormat | str = OutputFormat.PNG,
) -> Image.Image:
    """
    依模式調整尺寸

    Args:
        image: 輸入影像
        width: 目標寬度
        height: 目標高度
        mode: 縮放模式
        has_transparency: 是否已套用透明（決定 contain 是否裁切及其補邊顏色）
        output_format: 輸出格式（letterbox 補邊：支援 alpha 時透明，否則黑色）

    Returns:
        調整後的影像（尺寸恰為 width x height）
    """
    mode = ResizeMode(mode)
    output_format = OutputFormat(output_format)
    size = (width, height)
    resample = select_resample(width, height)

    logger.debug("Resize: %s -> %dx%d (%s)", image.size, width, height, mode.value)

    if mode == ResizeMode.STRETCH:
        return image.resize(size, resample)

    if mode == ResizeMode.LETTERBOX:
        return _letterbox(
            image, size, resample, transparent=output_format.supports_alpha
        )

    if mode == ResizeMode.CONTAIN:
        if has_transparency:
            image = trim_transparent(image)
        return _letterbox(image, size, resample, transparent=has_transparency)

    return ImageOps.fit(image, size, method=resample, centering=(0.5, 0.5))


def encode_image(
    image: Image.Image,
    output_format: OutputFormat | str,
    quality: int = JPEG_QUALITY,
) -> bytes:
    """
    編碼為位元組

    Args:
        image: 輸入影像
        output_format: 輸出格式
        quality: JPEG/WebP 品質

    Returns:
        編碼後資料
    """
    output_format = OutputFormat(output_format)
    buffer = io.BytesIO()

    if output_format == OutputFormat.PNG:
        image.save(buffer, "PNG", optimize=True)
    elif output_format == OutputFormat.JPG:
        image.convert("RGB").save(buffer, "JPEG", quality=quality)
    else:
        image.save(buffer, "WEBP", quality=quality)

    return buffer.getvalue()
