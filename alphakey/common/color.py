"""
色彩工具模組

提供 hex 解析、RGB→HSV 轉換與環狀色相距離計算
"""

import re

import numpy as np

from .errors import ColorParseError


# 常數定義
HUE_CIRCLE = 360.0
PIXEL_MAX_VALUE = 255

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """
    解析 hex 色碼

    支援 `#RRGGBB`、`RRGGBB` 及三位數簡寫 `#RGB`

    Args:
        value: hex 色碼字串

    Returns:
        (r, g, b) 三個 0-255 整數

    Raises:
        ColorParseError: 格式不正確
    """
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        msg = f"Invalid hex color: {value!r}"
        raise ColorParseError(msg)

    digits = match.group(1)
    if len(digits) == 3:  # noqa: PLR2004
        digits = "".join(c * 2 for c in digits)

    num = int(digits, 16)
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF


def format_hex_color(r: int, g: int, b: int) -> str:
    """將 RGB 格式化為大寫 `#RRGGBB`"""
    return f"#{r:02X}{g:02X}{b:02X}"


def rgb_to_hsv(r: float, g: float, b: float) -> tuple[float, float, float]:
    """
    RGB 轉 HSV

    Args:
        r: 紅色通道 (0-255)
        g: 綠色通道 (0-255)
        b: 藍色通道 (0-255)

    Returns:
        (h, s, v)，h 為 0-360 度，s/v 為 0-100 百分比
    """
    r_norm = r / PIXEL_MAX_VALUE
    g_norm = g / PIXEL_MAX_VALUE
    b_norm = b / PIXEL_MAX_VALUE

    c_max = max(r_norm, g_norm, b_norm)
    c_min = min(r_norm, g_norm, b_norm)
    delta = c_max - c_min

    hue = 0.0
    if delta != 0:
        if c_max == r_norm:
            hue = 60 * (((g_norm - b_norm) / delta) % 6)
        elif c_max == g_norm:
            hue = 60 * (((b_norm - r_norm) / delta) + 2)
        else:
            hue = 60 * (((r_norm - g_norm) / delta) + 4)
    if hue < 0:
        hue += HUE_CIRCLE

    saturation = 0.0 if c_max == 0 else (delta / c_max) * 100
    value = c_max * 100

    return hue, saturation, value


def hue_distance(h1: float, h2: float) -> float:
    """環狀色相距離：min(|Δ|, 360 - |Δ|)"""
    diff = abs(h1 - h2) % HUE_CIRCLE
    return min(diff, HUE_CIRCLE - diff)


def rgb_distance(rgb: np.ndarray, key: tuple[int, int, int]) -> np.ndarray:
    """
    計算每個像素與 key 色的歐氏 RGB 距離

    Args:
        rgb: RGB 陣列 (..., 3)
        key: key 色 (r, g, b)

    Returns:
        距離陣列 (...), float32
    """
    diff = rgb.astype(np.float32) - np.asarray(key, dtype=np.float32)
    return np.sqrt(np.sum(diff * diff, axis=-1))
