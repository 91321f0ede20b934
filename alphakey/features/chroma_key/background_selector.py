"""
背景色選擇模組

生成式模型輸出的背景色常偏離要求的 key 色，先從影像本身估計實際的背景色：
1. 4-bit/通道 RGB 直方圖（4096 個 bucket），取面積夠大且色相最接近者
2. 找不到時退回四角取樣，永遠能得到結果
"""

import logging

import numpy as np

from alphakey.common import PIXEL_MAX_VALUE, hue_distance, rgb_to_hsv
from alphakey.data_model import ColorRGB, KeySelection, SelectionMethod


logger = logging.getLogger(__name__)

# 常數定義
QUANTIZE_SHIFT = 4  # 每通道保留 4 bits
BUCKET_COUNT = 1 << (QUANTIZE_SHIFT * 3)  # 4096
BUCKET_CENTER_OFFSET = 8  # bucket 中心 = 量化值 + 8
MIN_AREA_RATIO = 0.05  # bucket 至少佔全圖 5%
HUE_TOLERANCE_SPAN = 120.0  # tolerance=255 時的色相容差（度）


def hue_tolerance_for(tolerance: int) -> float:
    """容差換算為色相容差：tolerance / 255 × 120 度"""
    return tolerance / PIXEL_MAX_VALUE * HUE_TOLERANCE_SPAN


def _bucket_center(index: int) -> ColorRGB:
    mask = (1 << QUANTIZE_SHIFT) - 1
    qr = (index >> (QUANTIZE_SHIFT * 2)) & mask
    qg = (index >> QUANTIZE_SHIFT) & mask
    qb = index & mask
    return ColorRGB(
        r=(qr << QUANTIZE_SHIFT) + BUCKET_CENTER_OFFSET,
        g=(qg << QUANTIZE_SHIFT) + BUCKET_CENTER_OFFSET,
        b=(qb << QUANTIZE_SHIFT) + BUCKET_CENTER_OFFSET,
    )


def build_color_histogram(rgb: np.ndarray) -> np.ndarray:
    """
    建立量化 RGB 直方圖

    Args:
        rgb: RGB 陣列 (H, W, 3), uint8

    Returns:
        各 bucket 的像素數 (4096,)
    """
    quantized = (rgb[:, :, :3] >> QUANTIZE_SHIFT).astype(np.int32)
    index = (
        (quantized[:, :, 0] << (QUANTIZE_SHIFT * 2))
        | (quantized[:, :, 1] << QUANTIZE_SHIFT)
        | quantized[:, :, 2]
    )
    return np.bincount(index.ravel(), minlength=BUCKET_COUNT)


def find_histogram_color(
    rgb: np.ndarray, target_hue: float, tolerance: int
) -> ColorRGB | None:
    """
    以直方圖尋找背景色

    面積 ≥ 5% 的 bucket 中，排除色相距離超過容差者，取距離最小者；
    距離相同時取像素數較多者，再相同則取 bucket 編號較小者。

    Args:
        rgb: RGB 陣列 (H, W, 3)
        target_hue: 要求 key 色的色相
        tolerance: 色彩容差 (0-255)

    Returns:
        bucket 中心色，找不到時為 None
    """
    counts = build_color_histogram(rgb)
    total = rgb.shape[0] * rgb.shape[1]
    min_area = total * MIN_AREA_RATIO
    max_hue_distance = hue_tolerance_for(tolerance)

    best: tuple[float, int, int] | None = None
    best_color: ColorRGB | None = None

    for index in np.flatnonzero(counts >= min_area):
        center = _bucket_center(int(index))
        distance = hue_distance(center.hue, target_hue)
        if distance > max_hue_distance:
            continue

        rank = (distance, -int(counts[index]), int(index))
        if best is None or rank < best:
            best = rank
            best_color = center

    return best_color


def sample_corners(rgb: np.ndarray) -> tuple[ColorRGB, ColorRGB, ColorRGB, ColorRGB]:
    """四角取樣，固定順序：左上、右上、左下、右下"""
    return (
        ColorRGB.from_array(rgb[0, 0]),
        ColorRGB.from_array(rgb[0, -1]),
        ColorRGB.from_array(rgb[-1, 0]),
        ColorRGB.from_array(rgb[-1, -1]),
    )


def pick_corner_color(corners: tuple[ColorRGB, ...], target_hue: float) -> ColorRGB:
    """取色相距離最小的角落色；距離相同時依列舉順序取前者"""
    best = corners[0]
    best_distance = hue_distance(best.hue, target_hue)
    for corner in corners[1:]:
        distance = hue_distance(corner.hue, target_hue)
        if distance < best_distance:
            best, best_distance = corner, distance
    return best


def select_background_color(
    rgba: np.ndarray, requested: ColorRGB, tolerance: int
) -> KeySelection:
    """
    估計影像實際的背景 key 色

    Args:
        rgba: RGBA 陣列 (H, W, 4)
        requested: 要求的 key 色
        tolerance: 色彩容差 (0-255)

    Returns:
        KeySelection（同時記錄直方圖結果與四角取樣）
    """
    target_hue = rgb_to_hsv(*requested.as_tuple())[0]
    rgb = rgba[:, :, :3]

    histogram_color = find_histogram_color(rgb, target_hue, tolerance)
    corners = sample_corners(rgb)

    if histogram_color is not None:
        color, method = histogram_color, SelectionMethod.HISTOGRAM
    else:
        color = pick_corner_color(corners, target_hue)
        method = SelectionMethod.CORNER

    logger.info(
        "Background color: %s via %s (requested %s)",
        color.to_hex(),
        method.value,
        requested.to_hex(),
    )

    return KeySelection(
        color=color,
        method=method,
        requested=requested,
        corner_colors=corners,
        histogram_color=histogram_color,
    )
