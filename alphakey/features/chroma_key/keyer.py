"""
Alpha key 模組

單次全圖掃描，依與 key 色的 RGB 距離把像素分為三類：
- 距離 ≤ rgbThreshold：完全透明
- rgbThreshold < 距離 ≤ despillThreshold：保持不透明，依距離線性衰減做去溢色
- 其餘：不變
"""

import logging
import math

import numpy as np

from alphakey.common import Despiller, rgb_distance
from alphakey.data_model import ColorRGB


logger = logging.getLogger(__name__)

# 常數定義
DESPILL_RANGE_FACTOR = 1.8  # despillThreshold = rgbThreshold × 1.8


def rgb_threshold_for(tolerance: int) -> float:
    """透明判定距離：tolerance × √2"""
    return tolerance * math.sqrt(2)


def despill_threshold_for(tolerance: int) -> float:
    """去溢色範圍上限：rgbThreshold × 1.8"""
    return rgb_threshold_for(tolerance) * DESPILL_RANGE_FACTOR


def apply_alpha_key(
    rgba: np.ndarray, key: ColorRGB, tolerance: int, despiller: Despiller
) -> None:
    """
    產生 alpha 並做第一次去溢色（in-place）

    已透明（alpha=0）的像素不會被重新上色，因此對全透明影像重複執行不會有變化。

    Args:
        rgba: RGBA 陣列 (H, W, 4)，會被 in-place 修改
        key: 選定的 key 色
        tolerance: 色彩容差 (0-255)
        despiller: 去溢色策略
    """
    rgb_threshold = rgb_threshold_for(tolerance)
    despill_threshold = despill_threshold_for(tolerance)

    distance = rgb_distance(rgba[:, :, :3], key.as_tuple())
    keyed = distance <= rgb_threshold

    spill_zone = (
        (distance > rgb_threshold)
        & (distance <= despill_threshold)
        & (rgba[:, :, 3] > 0)
    )

    if np.any(spill_zone):
        span = despill_threshold - rgb_threshold
        spill_strength = np.clip(
            1.0 - (distance[spill_zone] - rgb_threshold) / span, 0.0, 1.0
        )
        corrected = despiller.correct(rgba[:, :, :3][spill_zone], spill_strength)
        rgba[:, :, :3][spill_zone] = corrected.astype(np.uint8)

    rgba[:, :, 3][keyed] = 0

    logger.debug(
        "Alpha key: %d transparent, %d despilled (threshold %.1f/%.1f)",
        int(np.count_nonzero(keyed)),
        int(np.count_nonzero(spill_zone)),
        rgb_threshold,
        despill_threshold,
    )
