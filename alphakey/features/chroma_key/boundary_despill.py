"""
邊界去溢色模組

第二次、較強的去溢色，只處理緊鄰透明區的不透明像素：
1. 以 3x3 鄰域（含全部 9 格，邊界 clamp）的逐通道中位數作為參考色
2. 依家族公式以 force_base 強度校正
3. 再向中位數混合 median_blend
"""

import logging

import cv2
import numpy as np

from alphakey.common import (
    PIXEL_MAX_VALUE,
    Despiller,
    FringeMode,
    get_fringe_profile,
    transparent_boundary,
)


logger = logging.getLogger(__name__)

# 常數定義
MEDIAN_KERNEL_SIZE = 3


def neighborhood_median(rgb: np.ndarray) -> np.ndarray:
    """
    3x3 逐通道中位數

    cv2.medianBlur 的邊界處理為 replicate，等同座標 clamp 在影像內

    Args:
        rgb: RGB 陣列 (H, W, 3), uint8

    Returns:
        中位數陣列 (H, W, 3), uint8
    """
    median: np.ndarray = cv2.medianBlur(np.ascontiguousarray(rgb), MEDIAN_KERNEL_SIZE)
    return median


def apply_boundary_despill(
    rgba: np.ndarray, despiller: Despiller, mode: FringeMode | str = FringeMode.AUTO
) -> int:
    """
    邊界像素去溢色（in-place）

    Args:
        rgba: RGBA 陣列 (H, W, 4)
        despiller: 去溢色策略
        mode: 色邊模式（決定 force_base 與 median_blend）

    Returns:
        被校正的像素數
    """
    profile = get_fringe_profile(mode)
    snapshot = rgba.copy()

    boundary = transparent_boundary(snapshot[:, :, 3])
    if not np.any(boundary):
        return 0

    median = neighborhood_median(snapshot[:, :, :3])[boundary].astype(np.float32)
    corrected = despiller.correct(
        snapshot[:, :, :3][boundary], profile.force_base, reference=median
    )

    blend = profile.median_blend
    if blend > 0:
        corrected = corrected * (1 - blend) + median * blend

    rgba[:, :, :3][boundary] = np.clip(corrected, 0, PIXEL_MAX_VALUE).astype(np.uint8)

    count = int(np.count_nonzero(boundary))
    logger.debug(
        "Boundary despill: %d pixels (force=%.2f, blend=%.2f)",
        count,
        profile.force_base,
        blend,
    )
    return count
