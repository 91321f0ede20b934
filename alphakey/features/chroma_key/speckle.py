"""
殘點清除模組

移除主要去背後殘留的 1-2px 孤立背景色像素：
不透明、8 鄰居中至少 6 個透明（影像外視為透明）、且顏色接近 key 色者設為透明。
"""

import logging

import numpy as np

from alphakey.common import (
    FringeMode,
    count_neighbors,
    get_fringe_profile,
    rgb_distance,
)
from alphakey.data_model import ColorRGB

from .keyer import rgb_threshold_for


logger = logging.getLogger(__name__)

# 常數定義
MIN_TRANSPARENT_NEIGHBORS = 6


def remove_speckles(
    rgba: np.ndarray,
    key: ColorRGB,
    tolerance: int,
    mode: FringeMode | str = FringeMode.AUTO,
) -> int:
    """
    清除孤立殘點（in-place）

    Args:
        rgba: RGBA 陣列 (H, W, 4)
        key: 選定的 key 色
        tolerance: 色彩容差 (0-255)
        mode: 色邊模式（hd 使用較寬的距離）

    Returns:
        被清除的像素數
    """
    profile = get_fringe_profile(mode)
    snapshot = rgba.copy()

    transparent = snapshot[:, :, 3] == 0
    isolated = ~transparent & (
        count_neighbors(transparent, outside=True) >= MIN_TRANSPARENT_NEIGHBORS
    )
    if not np.any(isolated):
        return 0

    max_distance = rgb_threshold_for(tolerance) * profile.speckle_multiplier
    near_key = rgb_distance(snapshot[:, :, :3], key.as_tuple()) <= max_distance
    speckles = isolated & near_key

    rgba[:, :, 3][speckles] = 0

    count = int(np.count_nonzero(speckles))
    logger.debug("Speckle cleanup: removed %d pixels", count)
    return count
