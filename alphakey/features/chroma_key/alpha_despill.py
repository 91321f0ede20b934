"""
半透明去溢色模組

只作用於 0 < alpha < 255 的像素，強度為 (1 - alpha/255)^power × coef。
主要流程產生的 alpha 為二值，此階段只對輸入時已帶半透明 alpha 的影像有效。
"""

import logging

import numpy as np

from alphakey.common import (
    PIXEL_MAX_VALUE,
    Despiller,
    FringeMode,
    get_fringe_profile,
)


logger = logging.getLogger(__name__)


def apply_alpha_weighted_despill(
    rgba: np.ndarray, despiller: Despiller, mode: FringeMode | str = FringeMode.AUTO
) -> int:
    """
    依 alpha 權重去溢色（in-place）

    Args:
        rgba: RGBA 陣列 (H, W, 4)
        despiller: 去溢色策略
        mode: 色邊模式（決定 alpha_power 與 alpha_coef）

    Returns:
        被校正的像素數
    """
    profile = get_fringe_profile(mode)
    if profile.alpha_coef <= 0:
        return 0

    alpha = rgba[:, :, 3]
    partial = (alpha > 0) & (alpha < PIXEL_MAX_VALUE)
    if not np.any(partial):
        return 0

    t = 1.0 - alpha[partial].astype(np.float32) / PIXEL_MAX_VALUE
    strength = np.power(t, profile.alpha_power) * profile.alpha_coef

    corrected = despiller.correct(rgba[:, :, :3][partial], strength)
    rgba[:, :, :3][partial] = corrected.astype(np.uint8)

    count = int(np.count_nonzero(partial))
    logger.debug("Alpha-weighted despill: %d partial pixels", count)
    return count
