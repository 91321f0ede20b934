"""
邊緣精修模組

hd 模式下清除透明區外圍一圈像素，去掉 1px 的 key 色色邊。
判定一律讀取階段開始時的 alpha 快照，避免單次掃描中連鎖清除。
"""

import logging

import numpy as np

from alphakey.common import FringeMode, get_fringe_profile, transparent_boundary


logger = logging.getLogger(__name__)


def refine_edges(rgba: np.ndarray, mode: FringeMode | str) -> int:
    """
    清除透明區周圍的邊界像素（in-place，只在啟用 boundary_clear 的模式）

    Args:
        rgba: RGBA 陣列 (H, W, 4)
        mode: 已解析的色邊模式

    Returns:
        被清除的像素數
    """
    if not get_fringe_profile(mode).boundary_clear:
        return 0

    snapshot = rgba[:, :, 3].copy()
    boundary = transparent_boundary(snapshot)
    rgba[:, :, 3][boundary] = 0

    cleared = int(np.count_nonzero(boundary))
    logger.debug("Edge refine: cleared %d boundary pixels", cleared)
    return cleared
