"""
鄰域工具模組

8 連通鄰居計數。所有函數都只讀取傳入的遮罩（即階段開始時的快照），
回傳新陣列，呼叫端再寫回即時緩衝區，確保結果與掃描順序無關。
"""

import numpy as np


# 8 連通偏移（dy, dx）
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


def count_neighbors(mask: np.ndarray, *, outside: bool = False) -> np.ndarray:
    """
    計算每個像素 8 鄰居中為 True 的數量

    Args:
        mask: 布林遮罩 (H, W)
        outside: 影像外的鄰居視為 True 或 False

    Returns:
        鄰居數量 (H, W), uint8，範圍 0-8
    """
    height, width = mask.shape
    padded = np.pad(
        mask.astype(np.uint8), 1, mode="constant", constant_values=int(outside)
    )

    counts = np.zeros((height, width), dtype=np.uint8)
    for dy, dx in NEIGHBOR_OFFSETS:
        counts += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


def transparent_boundary(alpha: np.ndarray) -> np.ndarray:
    """
    找出「不透明且至少有一個影像內鄰居透明」的像素

    Args:
        alpha: alpha 快照 (H, W)

    Returns:
        邊界遮罩 (H, W), bool
    """
    transparent = alpha == 0
    return ~transparent & (count_neighbors(transparent, outside=False) > 0)
