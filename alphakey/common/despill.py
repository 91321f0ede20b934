"""
去溢色（despill）策略模組

依 key 色的色相分為四個家族，每個家族各自實作一種通道校正公式：
- magenta：壓低 R/B 中超過 G 的部分
- green：壓低 G 中超過 max(R, B) 的部分，溢出嚴重時連帶壓低 R/B
- blue：壓低 B 中超過 max(R, G) 的部分
- generic：向灰階平均值靠攏

家族只在流程開始時依 key 色決定一次，之後所有校正階段共用同一個策略物件。
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum
from typing import ClassVar

import numpy as np

from .color import PIXEL_MAX_VALUE


# 常數定義
GREEN_BLEED_THRESHOLD = 10.0  # 綠色過剩超過此值時連帶校正 R/B
GREEN_BLEED_FACTOR = 0.3
GENERIC_DESATURATE_FACTOR = 0.5


class DespillFamily(StrEnum):
    """去溢色家族"""

    MAGENTA = "magenta"
    GREEN = "green"
    BLUE = "blue"
    GENERIC = "generic"


def classify_hue(hue: float) -> DespillFamily:
    """
    依色相判斷去溢色家族

    區間：magenta [270, 360] ∪ [0, 30]、green [90, 150]、blue [210, 270)，
    其餘為 generic。270 度歸 magenta。

    Args:
        hue: 色相 (0-360)

    Returns:
        對應的 DespillFamily
    """
    if hue >= 270 or hue <= 30:  # noqa: PLR2004
        return DespillFamily.MAGENTA
    if 90 <= hue <= 150:  # noqa: PLR2004
        return DespillFamily.GREEN
    if 210 <= hue < 270:  # noqa: PLR2004
        return DespillFamily.BLUE
    return DespillFamily.GENERIC


class Despiller(ABC):
    """
    去溢色策略基底類別

    子類別只需實作 `_correct`，強度與參考色的正規化以及 clamp 由基底處理。
    """

    family: ClassVar[DespillFamily]

    def correct(
        self,
        rgb: np.ndarray,
        strength: np.ndarray | float,
        reference: np.ndarray | None = None,
    ) -> np.ndarray:
        """
        校正一批像素

        Args:
            rgb: 像素顏色 (N, 3)
            strength: 校正強度，純量或 (N,)；可大於 1
            reference: 參考色 (N, 3)，提供限制通道（例如鄰域中位數）；
                       None 時以像素本身為參考

        Returns:
            校正後顏色 (N, 3), float32，已 clamp 至 0-255
        """
        pixels = rgb.astype(np.float32)
        ref = pixels if reference is None else reference.astype(np.float32)
        s = np.asarray(strength, dtype=np.float32)

        result = self._correct(pixels.copy(), ref, s)
        return np.clip(result, 0, PIXEL_MAX_VALUE)

    @abstractmethod
    def _correct(self, rgb: np.ndarray, ref: np.ndarray, s: np.ndarray) -> np.ndarray:
        """實際的通道校正公式（rgb 為可直接修改的副本）"""


_REGISTRY: dict[DespillFamily, type[Despiller]] = {}


def register_despiller(
    family: DespillFamily,
) -> Callable[[type[Despiller]], type[Despiller]]:
    """註冊去溢色策略的裝飾器"""

    def decorator(cls: type[Despiller]) -> type[Despiller]:
        cls.family = family
        _REGISTRY[family] = cls
        return cls

    return decorator


@register_despiller(DespillFamily.MAGENTA)
class MagentaDespiller(Despiller):
    """洋紅 key：R、B 不得超過參考 G"""

    def _correct(self, rgb: np.ndarray, ref: np.ndarray, s: np.ndarray) -> np.ndarray:
        ref_g = ref[:, 1]
        rgb[:, 0] -= s * np.maximum(rgb[:, 0] - ref_g, 0)
        rgb[:, 2] -= s * np.maximum(rgb[:, 2] - ref_g, 0)
        return rgb


@register_despiller(DespillFamily.GREEN)
class GreenDespiller(Despiller):
    """綠幕 key：G 不得超過參考 max(R, B)"""

    def _correct(self, rgb: np.ndarray, ref: np.ndarray, s: np.ndarray) -> np.ndarray:
        excess = rgb[:, 1] - np.maximum(ref[:, 0], ref[:, 2])
        rgb[:, 1] -= s * np.maximum(excess, 0)

        # 溢出嚴重時 R/B 也被綠光抬高
        bleed = np.where(
            excess > GREEN_BLEED_THRESHOLD, s * GREEN_BLEED_FACTOR * excess, 0.0
        )
        rgb[:, 0] -= bleed
        rgb[:, 2] -= bleed
        return rgb


@register_despiller(DespillFamily.BLUE)
class BlueDespiller(Despiller):
    """藍幕 key：B 不得超過參考 max(R, G)"""

    def _correct(self, rgb: np.ndarray, ref: np.ndarray, s: np.ndarray) -> np.ndarray:
        limit = np.maximum(ref[:, 0], ref[:, 1])
        rgb[:, 2] -= s * np.maximum(rgb[:, 2] - limit, 0)
        return rgb


@register_despiller(DespillFamily.GENERIC)
class GenericDespiller(Despiller):
    """其他色相：各通道向參考色的灰階平均值移動 50%"""

    def _correct(self, rgb: np.ndarray, ref: np.ndarray, s: np.ndarray) -> np.ndarray:
        grey = ref.mean(axis=1, keepdims=True)
        weight = s[:, None] if s.ndim else s
        return rgb + weight * GENERIC_DESATURATE_FACTOR * (grey - rgb)


def get_despiller(family: DespillFamily | str) -> Despiller:
    """依家族名稱建立策略物件"""
    return _REGISTRY[DespillFamily(family)]()


def select_despiller(hue: float) -> Despiller:
    """依 key 色相選擇策略物件"""
    return get_despiller(classify_hue(hue))
