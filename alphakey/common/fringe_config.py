"""
色邊（fringe）處理模式設定

三種模式：
- crisp：二值 alpha，只做逐像素校正，不與鄰域混合
- hd：大圖用，清除透明區外圍 1px 並以最強參數校正
- auto：依輸出尺寸在 crisp 與 hd 之間決定；直接呼叫各階段時則使用預設參數
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


# 常數定義
HD_SIZE_THRESHOLD = 128  # 輸出最長邊超過此值時 auto 解析為 hd


class FringeMode(StrEnum):
    """色邊處理模式"""

    AUTO = "auto"  # 依輸出尺寸決定
    CRISP = "crisp"  # 二值 alpha，小尺寸 sprite
    HD = "hd"  # 強制清除 1px 邊界，大尺寸圖片


class FringeProfile(BaseModel):
    """
    各模式的校正參數

    Attributes:
        boundary_clear: 是否清除透明區外圍一圈像素
        force_base: 邊界去溢色強度
        median_blend: 邊界像素向 3x3 中位數混合的權重
        alpha_power: 半透明去溢色的冪次
        alpha_coef: 半透明去溢色的係數
        speckle_multiplier: 殘點判定距離相對 rgbThreshold 的倍數
    """

    model_config = ConfigDict(frozen=True)

    boundary_clear: bool = False
    force_base: float = Field(ge=0.0)
    median_blend: float = Field(ge=0.0, le=1.0)
    alpha_power: float = Field(gt=0.0)
    alpha_coef: float = Field(ge=0.0)
    speckle_multiplier: float = Field(gt=0.0)


PROFILE_CRISP = FringeProfile(
    force_base=0.4,
    median_blend=0.0,
    alpha_power=1.8,
    alpha_coef=0.0,
    speckle_multiplier=2.0,
)

PROFILE_DEFAULT = FringeProfile(
    force_base=1.0,
    median_blend=0.15,
    alpha_power=1.8,
    alpha_coef=1.2,
    speckle_multiplier=2.0,
)

PROFILE_HD = FringeProfile(
    boundary_clear=True,
    force_base=1.1,
    median_blend=0.2,
    alpha_power=2.0,
    alpha_coef=1.4,
    speckle_multiplier=3.0,
)

_PROFILES: dict[FringeMode, FringeProfile] = {
    FringeMode.CRISP: PROFILE_CRISP,
    FringeMode.AUTO: PROFILE_DEFAULT,
    FringeMode.HD: PROFILE_HD,
}


def get_fringe_profile(mode: FringeMode | str) -> FringeProfile:
    """取得模式對應的校正參數"""
    return _PROFILES[FringeMode(mode)]


def resolve_fringe_mode(
    mode: FringeMode | str, target_width: int, target_height: int
) -> FringeMode:
    """
    解析 auto 模式

    明確指定的 crisp/hd 原樣返回；auto 在輸出最長邊大於 128 時為 hd，否則 crisp

    Args:
        mode: 要求的模式
        target_width: 輸出寬度
        target_height: 輸出高度

    Returns:
        解析後的模式（crisp 或 hd）
    """
    mode = FringeMode(mode)
    if mode != FringeMode.AUTO:
        return mode
    if max(target_width, target_height) > HD_SIZE_THRESHOLD:
        return FringeMode.HD
    return FringeMode.CRISP
