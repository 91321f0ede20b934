"""
共用模組

提供色彩工具、去溢色策略、色邊模式設定等在各處理階段間共用的定義
"""

from .color import (
    PIXEL_MAX_VALUE,
    format_hex_color,
    hue_distance,
    parse_hex_color,
    rgb_distance,
    rgb_to_hsv,
)
from .despill import (
    Despiller,
    DespillFamily,
    classify_hue,
    get_despiller,
    select_despiller,
)
from .errors import AlphaKeyError, ColorParseError, RasterIntegrityError
from .fringe_config import (
    FringeMode,
    FringeProfile,
    get_fringe_profile,
    resolve_fringe_mode,
)
from .neighborhood import count_neighbors, transparent_boundary


__all__ = [
    "PIXEL_MAX_VALUE",
    "AlphaKeyError",
    "ColorParseError",
    "RasterIntegrityError",
    "format_hex_color",
    "hue_distance",
    "parse_hex_color",
    "rgb_distance",
    "rgb_to_hsv",
    "Despiller",
    "DespillFamily",
    "classify_hue",
    "get_despiller",
    "select_despiller",
    "FringeMode",
    "FringeProfile",
    "get_fringe_profile",
    "resolve_fringe_mode",
    "count_neighbors",
    "transparent_boundary",
]
