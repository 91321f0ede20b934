"""
核心資料模型

色彩、key 選擇結果與流程選項使用 Pydantic 驗證；
持有 numpy 緩衝區的點陣影像使用 frozen dataclass
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator

from alphakey.common import (
    PIXEL_MAX_VALUE,
    FringeMode,
    RasterIntegrityError,
    format_hex_color,
    parse_hex_color,
    rgb_to_hsv,
)


if TYPE_CHECKING:
    from alphakey.settings.app import AppSettings


# 常數定義
SUPPORTED_CHANNELS: frozenset[int] = frozenset({3, 4})


class ColorHSV(BaseModel):
    """
    HSV 色彩

    Attributes:
        h: 色相 (0-360 度)
        s: 飽和度 (0-100%)
        v: 明度 (0-100%)
    """

    model_config = ConfigDict(frozen=True)

    h: float = Field(ge=0.0, le=360.0)
    s: float = Field(ge=0.0, le=100.0)
    v: float = Field(ge=0.0, le=100.0)


class ColorRGB(BaseModel):
    """RGB 色彩（0-255 整數）"""

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=PIXEL_MAX_VALUE)
    g: int = Field(ge=0, le=PIXEL_MAX_VALUE)
    b: int = Field(ge=0, le=PIXEL_MAX_VALUE)

    @classmethod
    def from_hex(cls, value: str) -> "ColorRGB":
        """從 hex 色碼建立（`#RRGGBB`、`RRGGBB`、`#RGB`）"""
        r, g, b = parse_hex_color(value)
        return cls(r=r, g=g, b=b)

    @classmethod
    def from_array(cls, value: np.ndarray) -> "ColorRGB":
        """從長度 3 以上的陣列建立（只取前三個通道）"""
        return cls(r=int(value[0]), g=int(value[1]), b=int(value[2]))

    def to_hex(self) -> str:
        """輸出大寫 `#RRGGBB`"""
        return format_hex_color(self.r, self.g, self.b)

    def to_hsv(self) -> ColorHSV:
        """轉換為 HSV"""
        h, s, v = rgb_to_hsv(self.r, self.g, self.b)
        return ColorHSV(h=h, s=s, v=v)

    def as_tuple(self) -> tuple[int, int, int]:
        """(r, g, b)"""
        return self.r, self.g, self.b

    @property
    def hue(self) -> float:
        """色相 (0-360)"""
        return rgb_to_hsv(self.r, self.g, self.b)[0]


MAGENTA = ColorRGB(r=255, g=0, b=255)


class SelectionMethod(StrEnum):
    """背景色選擇方式"""

    HISTOGRAM = "histogram"  # 直方圖主色
    CORNER = "corner"  # 四角取樣（備援）


class KeyDiagnostics(BaseModel):
    """
    背景色選擇的除錯資訊（供外部日誌/除錯工具使用）

    Attributes:
        selected_color_hex: 實際使用的 key 色
        selection_method: 選擇方式
        requested_color_hex: 原本要求的 key 色
        corner_colors_hex: 四角顏色（左上、右上、左下、右下）
    """

    model_config = ConfigDict(frozen=True)

    selected_color_hex: str
    selection_method: SelectionMethod
    requested_color_hex: str
    corner_colors_hex: tuple[str, str, str, str]


class KeySelection(BaseModel):
    """
    背景色選擇結果

    Attributes:
        color: 選定的 key 色
        method: 選擇方式
        requested: 要求的 key 色
        corner_colors: 四角取樣（左上、右上、左下、右下）
        histogram_color: 直方圖找到的候選色（找不到時為 None）
    """

    model_config = ConfigDict(frozen=True)

    color: ColorRGB
    method: SelectionMethod
    requested: ColorRGB
    corner_colors: tuple[ColorRGB, ColorRGB, ColorRGB, ColorRGB]
    histogram_color: ColorRGB | None = None

    def to_diagnostics(self) -> KeyDiagnostics:
        """轉換為除錯資訊"""
        tl, tr, bl, br = (c.to_hex() for c in self.corner_colors)
        return KeyDiagnostics(
            selected_color_hex=self.color.to_hex(),
            selection_method=self.method,
            requested_color_hex=self.requested.to_hex(),
            corner_colors_hex=(tl, tr, bl, br),
        )


class PipelineOptions(BaseModel):
    """
    去背流程選項

    Attributes:
        key_color: 要求的 key 色；None 或 "auto" 代表洋紅 #FF00FF
        tolerance: 色彩容差 (0-255)
        fringe_mode: 色邊處理模式
        target_width: 輸出寬度（僅用於解析 auto 模式）
        target_height: 輸出高度（僅用於解析 auto 模式）
    """

    model_config = ConfigDict(frozen=True)

    key_color: ColorRGB | None = None
    tolerance: int = Field(default=30, ge=0, le=PIXEL_MAX_VALUE)
    fringe_mode: FringeMode = FringeMode.AUTO
    target_width: int | None = Field(default=None, ge=1)
    target_height: int | None = Field(default=None, ge=1)

    @field_validator("key_color", mode="before")
    @classmethod
    def _parse_key_color(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            if value.strip().lower() == "auto":
                return None
            return ColorRGB.from_hex(value)
        return value

    @property
    def requested_color(self) -> ColorRGB:
        """實際要求的 key 色（未指定時為洋紅）"""
        return self.key_color or MAGENTA

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """輸出尺寸；未指定的一邊以影像本身尺寸代替"""
        return self.target_width or width, self.target_height or height

    @classmethod
    def from_settings(
        cls, settings: "AppSettings", **overrides: object
    ) -> "PipelineOptions":
        """以應用程式設定的預設值建立選項"""
        values: dict[str, object] = {
            "key_color": settings.default_key_color,
            "tolerance": settings.default_tolerance,
            "fringe_mode": settings.default_fringe_mode,
        }
        values.update(overrides)
        return cls.model_validate(values)


@dataclass(frozen=True, slots=True)
class RasterImage:
    """
    點陣影像

    像素以 row-major 儲存於 (height, width, channels) 的 uint8 陣列。
    dataclass 本身不可替換欄位，但像素緩衝區可由各處理階段 in-place 修改。

    Attributes:
        pixels: 像素陣列 (H, W, 3) 或 (H, W, 4)
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray) or pixels.ndim != 3:  # noqa: PLR2004
            msg = "Raster must be a (height, width, channels) array"
            raise RasterIntegrityError(msg)
        if pixels.dtype != np.uint8:
            msg = f"Raster must be uint8, got {pixels.dtype}"
            raise RasterIntegrityError(msg)
        if pixels.shape[2] not in SUPPORTED_CHANNELS:
            msg = f"Unsupported channel count: {pixels.shape[2]}"
            raise RasterIntegrityError(msg)
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            msg = "Raster must not be empty"
            raise RasterIntegrityError(msg)

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        width: int,
        height: int,
        channels: int,
    ) -> "RasterImage":
        """
        從原始位元組建立

        Args:
            data: row-major 像素資料
            width: 寬度
            height: 高度
            channels: 通道數 (3 或 4)

        Raises:
            RasterIntegrityError: 長度與尺寸不符，或通道數不支援
        """
        if channels not in SUPPORTED_CHANNELS:
            msg = f"Unsupported channel count: {channels}"
            raise RasterIntegrityError(msg)
        if width <= 0 or height <= 0:
            msg = f"Invalid raster size: {width}x{height}"
            raise RasterIntegrityError(msg)

        expected = width * height * channels
        if len(data) != expected:
            msg = (
                f"Buffer length {len(data)} does not match "
                f"{width}x{height}x{channels} = {expected}"
            )
            raise RasterIntegrityError(msg)

        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(
            height, width, channels
        )
        return cls(pixels.copy())

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """從 PIL 影像建立（非 RGB/RGBA 模式會先轉換）"""
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
        return cls(np.array(image, dtype=np.uint8))

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4  # noqa: PLR2004

    @property
    def alpha(self) -> np.ndarray:
        """alpha 通道（無 alpha 時為全 255 的新陣列）"""
        if self.has_alpha:
            return self.pixels[:, :, 3]
        return np.full((self.height, self.width), PIXEL_MAX_VALUE, dtype=np.uint8)

    def ensure_alpha(self) -> "RasterImage":
        """
        確保有 alpha 通道

        RGBA 直接返回自身（共用緩衝區）；RGB 則建立 alpha=255 的新 RGBA 影像
        """
        if self.has_alpha:
            return self
        alpha = np.full((self.height, self.width, 1), PIXEL_MAX_VALUE, dtype=np.uint8)
        return RasterImage(np.concatenate([self.pixels, alpha], axis=2))

    def copy(self) -> "RasterImage":
        """深複製"""
        return RasterImage(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """row-major 原始位元組"""
        return np.ascontiguousarray(self.pixels).tobytes()

    def to_pil(self) -> Image.Image:
        """轉換為 PIL 影像"""
        return Image.fromarray(np.ascontiguousarray(self.pixels))
