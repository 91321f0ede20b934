"""
去背流程模組

依固定順序串接各階段，所有階段 in-place 修改同一個 RGBA 緩衝區：
1. 背景色選擇
2. Alpha key + 第一次去溢色
3. 解析色邊模式，hd 時清除邊界
4. 邊界去溢色
5. 半透明去溢色
6. 殘點清除

流程為線性，沒有重試；任何階段失敗都會直接拋給呼叫端。
"""

import logging
from dataclasses import dataclass

from alphakey.common import (
    DespillFamily,
    FringeMode,
    resolve_fringe_mode,
    select_despiller,
)
from alphakey.data_model import (
    KeyDiagnostics,
    KeySelection,
    PipelineOptions,
    RasterImage,
)
from alphakey.features.chroma_key import (
    apply_alpha_key,
    apply_alpha_weighted_despill,
    apply_boundary_despill,
    refine_edges,
    remove_speckles,
    select_background_color,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """
    去背結果

    Attributes:
        image: 處理後的 RGBA 影像
        selection: 背景色選擇結果
        fringe_mode: 解析後的色邊模式
        despill_family: 使用的去溢色家族
    """

    image: RasterImage
    selection: KeySelection
    fringe_mode: FringeMode
    despill_family: DespillFamily

    @property
    def diagnostics(self) -> KeyDiagnostics:
        """背景色選擇的除錯資訊"""
        return self.selection.to_diagnostics()


class ChromaKeyPipeline:
    """
    Chroma key 去背流程

    不保留任何跨呼叫的狀態，同一個實例可重複使用
    """

    def __init__(self, options: PipelineOptions | None = None):
        """
        初始化流程

        Args:
            options: 預設選項；None 時使用 PipelineOptions 的預設值
        """
        self.options = options or PipelineOptions()

    def run(
        self, image: RasterImage, options: PipelineOptions | None = None
    ) -> PipelineResult:
        """
        執行完整流程

        RGBA 輸入會被 in-place 修改；RGB 輸入會先建立新的 RGBA 緩衝區。

        Args:
            image: 輸入影像（RGB 或 RGBA）
            options: 本次選項，None 時使用建構時的選項

        Returns:
            PipelineResult
        """
        opts = options or self.options
        rgba_image = image.ensure_alpha()
        rgba = rgba_image.pixels
        tolerance = opts.tolerance

        logger.debug(
            "Chroma key: %dx%d, tolerance=%d, fringe=%s",
            rgba_image.width,
            rgba_image.height,
            tolerance,
            opts.fringe_mode.value,
        )

        # 階段 1: 背景色選擇
        selection = select_background_color(rgba, opts.requested_color, tolerance)
        key = selection.color
        despiller = select_despiller(key.hue)
        logger.debug(
            "Stage 1: Key %s, despill family %s",
            key.to_hex(),
            despiller.family.value,
        )

        # 階段 2: Alpha key + 第一次去溢色
        apply_alpha_key(rgba, key, tolerance, despiller)
        logger.debug("Stage 2: Alpha key complete")

        # 階段 3: 色邊模式與邊界清除
        target_width, target_height = opts.target_size(
            rgba_image.width, rgba_image.height
        )
        fringe_mode = resolve_fringe_mode(opts.fringe_mode, target_width, target_height)
        refine_edges(rgba, fringe_mode)
        logger.debug("Stage 3: Edge refine complete (mode=%s)", fringe_mode.value)

        # 階段 4: 邊界去溢色
        apply_boundary_despill(rgba, despiller, fringe_mode)
        logger.debug("Stage 4: Boundary despill complete")

        # 階段 5: 半透明去溢色
        apply_alpha_weighted_despill(rgba, despiller, fringe_mode)
        logger.debug("Stage 5: Alpha-weighted despill complete")

        # 階段 6: 殘點清除
        remove_speckles(rgba, key, tolerance, fringe_mode)
        logger.debug("Stage 6: Speckle cleanup complete")

        return PipelineResult(
            image=rgba_image,
            selection=selection,
            fringe_mode=fringe_mode,
            despill_family=despiller.family,
        )
