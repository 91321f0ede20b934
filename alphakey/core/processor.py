"""
圖片處理器模組

串接外部編解碼與去背流程：解碼 → 去背（僅 PNG/WebP）→ 縮放 → 編碼
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from alphakey.common import PIXEL_MAX_VALUE, FringeMode
from alphakey.data_model import KeyDiagnostics, PipelineOptions, RasterImage
from alphakey.features.post_process import (
    OutputFormat,
    ResizeMode,
    apply_resize,
    encode_image,
)
from alphakey.settings import AppSettings, settings

from .pipeline import ChromaKeyPipeline


logger = logging.getLogger(__name__)

# 常數定義
MIN_OUTPUT_SIZE = 8
MAX_OUTPUT_SIZE = 4096


class PostProcessOptions(BaseModel):
    """
    後處理設定

    Attributes:
        width: 輸出寬度
        height: 輸出高度
        output_format: 輸出格式
        resize_mode: 縮放模式
        transparent: 是否去背（JPG 輸出時忽略）
        key_color: 要求的 key 色（hex），None 或 "auto" 代表洋紅
        tolerance: 色彩容差 (0-255)
        fringe_mode: 色邊處理模式
        debug_dir: 除錯輸出目錄；設定時保存解碼後的原始影像並記錄完整選色資訊
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=MIN_OUTPUT_SIZE, le=MAX_OUTPUT_SIZE)
    height: int = Field(ge=MIN_OUTPUT_SIZE, le=MAX_OUTPUT_SIZE)
    output_format: OutputFormat = OutputFormat.PNG
    resize_mode: ResizeMode = ResizeMode.CROP
    transparent: bool = False
    key_color: str | None = None
    tolerance: int = Field(default=30, ge=0, le=PIXEL_MAX_VALUE)
    fringe_mode: FringeMode = FringeMode.AUTO
    debug_dir: Path | None = None

    @property
    def applies_transparency(self) -> bool:
        """是否實際套用透明（需要支援 alpha 的格式）"""
        return self.transparent and self.output_format.supports_alpha

    def to_pipeline_options(self) -> PipelineOptions:
        """轉換為去背流程選項（輸出尺寸用於解析 auto 色邊模式）"""
        return PipelineOptions(
            key_color=self.key_color,  # type: ignore[arg-type]
            tolerance=self.tolerance,
            fringe_mode=self.fringe_mode,
            target_width=self.width,
            target_height=self.height,
        )


@dataclass(frozen=True, slots=True)
class ProcessedImage:
    """
    處理結果

    Attributes:
        data: 編碼後的影像資料
        width: 輸出寬度
        height: 輸出高度
        output_format: 輸出格式
        diagnostics: 背景色選擇資訊（未去背時為 None）
        warning: 警告訊息（例如 JPG 忽略透明）
    """

    data: bytes
    width: int
    height: int
    output_format: OutputFormat
    diagnostics: KeyDiagnostics | None = None
    warning: str | None = None

    @property
    def mime_type(self) -> str:
        return self.output_format.mime_type


def save_debug_image(image: RasterImage, path: Path) -> None:
    """儲存中間結果（PNG）供除錯"""
    path.parent.mkdir(parents=True, exist_ok=True)
    image.to_pil().save(path, "PNG")
    logger.debug("Saved debug image: %s", path)


class ChromaKeyProcessor:
    """
    去背處理器

    負責解碼、去背、縮放與編碼；去背本身委派給 ChromaKeyPipeline
    """

    def __init__(
        self,
        pipeline: ChromaKeyPipeline | None = None,
        app_settings: AppSettings | None = None,
    ):
        """
        初始化處理器

        Args:
            pipeline: 去背流程，None 時建立預設流程
            app_settings: 應用程式設定，None 時使用全局設定
        """
        self._pipeline = pipeline or ChromaKeyPipeline()
        self._settings = app_settings or settings

    def _quality_for(self, output_format: OutputFormat) -> int:
        if output_format == OutputFormat.WEBP:
            return self._settings.webp_quality
        return self._settings.jpeg_quality

    def process_bytes(
        self, data: bytes, options: PostProcessOptions, *, name: str = "image"
    ) -> ProcessedImage:
        """
        處理已編碼的影像資料

        Args:
            data: 輸入影像（PNG/JPEG/WebP 等 Pillow 可解碼的格式）
            options: 後處理設定
            name: 除錯檔名前綴

        Returns:
            ProcessedImage

        Raises:
            ValueError: 輸出尺寸超過設定上限
            RasterIntegrityError: 解碼後的點陣資料不正確
        """
        max_size = self._settings.max_image_size
        if max(options.width, options.height) > max_size:
            msg = f"Output size {options.width}x{options.height} exceeds {max_size}"
            raise ValueError(msg)

        with Image.open(io.BytesIO(data)) as decoded:
            decoded.load()
            source = decoded.copy()

        if options.debug_dir is not None:
            save_debug_image(
                RasterImage.from_pil(source),
                options.debug_dir / f"{name}_debug_raw.png",
            )

        warning: str | None = None
        if options.transparent and not options.output_format.supports_alpha:
            warning = "Transparency is ignored for JPG output."
            logger.warning("Transparency requested with JPG format - ignored")

        diagnostics: KeyDiagnostics | None = None
        if options.applies_transparency:
            # 透明處理必須在縮放之前，避免背景色滲入邊緣
            result = self._pipeline.run(
                RasterImage.from_pil(source), options.to_pipeline_options()
            )
            working = result.image.to_pil()
            diagnostics = result.diagnostics
            logger.info(
                "Selected background color %s (%s)",
                diagnostics.selected_color_hex,
                diagnostics.selection_method.value,
            )
            if options.debug_dir is not None:
                logger.info("Key diagnostics: %s", diagnostics.model_dump(mode="json"))
        else:
            keep_alpha = (
                options.output_format.supports_alpha and "A" in source.getbands()
            )
            working = source.convert("RGBA" if keep_alpha else "RGB")

        resized = apply_resize(
            working,
            options.width,
            options.height,
            options.resize_mode,
            has_transparency=options.applies_transparency,
            output_format=options.output_format,
        )
        encoded = encode_image(
            resized, options.output_format, self._quality_for(options.output_format)
        )

        return ProcessedImage(
            data=encoded,
            width=options.width,
            height=options.height,
            output_format=options.output_format,
            diagnostics=diagnostics,
            warning=warning,
        )

    def process(
        self, input_path: Path, output_path: Path, options: PostProcessOptions
    ) -> bool:
        """
        處理單張圖片檔案

        Args:
            input_path: 輸入圖片路徑
            output_path: 輸出圖片路徑
            options: 後處理設定

        Returns:
            處理是否成功
        """
        try:
            result = self.process_bytes(
                input_path.read_bytes(), options, name=input_path.stem
            )
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(result.data)
            logger.debug("Saved: %s", output_path.name)

        except Exception:
            logger.exception("Chroma key processing failed: %s", input_path.name)
            return False
        else:
            return True
