"""
應用程式設定

使用 Pydantic BaseSettings 管理環境變數和配置
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from alphakey.common import PIXEL_MAX_VALUE, FringeMode


class AppSettings(BaseSettings):
    """
    應用程式設定

    從環境變數和 .env 文件讀取設定

    Attributes:
        log_level: 日誌級別 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        default_key_color: 預設 key 色（hex 或 "auto"）
        default_tolerance: 預設色彩容差 (0-255)
        default_fringe_mode: 預設色邊處理模式
        max_image_size: 最大輸出邊長（像素）
        jpeg_quality: JPEG 輸出品質
        webp_quality: WebP 輸出品質
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ALPHAKEY_",
        case_sensitive=False,
    )

    # 日誌設定
    log_level: str = "INFO"

    # 去背設定
    default_key_color: str = "auto"
    default_tolerance: int = Field(default=30, ge=0, le=PIXEL_MAX_VALUE)
    default_fringe_mode: FringeMode = FringeMode.AUTO

    # 輸出設定
    max_image_size: int = 4096  # 最大邊長（像素）
    jpeg_quality: int = Field(default=90, ge=1, le=100)
    webp_quality: int = Field(default=90, ge=1, le=100)


def configure_logging(app_settings: AppSettings | None = None) -> None:
    """依設定初始化 root logger"""
    level = (app_settings or settings).log_level.upper()
    logging.basicConfig(level=level, format="%(message)s")


# 創建全局設定實例
settings = AppSettings()
