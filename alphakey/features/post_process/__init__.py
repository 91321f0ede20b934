"""
輸出後處理模組（縮放與編碼）
"""

from .resize import (
    OutputFormat,
    ResizeMode,
    apply_resize,
    encode_image,
    select_resample,
    trim_transparent,
)


__all__ = [
    "OutputFormat",
    "ResizeMode",
    "apply_resize",
    "encode_image",
    "select_resample",
    "trim_transparent",
]
