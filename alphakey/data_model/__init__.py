"""
資料模型模組

提供去背流程的核心資料結構
"""

from .core import (
    MAGENTA,
    ColorHSV,
    ColorRGB,
    KeyDiagnostics,
    KeySelection,
    PipelineOptions,
    RasterImage,
    SelectionMethod,
)

__all__ = [
    "MAGENTA",
    "ColorHSV",
    "ColorRGB",
    "KeyDiagnostics",
    "KeySelection",
    "PipelineOptions",
    "RasterImage",
    "SelectionMethod",
]
