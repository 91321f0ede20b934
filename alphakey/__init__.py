"""
alphakey - AI 生成圖片的 chroma key 去背與去溢色

從影像估計實際背景色、產生 alpha，並修復 key 色在前景邊緣留下的色彩污染
"""

from alphakey.core import ChromaKeyPipeline, ChromaKeyProcessor, PipelineResult
from alphakey.data_model import ColorRGB, PipelineOptions, RasterImage


__version__ = "1.0.0"

__all__ = [
    "ChromaKeyPipeline",
    "ChromaKeyProcessor",
    "PipelineResult",
    "ColorRGB",
    "PipelineOptions",
    "RasterImage",
]
