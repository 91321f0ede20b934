"""
核心模組 - 去背流程與處理器
"""

from .pipeline import ChromaKeyPipeline, PipelineResult
from .processor import (
    ChromaKeyProcessor,
    PostProcessOptions,
    ProcessedImage,
    save_debug_image,
)


__all__ = [
    "ChromaKeyPipeline",
    "PipelineResult",
    "ChromaKeyProcessor",
    "PostProcessOptions",
    "ProcessedImage",
    "save_debug_image",
]
